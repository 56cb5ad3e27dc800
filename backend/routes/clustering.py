"""
Clustering REST API

POST /cluster-documents runs the full pipeline on the submitted documents.
The endpoint is a plain `def` so FastAPI runs the CPU-bound work in its
threadpool instead of blocking the event loop.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from backend.deps import get_pipeline
from backend.models import ClusterRequest, ClusterResponse
from docluster.exceptions import DoclusterError, InputDocumentError
from docluster.pipeline import DocumentClusteringPipeline

router = APIRouter(tags=["clustering"])
logger = logging.getLogger(__name__)

MIN_DOCUMENTS = 2


@router.post("/cluster-documents", response_model=ClusterResponse)
def cluster_documents(
    request: ClusterRequest,
    pipeline: DocumentClusteringPipeline = Depends(get_pipeline),
) -> ClusterResponse:
    """
    Cluster documents and describe the clusters.

    Returns:
        Clusters, per-cluster summaries, key terms per document and quality scores.

    Errors:
        400: Fewer than two documents, or fewer than two usable text documents
        500: Clustering failed
    """
    documents = request.documents
    logger.info(f"Received {len(documents)} documents")

    if len(documents) < MIN_DOCUMENTS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At least {MIN_DOCUMENTS} documents are required for clustering",
        )

    try:
        outcome = pipeline.run(documents)
    except InputDocumentError as e:
        logger.warning(f"Rejected clustering request: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except DoclusterError as e:
        logger.error(f"Clustering failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process documents",
        )

    logger.info(
        f"Returning {outcome.result.n_clusters} clusters ({outcome.result.algorithm})"
    )
    return ClusterResponse(**outcome.to_dict())
