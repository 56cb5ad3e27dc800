"""
End-to-end document clustering.

Stages:
- STAGE 1: Preprocessing (drop binary, blank and too-short documents)
- STAGE 2: Vectorization
- STAGE 3: Clustering (K-means vs DBSCAN, best silhouette wins)
- STAGE 4: Key terms per document
- STAGE 5: Cluster summaries with unique labels

Cluster indices in the result refer to the accepted documents;
`accepted_indices` maps them back to positions in the caller's list.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from docluster.clustering.models import ClusteringResult, ClusterSummary
from docluster.clustering.selector import select_clustering
from docluster.config import (
    ClusteringConfig,
    LabelingConfig,
    PreprocessingConfig,
    VectorizerConfig,
    get_config,
)
from docluster.exceptions import InputDocumentError
from docluster.labeling.key_terms import extract_all_key_terms
from docluster.labeling.labeler import ClusterLabeler
from docluster.labeling.summaries import summarize_clusters
from docluster.preprocessing import prepare_documents
from docluster.vectorization.feature_vectorizer import FeatureVectorizer, Vectorizer

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Everything one pipeline run produces."""

    result: ClusteringResult
    summaries: Dict[int, ClusterSummary]
    document_key_terms: List[List[str]]
    accepted_indices: List[int] = field(default_factory=list)
    filtered_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation (the shape the HTTP API returns)."""
        payload = self.result.to_dict()
        return {
            "clusters": payload["clusters"],
            "cluster_summaries": {
                str(cid): summary.to_dict() for cid, summary in self.summaries.items()
            },
            "document_key_terms": [list(terms) for terms in self.document_key_terms],
            "silhouette_score": payload["silhouette_score"],
            "algorithm": payload["algorithm"],
            "algorithm_details": payload["algorithm_details"],
            "quality_metrics": payload["quality_metrics"],
            "accepted_indices": list(self.accepted_indices),
            "filtered_count": self.filtered_count,
        }


class DocumentClusteringPipeline:
    """
    Cluster raw text documents and describe the clusters.

    Example:
        >>> pipeline = DocumentClusteringPipeline()
        >>> outcome = pipeline.run(documents)
        >>> for summary in outcome.summaries.values():
        ...     print(summary.label, summary.size)
    """

    def __init__(
        self,
        vectorizer: Optional[Vectorizer] = None,
        clustering_config: Optional[ClusteringConfig] = None,
        labeling_config: Optional[LabelingConfig] = None,
        preprocessing_config: Optional[PreprocessingConfig] = None,
    ):
        self.vectorizer = vectorizer or FeatureVectorizer()
        self.clustering_config = clustering_config or ClusteringConfig()
        self.labeling_config = labeling_config or LabelingConfig()
        self.preprocessing_config = preprocessing_config or PreprocessingConfig()
        self.labeler = ClusterLabeler(config=self.labeling_config)

    @classmethod
    def from_config(cls, config_path=None) -> "DocumentClusteringPipeline":
        """
        Build a pipeline from the validated config.json (or built-in defaults).

        CLUSTERING_* and PREPROCESSING_* environment variables that are set
        override the matching config.json values.
        """
        config = get_config(reload=config_path is not None, config_path=config_path)
        clustering_config = ClusteringConfig.from_env(
            base=ClusteringConfig.from_config(config.clustering)
        )
        preprocessing_config = PreprocessingConfig.from_env(
            base=PreprocessingConfig.from_config(config.preprocessing)
        )
        logger.debug(f"Pipeline clustering config: {clustering_config}")
        return cls(
            vectorizer=FeatureVectorizer(VectorizerConfig.from_config(config.vectorization)),
            clustering_config=clustering_config,
            labeling_config=LabelingConfig.from_config(config.labeling),
            preprocessing_config=preprocessing_config,
        )

    def _accept(self, documents: Sequence[Any], filter_documents: bool):
        if filter_documents and self.preprocessing_config.enable_filter:
            return prepare_documents(documents, self.preprocessing_config.min_document_length)

        for index, document in enumerate(documents):
            if not isinstance(document, str):
                raise InputDocumentError(
                    f"Document {index} is not a string",
                    details={"document_index": index, "type": type(document).__name__},
                )
        return list(documents), list(range(len(documents)))

    def run(self, documents: Sequence[Any], *, filter_documents: bool = True) -> PipelineResult:
        """
        Run all stages.

        Args:
            documents: Caller-supplied documents
            filter_documents: Apply the preprocessing filter (when enabled in config)

        Returns:
            PipelineResult

        Raises:
            InputDocumentError: If fewer than min_documents usable documents remain
        """
        min_documents = self.preprocessing_config.min_documents
        if len(documents) < min_documents:
            raise InputDocumentError(
                f"At least {min_documents} documents are required for clustering",
                details={"received": len(documents)},
            )

        # STAGE 1
        texts, accepted_indices = self._accept(documents, filter_documents)
        filtered_count = len(documents) - len(texts)
        if len(texts) < min_documents:
            raise InputDocumentError(
                f"At least {min_documents} valid text documents are required for clustering",
                details={"received": len(documents), "filtered_count": filtered_count},
            )

        # STAGE 2
        vectors = self.vectorizer.fit_transform(texts)

        # STAGE 3
        result = select_clustering(vectors, self.clustering_config)

        # STAGE 4
        document_key_terms = extract_all_key_terms(
            texts, self.labeling_config.key_terms_per_document
        )

        # STAGE 5
        summaries = summarize_clusters(
            texts, result, document_key_terms, self.labeler, self.labeling_config.top_terms
        )

        logger.info(
            f"Pipeline complete: {len(texts)} documents, {result.n_clusters} clusters "
            f"({result.algorithm}), silhouette={result.silhouette_score:.4f}"
        )

        return PipelineResult(
            result=result,
            summaries=summaries,
            document_key_terms=document_key_terms,
            accepted_indices=accepted_indices,
            filtered_count=filtered_count,
        )
