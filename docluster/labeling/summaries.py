"""Per-cluster summaries: top terms, label, description."""

import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence

from docluster.clustering.models import ClusteringResult, ClusterSummary
from docluster.labeling.labeler import ClusterLabeler, make_unique

logger = logging.getLogger(__name__)


def describe(size: int, label: str) -> str:
    plural = "s" if size != 1 else ""
    return f"{size} document{plural} related to {label.lower()}"


def summarize_clusters(
    documents: Sequence[str],
    result: ClusteringResult,
    document_key_terms: Sequence[List[str]],
    labeler: Optional[ClusterLabeler] = None,
    top_terms: int = 8,
) -> Dict[int, ClusterSummary]:
    """
    Build a ClusterSummary for every cluster of a result.

    Args:
        documents: Texts the result's indices refer to
        result: Clustering result
        document_key_terms: Key terms per document (same indexing as documents)
        labeler: ClusterLabeler (default catalogue when None)
        top_terms: Top terms kept per cluster

    Returns:
        cluster_id -> ClusterSummary, in cluster enumeration order, with
        labels unique across clusters
    """
    labeler = labeler or ClusterLabeler()

    drafts = []
    for cluster_id, indices in result.clusters.items():
        term_frequency: Counter = Counter()
        for index in indices:
            term_frequency.update(document_key_terms[index])

        # most_common keeps first-seen order among equal counts
        terms = [term for term, _ in term_frequency.most_common(top_terms)]
        label = labeler.label([documents[i] for i in indices], terms, term_frequency)
        drafts.append((cluster_id, indices, terms, label))

    labels = make_unique(draft[3] for draft in drafts)

    summaries: Dict[int, ClusterSummary] = {}
    for (cluster_id, indices, terms, _), label in zip(drafts, labels):
        summaries[cluster_id] = ClusterSummary(
            cluster_id=cluster_id,
            label=label,
            size=len(indices),
            coherence=result.coherence.get(cluster_id, 1.0),
            top_terms=terms,
            description=describe(len(indices), label),
            document_indices=list(indices),
        )

    logger.info(f"Summarized {len(summaries)} clusters: {[s.label for s in summaries.values()]}")
    return summaries
