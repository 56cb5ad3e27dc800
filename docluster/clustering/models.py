"""Result types produced by the clustering engines and the labeler."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import numpy as np


def label_array(clusters: Mapping[int, List[int]], n_documents: int) -> np.ndarray:
    """Flat (N,) array of cluster ids, -1 for indices not in any cluster."""
    labels = np.full(n_documents, -1, dtype=int)
    for cluster_id, indices in clusters.items():
        labels[indices] = cluster_id
    return labels


@dataclass(frozen=True)
class ClusteringResult:
    """
    Result of one clustering run.

    Attributes:
        clusters: Ordered mapping cluster_id -> document indices. Iteration order
            is the enumeration order consumers rely on. Ids need not be contiguous.
        coherence: Mean pairwise cosine similarity per cluster (1.0 for singletons)
        silhouette_score: Overall silhouette in [-1, 1] (0 with fewer than 2 clusters)
        algorithm: "K-means" or "DBSCAN"
        parameters: Algorithm-specific record (k, iterations, epsilon, min_pts, ...)
        centroids: K-means centroids of the returned snapshot, keyed by cluster id
        quality_metrics: Auxiliary quality metrics (davies_bouldin_score, noise_ratio, ...)
    """

    clusters: Dict[int, List[int]]
    coherence: Dict[int, float]
    silhouette_score: float
    algorithm: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    centroids: Optional[Dict[int, np.ndarray]] = None
    quality_metrics: Dict[str, float] = field(default_factory=dict)

    @property
    def n_clusters(self) -> int:
        return len(self.clusters)

    @property
    def n_documents(self) -> int:
        return sum(len(indices) for indices in self.clusters.values())

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation (cluster ids become strings)."""
        return {
            "clusters": {str(cid): list(indices) for cid, indices in self.clusters.items()},
            "cluster_coherence": {str(cid): float(c) for cid, c in self.coherence.items()},
            "silhouette_score": float(self.silhouette_score),
            "algorithm": self.algorithm,
            "algorithm_details": dict(self.parameters),
            "quality_metrics": dict(self.quality_metrics),
        }

    @classmethod
    def empty(cls, algorithm: str, parameters: Optional[Dict[str, Any]] = None) -> "ClusteringResult":
        """Well-formed result for empty input."""
        params = dict(parameters or {})
        params.setdefault("cluster_count", 0)
        return cls(
            clusters={},
            coherence={},
            silhouette_score=0.0,
            algorithm=algorithm,
            parameters=params,
            centroids={} if algorithm == "K-means" else None,
        )


@dataclass(frozen=True)
class ClusterSummary:
    """Human-readable description of one cluster."""

    cluster_id: int
    label: str
    size: int
    coherence: float
    top_terms: List[str] = field(default_factory=list)
    description: str = ""
    document_indices: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cluster_id": self.cluster_id,
            "name": self.label,
            "label": self.label,
            "size": self.size,
            "coherence": float(self.coherence),
            "top_terms": list(self.top_terms),
            "description": self.description,
            "document_indices": list(self.document_indices),
        }
