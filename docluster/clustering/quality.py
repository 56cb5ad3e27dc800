"""
Cluster quality scoring.

Silhouette uses one piecewise per-point formula everywhere:

    s(i) = 0            if a == b == 0
    s(i) = 1 - a / b    if a < b
    s(i) = b / a - 1    otherwise

where a(i) is the mean distance to the other members of i's cluster (0 for
singletons) and b(i) the smallest mean distance to another non-empty cluster.
The overall score is the mean over all clustered points and is 0 when fewer
than two non-empty clusters exist.
"""

import logging
from typing import Dict, List, Mapping, Optional

import numpy as np
from sklearn.metrics import davies_bouldin_score

from docluster.clustering.distance import as_matrix, pairwise_distances, pairwise_similarities
from docluster.clustering.models import label_array

logger = logging.getLogger(__name__)


def _non_empty(clusters: Mapping[int, List[int]]) -> Dict[int, List[int]]:
    return {cid: list(indices) for cid, indices in clusters.items() if len(indices) > 0}


def point_silhouette(a: float, b: float) -> float:
    """Per-point silhouette from intra (a) and nearest inter (b) mean distances."""
    if a == 0 and b == 0:
        return 0.0
    if a < b:
        return 1.0 - a / b
    return b / a - 1.0


def silhouette_score(
    vectors,
    clusters: Mapping[int, List[int]],
    metric: str = "cosine",
    distances: Optional[np.ndarray] = None,
) -> float:
    """
    Mean silhouette over all points in all clusters.

    Args:
        vectors: (N x D) vectors (ignored when distances is given)
        clusters: cluster_id -> document indices
        metric: "cosine" or "euclidean"
        distances: Optional precomputed (N x N) distance matrix

    Returns:
        Score in [-1, 1]; 0 with fewer than two non-empty clusters
    """
    groups = _non_empty(clusters)
    if len(groups) <= 1:
        return 0.0

    if distances is None:
        distances = pairwise_distances(vectors, metric)

    member_arrays = {cid: np.asarray(indices, dtype=int) for cid, indices in groups.items()}
    total = 0.0
    points = 0

    for cid, members in member_arrays.items():
        for point in members:
            if len(members) > 1:
                a = float(distances[point, members].sum()) / (len(members) - 1)
            else:
                a = 0.0

            b = float("inf")
            for other_id, other_members in member_arrays.items():
                if other_id == cid:
                    continue
                b = min(b, float(distances[point, other_members].mean()))

            total += point_silhouette(a, b)
            points += 1

    return total / points if points > 0 else 0.0


def cluster_coherence(
    vectors,
    clusters: Mapping[int, List[int]],
    similarities: Optional[np.ndarray] = None,
) -> Dict[int, float]:
    """
    Mean pairwise cosine similarity within each cluster.

    Clusters with at most one member get 1.0.
    """
    if similarities is None:
        similarities = pairwise_similarities(vectors)

    coherence: Dict[int, float] = {}
    for cid, indices in clusters.items():
        if len(indices) <= 1:
            coherence[cid] = 1.0
            continue
        members = np.asarray(indices, dtype=int)
        block = similarities[np.ix_(members, members)]
        upper = block[np.triu_indices(len(members), k=1)]
        coherence[cid] = float(upper.mean()) if upper.size else 0.0
    return coherence


def compute_quality_metrics(
    vectors,
    clusters: Mapping[int, List[int]],
    silhouette: float,
    coherence: Mapping[int, float],
    noise_count: int = 0,
) -> Dict[str, float]:
    """
    Compute auxiliary clustering quality metrics.

    Metrics:
    - silhouette_score: Piecewise silhouette (-1 to 1, higher is better)
    - mean_coherence: Mean of per-cluster coherence
    - davies_bouldin_score: Cluster compactness (lower is better), when defined
    - n_clusters: Number of non-empty clusters
    - noise_ratio: Share of points DBSCAN marked as noise

    Args:
        vectors: (N x D) vectors
        clusters: cluster_id -> document indices
        silhouette: Already computed silhouette score
        coherence: Already computed coherence per cluster
        noise_count: DBSCAN noise points before folding

    Returns:
        Dictionary of quality metrics
    """
    groups = _non_empty(clusters)
    matrix = as_matrix(vectors)
    n_points = sum(len(indices) for indices in groups.values())

    metrics: Dict[str, float] = {
        "silhouette_score": float(silhouette),
        "mean_coherence": float(np.mean(list(coherence.values()))) if coherence else 0.0,
        "n_clusters": float(len(groups)),
        "noise_ratio": float(noise_count / n_points) if n_points else 0.0,
    }

    # Davies-Bouldin is only defined for 2 <= n_clusters <= n_samples - 1
    if 2 <= len(groups) <= n_points - 1:
        labels = label_array(groups, matrix.shape[0])
        mask = labels >= 0

        try:
            metrics["davies_bouldin_score"] = float(
                davies_bouldin_score(matrix[mask], labels[mask])
            )
        except ValueError as e:
            logger.warning(f"Failed to compute Davies-Bouldin score: {e}")

    return metrics
