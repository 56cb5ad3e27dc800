"""
Elbow-based parameter tuning for K-means (k) and DBSCAN (epsilon).

Both helpers plot a monotone curve against its index and pick the point where
consecutive segments turn the most.
"""

import logging
import math
from typing import Optional, Sequence

import numpy as np

from docluster.clustering.distance import as_matrix, check_metric, pairwise_distances
from docluster.clustering.kmeans import kmeans

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = 0.5


def _turning_angle(y_prev: float, y_mid: float, y_next: float) -> Optional[float]:
    """Angle between segments (i-1 -> i) and (i -> i+1) at unit x spacing."""
    dy1 = y_mid - y_prev
    dy2 = y_next - y_mid
    if not (math.isfinite(dy1) and math.isfinite(dy2)):
        return None
    # atan2 of |cross| and dot is exactly 0 for collinear segments
    cross = dy2 - dy1
    dot = 1.0 + dy1 * dy2
    return math.atan2(abs(cross), dot)


def elbow_index(values: Sequence[float]) -> Optional[int]:
    """
    Index of the interior point with the largest turning angle.

    Returns None when no interior point produces a positive angle.
    """
    best_index = None
    best_angle = 0.0
    for i in range(1, len(values) - 1):
        angle = _turning_angle(values[i - 1], values[i], values[i + 1])
        if angle is None:
            continue
        if angle > best_angle:
            best_angle = angle
            best_index = i
    return best_index


def sum_squared_errors(vectors: np.ndarray, result) -> float:
    """Euclidean SSE of every clustered point to its cluster centroid."""
    sse = 0.0
    for cluster_id, indices in result.clusters.items():
        centroid = result.centroids[cluster_id]
        diff = vectors[indices] - centroid
        sse += float(np.sum(diff * diff))
    return sse


def find_optimal_k(
    vectors,
    max_k: int = 10,
    metric: str = "cosine",
    random_state: Optional[int] = None,
) -> int:
    """
    Choose k with the SSE elbow method.

    Runs K-means for k = 1..min(max_k, N-1) and returns the k at the sharpest
    bend of the SSE curve.

    Args:
        vectors: (N x D) vectors
        max_k: Largest k tried
        metric: Metric used by the K-means runs (SSE is always Euclidean)
        random_state: Seed for every K-means run

    Returns:
        N when N <= 2, otherwise the elbow k (2 when no elbow is found)
    """
    check_metric(metric)
    matrix = as_matrix(vectors)
    n_samples = matrix.shape[0]
    if n_samples <= 2:
        return n_samples

    max_clusters = min(max_k, n_samples - 1)
    sse = []
    for k in range(1, max_clusters + 1):
        result = kmeans(matrix, k, metric=metric, random_state=random_state)
        sse.append(sum_squared_errors(matrix, result))

    logger.debug(f"SSE curve for k=1..{max_clusters}: {[round(v, 4) for v in sse]}")

    index = elbow_index(sse)
    optimal_k = index + 1 if index is not None else 2
    logger.info(f"Elbow method chose k={optimal_k}")
    return optimal_k


def find_optimal_epsilon(vectors, k: int = 4, metric: str = "cosine") -> float:
    """
    Choose DBSCAN epsilon from the sorted k-distance curve.

    Each point's k-distance is its distance to the k-th nearest other point
    (the farthest one when fewer exist).

    Returns:
        0.5 when N <= 1, otherwise the k-distance at the elbow (the smallest
        k-distance when no elbow is found)
    """
    check_metric(metric)
    matrix = as_matrix(vectors)
    n_samples = matrix.shape[0]
    if n_samples <= 1:
        return DEFAULT_EPSILON

    distances = pairwise_distances(matrix, metric)
    k_distances = []
    for i in range(n_samples):
        others = np.sort(np.delete(distances[i], i))
        k_distances.append(float(others[min(k, len(others) - 1)]))
    k_distances.sort()

    index = elbow_index(k_distances)
    epsilon = k_distances[index if index is not None else 0]
    logger.info(f"k-distance elbow chose epsilon={epsilon:.4f} (k={k})")
    return epsilon
