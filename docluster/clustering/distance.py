"""
Distance and similarity metrics shared by both clustering engines and the scorer.

The metric is chosen per call ("cosine" or "euclidean"); nothing here is
specific to one algorithm. Cosine similarity with a zero vector is defined
as 0, so cosine distance to a zero vector is 1.
"""

import logging
from typing import Sequence, Union

import numpy as np
from sklearn.utils import gen_batches

from docluster.exceptions import ConfigurationError, DimensionMismatchError

logger = logging.getLogger(__name__)

METRICS = ("cosine", "euclidean")

# Floating round-off below this is treated as an exact zero distance.
ZERO_TOLERANCE = 1e-12

# Upper bound on the (rows x K x D) difference block built per Euclidean batch.
EUCLIDEAN_BATCH_BYTES = 8 * 1024 * 1024

VectorLike = Union[np.ndarray, Sequence[float]]


def check_metric(metric: str) -> str:
    """Return metric unchanged or raise ConfigurationError."""
    if metric not in METRICS:
        raise ConfigurationError(
            f"Unsupported distance metric: {metric!r}. Use one of {METRICS}",
            details={"metric": metric},
        )
    return metric


def as_matrix(vectors) -> np.ndarray:
    """
    Convert vectors to a float64 (N x D) matrix.

    Args:
        vectors: 2D array or sequence of equal-length sequences

    Returns:
        np.ndarray of shape (N, D); (0, 0) for empty input

    Raises:
        DimensionMismatchError: If rows have different lengths
    """
    if isinstance(vectors, np.ndarray):
        if vectors.size == 0:
            return np.zeros((0, vectors.shape[1] if vectors.ndim == 2 else 0), dtype=np.float64)
        if vectors.ndim != 2:
            raise DimensionMismatchError(
                f"Expected a 2D vector matrix, got array with shape {vectors.shape}"
            )
        return vectors.astype(np.float64, copy=False)

    rows = list(vectors)
    if not rows:
        return np.zeros((0, 0), dtype=np.float64)

    dimensions = {len(row) for row in rows}
    if len(dimensions) != 1:
        raise DimensionMismatchError(
            f"All vectors must share one dimension, got dimensions {sorted(dimensions)}",
            details={"dimensions": sorted(dimensions)},
        )
    return np.asarray(rows, dtype=np.float64)


def _as_pair(a: VectorLike, b: VectorLike):
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise DimensionMismatchError(
            f"Vector dimensions differ: {a.shape} vs {b.shape}",
            details={"left": a.shape, "right": b.shape},
        )
    return a, b


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """Cosine similarity in [-1, 1]; 0 when either vector has zero norm."""
    a, b = _as_pair(a, b)
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    similarity = float(np.dot(a, b) / (norm_a * norm_b))
    return max(-1.0, min(1.0, similarity))


def cosine_distance(a: VectorLike, b: VectorLike) -> float:
    """1 - cosine similarity, in [0, 2]."""
    distance = 1.0 - cosine_similarity(a, b)
    return 0.0 if distance < ZERO_TOLERANCE else distance


def euclidean_distance(a: VectorLike, b: VectorLike) -> float:
    a, b = _as_pair(a, b)
    return float(np.sqrt(np.sum((a - b) ** 2)))


def distance(a: VectorLike, b: VectorLike, metric: str = "cosine") -> float:
    """Distance between two vectors under the given metric."""
    if check_metric(metric) == "cosine":
        return cosine_distance(a, b)
    return euclidean_distance(a, b)


def cosine_similarity_matrix(left: np.ndarray, right: np.ndarray) -> np.ndarray:
    """
    Cosine similarities between every row of left and every row of right.

    Rows with zero norm have similarity 0 to everything.
    """
    left_norms = np.linalg.norm(left, axis=1)
    right_norms = np.linalg.norm(right, axis=1)
    denominator = np.outer(left_norms, right_norms)
    dots = np.dot(left, right.T)
    with np.errstate(divide="ignore", invalid="ignore"):
        sims = np.where(denominator > 0, dots / np.where(denominator > 0, denominator, 1.0), 0.0)
    np.clip(sims, -1.0, 1.0, out=sims)
    return sims


def _euclidean_cross(left: np.ndarray, right: np.ndarray) -> np.ndarray:
    """
    Exact Euclidean distances computed in row batches.

    Differences are taken directly (no |a|^2 + |b|^2 - 2ab expansion), so
    identical rows are at exactly 0. Each batch holds at most
    EUCLIDEAN_BATCH_BYTES of differences besides the (N x K) result.
    """
    dist = np.empty((left.shape[0], right.shape[0]), dtype=np.float64)
    row_bytes = max(1, right.shape[0] * left.shape[1] * 8)
    batch_size = max(1, EUCLIDEAN_BATCH_BYTES // row_bytes)
    for batch in gen_batches(left.shape[0], batch_size):
        diff = left[batch, None, :] - right[None, :, :]
        dist[batch] = np.sqrt(np.einsum("ijk,ijk->ij", diff, diff))
    return dist


def cross_distances(left: np.ndarray, right: np.ndarray, metric: str = "cosine") -> np.ndarray:
    """
    Distances between every row of left (N x D) and every row of right (K x D).

    Returns:
        (N x K) distance matrix
    """
    check_metric(metric)
    if left.shape[1] != right.shape[1]:
        raise DimensionMismatchError(
            f"Vector dimensions differ: {left.shape[1]} vs {right.shape[1]}"
        )

    if metric == "cosine":
        dist = 1.0 - cosine_similarity_matrix(left, right)
    else:
        dist = _euclidean_cross(left, right)

    dist[dist < ZERO_TOLERANCE] = 0.0
    return dist


def pairwise_distances(vectors, metric: str = "cosine") -> np.ndarray:
    """
    Symmetric (N x N) distance matrix with a zero diagonal.

    Args:
        vectors: (N x D) vectors
        metric: "cosine" or "euclidean"
    """
    matrix = as_matrix(vectors)
    if matrix.shape[0] == 0:
        return np.zeros((0, 0), dtype=np.float64)
    dist = cross_distances(matrix, matrix, metric)
    np.fill_diagonal(dist, 0.0)
    return dist


def pairwise_similarities(vectors) -> np.ndarray:
    """(N x N) cosine similarity matrix."""
    matrix = as_matrix(vectors)
    if matrix.shape[0] == 0:
        return np.zeros((0, 0), dtype=np.float64)
    return cosine_similarity_matrix(matrix, matrix)


def mean_pairwise_distance(vectors, metric: str = "cosine", default: float = 0.5) -> float:
    """
    Mean distance over all unordered pairs.

    Returns `default` when there are fewer than two vectors.
    """
    dist = pairwise_distances(vectors, metric)
    n = dist.shape[0]
    if n < 2:
        return default
    upper = dist[np.triu_indices(n, k=1)]
    return float(upper.mean())


def distances_to_centroids(vectors, centroids, metric: str = "cosine") -> np.ndarray:
    """(N x K) distances from every vector to every centroid."""
    return cross_distances(as_matrix(vectors), as_matrix(centroids), metric)
