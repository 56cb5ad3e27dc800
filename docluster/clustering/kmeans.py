"""
K-means clustering with k-means++ seeding.

- Seeding samples each next centroid with probability proportional to the
  squared distance to the closest chosen centroid (roulette over cumulative
  sums in index order).
- Empty clusters are repaired by splitting the largest cluster in half.
- The snapshot with the best silhouette seen across iterations is returned,
  not necessarily the last iteration.

All randomness comes from a numpy Generator scoped to one call.
"""

import logging
import math
from typing import Callable, Dict, List, Optional

import numpy as np

from docluster.clustering.distance import (
    as_matrix,
    check_metric,
    cross_distances,
    pairwise_distances,
)
from docluster.clustering.models import ClusteringResult
from docluster.clustering.quality import (
    cluster_coherence,
    compute_quality_metrics,
    silhouette_score,
)
from docluster.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ALGORITHM_NAME = "K-means"


def _make_rng(random_state: Optional[int], rng: Optional[np.random.Generator]) -> np.random.Generator:
    if rng is not None:
        return rng
    return np.random.default_rng(random_state)


def initialize_centroids(
    vectors: np.ndarray,
    k: int,
    rng: np.random.Generator,
    metric: str = "cosine",
) -> np.ndarray:
    """
    k-means++ initialization.

    Args:
        vectors: (N x D) vectors, N >= 1
        k: Requested number of centroids (<= N)
        rng: Random generator
        metric: Distance metric

    Returns:
        (K' x D) centroids with K' <= k. K' < k only when every remaining point
        coincides with an existing centroid (zero total distance).
    """
    n_samples = vectors.shape[0]
    used = np.zeros(n_samples, dtype=bool)

    first = int(rng.integers(0, n_samples))
    chosen = [first]
    used[first] = True

    while len(chosen) < k:
        unused = np.flatnonzero(~used)
        if unused.size == 0:
            break

        min_dist = cross_distances(vectors[unused], vectors[chosen], metric).min(axis=1)
        weights = min_dist * min_dist
        total = float(weights.sum())

        if total == 0.0:
            logger.warning(
                f"k-means++ stopped at {len(chosen)} of {k} centroids: "
                f"remaining points coincide with chosen centroids"
            )
            break

        threshold = rng.random() * total
        cumulative = 0.0
        next_index = -1
        for position, index in enumerate(unused):
            cumulative += weights[position]
            if weights[position] > 0 and cumulative >= threshold:
                next_index = int(index)
                break

        if next_index == -1:
            # Round-off left the threshold above the last cumulative sum
            next_index = int(unused[int(np.argmax(min_dist))])
            logger.debug(f"k-means++ roulette fell through, using farthest point {next_index}")

        chosen.append(next_index)
        used[next_index] = True

    return vectors[chosen].copy()


def _assign(vectors: np.ndarray, centroids: np.ndarray, metric: str) -> Dict[int, List[int]]:
    dist = cross_distances(vectors, centroids, metric)
    nearest = np.argmin(dist, axis=1)
    clusters: Dict[int, List[int]] = {c: [] for c in range(centroids.shape[0])}
    for index, c in enumerate(nearest):
        clusters[int(c)].append(index)
    return clusters


def _centroid_shift(old: np.ndarray, new: np.ndarray, metric: str) -> float:
    return float(cross_distances(old[None, :], new[None, :], metric)[0, 0])


def _repair_empty_clusters(
    vectors: np.ndarray,
    clusters: Dict[int, List[int]],
    centroids: np.ndarray,
) -> bool:
    """
    Split the largest cluster into each empty one.

    The first ceil(n/2) indices of the largest cluster (first on ties) move to
    the empty cluster and both centroids are recomputed. Returns True if any
    cluster was repaired.
    """
    repaired = False
    for c in clusters:
        if clusters[c]:
            continue

        largest = max(clusters, key=lambda cid: len(clusters[cid]))
        if len(clusters[largest]) < 2:
            continue

        moved_count = math.ceil(len(clusters[largest]) / 2)
        clusters[c] = clusters[largest][:moved_count]
        clusters[largest] = clusters[largest][moved_count:]

        centroids[c] = vectors[clusters[c]].mean(axis=0)
        centroids[largest] = vectors[clusters[largest]].mean(axis=0)
        repaired = True
        logger.debug(f"Repaired empty cluster {c} by splitting cluster {largest}")

    return repaired


def kmeans(
    vectors,
    k: int,
    max_iterations: int = 20,
    *,
    metric: str = "cosine",
    convergence_threshold: float = 0.001,
    random_state: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    should_stop: Optional[Callable[[], bool]] = None,
) -> ClusteringResult:
    """
    Partition vectors into at most k clusters.

    Args:
        vectors: (N x D) vectors
        k: Requested number of clusters (clamped to N)
        max_iterations: Iteration budget; reaching it is not an error
        metric: "cosine" or "euclidean"
        convergence_threshold: A centroid moving further than this keeps iterating
        random_state: Seed for k-means++ (ignored when rng is given)
        rng: Explicit numpy Generator
        should_stop: Optional callable checked between iterations; returning True
            ends the run with the best snapshot so far

    Returns:
        ClusteringResult of the best-silhouette snapshot
    """
    check_metric(metric)
    matrix = as_matrix(vectors)
    n_samples = matrix.shape[0]

    if n_samples == 0:
        logger.warning("No vectors to cluster (K-means)")
        return ClusteringResult.empty(
            ALGORITHM_NAME,
            {"k": 0, "requested_k": k, "iterations": 0, "metric": metric},
        )

    if k < 1:
        raise ConfigurationError(f"k must be at least 1, got {k}")
    if max_iterations < 1:
        raise ConfigurationError(f"max_iterations must be at least 1, got {max_iterations}")

    requested_k = k
    k = min(k, n_samples)

    generator = _make_rng(random_state, rng)
    centroids = initialize_centroids(matrix, k, generator, metric)
    k = centroids.shape[0]

    distances = pairwise_distances(matrix, metric)

    best_clusters: Dict[int, List[int]] = {}
    best_centroids = centroids.copy()
    best_silhouette = -math.inf
    iterations = 0
    converged = False
    cancelled = False

    for iteration in range(max_iterations):
        if should_stop is not None and iteration > 0 and should_stop():
            cancelled = True
            logger.info(f"K-means cancelled after {iterations} iterations")
            break

        iterations = iteration + 1
        clusters = _assign(matrix, centroids, metric)

        centroids_changed = False
        for c, members in clusters.items():
            if not members:
                continue
            new_centroid = matrix[members].mean(axis=0)
            if _centroid_shift(centroids[c], new_centroid, metric) > convergence_threshold:
                centroids_changed = True
            centroids[c] = new_centroid

        if _repair_empty_clusters(matrix, clusters, centroids):
            centroids_changed = True

        score = silhouette_score(matrix, clusters, metric, distances=distances)
        logger.debug(
            f"K-means iter {iterations}: silhouette={score:.4f}, changed={centroids_changed}"
        )

        if score > best_silhouette:
            best_silhouette = score
            best_clusters = {c: list(members) for c, members in clusters.items()}
            best_centroids = centroids.copy()

        if not centroids_changed:
            converged = True
            break

    final_clusters = {c: members for c, members in best_clusters.items() if members}
    coherence = cluster_coherence(matrix, final_clusters)
    silhouette = best_silhouette

    parameters = {
        "k": k,
        "requested_k": requested_k,
        "iterations": iterations,
        "converged": converged,
        "metric": metric,
        "cluster_count": len(final_clusters),
    }
    if cancelled:
        parameters["cancelled"] = True

    logger.info(
        f"K-means complete: {len(final_clusters)} clusters, {iterations} iterations, "
        f"silhouette={silhouette:.4f}"
    )

    return ClusteringResult(
        clusters=final_clusters,
        coherence=coherence,
        silhouette_score=float(silhouette),
        algorithm=ALGORITHM_NAME,
        parameters=parameters,
        centroids={c: best_centroids[c].copy() for c in final_clusters},
        quality_metrics=compute_quality_metrics(matrix, final_clusters, silhouette, coherence),
    )
