"""
DBSCAN clustering with noise folding.

Noise points are not dropped: up to `noise_singleton_limit` of them become
singleton clusters, more are grouped into one extra cluster. Every input
index therefore appears in exactly one output cluster.
"""

import logging
from collections import deque
from typing import Dict, List

import numpy as np

from docluster.clustering.distance import ZERO_TOLERANCE, as_matrix, check_metric, pairwise_distances
from docluster.clustering.models import ClusteringResult
from docluster.clustering.quality import (
    cluster_coherence,
    compute_quality_metrics,
    silhouette_score,
)
from docluster.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ALGORITHM_NAME = "DBSCAN"

UNASSIGNED = -1


def region_query(distances: np.ndarray, point: int, eps: float) -> List[int]:
    """All indices (the point itself included) within eps of point."""
    return np.flatnonzero(distances[point] <= eps + ZERO_TOLERANCE).tolist()


def fold_noise(
    clusters: Dict[int, List[int]],
    noise: List[int],
    noise_singleton_limit: int = 3,
) -> Dict[int, List[int]]:
    """
    Append noise points to the cluster map as synthetic clusters.

    Args:
        clusters: Density clusters, ids 0..C-1
        noise: Noise indices in visiting order
        noise_singleton_limit: Up to this many noise points become singletons

    Returns:
        New ordered mapping with the synthetic clusters appended
    """
    folded = {cid: list(members) for cid, members in clusters.items()}
    next_id = max(folded) + 1 if folded else 0

    if not noise:
        return folded

    if len(noise) <= noise_singleton_limit:
        for offset, point in enumerate(noise):
            folded[next_id + offset] = [point]
    else:
        folded[next_id] = list(noise)
    return folded


def dbscan(
    vectors,
    eps: float,
    min_pts: int,
    *,
    metric: str = "cosine",
    noise_singleton_limit: int = 3,
) -> ClusteringResult:
    """
    Density-based clustering.

    Args:
        vectors: (N x D) vectors
        eps: Neighborhood radius under the metric
        min_pts: Minimum neighborhood size (point included) for a core point
        metric: "cosine" or "euclidean"
        noise_singleton_limit: Noise counts up to this become singleton clusters

    Returns:
        ClusteringResult with noise folded into synthetic clusters
    """
    check_metric(metric)
    matrix = as_matrix(vectors)
    n_samples = matrix.shape[0]

    if n_samples == 0:
        logger.warning("No vectors to cluster (DBSCAN)")
        return ClusteringResult.empty(
            ALGORITHM_NAME,
            {"epsilon": eps, "min_pts": min_pts, "noise_points": 0, "metric": metric},
        )

    if min_pts < 1:
        raise ConfigurationError(f"min_pts must be at least 1, got {min_pts}")
    if eps < 0:
        raise ConfigurationError(f"eps must be non-negative, got {eps}")

    logger.info(f"Running DBSCAN with eps={eps:.4f}, min_pts={min_pts}, metric={metric}")

    distances = pairwise_distances(matrix, metric)
    visited = np.zeros(n_samples, dtype=bool)
    owner = np.full(n_samples, UNASSIGNED, dtype=int)
    noise_candidates: List[int] = []
    clusters: Dict[int, List[int]] = {}
    cluster_id = 0

    for point in range(n_samples):
        if visited[point]:
            continue

        visited[point] = True
        neighbors = region_query(distances, point, eps)

        if len(neighbors) < min_pts:
            noise_candidates.append(point)
            continue

        clusters[cluster_id] = [point]
        owner[point] = cluster_id

        queue = deque(neighbors)
        queued = set(neighbors)

        while queue:
            current = queue.popleft()

            if not visited[current]:
                visited[current] = True
                current_neighbors = region_query(distances, current, eps)
                if len(current_neighbors) >= min_pts:
                    for neighbor in current_neighbors:
                        if neighbor not in queued:
                            queued.add(neighbor)
                            queue.append(neighbor)

            if owner[current] == UNASSIGNED:
                owner[current] = cluster_id
                clusters[cluster_id].append(current)

        cluster_id += 1

    # Noise candidates later reached from a core point are border members
    noise = [point for point in noise_candidates if owner[point] == UNASSIGNED]
    density_clusters = len(clusters)
    folded = fold_noise(clusters, noise, noise_singleton_limit)

    silhouette = silhouette_score(matrix, folded, metric, distances=distances)
    coherence = cluster_coherence(matrix, folded)

    logger.info(
        f"DBSCAN complete: {density_clusters} density clusters, {len(noise)} noise points, "
        f"{len(folded)} clusters after folding, silhouette={silhouette:.4f}"
    )

    return ClusteringResult(
        clusters=folded,
        coherence=coherence,
        silhouette_score=float(silhouette),
        algorithm=ALGORITHM_NAME,
        parameters={
            "epsilon": float(eps),
            "min_pts": int(min_pts),
            "noise_points": len(noise),
            "metric": metric,
            "cluster_count": len(folded),
        },
        quality_metrics=compute_quality_metrics(
            matrix, folded, silhouette, coherence, noise_count=len(noise)
        ),
    )
