"""
Algorithm selection: run K-means and DBSCAN, keep the higher silhouette.

Parameters are derived from the data size:

    k       = clamp(ceil(sqrt(N / 2)), min_k, max_k)
    epsilon = mean pairwise distance * epsilon_scale   (0.5 mean when N < 2)
    min_pts = clamp(floor(N / 10), min_pts_floor, min_pts_ceiling)

With parameter_strategy="elbow" k and epsilon come from the elbow helpers in
`docluster.clustering.tuning` instead.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from docluster.clustering.dbscan import dbscan
from docluster.clustering.distance import as_matrix, mean_pairwise_distance
from docluster.clustering.kmeans import ALGORITHM_NAME as KMEANS_NAME, kmeans
from docluster.clustering.models import ClusteringResult
from docluster.clustering.tuning import find_optimal_epsilon, find_optimal_k
from docluster.config import ClusteringConfig
from docluster.exceptions import ClusteringError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionParameters:
    """Parameters handed to the two engines."""

    k: int
    epsilon: float
    min_pts: int
    avg_distance: float


def derive_parameters(vectors, config: Optional[ClusteringConfig] = None) -> SelectionParameters:
    """
    Derive k, epsilon and min_pts for one run.

    Args:
        vectors: (N x D) vectors
        config: Clustering configuration (defaults when None)

    Returns:
        SelectionParameters
    """
    config = config or ClusteringConfig()
    matrix = as_matrix(vectors)
    n_samples = matrix.shape[0]

    k = min(max(config.min_k, math.ceil(math.sqrt(n_samples / 2))), config.max_k)
    avg_distance = mean_pairwise_distance(matrix, config.metric, default=0.5)
    epsilon = avg_distance * config.epsilon_scale
    min_pts = max(config.min_pts_floor, min(config.min_pts_ceiling, n_samples // 10))

    if config.parameter_strategy == "elbow":
        if n_samples > 2:
            k = min(
                max(config.min_k, find_optimal_k(
                    matrix, config.max_k, config.metric, config.random_state
                )),
                config.max_k,
            )
        if n_samples > 1:
            tuned = find_optimal_epsilon(matrix, k=min_pts, metric=config.metric)
            if tuned > 0:
                epsilon = tuned
            else:
                logger.warning("k-distance elbow gave epsilon=0, keeping heuristic epsilon")

    logger.debug(
        f"Derived parameters: k={k}, epsilon={epsilon:.4f}, min_pts={min_pts}, "
        f"avg_distance={avg_distance:.4f}, strategy={config.parameter_strategy}"
    )
    return SelectionParameters(k=k, epsilon=epsilon, min_pts=min_pts, avg_distance=avg_distance)


def select_clustering(
    vectors,
    config: Optional[ClusteringConfig] = None,
    *,
    rng: Optional[np.random.Generator] = None,
) -> ClusteringResult:
    """
    Run both engines and return the result with the higher silhouette.

    DBSCAN wins only with a strictly higher silhouette. The winner's
    parameters gain `strategy` and `candidates` (silhouette per algorithm).

    Args:
        vectors: (N x D) vectors
        config: Clustering configuration (defaults when None)
        rng: Optional numpy Generator for k-means++ (overrides random_state)

    Returns:
        ClusteringResult of the chosen algorithm

    Raises:
        ClusteringError: If any vector holds NaN or infinite values
    """
    config = config or ClusteringConfig()
    matrix = as_matrix(vectors)

    if matrix.shape[0] == 0:
        logger.warning("No vectors to cluster")
        return ClusteringResult.empty(KMEANS_NAME, {"k": 0, "metric": config.metric})

    finite_rows = np.isfinite(matrix).all(axis=1)
    if not finite_rows.all():
        bad_rows = np.flatnonzero(~finite_rows).tolist()
        raise ClusteringError(
            f"{len(bad_rows)} vectors contain NaN or infinite values",
            details={"rows": bad_rows[:10]},
        )

    params = derive_parameters(matrix, config)

    kmeans_result = kmeans(
        matrix,
        params.k,
        config.max_iterations,
        metric=config.metric,
        convergence_threshold=config.convergence_threshold,
        random_state=config.random_state,
        rng=rng,
    )
    dbscan_result = dbscan(
        matrix,
        params.epsilon,
        params.min_pts,
        metric=config.metric,
        noise_singleton_limit=config.noise_singleton_limit,
    )

    if dbscan_result.silhouette_score > kmeans_result.silhouette_score:
        chosen = dbscan_result
    else:
        chosen = kmeans_result

    logger.info(
        f"Selected {chosen.algorithm}: K-means silhouette={kmeans_result.silhouette_score:.4f}, "
        f"DBSCAN silhouette={dbscan_result.silhouette_score:.4f}"
    )

    parameters = dict(chosen.parameters)
    parameters["strategy"] = config.parameter_strategy
    parameters["candidates"] = {
        kmeans_result.algorithm: kmeans_result.silhouette_score,
        dbscan_result.algorithm: dbscan_result.silhouette_score,
    }
    return replace(chosen, parameters=parameters)
