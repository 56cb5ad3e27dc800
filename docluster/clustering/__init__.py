"""
Clustering engines, quality scoring and algorithm selection.
"""

from .dbscan import dbscan
from .distance import (
    cosine_distance,
    cosine_similarity,
    distances_to_centroids,
    euclidean_distance,
    pairwise_distances,
    pairwise_similarities,
)
from .kmeans import kmeans
from .models import ClusteringResult, ClusterSummary
from .quality import cluster_coherence, compute_quality_metrics, silhouette_score
from .selector import derive_parameters, select_clustering
from .tuning import find_optimal_epsilon, find_optimal_k

__all__ = [
    "ClusteringResult",
    "ClusterSummary",
    "kmeans",
    "dbscan",
    "select_clustering",
    "derive_parameters",
    "find_optimal_k",
    "find_optimal_epsilon",
    "silhouette_score",
    "cluster_coherence",
    "compute_quality_metrics",
    "cosine_similarity",
    "cosine_distance",
    "euclidean_distance",
    "pairwise_distances",
    "pairwise_similarities",
    "distances_to_centroids",
]
