"""
DocCluster - lightweight document clustering.

Vectorizes raw text with model-free features (or any embedding function),
clusters with K-means and DBSCAN, keeps the better silhouette, and labels the
clusters from a keyword catalogue.
"""

__version__ = "1.0.0"

from .clustering import ClusteringResult, ClusterSummary, dbscan, kmeans, select_clustering
from .exceptions import DoclusterError, InputDocumentError
from .labeling import ClusterLabeler, make_unique, summarize_clusters
from .pipeline import DocumentClusteringPipeline, PipelineResult
from .vectorization import EmbeddingVectorizer, FeatureVectorizer, normalize_rows

__all__ = [
    "__version__",
    "DocumentClusteringPipeline",
    "PipelineResult",
    "ClusteringResult",
    "ClusterSummary",
    "kmeans",
    "dbscan",
    "select_clustering",
    "ClusterLabeler",
    "make_unique",
    "summarize_clusters",
    "FeatureVectorizer",
    "EmbeddingVectorizer",
    "normalize_rows",
    "DoclusterError",
    "InputDocumentError",
]
