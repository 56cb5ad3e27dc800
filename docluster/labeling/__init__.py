"""
Key terms, cluster labels and summaries.
"""

from .key_terms import extract_all_key_terms, extract_key_terms, tokenize
from .labeler import ClusterLabeler, make_unique
from .summaries import summarize_clusters

__all__ = [
    "ClusterLabeler",
    "make_unique",
    "extract_key_terms",
    "extract_all_key_terms",
    "tokenize",
    "summarize_clusters",
]
