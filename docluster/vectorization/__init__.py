"""
Document vectorization and keyword catalogues.
"""

from .catalogue import LABEL_CATEGORIES, SEMANTIC_RELATIONSHIPS, STOP_WORDS, TOPIC_PATTERNS, LabelCategory
from .feature_vectorizer import (
    EmbeddingVectorizer,
    FeatureVectorizer,
    Vectorizer,
    normalize_rows,
)

__all__ = [
    "Vectorizer",
    "FeatureVectorizer",
    "EmbeddingVectorizer",
    "normalize_rows",
    "TOPIC_PATTERNS",
    "SEMANTIC_RELATIONSHIPS",
    "LABEL_CATEGORIES",
    "STOP_WORDS",
    "LabelCategory",
]
