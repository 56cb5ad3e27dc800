"""
Document vectorization.

FeatureVectorizer produces a lightweight, model-free vector per document:

    [0, 10)                      document statistics
    [10, 10 + topic_slots)       topic regex match counts (capped)
    [.., .. + semantic_slots)    seed concept + related term scores (capped)

Each row is L2-normalized; an all-zero row stays all-zero.

EmbeddingVectorizer wraps any `embed(text) -> Sequence[float]` callable (a
sentence-transformer, an HTTP embedding service, ...) so the clustering engines
never depend on where vectors come from.
"""

import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Mapping, Optional, Pattern, Sequence

import numpy as np

from docluster.clustering.distance import as_matrix
from docluster.config import VectorizerConfig
from docluster.exceptions import DimensionMismatchError, VectorizationError
from docluster.vectorization.catalogue import SEMANTIC_RELATIONSHIPS, TOPIC_PATTERNS

logger = logging.getLogger(__name__)

STATISTICS_SLOTS = 10

_SENTENCE_END = re.compile(r"[.!?]")
_DIGIT_RUN = re.compile(r"\d+")
_CAPITALIZED = re.compile(r"[A-Z][a-z]+")
_PUNCTUATION = re.compile(r"[(),;:]")
_SUFFIX = re.compile(r"(ing|tion|ment)$")


def normalize_rows(matrix) -> np.ndarray:
    """
    L2-normalize every row. Zero rows stay zero.

    Idempotent: normalizing unit rows returns them unchanged.
    """
    matrix = as_matrix(matrix)
    if matrix.size == 0:
        return matrix.copy()
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    safe = np.where(norms > 0, norms, 1.0)
    return matrix / safe


class Vectorizer(ABC):
    """Turns a list of documents into an (N x D) matrix."""

    @abstractmethod
    def fit_transform(self, documents: Sequence[str]) -> np.ndarray:
        """Vectorize documents; row i belongs to documents[i]."""

    @property
    @abstractmethod
    def dimensions(self) -> Optional[int]:
        """Vector dimension, or None when it is only known after the first call."""


class FeatureVectorizer(Vectorizer):
    """
    Statistics + topic patterns + semantic relationships.

    Args:
        config: Slot layout and saturation caps
        topic_patterns: Topic -> regex list (catalogue order = slot order)
        semantic_relationships: Seed concept -> related terms
    """

    def __init__(
        self,
        config: Optional[VectorizerConfig] = None,
        topic_patterns: Optional[Mapping[str, List[str]]] = None,
        semantic_relationships: Optional[Mapping[str, List[str]]] = None,
    ):
        self.config = config or VectorizerConfig()
        topic_patterns = TOPIC_PATTERNS if topic_patterns is None else topic_patterns
        semantic_relationships = (
            SEMANTIC_RELATIONSHIPS if semantic_relationships is None else semantic_relationships
        )

        self._topics = self._compile_topics(topic_patterns)
        self._semantics = self._compile_semantics(semantic_relationships)

        logger.debug(
            f"FeatureVectorizer: {len(self._topics)} topics, {len(self._semantics)} semantic seeds, "
            f"D={self.dimensions}"
        )

    @property
    def dimensions(self) -> int:
        return STATISTICS_SLOTS + self.config.topic_slots + self.config.semantic_slots

    def _compile_topics(self, topic_patterns: Mapping[str, List[str]]) -> List[List[Pattern]]:
        items = list(topic_patterns.items())
        if len(items) > self.config.topic_slots:
            logger.warning(
                f"Topic catalogue has {len(items)} entries but only {self.config.topic_slots} "
                f"slots; ignoring {[name for name, _ in items[self.config.topic_slots:]]}"
            )
            items = items[: self.config.topic_slots]

        compiled = []
        for topic, patterns in items:
            try:
                compiled.append([re.compile(p, re.IGNORECASE) for p in patterns])
            except re.error as e:
                raise VectorizationError(
                    f"Invalid regex in topic {topic!r}",
                    details={"topic": topic},
                    cause=e,
                ) from e
        return compiled

    def _compile_semantics(
        self, semantic_relationships: Mapping[str, List[str]]
    ) -> List[Dict[str, object]]:
        items = list(semantic_relationships.items())
        if len(items) > self.config.semantic_slots:
            logger.warning(
                f"Semantic catalogue has {len(items)} entries but only "
                f"{self.config.semantic_slots} slots; truncating"
            )
            items = items[: self.config.semantic_slots]

        # Terms match as whole words/phrases of the lower-cased document
        return [
            {
                "seed": _word_pattern(seed),
                "related": [_word_pattern(term) for term in related],
            }
            for seed, related in items
        ]

    def statistics(self, document: str) -> np.ndarray:
        """The 10 document statistic features (unnormalized)."""
        words = [w for w in document.lower().split() if len(w) > 2]
        n_words = len(words)

        features = np.zeros(STATISTICS_SLOTS, dtype=np.float64)
        features[0] = math.log(len(document) + 1) / 10
        features[1] = n_words / 100
        features[2] = len(_SENTENCE_END.findall(document)) / 10
        features[3] = document.count("\n") / 5
        features[4] = len(_DIGIT_RUN.findall(document)) / 10
        features[5] = len(_CAPITALIZED.findall(document)) / 20
        features[6] = sum(1 for w in words if len(w) > 8) / 10
        features[7] = len(_PUNCTUATION.findall(document)) / 20
        if n_words:
            features[8] = len(set(words)) / n_words
            features[9] = sum(1 for w in words if _SUFFIX.search(w)) / n_words
        return features

    def transform_one(self, document: str) -> np.ndarray:
        """Unnormalized feature row for one document."""
        vector = np.zeros(self.dimensions, dtype=np.float64)
        vector[:STATISTICS_SLOTS] = self.statistics(document)

        offset = STATISTICS_SLOTS
        for slot, patterns in enumerate(self._topics):
            matches = sum(len(p.findall(document)) for p in patterns)
            vector[offset + slot] = min(1.0, matches / self.config.topic_match_cap)

        offset = STATISTICS_SLOTS + self.config.topic_slots
        lowered = document.lower()
        for slot, entry in enumerate(self._semantics):
            score = 2 if entry["seed"].search(lowered) else 0
            score += sum(1 for term in entry["related"] if term.search(lowered))
            vector[offset + slot] = min(1.0, score / self.config.semantic_match_cap)

        return vector

    def fit_transform(self, documents: Sequence[str]) -> np.ndarray:
        if len(documents) == 0:
            return np.zeros((0, self.dimensions), dtype=np.float64)

        raw = np.vstack([self.transform_one(doc) for doc in documents])
        vectors = normalize_rows(raw)
        logger.info(f"Vectorized {len(documents)} documents ({self.dimensions} features)")
        return vectors


class EmbeddingVectorizer(Vectorizer):
    """
    Adapter for an external embedding function.

    Args:
        embed: Callable mapping one text to a vector
        normalize: L2-normalize rows (default True)
    """

    def __init__(self, embed: Callable[[str], Sequence[float]], normalize: bool = True):
        self.embed = embed
        self.normalize = normalize
        self._dimensions: Optional[int] = None

    @property
    def dimensions(self) -> Optional[int]:
        return self._dimensions

    def fit_transform(self, documents: Sequence[str]) -> np.ndarray:
        if len(documents) == 0:
            return np.zeros((0, self._dimensions or 0), dtype=np.float64)

        rows = []
        for index, document in enumerate(documents):
            try:
                rows.append(list(self.embed(document)))
            except Exception as e:
                raise VectorizationError(
                    f"Embedding failed for document {index}",
                    details={"document_index": index},
                    cause=e,
                ) from e

        matrix = as_matrix(rows)
        if self._dimensions is not None and matrix.shape[1] != self._dimensions:
            raise DimensionMismatchError(
                f"Embedding dimension changed from {self._dimensions} to {matrix.shape[1]}"
            )
        self._dimensions = matrix.shape[1]

        logger.info(f"Embedded {len(documents)} documents ({self._dimensions} dimensions)")
        return normalize_rows(matrix) if self.normalize else matrix


def _word_pattern(term: str) -> Pattern:
    return re.compile(r"\b" + re.escape(term.lower()) + r"\b")
