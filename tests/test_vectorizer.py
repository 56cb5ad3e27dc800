"""
Tests for document vectorization.

Tests:
- Feature layout (statistics, topic and semantic blocks)
- Normalization (unit rows, zero rows, idempotence)
- Catalogue truncation and invalid patterns
- EmbeddingVectorizer adapter
"""

import logging
import math

import numpy as np
import pytest

from docluster.config import VectorizerConfig
from docluster.exceptions import DimensionMismatchError, VectorizationError
from docluster.vectorization import (
    EmbeddingVectorizer,
    FeatureVectorizer,
    SEMANTIC_RELATIONSHIPS,
    TOPIC_PATTERNS,
    normalize_rows,
)

TOPIC_OFFSET = 10
SEMANTIC_OFFSET = 30


@pytest.fixture
def vectorizer():
    return FeatureVectorizer()


class TestFeatureLayout:
    def test_default_dimension(self, vectorizer, topic_documents):
        vectors = vectorizer.fit_transform(topic_documents)
        assert vectorizer.dimensions == 50
        assert vectors.shape == (4, 50)

    def test_statistics(self, vectorizer):
        doc = "testing testing movement"
        stats = vectorizer.statistics(doc)

        assert stats[0] == pytest.approx(math.log(len(doc) + 1) / 10)
        assert stats[1] == pytest.approx(0.03)
        assert stats[6] == 0.0
        assert stats[8] == pytest.approx(2 / 3)
        assert stats[9] == pytest.approx(1.0)

    def test_statistics_counts(self, vectorizer):
        stats = vectorizer.statistics("Hello World. Call me at 555 (ok);\nBye!")
        assert stats[2] == pytest.approx(2 / 10)
        assert stats[3] == pytest.approx(1 / 5)
        assert stats[4] == pytest.approx(1 / 10)
        assert stats[5] == pytest.approx(4 / 20)
        assert stats[7] == pytest.approx(3 / 20)

    def test_empty_document_is_all_zero(self, vectorizer):
        assert not vectorizer.statistics("").any()
        vectors = vectorizer.fit_transform([""])
        assert not vectors.any()

    def test_topic_block_saturates(self, vectorizer):
        raw = vectorizer.transform_one("machine learning " * 5)
        assert raw[TOPIC_OFFSET] == 1.0

    def test_topic_partial_score(self, vectorizer):
        raw = vectorizer.transform_one("an sql query against the database")
        database_slot = list(TOPIC_PATTERNS).index("Database")
        assert raw[TOPIC_OFFSET + database_slot] == pytest.approx(3 / 5)

    def test_semantic_seed_and_related_terms(self, vectorizer):
        raw = vectorizer.transform_one("database sql query")
        slot = list(SEMANTIC_RELATIONSHIPS).index("database")
        assert raw[SEMANTIC_OFFSET + slot] == pytest.approx(4 / 5)

    def test_semantic_terms_match_whole_words(self, vectorizer):
        raw = vectorizer.transform_one("webinar schedule")
        slot = list(SEMANTIC_RELATIONSHIPS).index("web")
        assert raw[SEMANTIC_OFFSET + slot] == 0.0

    def test_unused_slots_stay_zero(self, vectorizer, topic_documents):
        vectors = vectorizer.fit_transform(topic_documents)
        assert not vectors[:, TOPIC_OFFSET + len(TOPIC_PATTERNS):SEMANTIC_OFFSET].any()
        assert not vectors[:, SEMANTIC_OFFSET + len(SEMANTIC_RELATIONSHIPS):].any()

    def test_rows_are_unit_length(self, vectorizer, topic_documents):
        vectors = vectorizer.fit_transform(topic_documents)
        assert np.allclose(np.linalg.norm(vectors, axis=1), 1.0)

    def test_no_documents(self, vectorizer):
        assert vectorizer.fit_transform([]).shape == (0, 50)


class TestCatalogues:
    def test_truncated_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            vectorizer = FeatureVectorizer(VectorizerConfig(topic_slots=2))
        assert vectorizer.dimensions == 32
        assert "Topic catalogue" in caplog.text

    def test_invalid_pattern_raises(self):
        with pytest.raises(VectorizationError):
            FeatureVectorizer(topic_patterns={"Broken": ["(unclosed"]})

    def test_custom_catalogue(self):
        vectorizer = FeatureVectorizer(
            topic_patterns={"Astronomy": [r"\b(star|planet|galaxy)\b"]},
            semantic_relationships={},
        )
        raw = vectorizer.transform_one("A star orbits the galaxy; a planet orbits the star.")
        assert raw[TOPIC_OFFSET] == pytest.approx(4 / 5)
        assert not raw[SEMANTIC_OFFSET:].any()


class TestNormalization:
    def test_idempotent(self):
        rng = np.random.default_rng(2)
        once = normalize_rows(rng.normal(size=(6, 4)))
        assert np.allclose(normalize_rows(once), once)

    def test_zero_row_stays_zero(self):
        result = normalize_rows([[0.0, 0.0], [3.0, 4.0]])
        assert np.array_equal(result[0], [0.0, 0.0])
        assert np.allclose(result[1], [0.6, 0.8])


class TestEmbeddingVectorizer:
    def test_rows_are_normalized(self):
        vectorizer = EmbeddingVectorizer(lambda text: [3.0, 4.0])
        vectors = vectorizer.fit_transform(["a", "b"])
        assert np.allclose(vectors, [[0.6, 0.8], [0.6, 0.8]])
        assert vectorizer.dimensions == 2

    def test_unequal_lengths_raise(self):
        vectorizer = EmbeddingVectorizer(lambda text: [1.0] * len(text))
        with pytest.raises(DimensionMismatchError):
            vectorizer.fit_transform(["ab", "abc"])

    def test_dimension_change_between_calls_raises(self):
        vectorizer = EmbeddingVectorizer(lambda text: [1.0] * len(text))
        vectorizer.fit_transform(["ab"])
        with pytest.raises(DimensionMismatchError):
            vectorizer.fit_transform(["abc"])

    def test_embedder_failure_wrapped(self):
        def failing(text):
            raise RuntimeError("service unavailable")

        with pytest.raises(VectorizationError) as excinfo:
            EmbeddingVectorizer(failing).fit_transform(["doc"])
        assert isinstance(excinfo.value.cause, RuntimeError)
