"""Shared fixtures for the docluster test suite."""

import numpy as np
import pytest

import docluster.config


ML_DOCUMENTS = [
    "Machine learning models use neural network layers for classification and regression. "
    "Deep learning algorithm training improves prediction accuracy on supervised tasks.",
    "Machine learning models use neural network layers for classification and regression. "
    "Deep learning algorithm training improves prediction quality on supervised tasks.",
]

COOKING_DOCUMENTS = [
    "Preheat the oven and mix flour, sugar and butter for the dough. This recipe bakes a "
    "simple dessert; add garlic sauce to the pasta while it simmers in the kitchen.",
    "Preheat the oven and mix flour, sugar and butter for the dough. This recipe bakes a "
    "lovely dessert; add garlic sauce to the pasta while it simmers in the kitchen.",
]


@pytest.fixture
def topic_documents():
    """Two near-duplicate ML texts followed by two near-duplicate cooking texts."""
    return ML_DOCUMENTS + COOKING_DOCUMENTS


@pytest.fixture
def two_blobs():
    """Two tight groups of 5 unit vectors around orthogonal directions (10-d)."""
    rng = np.random.default_rng(7)
    base_a = np.zeros(10)
    base_a[0] = 1.0
    base_b = np.zeros(10)
    base_b[1] = 1.0

    blob_a = base_a + rng.normal(scale=0.05, size=(5, 10))
    blob_b = base_b + rng.normal(scale=0.05, size=(5, 10))
    vectors = np.vstack([blob_a, blob_b])
    return vectors / np.linalg.norm(vectors, axis=1, keepdims=True)


@pytest.fixture
def three_blobs_2d():
    """Three well-separated 2-d groups of 10 points (Euclidean)."""
    rng = np.random.default_rng(3)
    centers = np.array([[0.0, 0.0], [10.0, 0.0], [0.0, 10.0]])
    return np.vstack([c + rng.normal(scale=0.1, size=(10, 2)) for c in centers])


@pytest.fixture
def reset_config(monkeypatch):
    """Clear the cached RootConfig so each test loads its own."""
    monkeypatch.setattr(docluster.config, "_CONFIG", None)
    monkeypatch.delenv("DOCLUSTER_CONFIG", raising=False)
    yield
