"""
Tests for distance and similarity metrics.

Tests:
- Cosine similarity/distance including zero vectors
- Euclidean distance
- Pairwise and centroid distance matrices
- Dimension and metric validation
- Batched Euclidean matrices (exact values, bounded memory)
"""

import tracemalloc

import numpy as np
import pytest
from sklearn.metrics.pairwise import euclidean_distances

from docluster.clustering import distance as distance_module
from docluster.clustering.distance import (
    as_matrix,
    cosine_distance,
    cosine_similarity,
    distance,
    distances_to_centroids,
    euclidean_distance,
    mean_pairwise_distance,
    pairwise_distances,
    pairwise_similarities,
)
from docluster.exceptions import ConfigurationError, DimensionMismatchError


class TestPointMetrics:
    def test_orthogonal_vectors(self):
        assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)
        assert cosine_distance([1, 0], [0, 1]) == pytest.approx(1.0)

    def test_opposite_vectors(self):
        assert cosine_similarity([1, 2], [-1, -2]) == pytest.approx(-1.0)
        assert cosine_distance([1, 2], [-1, -2]) == pytest.approx(2.0)

    def test_identical_vectors_have_zero_distance(self):
        v = [0.1, 0.2, 0.3]
        assert cosine_distance(v, v) == 0.0

    def test_zero_vector_similarity_is_zero(self):
        """Zero norm gives similarity 0 (distance 1), never NaN."""
        assert cosine_similarity([0, 0, 0], [1, 2, 3]) == 0.0
        assert cosine_distance([0, 0, 0], [1, 2, 3]) == 1.0

    def test_euclidean(self):
        assert euclidean_distance([0, 0], [3, 4]) == pytest.approx(5.0)

    def test_distance_dispatch(self):
        assert distance([0, 0], [3, 4], "euclidean") == pytest.approx(5.0)
        assert distance([1, 0], [0, 1], "cosine") == pytest.approx(1.0)

    def test_unknown_metric_raises(self):
        with pytest.raises(ConfigurationError):
            distance([1, 0], [0, 1], "manhattan")

    def test_dimension_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError):
            cosine_similarity([1, 2], [1, 2, 3])


class TestMatrices:
    def test_pairwise_is_symmetric_with_zero_diagonal(self, two_blobs):
        dist = pairwise_distances(two_blobs, "cosine")
        assert dist.shape == (10, 10)
        assert np.allclose(dist, dist.T)
        assert np.all(np.diag(dist) == 0.0)

    def test_identical_rows_are_exactly_zero(self):
        vectors = np.tile([0.3, 0.1, 0.7], (4, 1))
        assert np.all(pairwise_distances(vectors, "cosine") == 0.0)

    def test_pairwise_euclidean_values(self):
        dist = pairwise_distances([[0, 0], [3, 4], [6, 8]], "euclidean")
        assert dist[0, 1] == pytest.approx(5.0)
        assert dist[0, 2] == pytest.approx(10.0)

    def test_similarities_match_pointwise(self, two_blobs):
        sims = pairwise_similarities(two_blobs)
        assert sims[0, 7] == pytest.approx(cosine_similarity(two_blobs[0], two_blobs[7]))

    def test_distances_to_centroids_shape(self, two_blobs):
        dist = distances_to_centroids(two_blobs, two_blobs[:3], "euclidean")
        assert dist.shape == (10, 3)
        assert dist[1, 1] == 0.0

    def test_ragged_rows_raise(self):
        with pytest.raises(DimensionMismatchError):
            as_matrix([[1, 2], [1, 2, 3]])

    def test_empty_input(self):
        assert as_matrix([]).shape == (0, 0)
        assert pairwise_distances([]).shape == (0, 0)

    def test_mean_pairwise_distance_default_for_single_vector(self):
        assert mean_pairwise_distance([[1.0, 0.0]]) == 0.5

    def test_mean_pairwise_distance(self):
        assert mean_pairwise_distance([[1, 0], [0, 1]], "cosine") == pytest.approx(1.0)


class TestEuclideanBatches:
    def test_matches_sklearn_across_batches(self, monkeypatch):
        rng = np.random.default_rng(4)
        vectors = rng.normal(size=(7, 3))
        monkeypatch.setattr(distance_module, "EUCLIDEAN_BATCH_BYTES", 50)

        dist = pairwise_distances(vectors, "euclidean")

        assert np.allclose(dist, euclidean_distances(vectors))

    def test_identical_rows_are_exactly_zero(self):
        vectors = np.tile([123.456, -7.5, 0.001], (5, 1))
        assert np.all(pairwise_distances(vectors, "euclidean") == 0.0)

    def test_memory_stays_bounded(self):
        vectors = np.random.default_rng(0).normal(size=(1500, 50))

        tracemalloc.start()
        try:
            dist = pairwise_distances(vectors, "euclidean")
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()

        assert dist.shape == (1500, 1500)
        # Result matrix is 18 MB; a full (N x N x D) difference tensor would be ~900 MB
        assert peak < 100 * 1024 * 1024
