"""
Tests for K-means clustering.

Tests:
- Determinism with a fixed seed
- Completeness (every index in exactly one cluster)
- Separation of well-separated groups
- Degenerate input (identical vectors, empty input, k > N)
- k-means++ fallback and early stop
- Empty-cluster repair (helper and inside the iteration loop)
- Best-silhouette snapshot when a later iteration scores worse
- Cooperative cancellation
"""

import importlib

import numpy as np
import pytest

from docluster.clustering.kmeans import _repair_empty_clusters, initialize_centroids, kmeans
from docluster.clustering.quality import silhouette_score
from docluster.exceptions import ConfigurationError

kmeans_module = importlib.import_module("docluster.clustering.kmeans")


class FixedRng:
    """Stand-in Generator: always picks index 0 first, roulette draw above the total."""

    def integers(self, low, high):
        return 0

    def random(self):
        return 1.5


def _all_indices(result):
    return sorted(i for members in result.clusters.values() for i in members)


# ============================================================================
# Clustering behaviour
# ============================================================================


class TestKMeans:
    def test_same_seed_same_result(self, two_blobs):
        first = kmeans(two_blobs, 3, random_state=11)
        second = kmeans(two_blobs, 3, random_state=11)
        assert first.clusters == second.clusters
        assert first.silhouette_score == second.silhouette_score

    def test_every_index_assigned_once(self, two_blobs):
        result = kmeans(two_blobs, 4, random_state=0)
        assert _all_indices(result) == list(range(10))

    def test_separates_two_groups(self, two_blobs):
        result = kmeans(two_blobs, 2, random_state=0)
        groups = {frozenset(members) for members in result.clusters.values()}
        assert groups == {frozenset(range(5)), frozenset(range(5, 10))}
        assert result.silhouette_score > 0.3
        assert result.algorithm == "K-means"

    def test_euclidean_metric(self, three_blobs_2d):
        result = kmeans(three_blobs_2d, 3, metric="euclidean", random_state=1)
        groups = {frozenset(members) for members in result.clusters.values()}
        assert groups == {frozenset(range(0, 10)), frozenset(range(10, 20)), frozenset(range(20, 30))}

    def test_identical_vectors_collapse_to_one_cluster(self):
        vectors = np.tile([0.2, 0.5, 0.1], (5, 1))
        result = kmeans(vectors, 3, random_state=0)
        assert result.n_clusters == 1
        assert _all_indices(result) == list(range(5))
        assert result.coherence[next(iter(result.clusters))] == pytest.approx(1.0)
        assert result.silhouette_score == 0.0

    def test_empty_input(self):
        result = kmeans([], 3)
        assert result.clusters == {}
        assert result.silhouette_score == 0.0

    def test_k_clamped_to_n(self, two_blobs):
        result = kmeans(two_blobs[:3], 10, random_state=0)
        assert result.parameters["k"] <= 3
        assert result.parameters["requested_k"] == 10
        assert _all_indices(result) == [0, 1, 2]

    def test_invalid_k_raises(self, two_blobs):
        with pytest.raises(ConfigurationError):
            kmeans(two_blobs, 0)

    def test_invalid_metric_raises(self, two_blobs):
        with pytest.raises(ConfigurationError):
            kmeans(two_blobs, 2, metric="hamming")

    def test_parameters_and_centroids(self, two_blobs):
        result = kmeans(two_blobs, 2, random_state=0)
        for key in ("k", "requested_k", "iterations", "converged", "metric", "cluster_count"):
            assert key in result.parameters
        assert set(result.centroids) == set(result.clusters)
        assert "silhouette_score" in result.quality_metrics

    def test_cancellation_returns_best_snapshot(self, two_blobs):
        result = kmeans(two_blobs, 2, random_state=0, should_stop=lambda: True)
        assert result.parameters["cancelled"] is True
        assert result.parameters["iterations"] == 1
        assert _all_indices(result) == list(range(10))


# ============================================================================
# Seeding and repair
# ============================================================================


class TestInitialization:
    def test_roulette_fall_through_picks_farthest(self):
        vectors = np.array([[0.0, 0.0], [1.0, 0.0], [5.0, 0.0]])
        centroids = initialize_centroids(vectors, 2, FixedRng(), metric="euclidean")
        assert np.array_equal(centroids, vectors[[0, 2]])

    def test_seeding_stops_when_points_coincide(self):
        vectors = np.array([[1.0, 0.0], [1.0, 0.0], [1.0, 0.0]])
        centroids = initialize_centroids(vectors, 3, np.random.default_rng(0))
        assert centroids.shape == (1, 2)

    def test_distinct_centroids(self, two_blobs):
        centroids = initialize_centroids(two_blobs, 4, np.random.default_rng(5))
        assert len({tuple(row) for row in centroids}) == 4


class TestRepair:
    def test_largest_cluster_split_into_empty(self):
        vectors = np.arange(8, dtype=float).reshape(4, 2)
        clusters = {0: [0, 1, 2, 3], 1: []}
        centroids = np.zeros((2, 2))

        assert _repair_empty_clusters(vectors, clusters, centroids) is True
        assert clusters == {0: [2, 3], 1: [0, 1]}
        assert np.allclose(centroids[1], vectors[[0, 1]].mean(axis=0))
        assert np.allclose(centroids[0], vectors[[2, 3]].mean(axis=0))

    def test_odd_split_moves_ceiling_half(self):
        vectors = np.arange(6, dtype=float).reshape(3, 2)
        clusters = {0: [], 1: [0, 1, 2]}
        _repair_empty_clusters(vectors, clusters, np.zeros((2, 2)))
        assert clusters == {0: [0, 1], 1: [2]}

    def test_nothing_to_repair(self):
        clusters = {0: [0], 1: [1]}
        assert _repair_empty_clusters(np.eye(2), clusters, np.eye(2)) is False


# ============================================================================
# Iteration loop
# ============================================================================


def _line(*xs):
    """Points on the x axis (Euclidean distances equal |x_i - x_j|)."""
    return np.array([[x, 0.0] for x in xs])


@pytest.fixture
def fixed_centroids(monkeypatch):
    """Replace k-means++ seeding with the given starting centroids."""

    def use(*xs):
        monkeypatch.setattr(
            kmeans_module, "initialize_centroids", lambda vectors, k, rng, metric: _line(*xs)
        )

    return use


@pytest.fixture
def recorded_scores(monkeypatch):
    """Silhouette of every iteration, in order."""
    scores = []

    def recording(*args, **kwargs):
        score = silhouette_score(*args, **kwargs)
        scores.append(score)
        return score

    monkeypatch.setattr(kmeans_module, "silhouette_score", recording)
    return scores


class TestIterationLoop:
    def test_earlier_snapshot_kept_when_silhouette_drops(self, fixed_centroids, recorded_scores):
        # Iteration 1: {-11, -9, -10.5, -9.5} | {-6, 6} | {9, 11}
        # Iteration 2: -6 and 6 defect, the middle cluster empties and is
        # refilled with the first three members (by index) of the left cluster.
        vectors = _line(-11, -9, -6, -10.5, -9.5, 6, 9, 11)
        fixed_centroids(-15, 0, 15)

        result = kmeans(vectors, 3, max_iterations=2, metric="euclidean")

        first = {0: [0, 1, 3, 4], 1: [2, 5], 2: [6, 7]}
        assert len(recorded_scores) == 2
        assert recorded_scores[1] < recorded_scores[0]
        assert result.clusters == first
        assert result.silhouette_score == pytest.approx(
            silhouette_score(vectors, first, "euclidean")
        )
        assert result.silhouette_score == pytest.approx(0.474096, abs=1e-5)
        assert result.parameters["iterations"] == 2
        assert result.parameters["converged"] is False
        assert np.allclose(result.centroids[1], [0.0, 0.0])

    def test_empty_cluster_repaired_inside_loop(self, fixed_centroids, recorded_scores):
        # Iteration 1: {-4, -3} | {-2, 4} | {5, 6}
        # Iteration 2: -2 and 4 move to their neighbours, cluster 1 empties and
        # takes the first ceil(3/2) members of cluster 0.
        vectors = _line(-4, -3, -2, 4, 5, 6)
        fixed_centroids(-5.5, 1, 7.5)

        result = kmeans(vectors, 3, metric="euclidean")

        assert result.clusters == {0: [2], 1: [0, 1], 2: [3, 4, 5]}
        assert result.parameters["converged"] is True
        assert result.parameters["iterations"] == 3
        assert np.allclose(result.centroids[0], [-2.0, 0.0])
        assert np.allclose(result.centroids[1], [-3.5, 0.0])
        assert np.allclose(result.centroids[2], [5.0, 0.0])
        assert recorded_scores[0] == pytest.approx(1.6 / 6)
        assert result.silhouette_score == pytest.approx(max(recorded_scores))
