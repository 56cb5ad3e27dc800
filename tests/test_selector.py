"""
Tests for parameter derivation and algorithm selection.
"""

import numpy as np
import pytest

from docluster.clustering.selector import derive_parameters, select_clustering
from docluster.config import ClusteringConfig
from docluster.exceptions import ClusteringError


def _random_vectors(n, seed=0):
    return np.random.default_rng(seed).normal(size=(n, 5))


class TestDeriveParameters:
    @pytest.mark.parametrize(
        "n, expected_k",
        [(2, 2), (8, 2), (50, 5), (1000, 10)],
    )
    def test_k_heuristic(self, n, expected_k):
        assert derive_parameters(_random_vectors(n)).k == expected_k

    @pytest.mark.parametrize(
        "n, expected_min_pts",
        [(8, 2), (30, 3), (100, 4)],
    )
    def test_min_pts_heuristic(self, n, expected_min_pts):
        assert derive_parameters(_random_vectors(n)).min_pts == expected_min_pts

    def test_epsilon_scales_mean_cosine_distance(self):
        params = derive_parameters([[1.0, 0.0], [0.0, 1.0]])
        assert params.avg_distance == pytest.approx(1.0)
        assert params.epsilon == pytest.approx(1.5)

    def test_single_vector_uses_default_distance(self):
        params = derive_parameters([[1.0, 0.0]])
        assert params.avg_distance == 0.5
        assert params.epsilon == pytest.approx(0.75)

    def test_config_bounds(self):
        config = ClusteringConfig(min_k=3, max_k=4, epsilon_scale=2.0)
        params = derive_parameters([[1.0, 0.0], [0.0, 1.0]], config)
        assert params.k == 3
        assert params.epsilon == pytest.approx(2.0)

    def test_elbow_strategy(self, three_blobs_2d):
        config = ClusteringConfig(metric="euclidean", parameter_strategy="elbow", random_state=0)
        params = derive_parameters(three_blobs_2d, config)
        assert params.k == 3
        assert params.epsilon > 0


class TestSelectClustering:
    def test_empty_input(self):
        result = select_clustering([])
        assert result.algorithm == "K-means"
        assert result.clusters == {}
        assert result.silhouette_score == 0.0

    def test_winner_has_best_silhouette(self, two_blobs):
        result = select_clustering(two_blobs, ClusteringConfig(random_state=0))
        candidates = result.parameters["candidates"]
        assert set(candidates) == {"K-means", "DBSCAN"}
        assert result.silhouette_score == max(candidates.values())
        assert sorted(i for m in result.clusters.values() for i in m) == list(range(10))

    def test_tie_keeps_kmeans(self):
        """Identical vectors: both engines return one cluster with silhouette 0."""
        vectors = np.tile([0.4, 0.4, 0.2], (6, 1))
        result = select_clustering(vectors, ClusteringConfig(random_state=0))
        assert result.algorithm == "K-means"
        assert result.parameters["candidates"]["DBSCAN"] == 0.0
        assert result.n_clusters == 1

    def test_strategy_recorded(self, two_blobs):
        result = select_clustering(two_blobs, ClusteringConfig(random_state=0))
        assert result.parameters["strategy"] == "heuristic"

    def test_explicit_rng_is_used(self, two_blobs):
        first = select_clustering(two_blobs, rng=np.random.default_rng(9))
        second = select_clustering(two_blobs, rng=np.random.default_rng(9))
        assert first.clusters == second.clusters

    def test_non_finite_vectors_rejected(self, two_blobs):
        vectors = two_blobs.copy()
        vectors[3, 0] = np.nan
        with pytest.raises(ClusteringError) as excinfo:
            select_clustering(vectors)
        assert excinfo.value.details["rows"] == [3]
