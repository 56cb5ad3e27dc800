"""
Tests for elbow-based parameter tuning.
"""

import numpy as np
import pytest

from docluster.clustering.tuning import elbow_index, find_optimal_epsilon, find_optimal_k


class TestElbowIndex:
    def test_sharpest_bend(self):
        assert elbow_index([10.0, 9.0, 1.0, 0.5]) == 2

    def test_straight_line_has_no_elbow(self):
        assert elbow_index([3.0, 2.0, 1.0]) is None

    def test_too_short(self):
        assert elbow_index([1.0, 0.0]) is None


class TestFindOptimalK:
    def test_tiny_inputs_return_n(self):
        assert find_optimal_k([[1.0, 0.0]]) == 1
        assert find_optimal_k([[1.0, 0.0], [0.0, 1.0]]) == 2

    def test_three_groups(self, three_blobs_2d):
        k = find_optimal_k(three_blobs_2d, max_k=6, metric="euclidean", random_state=0)
        assert k == 3

    def test_default_when_no_elbow(self):
        """Three points give a single-segment curve: no interior point, default 2."""
        assert find_optimal_k([[0.0, 0.0], [1.0, 0.0], [5.0, 0.0]], metric="euclidean") == 2


class TestFindOptimalEpsilon:
    def test_single_vector_default(self):
        assert find_optimal_epsilon([[1.0, 0.0]]) == 0.5

    def test_identical_vectors(self):
        assert find_optimal_epsilon(np.tile([1.0, 1.0], (5, 1))) == 0.0

    def test_value_is_a_k_distance(self, three_blobs_2d):
        epsilon = find_optimal_epsilon(three_blobs_2d, k=3, metric="euclidean")
        assert 0 < epsilon < 1.0
