import numpy as np
import pytest
from scipy.stats import chisquare

from distractor_service.core.utils import get_rng
from distractor_service.simulation.sampling import (
    empirical_distribution,
    sample_categorical,
)


class TestSampleCategorical:
    def test_shape_and_range(self) -> None:
        indices = sample_categorical([0.5, 0.3, 0.2], 500, get_rng(0))
        assert indices.shape == (500,)
        assert indices.dtype == np.int64
        assert indices.min() >= 0
        assert indices.max() <= 2

    def test_zero_draws(self) -> None:
        indices = sample_categorical([0.5, 0.5], 0, get_rng(0))
        assert indices.shape == (0,)

    def test_zero_weight_categories_never_selected(self) -> None:
        indices = sample_categorical([0.0, 1.0, 0.0, 2.0], 5000, get_rng(1))
        assert set(np.unique(indices).tolist()) <= {1, 3}

    def test_trailing_zero_weight_never_selected(self) -> None:
        indices = sample_categorical([1.0, 0.0, 0.0], 2000, get_rng(2))
        np.testing.assert_array_equal(indices, np.zeros(2000))

    def test_all_zero_weights_select_first(self) -> None:
        indices = sample_categorical([0.0, 0.0, 0.0], 50, get_rng(3))
        np.testing.assert_array_equal(indices, np.zeros(50))

    def test_unnormalized_matches_normalized(self) -> None:
        a = sample_categorical([2.0, 6.0, 2.0], 1000, get_rng(4))
        b = sample_categorical([0.2, 0.6, 0.2], 1000, get_rng(4))
        np.testing.assert_array_equal(a, b)

    def test_deterministic_with_seed(self) -> None:
        probs = [0.1, 0.2, 0.3, 0.4]
        np.testing.assert_array_equal(
            sample_categorical(probs, 300, get_rng(42)),
            sample_categorical(probs, 300, get_rng(42)),
        )

    def test_empirical_frequencies_match_probabilities(self) -> None:
        probs = np.array([0.5, 0.25, 0.15, 0.1])
        n = 20_000
        indices = sample_categorical(probs, n, get_rng(5))
        observed = np.bincount(indices, minlength=4)
        _, p_value = chisquare(observed, probs * n)
        assert p_value > 0.001

    def test_unnormalized_frequencies_match_rescaled(self) -> None:
        probs = np.array([3.0, 1.0, 1.0])
        indices = sample_categorical(probs, 20_000, get_rng(6))
        np.testing.assert_allclose(
            empirical_distribution(indices, 3),
            probs / probs.sum(),
            atol=0.02,
        )

    def test_negative_weight_raises(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            sample_categorical([0.5, -0.1], 10)

    def test_non_finite_weight_raises(self) -> None:
        with pytest.raises(ValueError, match="finite"):
            sample_categorical([0.5, np.inf], 10)

    def test_empty_vector_raises(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            sample_categorical([], 10)

    def test_negative_n_raises(self) -> None:
        with pytest.raises(ValueError, match="n must be"):
            sample_categorical([1.0], -1)


class TestEmpiricalDistribution:
    def test_fractions(self) -> None:
        indices = np.array([0, 0, 1, 3], dtype=np.int64)
        np.testing.assert_allclose(
            empirical_distribution(indices, 4), [0.5, 0.25, 0.0, 0.25]
        )

    def test_empty(self) -> None:
        result = empirical_distribution(np.array([], dtype=np.int64), 3)
        np.testing.assert_array_equal(result, np.zeros(3))
