import numpy as np
import pytest

from distractor_service.core.utils import get_rng, option_labels


class TestGetRng:
    def test_same_seed_same_stream(self) -> None:
        np.testing.assert_array_equal(
            get_rng(7).random(5), get_rng(7).random(5)
        )

    def test_different_seeds_differ(self) -> None:
        assert not np.array_equal(get_rng(1).random(5), get_rng(2).random(5))


class TestOptionLabels:
    def test_four_options(self) -> None:
        assert option_labels(4) == ["A", "B", "C", "D"]

    def test_zero_options(self) -> None:
        assert option_labels(0) == []

    def test_too_many_options_raises(self) -> None:
        with pytest.raises(ValueError, match="n_options"):
            option_labels(7)
