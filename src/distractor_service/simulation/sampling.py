"""
Categorical sampling by cumulative-distribution inversion.

Probability vectors do not have to be normalized: draws are scaled by the
actual total of the vector, so any non-negative vector with a positive sum
defines a valid distribution.
"""

from collections.abc import Sequence

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

from distractor_service.core.utils import get_rng


def sample_categorical(
    probs: Sequence[float] | NDArray[np.float64],
    n: int,
    rng: Generator | None = None,
) -> NDArray[np.int64]:
    """
    Draw n category indices from a (possibly unnormalized) weight vector.

    A running cumulative sum is taken over the categories in the given
    order, each uniform draw is scaled to [0, total) and the first category
    whose cumulative sum exceeds the draw is selected. Categories with zero
    weight are never selected.

    If the weights sum to 0 every draw selects category 0.

    Args:
        probs: Non-negative weights, one per category.
        n: Number of draws.
        rng: Random number generator.

    Returns:
        Array of shape (n,) with category indices.
    """
    if rng is None:
        rng = get_rng()

    weights = np.asarray(probs, dtype=np.float64)
    if weights.ndim != 1 or weights.size == 0:
        raise ValueError(
            f"probs must be a non-empty 1D vector, got shape {weights.shape}"
        )
    if not np.all(np.isfinite(weights)) or np.any(weights < 0):
        raise ValueError("probs must be finite and non-negative")
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")

    cumulative = np.cumsum(weights)
    total = cumulative[-1]

    if total <= 0:
        return np.zeros(n, dtype=np.int64)

    draws = rng.random(n) * total
    indices = np.searchsorted(cumulative, draws, side="right")

    # Rounding in `random() * total` can land exactly on total
    last_positive = int(np.flatnonzero(weights > 0)[-1])
    return np.minimum(indices, last_positive).astype(np.int64)


def empirical_distribution(
    indices: NDArray[np.int64], n_categories: int
) -> NDArray[np.float64]:
    """Fraction of draws that landed in each category."""
    counts = np.bincount(indices, minlength=n_categories).astype(np.float64)
    if indices.size == 0:
        return counts
    result: NDArray[np.float64] = counts / indices.size
    return result
