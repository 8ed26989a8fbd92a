"""
Core utility functions shared across distractor service modules.
"""

import numpy as np
from numpy.random import Generator

from distractor_service.core.constants import MAX_OPTIONS, OPTION_LABELS


def get_rng(seed: int | None = None) -> Generator:
    """
    Create a numpy random Generator with optional seed.

    Args:
        seed: Random seed for reproducibility. If None, uses entropy.

    Returns:
        A numpy random Generator instance.
    """
    return np.random.default_rng(seed)


def option_labels(n_options: int) -> list[str]:
    """
    Labels for the first n options ('A', 'B', ...).

    Raises:
        ValueError: If n_options is outside [0, MAX_OPTIONS].
    """
    if not (0 <= n_options <= MAX_OPTIONS):
        raise ValueError(
            f"n_options must be in [0, {MAX_OPTIONS}], got {n_options}"
        )
    return list(OPTION_LABELS[:n_options])
