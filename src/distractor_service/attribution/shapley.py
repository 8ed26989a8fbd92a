"""
Shapley values for the wrong-answer attribution game.

Players are the distractors of an item. A coalition S is worth the fraction
of all wrong responses that chose a distractor in S:

    v(S) = sum_{d in S} wrong_count[d] / total_wrong

The game is additive, so each distractor's Shapley value equals its direct
share of wrong responses. `exact_shapley_values` still enumerates every
ordering of the players and is the reference computation; the closed form
in `direct_share_values` is exposed for games too large to enumerate and as
a test oracle.
"""

import itertools
import math
from collections.abc import Iterable, Sequence, Set

import numpy as np
from numpy.typing import NDArray

from distractor_service.core.constants import MAX_EXACT_PLAYERS
from distractor_service.core.exceptions import InvalidInputError


def _as_counts(wrong_counts: Sequence[int]) -> NDArray[np.int64]:
    counts = np.asarray(wrong_counts, dtype=np.int64)
    if counts.ndim != 1:
        raise InvalidInputError(
            f"wrong_counts must be 1D, got shape {counts.shape}"
        )
    if np.any(counts < 0):
        raise InvalidInputError("wrong_counts must be non-negative")
    return counts


def coalition_value(
    coalition: Set[int],
    wrong_counts: Sequence[int] | NDArray[np.int64],
    total_wrong: int,
) -> float:
    """
    Fraction of wrong responses attributable to the players in `coalition`.

    Returns 0 when `total_wrong` is 0.
    """
    if total_wrong <= 0:
        return 0.0
    return sum(int(wrong_counts[j]) for j in coalition) / total_wrong


def all_orderings(n_players: int) -> Iterable[tuple[int, ...]]:
    """Every ordering of players 0..n-1."""
    return itertools.permutations(range(n_players))


def _check_complete(
    orderings: list[tuple[int, ...]], n_players: int
) -> None:
    expected = math.factorial(n_players)
    players = set(range(n_players))
    if len(orderings) != expected or len(set(orderings)) != expected:
        raise InvalidInputError(
            f"Expected {expected} distinct orderings of {n_players} players, "
            f"got {len(set(orderings))} distinct of {len(orderings)}"
        )
    for ordering in orderings:
        if len(ordering) != n_players or set(ordering) != players:
            raise InvalidInputError(
                f"Invalid ordering {ordering} for {n_players} players"
            )


def exact_shapley_values(
    wrong_counts: Sequence[int],
    orderings: Iterable[Sequence[int]] | None = None,
) -> NDArray[np.float64]:
    """
    Shapley values by enumerating every ordering of the players.

    For each ordering the coalition grows left to right; each player is
    credited with v(S + {j}) - v(S) at the moment it joins. Credits are
    averaged over all orderings.

    Args:
        wrong_counts: Wrong responses per distractor, in player order.
        orderings: A complete enumeration of the n! orderings, in any
            order. Defaults to `itertools.permutations`.

    Returns:
        Array of shape (n,) with Shapley values. They sum to 1 when there
        is at least one wrong response and are all 0 otherwise.

    Raises:
        InvalidInputError: If there are no players, more than
            MAX_EXACT_PLAYERS players, or `orderings` is incomplete.
    """
    counts = _as_counts(wrong_counts)
    n = counts.size

    if n == 0:
        raise InvalidInputError("At least one distractor is required")
    if n > MAX_EXACT_PLAYERS:
        raise InvalidInputError(
            f"Exact Shapley enumeration supports at most "
            f"{MAX_EXACT_PLAYERS} distractors ({n} given); "
            f"use direct_share_values instead"
        )

    if orderings is None:
        ordering_list = list(all_orderings(n))
    else:
        ordering_list = [tuple(int(j) for j in o) for o in orderings]
        _check_complete(ordering_list, n)

    total_wrong = int(counts.sum())
    accumulated = np.zeros(n, dtype=np.float64)

    for ordering in ordering_list:
        coalition: set[int] = set()
        for j in ordering:
            before = coalition_value(coalition, counts, total_wrong)
            coalition.add(j)
            after = coalition_value(coalition, counts, total_wrong)
            accumulated[j] += after - before

    result: NDArray[np.float64] = accumulated / len(ordering_list)
    return result


def direct_share_values(wrong_counts: Sequence[int]) -> NDArray[np.float64]:
    """
    Closed-form Shapley values for the additive game: count / total.

    Returns all zeros when there are no wrong responses.
    """
    counts = _as_counts(wrong_counts)
    total_wrong = int(counts.sum())
    if total_wrong == 0:
        return np.zeros(counts.size, dtype=np.float64)
    result: NDArray[np.float64] = counts.astype(np.float64) / total_wrong
    return result
