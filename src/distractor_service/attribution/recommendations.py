"""
Distractor strength tiers.

A distractor's share of wrong responses (Shapley value in percent) is
classified by walking an ordered table of tiers from the highest floor
down. Thresholds and wording live in the table only.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from distractor_service.core.data_models import DistractorStrength
from distractor_service.core.exceptions import InvalidInputError


@dataclass(frozen=True)
class RecommendationTier:
    """
    Attributes:
        min_share_pct: Lowest share (inclusive) that falls in this tier.
        strength: Strength tier.
        label: Recommendation shown to item writers.
    """

    min_share_pct: float
    strength: DistractorStrength
    label: str


DEFAULT_TIERS: tuple[RecommendationTier, ...] = (
    RecommendationTier(
        min_share_pct=40.0,
        strength=DistractorStrength.VERY_STRONG,
        label=(
            "Very strong distractor - keep; it draws a large part of the "
            "wrong answers."
        ),
    ),
    RecommendationTier(
        min_share_pct=25.0,
        strength=DistractorStrength.STRONG,
        label="Strong distractor - keep; consider refining the wording.",
    ),
    RecommendationTier(
        min_share_pct=10.0,
        strength=DistractorStrength.MODERATE,
        label=(
            "Moderate distractor - keep if four options are needed; "
            "improve it to make it more plausible."
        ),
    ),
    RecommendationTier(
        min_share_pct=0.0,
        strength=DistractorStrength.WEAK,
        label=(
            "Weak distractor - contributes little to wrong answers; "
            "replace or remove it."
        ),
    ),
)

TOO_EASY_RECOMMENDATION = (
    "Item too easy to evaluate - almost every examinee answered correctly, "
    "so distractor strength cannot be judged."
)

NO_RESPONSES_RECOMMENDATION = (
    "Not enough data - no responses were simulated for this item."
)


def validate_tiers(tiers: Sequence[RecommendationTier]) -> None:
    """
    Raises:
        InvalidInputError: If the table is empty, not strictly descending,
            or does not end with a floor of 0.
    """
    if len(tiers) == 0:
        raise InvalidInputError("At least one recommendation tier is required")

    floors = [t.min_share_pct for t in tiers]
    if any(a <= b for a, b in zip(floors, floors[1:], strict=False)):
        raise InvalidInputError(
            f"Tier floors must be strictly descending, got {floors}"
        )
    if floors[-1] != 0.0:
        raise InvalidInputError(
            f"The last tier must start at 0, got {floors[-1]}"
        )


def classify_share(
    share_pct: float,
    tiers: Sequence[RecommendationTier] = DEFAULT_TIERS,
) -> RecommendationTier:
    """Return the first tier whose floor is at or below `share_pct`."""
    for tier in tiers:
        if share_pct >= tier.min_share_pct:
            return tier
    return tiers[-1]
