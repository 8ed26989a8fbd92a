"""
Shapley attribution of wrong answers to the distractors of an item.
"""

from distractor_service.attribution.engine import (
    DEFAULT_LOW_ABILITY_PERSONAS,
    compute_shapley,
)
from distractor_service.attribution.recommendations import (
    DEFAULT_TIERS,
    NO_RESPONSES_RECOMMENDATION,
    TOO_EASY_RECOMMENDATION,
    RecommendationTier,
    classify_share,
    validate_tiers,
)
from distractor_service.attribution.shapley import (
    all_orderings,
    coalition_value,
    direct_share_values,
    exact_shapley_values,
)

__all__ = [
    "DEFAULT_LOW_ABILITY_PERSONAS",
    "DEFAULT_TIERS",
    "NO_RESPONSES_RECOMMENDATION",
    "RecommendationTier",
    "TOO_EASY_RECOMMENDATION",
    "all_orderings",
    "classify_share",
    "coalition_value",
    "compute_shapley",
    "direct_share_values",
    "exact_shapley_values",
    "validate_tiers",
]
