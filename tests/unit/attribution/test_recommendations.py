import pytest

from distractor_service.attribution.recommendations import (
    DEFAULT_TIERS,
    RecommendationTier,
    classify_share,
    validate_tiers,
)
from distractor_service.core.data_models import DistractorStrength
from distractor_service.core.exceptions import InvalidInputError


class TestClassifyShare:
    @pytest.mark.parametrize(
        ("share_pct", "strength"),
        [
            (100.0, DistractorStrength.VERY_STRONG),
            (40.0, DistractorStrength.VERY_STRONG),
            (39.99, DistractorStrength.STRONG),
            (25.0, DistractorStrength.STRONG),
            (24.9, DistractorStrength.MODERATE),
            (10.0, DistractorStrength.MODERATE),
            (9.99, DistractorStrength.WEAK),
            (0.0, DistractorStrength.WEAK),
        ],
    )
    def test_default_boundaries(
        self, share_pct: float, strength: DistractorStrength
    ) -> None:
        assert classify_share(share_pct).strength == strength

    def test_custom_table(self) -> None:
        tiers = (
            RecommendationTier(50.0, DistractorStrength.STRONG, "keep"),
            RecommendationTier(0.0, DistractorStrength.WEAK, "drop"),
        )
        assert classify_share(60.0, tiers).label == "keep"
        assert classify_share(45.0, tiers).label == "drop"


class TestValidateTiers:
    def test_defaults_are_valid(self) -> None:
        validate_tiers(DEFAULT_TIERS)

    def test_empty_raises(self) -> None:
        with pytest.raises(InvalidInputError):
            validate_tiers(())

    def test_not_descending_raises(self) -> None:
        tiers = (
            RecommendationTier(10.0, DistractorStrength.MODERATE, "x"),
            RecommendationTier(25.0, DistractorStrength.STRONG, "y"),
            RecommendationTier(0.0, DistractorStrength.WEAK, "z"),
        )
        with pytest.raises(InvalidInputError, match="descending"):
            validate_tiers(tiers)

    def test_missing_zero_floor_raises(self) -> None:
        tiers = (RecommendationTier(10.0, DistractorStrength.WEAK, "x"),)
        with pytest.raises(InvalidInputError, match="start at 0"):
            validate_tiers(tiers)
