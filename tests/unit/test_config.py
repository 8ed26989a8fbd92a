from pathlib import Path

import pytest

from distractor_service.config import (
    EvaluationConfig,
    PersonaConfig,
    RecommendationTierConfig,
    get_available_presets,
    get_preset,
    load_config,
)
from distractor_service.core.constants import DEFAULT_TOTAL_SAMPLES
from distractor_service.core.data_models import DistractorStrength


class TestEvaluationConfig:
    def test_defaults(self) -> None:
        config = EvaluationConfig()
        assert config.total_samples == DEFAULT_TOTAL_SAMPLES
        assert config.persona_names == [
            "Expert",
            "Proficient",
            "Average",
            "Novice",
            "Weak",
            "Guesser",
        ]
        assert config.low_ability_personas == ["Novice", "Weak"]
        assert config.weights is None

    def test_tiers_are_typed(self) -> None:
        tiers = EvaluationConfig().tiers()
        assert tiers[0].strength == DistractorStrength.VERY_STRONG
        assert tiers[-1].min_share_pct == 0.0

    def test_weights(self) -> None:
        config = EvaluationConfig(
            personas=[
                PersonaConfig(name="Expert", weight=1.0),
                PersonaConfig(name="Weak", weight=3.0),
            ]
        )
        assert config.weights == [1.0, 3.0]

    def test_partial_weights_rejected(self) -> None:
        with pytest.raises(ValueError, match="every persona or on none"):
            EvaluationConfig(
                personas=[
                    PersonaConfig(name="Expert", weight=1.0),
                    PersonaConfig(name="Weak"),
                ]
            )

    def test_negative_weight_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            EvaluationConfig(
                personas=[PersonaConfig(name="Expert", weight=-1.0)]
            )

    def test_duplicate_names_rejected(self) -> None:
        with pytest.raises(ValueError, match="unique"):
            EvaluationConfig(
                personas=[PersonaConfig(name="A"), PersonaConfig(name="A")]
            )

    def test_empty_catalog_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least 1 persona"):
            EvaluationConfig(personas=[])

    def test_negative_total_rejected(self) -> None:
        with pytest.raises(ValueError, match="total_samples"):
            EvaluationConfig(total_samples=-1)

    def test_bad_tier_table_rejected(self) -> None:
        with pytest.raises(ValueError, match="start at 0"):
            EvaluationConfig(
                recommendation_tiers=[
                    RecommendationTierConfig(
                        min_share_pct=10.0, strength="weak", label="x"
                    )
                ]
            )


class TestLoadConfig:
    def test_none_gives_defaults(self) -> None:
        assert load_config(None) == EvaluationConfig()

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_yaml_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text(
            "total_samples: 300\n"
            "low_ability_personas: [Weak]\n"
            "personas:\n"
            "  - name: Expert\n"
            "  - name: Weak\n"
            "    description: Guesses a lot\n"
        )
        config = load_config(path)
        assert config.total_samples == 300
        assert config.persona_names == ["Expert", "Weak"]
        assert config.personas[1].description == "Guesses a lot"
        assert config.low_ability_personas == ["Weak"]


class TestPresets:
    def test_available(self) -> None:
        presets = get_available_presets()
        assert "default" in presets
        assert "weighted_cohort" in presets

    def test_default_matches_dataclass(self) -> None:
        assert get_preset("default") == EvaluationConfig()

    def test_weighted_cohort(self) -> None:
        config = get_preset("weighted_cohort")
        assert config.weights == [5.0, 20.0, 40.0, 20.0, 10.0, 5.0]

    def test_unknown_preset_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown preset"):
            get_preset("nonexistent")
