"""
Configuration dataclasses for distractor evaluation.

This module defines:
- The persona catalog (names, descriptions, optional sampling weights)
- The low-ability persona group used for novice percentages
- The recommendation tier table
- Config loading from YAML presets using OmegaConf
"""

from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import toml
from omegaconf import MISSING, OmegaConf

from distractor_service.attribution.recommendations import (
    DEFAULT_TIERS,
    RecommendationTier,
    validate_tiers,
)
from distractor_service.core.constants import DEFAULT_TOTAL_SAMPLES
from distractor_service.core.data_models import DistractorStrength

PARAMS_DIR = Path(__file__).parent / "params"
DEFAULT_PRESET = "default"
DISTRIBUTION_NAME = "distractor-service"


def _find_pyproject() -> Path | None:
    """Nearest pyproject.toml above this file (source checkouts only)."""
    for directory in Path(__file__).resolve().parents:
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _get_backend_version() -> str:
    pyproject = _find_pyproject()
    if pyproject is None:
        try:
            return version(DISTRIBUTION_NAME)
        except PackageNotFoundError as e:
            raise ValueError("Package version not available") from e

    with open(pyproject) as f:
        data = toml.load(f)

    project_version = data.get("project", {}).get("version")

    if not project_version:
        raise ValueError("Version not found in pyproject.toml")

    assert isinstance(project_version, str)
    return project_version


@dataclass
class PersonaConfig:
    """An examinee ability archetype.

    Attributes:
        name: Persona identifier, unique within the catalog.
        description: Ability profile handed to the probability estimator.
        weight: Relative share of the sample budget. Leave unset on every
            persona for an equal split.
    """

    name: str = MISSING
    description: str = ""
    weight: float | None = None


@dataclass
class RecommendationTierConfig:
    """One row of the recommendation table (see `RecommendationTier`)."""

    min_share_pct: float = MISSING
    strength: str = MISSING
    label: str = MISSING


def _default_personas() -> list[PersonaConfig]:
    return [
        PersonaConfig(
            name="Expert",
            description=(
                "Very strong learner with deep theoretical and clinical "
                "understanding; rarely makes mistakes."
            ),
        ),
        PersonaConfig(
            name="Proficient",
            description=(
                "Good learner who knows the core material well but "
                "occasionally slips on difficult details."
            ),
        ),
        PersonaConfig(
            name="Average",
            description=(
                "Grasps the main ideas but is easily misled by plausible "
                "distractors."
            ),
        ),
        PersonaConfig(
            name="Novice",
            description=(
                "New to the topic; knowledge is not yet organised and "
                "concepts are often confused."
            ),
        ),
        PersonaConfig(
            name="Weak",
            description=(
                "Has studied little; relies on vague impressions or guessing "
                "and is very likely to answer wrongly."
            ),
        ),
        PersonaConfig(
            name="Guesser",
            description=(
                "No relevant knowledge at all; picks options at random."
            ),
        ),
    ]


def _default_low_ability() -> list[str]:
    return ["Novice", "Weak"]


def _default_tiers() -> list[RecommendationTierConfig]:
    return [
        RecommendationTierConfig(
            min_share_pct=t.min_share_pct,
            strength=t.strength.value,
            label=t.label,
        )
        for t in DEFAULT_TIERS
    ]


@dataclass
class EvaluationConfig:
    """Complete configuration for evaluating the distractors of an item."""

    total_samples: int = DEFAULT_TOTAL_SAMPLES
    personas: list[PersonaConfig] = field(default_factory=_default_personas)
    low_ability_personas: list[str] = field(
        default_factory=_default_low_ability
    )
    recommendation_tiers: list[RecommendationTierConfig] = field(
        default_factory=_default_tiers
    )

    def __post_init__(self) -> None:
        if self.total_samples < 0:
            raise ValueError("total_samples must be >= 0")
        if len(self.personas) == 0:
            raise ValueError("Must have at least 1 persona")

        names = self.persona_names
        if len(set(names)) != len(names):
            raise ValueError(f"Persona names must be unique: {names}")

        n_weighted = sum(1 for p in self.personas if p.weight is not None)
        if n_weighted not in (0, len(self.personas)):
            raise ValueError(
                "Persona weights must be set on every persona or on none"
            )
        if any(p.weight is not None and p.weight < 0 for p in self.personas):
            raise ValueError("Persona weights must be non-negative")

        # Raises InvalidInputError (a ValueError) on a bad table
        validate_tiers(self.tiers())

    @property
    def persona_names(self) -> list[str]:
        return [p.name for p in self.personas]

    @property
    def weights(self) -> list[float] | None:
        """Per-persona weights, or None for an equal split."""
        if all(p.weight is None for p in self.personas):
            return None
        return [float(p.weight or 0.0) for p in self.personas]

    def tiers(self) -> tuple[RecommendationTier, ...]:
        return tuple(
            RecommendationTier(
                min_share_pct=float(t.min_share_pct),
                strength=DistractorStrength(t.strength),
                label=t.label,
            )
            for t in self.recommendation_tiers
        )


def load_config(yaml_path: Path | None) -> EvaluationConfig:
    """Load and validate an evaluation config from YAML.

    Args:
        yaml_path: Path to YAML config file. None gives the defaults.

    Returns:
        Validated EvaluationConfig

    Raises:
        ValueError: If the config is inconsistent
        FileNotFoundError: If yaml_path doesn't exist
    """
    # Create schema from dataclass
    schema = OmegaConf.structured(EvaluationConfig)

    if yaml_path is not None:
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        user_config = OmegaConf.load(yaml_path)
        config = OmegaConf.merge(schema, user_config)
    else:
        config = schema

    # Convert to typed dataclass
    result = OmegaConf.to_object(config)
    assert isinstance(result, EvaluationConfig)

    return result


def get_available_presets() -> list[str]:
    return sorted(x.stem for x in PARAMS_DIR.glob("*.yaml"))


def get_preset(name: str) -> EvaluationConfig:
    """Get a preset configuration by name."""
    config_path = PARAMS_DIR / f"{name}.yaml"
    if not config_path.exists():
        available_presets = get_available_presets()
        raise ValueError(
            f"Unknown preset: {name}. Available presets: {available_presets}"
        )
    return load_config(config_path)
