"""
Data models for distractor evaluation input/output.

This module defines the data structures for:
- AnswerOption, Persona: Input data for the response simulator
- ResponseRecord, AccuracySummary, SimResult: Simulator output
- ShapleyRow: Attribution engine output
- DegenerateInputWarning: Non-fatal flags attached to results
"""

import math
import numbers
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from distractor_service.core.constants import MAX_OPTIONS, MIN_OPTIONS
from distractor_service.core.exceptions import InvalidInputError


class DegenerateCode(StrEnum):
    ZERO_SAMPLES = "zero_samples"
    ZERO_PROBABILITY_PERSONA = "zero_probability_persona"
    NO_WRONG_RESPONSES = "no_wrong_responses"
    NO_LOW_ABILITY_WRONG_RESPONSES = "no_low_ability_wrong_responses"
    UNIFORM_FALLBACK_PERSONA = "uniform_fallback_persona"
    UNKNOWN_PERSONA_ESTIMATE = "unknown_persona_estimate"


class DistractorStrength(StrEnum):
    VERY_STRONG = "very_strong"
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"
    NOT_EVALUATED = "not_evaluated"


@dataclass(frozen=True)
class AnswerOption:
    """
    One selectable choice of a multiple-choice item.

    Attributes:
        label: Single uppercase letter, unique within the item.
        text: Displayed option text.
        is_correct: Whether this is the keyed answer.
    """

    label: str
    text: str
    is_correct: bool = False

    def __post_init__(self) -> None:
        if len(self.label) != 1 or not ("A" <= self.label <= "Z"):
            raise InvalidInputError(
                f"Option label must be a single letter A-Z, got '{self.label}'"
            )


@dataclass(frozen=True)
class Persona:
    """
    A named examinee ability archetype.

    Attributes:
        name: Identifier, unique within a run.
        probs: Option label -> non-negative weight. Need not sum to 1;
            labels that are absent count as 0.
    """

    name: str
    probs: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise InvalidInputError("Persona name must be non-empty")
        for label, p in self.probs.items():
            if isinstance(p, bool) or not isinstance(p, numbers.Real):
                raise InvalidInputError(
                    f"Persona '{self.name}' has non-numeric probability "
                    f"{p!r} for option {label}"
                )
            if not math.isfinite(p) or p < 0:
                raise InvalidInputError(
                    f"Persona '{self.name}' has invalid probability "
                    f"{p!r} for option {label}"
                )

    def weights_for(self, labels: Sequence[str]) -> list[float]:
        """Probability weights aligned with `labels`, 0 where missing."""
        return [float(self.probs.get(label, 0.0)) for label in labels]


class DegenerateInputWarning(BaseModel):
    """
    A condition under which the computation completed with neutral values.

    Attributes:
        code: Machine-readable condition.
        message: Human-readable explanation for the UI layer.
        persona: Persona concerned, when the condition is persona-specific.
    """

    model_config = ConfigDict(frozen=True)

    code: DegenerateCode
    message: str
    persona: str | None = None


class ResponseRecord(BaseModel):
    """One simulated examinee response."""

    model_config = ConfigDict(frozen=True)

    persona: str
    chosen_option: str
    chosen_text: str = ""
    is_correct: bool


class AccuracySummary(BaseModel):
    """Per-persona accuracy. `accuracy` is 0 when `total` is 0."""

    model_config = ConfigDict(frozen=True)

    persona: str
    accuracy: float = Field(..., ge=0.0, le=1.0)
    total: int = Field(..., ge=0)


class SimResult(BaseModel):
    """
    Complete output from the response simulator.

    `per_persona_samples` is the equal-split draw count, or None when a
    weighted allocation was used; `accuracy[i].total` always holds the
    number of draws for each persona.
    """

    options: list[AnswerOption]
    personas: list[Persona]
    per_persona_samples: int | None
    responses: list[ResponseRecord]
    accuracy: list[AccuracySummary]
    warnings: list[DegenerateInputWarning] = Field(default_factory=list)

    @property
    def n_responses(self) -> int:
        return len(self.responses)

    @property
    def is_degenerate(self) -> bool:
        return len(self.warnings) > 0


class ShapleyRow(BaseModel):
    """
    Attribution result for a single distractor.

    Attributes:
        label: Distractor option label.
        text: Distractor option text.
        shapley: Shapley value in [0, 1].
        share_pct: shapley * 100.
        wrong_pct: Percentage of all responses that chose this distractor.
        novice_pct: Percentage of low-ability wrong responses that chose
            this distractor.
        strength: Discrete strength tier.
        recommendation: Human-readable recommendation for the tier.
        degenerate: True when the values are neutral placeholders.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    text: str
    shapley: float
    share_pct: float
    wrong_pct: float
    novice_pct: float
    strength: DistractorStrength
    recommendation: str
    degenerate: bool = False


class DistractorEvaluation(BaseModel):
    """Simulation plus attribution for a single item."""

    simulation: SimResult
    shapley: list[ShapleyRow]
    warnings: list[DegenerateInputWarning] = Field(default_factory=list)


def distractor_options(
    options: Sequence[AnswerOption],
) -> list[AnswerOption]:
    """Distractors in alphabetical label order."""
    return sorted(
        (o for o in options if not o.is_correct), key=lambda o: o.label
    )


def validate_options(options: Sequence[AnswerOption]) -> None:
    """
    Validate the option list of a multiple-choice item.

    Raises:
        InvalidInputError: If there are fewer than MIN_OPTIONS or more than
            MAX_OPTIONS options, labels repeat, or the number of correct
            options is not exactly one.
    """
    if len(options) < MIN_OPTIONS:
        raise InvalidInputError(
            f"An item needs at least {MIN_OPTIONS} options, "
            f"got {len(options)}"
        )
    if len(options) > MAX_OPTIONS:
        raise InvalidInputError(
            f"An item supports at most {MAX_OPTIONS} options, "
            f"got {len(options)}"
        )

    labels = [o.label for o in options]
    if len(set(labels)) != len(labels):
        raise InvalidInputError(f"Option labels must be unique: {labels}")

    n_correct = sum(1 for o in options if o.is_correct)
    if n_correct != 1:
        raise InvalidInputError(
            f"Exactly one option must be correct, got {n_correct}"
        )
