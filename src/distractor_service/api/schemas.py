from typing import Any

from pydantic import BaseModel, Field

from distractor_service.core.data_models import (
    AccuracySummary,
    AnswerOption,
    DegenerateInputWarning,
    Persona,
    ResponseRecord,
    ShapleyRow,
)

# --- Shared schemas ---


class AnswerOptionSchema(BaseModel):
    label: str = Field(min_length=1, max_length=1)
    text: str
    is_correct: bool = False

    def to_domain(self) -> AnswerOption:
        return AnswerOption(
            label=self.label, text=self.text, is_correct=self.is_correct
        )

    @classmethod
    def from_domain(cls, option: AnswerOption) -> "AnswerOptionSchema":
        return cls(
            label=option.label, text=option.text, is_correct=option.is_correct
        )


class PersonaSchema(BaseModel):
    name: str
    probs: dict[str, float]

    @classmethod
    def from_domain(cls, persona: Persona) -> "PersonaSchema":
        return cls(name=persona.name, probs=dict(persona.probs))


# --- Request schemas ---


class SimulationRequest(BaseModel):
    correct_answer: str = Field(min_length=1)
    distractors: list[str] = Field(min_length=1)
    # Raw estimator payload; malformed entries fall back to uniform
    personas: list[Any] | dict[str, Any] | None = None
    persona_names: list[str] | None = None
    total_samples: int | None = Field(default=None, ge=0)
    persona_weights: dict[str, float] | None = None
    low_ability_personas: list[str] | None = None
    random_seed: int | None = None
    include_shapley: bool = True


class ShapleyRequest(BaseModel):
    options: list[AnswerOptionSchema]
    responses: list[ResponseRecord]
    low_ability_personas: list[str] | None = None

    def domain_options(self) -> list[AnswerOption]:
        return [o.to_domain() for o in self.options]


# --- Response schemas ---


class SimulationResponse(BaseModel):
    options: list[AnswerOptionSchema]
    personas: list[PersonaSchema]
    per_persona_samples: int | None
    response_matrix: list[ResponseRecord]
    accuracy_summary: list[AccuracySummary]
    warnings: list[DegenerateInputWarning]
    shapley: list[ShapleyRow] | None = None


class ShapleyResponse(BaseModel):
    shapley: list[ShapleyRow]


class ErrorDetail(BaseModel):
    code: str
    message: str
    request_id: str | None = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
