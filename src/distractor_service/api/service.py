import logging
from dataclasses import replace

from distractor_service.api.config import ApiSettings
from distractor_service.api.errors import DataSizeExceededError
from distractor_service.api.schemas import (
    AnswerOptionSchema,
    PersonaSchema,
    ShapleyRequest,
    ShapleyResponse,
    SimulationRequest,
    SimulationResponse,
)
from distractor_service.attribution.engine import compute_shapley
from distractor_service.config import EvaluationConfig
from distractor_service.core.utils import get_rng
from distractor_service.pipeline import build_options, evaluate_item
from distractor_service.simulation.personas import (
    parse_persona_estimates,
    resolve_personas,
)

logger = logging.getLogger(__name__)

# Weight for personas left out of `persona_weights`
DEFAULT_PERSONA_WEIGHT = 1.0


class EvaluationService:
    def __init__(
        self, settings: ApiSettings, config: EvaluationConfig
    ) -> None:
        self._settings = settings
        self._config = config

    def _validate_simulation_size(
        self, total_samples: int, n_personas: int
    ) -> None:
        if total_samples > self._settings.max_total_samples:
            raise DataSizeExceededError(
                f"total_samples={total_samples} exceeds "
                f"max={self._settings.max_total_samples}"
            )
        if n_personas > self._settings.max_personas:
            raise DataSizeExceededError(
                f"n_personas={n_personas} exceeds "
                f"max={self._settings.max_personas}"
            )

    def simulate(self, request: SimulationRequest) -> SimulationResponse:
        config = self._config
        names = request.persona_names or config.persona_names
        total_samples = (
            request.total_samples
            if request.total_samples is not None
            else config.total_samples
        )
        self._validate_simulation_size(total_samples, len(names))

        options = build_options(request.correct_answer, request.distractors)
        labels = [o.label for o in options]

        # Missing or malformed estimates fall back to uniform per persona
        estimates = (
            parse_persona_estimates(request.personas)
            if request.personas is not None
            else []
        )
        if not estimates:
            logger.warning(
                "Request carries no persona estimates; every persona uses "
                "the uniform fallback"
            )
        personas, fallback_warnings = resolve_personas(
            names, estimates, labels
        )

        weights: list[float] | None = None
        if request.persona_weights is not None:
            weights = [
                request.persona_weights.get(name, DEFAULT_PERSONA_WEIGHT)
                for name in names
            ]

        if request.low_ability_personas is not None:
            config = replace(
                config, low_ability_personas=request.low_ability_personas
            )

        evaluation = evaluate_item(
            options,
            personas,
            config=config,
            rng=get_rng(request.random_seed),
            total_samples=total_samples,
            weights=weights,
            input_warnings=fallback_warnings,
        )
        result = evaluation.simulation

        return SimulationResponse(
            options=[AnswerOptionSchema.from_domain(o) for o in options],
            personas=[PersonaSchema.from_domain(p) for p in personas],
            per_persona_samples=result.per_persona_samples,
            response_matrix=result.responses,
            accuracy_summary=result.accuracy,
            warnings=evaluation.warnings,
            shapley=evaluation.shapley if request.include_shapley else None,
        )

    def shapley(self, request: ShapleyRequest) -> ShapleyResponse:
        if len(request.responses) > self._settings.max_responses:
            raise DataSizeExceededError(
                f"n_responses={len(request.responses)} exceeds "
                f"max={self._settings.max_responses}"
            )

        low_ability = (
            request.low_ability_personas
            if request.low_ability_personas is not None
            else self._config.low_ability_personas
        )
        rows = compute_shapley(
            request.domain_options(),
            request.responses,
            low_ability_personas=low_ability,
            tiers=self._config.tiers(),
        )
        return ShapleyResponse(shapley=rows)
