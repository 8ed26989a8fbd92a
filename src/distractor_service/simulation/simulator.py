"""
Monte Carlo response simulator.

Given a probability table over answer options for each persona, draws
independent categorical samples per persona and returns the full response
matrix together with per-persona accuracy.
"""

import logging
from collections.abc import Sequence

import numpy as np
from numpy.random import Generator

from distractor_service.core.data_models import (
    AccuracySummary,
    AnswerOption,
    DegenerateCode,
    DegenerateInputWarning,
    Persona,
    ResponseRecord,
    SimResult,
    validate_options,
)
from distractor_service.core.exceptions import InvalidInputError
from distractor_service.core.utils import get_rng
from distractor_service.simulation.personas import allocate_samples
from distractor_service.simulation.sampling import sample_categorical

logger = logging.getLogger(__name__)


def _validate_personas(personas: Sequence[Persona]) -> None:
    if len(personas) == 0:
        raise InvalidInputError("At least one persona is required")
    names = [p.name for p in personas]
    if len(set(names)) != len(names):
        raise InvalidInputError(f"Persona names must be unique: {names}")


def simulate(
    options: Sequence[AnswerOption],
    personas: Sequence[Persona],
    total_samples: int,
    rng: Generator | None = None,
    weights: Sequence[float] | None = None,
) -> SimResult:
    """
    Simulate responses to a single multiple-choice item.

    Without `weights`, each persona draws ``total_samples // len(personas)``
    responses. With `weights`, the budget is split by `allocate_samples` and
    `per_persona_samples` is None in the result.

    Records are emitted persona by persona in the order given. A persona
    whose probabilities are all zero selects the first declared option on
    every draw and is flagged in `SimResult.warnings`.

    Args:
        options: Item options, exactly one correct.
        personas: Persona probability tables, unique names.
        total_samples: Total draws across all personas.
        rng: Random number generator. Pass a seeded generator for
            reproducible runs.
        weights: Optional per-persona weights aligned with `personas`.

    Returns:
        SimResult with the full response matrix and accuracy summary.

    Raises:
        InvalidInputError: If options or personas are malformed.
    """
    validate_options(options)
    _validate_personas(personas)
    if total_samples < 0:
        raise InvalidInputError(
            f"total_samples must be >= 0, got {total_samples}"
        )

    if rng is None:
        rng = get_rng()

    per_persona_samples: int | None
    if weights is None:
        per_persona_samples = total_samples // len(personas)
        counts = [per_persona_samples] * len(personas)
    else:
        if len(weights) != len(personas):
            raise InvalidInputError(
                f"Got {len(weights)} weights for {len(personas)} personas"
            )
        per_persona_samples = None
        counts = allocate_samples(total_samples, weights)

    labels = [o.label for o in options]
    texts = [o.text for o in options]
    correct = np.array([o.is_correct for o in options], dtype=np.bool_)

    responses: list[ResponseRecord] = []
    accuracy: list[AccuracySummary] = []
    warnings: list[DegenerateInputWarning] = []

    if sum(counts) == 0:
        logger.warning(
            f"No draws: total_samples={total_samples} across "
            f"{len(personas)} personas"
        )
        warnings.append(
            DegenerateInputWarning(
                code=DegenerateCode.ZERO_SAMPLES,
                message="Sample size is 0; no responses were simulated",
            )
        )

    for persona, n in zip(personas, counts, strict=True):
        probs = persona.weights_for(labels)

        if n > 0 and sum(probs) <= 0:
            logger.warning(
                f"Persona '{persona.name}' has an all-zero probability "
                f"vector; every draw selects option {labels[0]}"
            )
            warnings.append(
                DegenerateInputWarning(
                    code=DegenerateCode.ZERO_PROBABILITY_PERSONA,
                    message=(
                        f"Persona '{persona.name}' has no probability mass; "
                        f"all responses default to option {labels[0]}"
                    ),
                    persona=persona.name,
                )
            )

        chosen = sample_categorical(probs, n, rng)
        n_correct = int(np.count_nonzero(correct[chosen]))

        responses.extend(
            ResponseRecord(
                persona=persona.name,
                chosen_option=labels[ix],
                chosen_text=texts[ix],
                is_correct=bool(correct[ix]),
            )
            for ix in chosen.tolist()
        )

        if n == 0:
            logger.debug(f"Persona '{persona.name}': sample size is 0")
        accuracy.append(
            AccuracySummary(
                persona=persona.name,
                accuracy=n_correct / n if n > 0 else 0.0,
                total=n,
            )
        )

    logger.info(
        f"Simulated {len(responses)} responses for {len(personas)} personas"
    )

    return SimResult(
        options=list(options),
        personas=list(personas),
        per_persona_samples=per_persona_samples,
        responses=responses,
        accuracy=accuracy,
        warnings=warnings,
    )
