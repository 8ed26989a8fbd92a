"""
Simulate-then-attribute pipeline for a single multiple-choice item.
"""

import logging
from collections.abc import Sequence

from numpy.random import Generator

from distractor_service.attribution.engine import compute_shapley
from distractor_service.config import EvaluationConfig
from distractor_service.core.data_models import (
    AnswerOption,
    DegenerateCode,
    DegenerateInputWarning,
    DistractorEvaluation,
    Persona,
)
from distractor_service.core.exceptions import InvalidInputError
from distractor_service.core.utils import get_rng, option_labels
from distractor_service.simulation.simulator import simulate

logger = logging.getLogger(__name__)


def build_options(
    correct_answer: str, distractors: Sequence[str]
) -> list[AnswerOption]:
    """
    Label an item's options: A is the correct answer, B, C, ... follow the
    distractors in the order given.

    Raises:
        InvalidInputError: If the option count is out of range.
    """
    texts = [correct_answer, *distractors]
    try:
        labels = option_labels(len(texts))
    except ValueError as e:
        raise InvalidInputError(str(e)) from e

    return [
        AnswerOption(label=label, text=text, is_correct=(i == 0))
        for i, (label, text) in enumerate(zip(labels, texts, strict=True))
    ]


def evaluate_item(
    options: Sequence[AnswerOption],
    personas: Sequence[Persona],
    config: EvaluationConfig | None = None,
    rng: Generator | None = None,
    total_samples: int | None = None,
    weights: Sequence[float] | None = None,
    input_warnings: Sequence[DegenerateInputWarning] = (),
) -> DistractorEvaluation:
    """
    Run the response simulator and the Shapley engine for one item.

    Args:
        options: Item options, exactly one correct.
        personas: Persona probability tables.
        config: Evaluation config; defaults to `EvaluationConfig()`.
        rng: Random number generator.
        total_samples: Overrides `config.total_samples`.
        weights: Per-persona weights aligned with `personas`. Defaults to
            the config's weights when the config catalog matches
            `personas` by name, otherwise an equal split.
        input_warnings: Warnings raised while building `personas` (see
            `resolve_personas`); they lead the result's warning list.

    Returns:
        DistractorEvaluation with every degenerate condition collected in
        `warnings`.
    """
    if config is None:
        config = EvaluationConfig()
    if rng is None:
        rng = get_rng()
    if total_samples is None:
        total_samples = config.total_samples
    persona_names = [p.name for p in personas]
    if weights is None and config.persona_names == persona_names:
        weights = config.weights

    simulation = simulate(
        options, personas, total_samples, rng=rng, weights=weights
    )
    rows = compute_shapley(
        options,
        simulation.responses,
        low_ability_personas=config.low_ability_personas,
        tiers=config.tiers(),
    )

    warnings = [*input_warnings, *simulation.warnings]
    low_ability = set(config.low_ability_personas)

    responses = simulation.responses
    if responses and all(r.is_correct for r in responses):
        warnings.append(
            DegenerateInputWarning(
                code=DegenerateCode.NO_WRONG_RESPONSES,
                message=(
                    "No simulated examinee chose a distractor; the item is "
                    "too easy to evaluate"
                ),
            )
        )
    elif responses and not any(
        not r.is_correct and r.persona in low_ability for r in responses
    ):
        warnings.append(
            DegenerateInputWarning(
                code=DegenerateCode.NO_LOW_ABILITY_WRONG_RESPONSES,
                message=(
                    "No wrong responses from the low-ability group; "
                    "novice percentages are 0"
                ),
            )
        )

    logger.info(
        f"Evaluated {len(rows)} distractors from "
        f"{simulation.n_responses} responses ({len(warnings)} warnings)"
    )

    return DistractorEvaluation(
        simulation=simulation, shapley=rows, warnings=warnings
    )
