"""
Shapley attribution of wrong answers to distractors.

Turns a simulated response matrix into one `ShapleyRow` per distractor.
"""

import logging
from collections import Counter
from collections.abc import Collection, Sequence

from distractor_service.attribution.recommendations import (
    DEFAULT_TIERS,
    NO_RESPONSES_RECOMMENDATION,
    TOO_EASY_RECOMMENDATION,
    RecommendationTier,
    classify_share,
    validate_tiers,
)
from distractor_service.attribution.shapley import exact_shapley_values
from distractor_service.core.data_models import (
    AnswerOption,
    DistractorStrength,
    ResponseRecord,
    ShapleyRow,
    distractor_options,
    validate_options,
)
from distractor_service.core.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

DEFAULT_LOW_ABILITY_PERSONAS = frozenset({"Novice", "Weak"})


def _neutral_rows(
    distractors: Sequence[AnswerOption], recommendation: str
) -> list[ShapleyRow]:
    return [
        ShapleyRow(
            label=d.label,
            text=d.text,
            shapley=0.0,
            share_pct=0.0,
            wrong_pct=0.0,
            novice_pct=0.0,
            strength=DistractorStrength.NOT_EVALUATED,
            recommendation=recommendation,
            degenerate=True,
        )
        for d in distractors
    ]


def compute_shapley(
    options: Sequence[AnswerOption],
    responses: Sequence[ResponseRecord],
    low_ability_personas: Collection[str] = DEFAULT_LOW_ABILITY_PERSONAS,
    tiers: Sequence[RecommendationTier] = DEFAULT_TIERS,
) -> list[ShapleyRow]:
    """
    Score each distractor's contribution to the wrong-answer rate.

    Correct responses are discarded. Among the wrong ones, the Shapley value
    of each distractor is computed by enumerating every order in which the
    distractors can join a coalition (see `exact_shapley_values`).

    For every distractor the row also reports:
        - share_pct: Shapley value * 100
        - wrong_pct: responses choosing it / all responses * 100
        - novice_pct: low-ability wrong responses choosing it / all
          low-ability wrong responses * 100 (0 if there are none)
        - recommendation: tier from `tiers` for share_pct

    If no response is wrong every row is neutral (all zeros,
    ``degenerate=True``) with the "too easy" recommendation.

    Args:
        options: Item options, exactly one correct.
        responses: Simulated responses.
        low_ability_personas: Persona names forming the low-ability group.
        tiers: Recommendation table, highest floor first.

    Returns:
        One ShapleyRow per distractor, in alphabetical label order.

    Raises:
        InvalidInputError: If the options are malformed or a response names
            an option that does not exist.
    """
    validate_options(options)
    validate_tiers(tiers)

    distractors = distractor_options(options)
    if not distractors:
        raise InvalidInputError("At least one distractor is required")

    by_label = {o.label: o for o in options}
    low_ability = set(low_ability_personas)

    wrong_counts: Counter[str] = Counter()
    low_wrong_counts: Counter[str] = Counter()

    for record in responses:
        option = by_label.get(record.chosen_option)
        if option is None:
            raise InvalidInputError(
                f"Response chose unknown option '{record.chosen_option}'"
            )
        if option.is_correct:
            continue
        wrong_counts[option.label] += 1
        if record.persona in low_ability:
            low_wrong_counts[option.label] += 1

    n_responses = len(responses)
    total_wrong = sum(wrong_counts.values())
    total_low_wrong = sum(low_wrong_counts.values())

    if n_responses == 0:
        logger.warning("No responses to attribute")
        return _neutral_rows(distractors, NO_RESPONSES_RECOMMENDATION)

    if total_wrong == 0:
        logger.warning(
            f"All {n_responses} responses are correct; item too easy to "
            f"evaluate distractors"
        )
        return _neutral_rows(distractors, TOO_EASY_RECOMMENDATION)

    counts = [wrong_counts[d.label] for d in distractors]
    shapley = exact_shapley_values(counts)

    rows: list[ShapleyRow] = []
    for d, count, value in zip(distractors, counts, shapley, strict=True):
        share_pct = float(value) * 100
        novice_pct = (
            low_wrong_counts[d.label] / total_low_wrong * 100
            if total_low_wrong > 0
            else 0.0
        )
        tier = classify_share(share_pct, tiers)
        rows.append(
            ShapleyRow(
                label=d.label,
                text=d.text,
                shapley=float(value),
                share_pct=share_pct,
                wrong_pct=count / n_responses * 100,
                novice_pct=novice_pct,
                strength=tier.strength,
                recommendation=tier.label,
            )
        )

    logger.debug(
        "Shapley shares: "
        + ", ".join(f"{r.label}={r.share_pct:.1f}%" for r in rows)
    )
    return rows
