"""
Persona probability tables and sample allocation.

Persona probabilities come from an external estimator (typically a
language-model call) as a list of ``{"name": ..., "probs": {...}}`` objects.
Estimates may be unnormalized, omit labels or be missing entirely. This
module turns them into validated `Persona` objects:

- `normalize_or_default`: the fallback policy for a single estimate
- `parse_persona_estimates`: reading the estimator payload
- `resolve_personas`: one persona per catalog entry, with fallback
- `allocate_samples`: splitting a sample budget by persona weights
"""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from distractor_service.core.data_models import (
    DegenerateCode,
    DegenerateInputWarning,
    Persona,
)
from distractor_service.core.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PersonaEstimate:
    """Raw estimator output for one persona; `probs` is untrusted."""

    name: str
    probs: Any = None


def uniform_probs(labels: Sequence[str]) -> dict[str, float]:
    """Equal probability for every label."""
    if not labels:
        return {}
    p = 1.0 / len(labels)
    return {label: p for label in labels}


def _coerce_probability(value: Any) -> float:
    """Read one estimator value; anything unusable counts as 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        p = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(p) or p < 0:
        return 0.0
    return p


def _has_estimate(probs: Any) -> bool:
    return isinstance(probs, Mapping) and len(probs) > 0


def normalize_or_default(
    probs: Any, labels: Sequence[str]
) -> dict[str, float]:
    """
    Turn an untrusted probability estimate into a distribution over labels.

    - Missing, empty or non-mapping estimates become the uniform
      distribution over `labels`.
    - Otherwise each label reads its value from the estimate; missing,
      non-numeric, negative or non-finite values count as 0. Labels not in
      `labels` are dropped.
    - If the result has a positive sum it is rescaled to sum to 1. An
      all-zero result is returned unchanged so the simulator can flag it.

    Args:
        probs: Estimator output for one persona.
        labels: Option labels of the item.

    Returns:
        Mapping of every label to a non-negative probability.
    """
    if not _has_estimate(probs):
        return uniform_probs(labels)

    values = {
        label: _coerce_probability(probs.get(label)) for label in labels
    }
    total = sum(values.values())
    if total <= 0:
        return values

    return {label: p / total for label, p in values.items()}


def parse_persona_estimates(payload: Any) -> list[PersonaEstimate]:
    """
    Read the estimator payload.

    Accepts ``{"personas": [...]}`` or the bare list. Entries without a
    usable name are skipped.

    Raises:
        InvalidInputError: If the payload has neither shape.
    """
    if isinstance(payload, Mapping):
        payload = payload.get("personas")

    if not isinstance(payload, Sequence) or isinstance(payload, str):
        raise InvalidInputError(
            "Persona estimates must be a list of {name, probs} objects"
        )

    estimates: list[PersonaEstimate] = []
    for i, entry in enumerate(payload):
        if not isinstance(entry, Mapping):
            logger.warning(f"Skipping persona estimate {i}: not an object")
            continue
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            logger.warning(f"Skipping persona estimate {i}: missing name")
            continue
        estimates.append(
            PersonaEstimate(name=name.strip(), probs=entry.get("probs"))
        )

    return estimates


def resolve_personas(
    names: Sequence[str],
    estimates: Sequence[PersonaEstimate],
    labels: Sequence[str],
) -> tuple[list[Persona], list[DegenerateInputWarning]]:
    """
    Build one `Persona` per catalog name from estimator output.

    A catalog persona with no estimate, or with an unusable one, falls back
    to the uniform distribution over `labels`. Estimates for names outside
    the catalog are ignored. Both cases are reported as warnings so callers
    can tell simulated data from estimated data.

    Returns:
        Personas in catalog order and the fallback warnings.

    Raises:
        InvalidInputError: If the catalog repeats a name.
    """
    if len(set(names)) != len(names):
        raise InvalidInputError(
            f"Persona names must be unique: {list(names)}"
        )

    by_name: dict[str, PersonaEstimate] = {}
    for estimate in estimates:
        by_name.setdefault(estimate.name, estimate)

    warnings: list[DegenerateInputWarning] = []

    unknown = sorted(set(by_name) - set(names))
    if unknown:
        logger.warning(f"Ignoring estimates for unknown personas: {unknown}")
    for name in unknown:
        warnings.append(
            DegenerateInputWarning(
                code=DegenerateCode.UNKNOWN_PERSONA_ESTIMATE,
                message=(
                    f"Estimate for '{name}' ignored; it is not in the "
                    f"persona catalog"
                ),
                persona=name,
            )
        )

    personas: list[Persona] = []
    for name in names:
        estimate = by_name.get(name)
        if estimate is None or not _has_estimate(estimate.probs):
            reason = "no estimate" if estimate is None else "unusable estimate"
            logger.warning(
                f"Persona '{name}' has {reason}, using uniform fallback"
            )
            warnings.append(
                DegenerateInputWarning(
                    code=DegenerateCode.UNIFORM_FALLBACK_PERSONA,
                    message=(
                        f"Persona '{name}' has {reason}; responses are "
                        f"simulated from a uniform distribution"
                    ),
                    persona=name,
                )
            )
            probs = uniform_probs(labels)
        else:
            probs = normalize_or_default(estimate.probs, labels)
        personas.append(Persona(name=name, probs=probs))

    return personas, warnings


def allocate_samples(total: int, weights: Sequence[float]) -> list[int]:
    """
    Split `total` draws across personas in proportion to `weights`.

    Negative weights count as 0; if no weight is positive every persona is
    weighted equally. Each persona gets the floor of its proportional share
    and the remainder is handed out one draw at a time from the first
    persona onwards, so the allocation always sums to `total`.
    """
    if total < 0:
        raise InvalidInputError(f"total must be >= 0, got {total}")
    if not weights:
        return []

    clean = [_coerce_probability(w) for w in weights]
    weight_sum = sum(clean)
    if weight_sum <= 0:
        clean = [1.0] * len(clean)
        weight_sum = float(len(clean))

    counts = [math.floor(w / weight_sum * total) for w in clean]
    remaining = total - sum(counts)
    ix = 0
    while remaining > 0:
        counts[ix % len(counts)] += 1
        remaining -= 1
        ix += 1

    return counts
