"""
Monte Carlo response simulation for multiple-choice items.

Personas (examinee ability archetypes) each carry a probability table over
the item's options; the simulator draws independent responses per persona.
"""

from distractor_service.simulation.frames import (
    choice_distribution,
    to_dataframe,
)
from distractor_service.simulation.personas import (
    PersonaEstimate,
    allocate_samples,
    normalize_or_default,
    parse_persona_estimates,
    resolve_personas,
    uniform_probs,
)
from distractor_service.simulation.sampling import (
    empirical_distribution,
    sample_categorical,
)
from distractor_service.simulation.simulator import simulate

__all__ = [
    "PersonaEstimate",
    "allocate_samples",
    "choice_distribution",
    "empirical_distribution",
    "normalize_or_default",
    "parse_persona_estimates",
    "resolve_personas",
    "sample_categorical",
    "simulate",
    "to_dataframe",
    "uniform_probs",
]
