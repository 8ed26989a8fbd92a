"""
Core shared types and utilities for the distractor service.

This module provides the domain types and helpers shared by the response
simulator, the Shapley attribution engine and the HTTP layer.
"""

from distractor_service.core.exceptions import InvalidInputError
from distractor_service.core.utils import get_rng, option_labels

__all__ = [
    "InvalidInputError",
    "get_rng",
    "option_labels",
]
