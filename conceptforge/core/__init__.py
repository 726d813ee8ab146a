"""
Core layer: configuration, logging and the exception hierarchy.

Every other ConceptForge module depends on this package; it depends on
nothing inside ConceptForge.
"""

from conceptforge.core.exceptions import (
    ConceptForgeError,
    ConceptMapValidationError,
    ConfigValidationError,
    LLMError,
    TaggingError,
)
from conceptforge.core.logging import configure_logging, get_logger

__all__ = [
    "ConceptForgeError",
    "ConceptMapValidationError",
    "ConfigValidationError",
    "LLMError",
    "TaggingError",
    "configure_logging",
    "get_logger",
]
