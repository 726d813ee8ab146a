"""
Exception hierarchy for ConceptForge.

All custom exceptions inherit from ConceptForgeError so callers can catch
any ConceptForge-specific failure in one place. Each exception carries
user-facing help: an error code, an explanation, and fix suggestions,
which the CLI prints when a command fails.

Hierarchy
---------
    ConceptForgeError
    ├── LLMError
    │   ├── RateLimitError
    │   └── ConfigurationError
    ├── TaggingError
    ├── ConceptMapValidationError
    └── ConfigValidationError

Error Semantics
---------------
Only upstream failures are errors. Malformed completion output is filtered
out silently by the parsers and never raises; an upstream LLMError or
TaggingError aborts the whole concept-map generation.
"""

from typing import Any, List, Optional


def get_root_cause(exc: BaseException) -> BaseException:
    """
    Follow an exception chain to its original cause.

    Args:
        exc: Exception to inspect

    Returns:
        The innermost exception in the __cause__/__context__ chain
    """
    current = exc
    seen: set[int] = set()

    # Bounded by the chain length; the seen-set guards against cycles
    while id(current) not in seen:
        seen.add(id(current))
        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__context__ is not None:
            current = current.__context__
        else:
            break

    return current


class ConceptForgeError(Exception):
    """
    Base exception for all ConceptForge errors.

    Example
    -------
        try:
            concept_map = await builder.generate_concept_map(title, docs)
        except ConceptForgeError as e:
            logger.error(f"Generation failed: {e}")
            print(f"Fix: {e.how_to_fix}")
    """

    # Default error info - subclasses should override
    error_code: str = "CF-ERR-000"
    why_it_happened: str = "An unexpected error occurred"
    how_to_fix: List[str] = ["Check the error message for details"]

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(message)

        # Override class defaults if provided
        if error_code is not None:
            self.error_code = error_code
        if why_it_happened is not None:
            self.why_it_happened = why_it_happened
        if how_to_fix is not None:
            self.how_to_fix = how_to_fix

    @property
    def user_message(self) -> str:
        """Get the user-friendly error message."""
        return str(self)

    def get_root_cause(self) -> BaseException:
        """Get the root cause of this exception chain."""
        return get_root_cause(self)


# ============================================================================
# LLM Exceptions
# ============================================================================


class LLMError(ConceptForgeError):
    """
    Base exception for completion-service errors.

    Raised when a call to Ollama, Anthropic or another provider fails.
    Concept-map generation treats this as fatal.
    """

    error_code = "CF-LLM-000"
    why_it_happened = "A call to the completion service failed"
    how_to_fix = [
        "Check that the LLM provider is running or reachable",
        "Verify your API key is set correctly",
        "Try a different provider with --provider",
    ]


class RateLimitError(LLMError):
    """
    Raised when an LLM API rate limit is exceeded.

    Attributes
    ----------
    retry_after : float, optional
        Seconds to wait before retrying (if provided by API)
    """

    error_code = "CF-LLM-001"
    why_it_happened = (
        "The LLM API rate limit was exceeded. Too many requests were made "
        "in a short period"
    )
    how_to_fix = [
        "Wait a few minutes before retrying",
        "Lower concept_map.max_concurrent_definitions in your config",
        "Use a local model through Ollama",
    ]

    def __init__(
        self,
        message: str,
        retry_after: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ConfigurationError(LLMError):
    """
    Raised when LLM configuration is invalid.

    This can occur when:
    - API key is missing or invalid
    - Model name is not recognized
    - The provider name is unknown
    """

    error_code = "CF-LLM-002"
    why_it_happened = (
        "The LLM configuration is invalid. The API key may be missing, "
        "or the provider or model name may be incorrect"
    )
    how_to_fix = [
        "For Anthropic: export ANTHROPIC_API_KEY=your-key",
        "Set llm.default_provider to 'ollama' or 'claude'",
        "Verify the model name in conceptforge.yaml",
    ]


# ============================================================================
# Tagging Exceptions
# ============================================================================


class TaggingError(ConceptForgeError):
    """
    Raised when the text-tagging capability cannot run.

    Typically the spaCy language model is not installed.
    """

    error_code = "CF-NLP-001"
    why_it_happened = "The text tagger could not be loaded or failed on the input"
    how_to_fix = [
        "Install the spaCy model: python -m spacy download en_core_web_sm",
        "Set nlp.spacy_model in conceptforge.yaml to an installed model",
    ]


# ============================================================================
# Validation Exceptions
# ============================================================================


class ConceptMapValidationError(ConceptForgeError):
    """
    Raised when a concept map violates a structural invariant.

    Examples: an edge pointing at a node that is not in the map, two
    nodes sharing a name, or more nodes than the concept cap allows.
    """

    error_code = "CF-MAP-001"
    why_it_happened = "The assembled concept map is structurally inconsistent"
    how_to_fix = ["Regenerate the concept map from its source documents"]

    def __init__(self, message: str, problems: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.problems = problems or []


class ConfigValidationError(ConceptForgeError):
    """
    Raised when configuration values are invalid.

    Attributes
    ----------
    field : str, optional
        The configuration field that failed validation
    """

    error_code = "CF-CFG-001"
    why_it_happened = "A configuration value is out of range or malformed"
    how_to_fix = [
        "Check conceptforge.yaml for typos",
        "Remove the offending key to fall back to the default",
    ]

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field
