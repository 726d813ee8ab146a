"""Tests for the ConceptForge exception hierarchy."""

import pytest

from conceptforge.core.exceptions import (
    ConceptForgeError,
    ConceptMapValidationError,
    ConfigValidationError,
    ConfigurationError,
    LLMError,
    RateLimitError,
    TaggingError,
    get_root_cause,
)


class TestHierarchy:
    """Tests for inheritance and error codes."""

    @pytest.mark.parametrize(
        "exc_type",
        [
            LLMError,
            RateLimitError,
            ConfigurationError,
            TaggingError,
            ConceptMapValidationError,
            ConfigValidationError,
        ],
    )
    def test_all_are_conceptforge_errors(self, exc_type):
        assert issubclass(exc_type, ConceptForgeError)

    def test_llm_subclasses(self):
        assert issubclass(RateLimitError, LLMError)
        assert issubclass(ConfigurationError, LLMError)

    def test_error_codes_unique(self):
        codes = [
            cls.error_code
            for cls in (
                ConceptForgeError,
                LLMError,
                RateLimitError,
                ConfigurationError,
                TaggingError,
                ConceptMapValidationError,
                ConfigValidationError,
            )
        ]
        assert len(set(codes)) == len(codes)


class TestHelpText:
    """Tests for per-instance overrides of the help text."""

    def test_class_defaults(self):
        error = TaggingError("model missing")

        assert error.user_message == "model missing"
        assert error.error_code == "CF-NLP-001"
        assert any("spacy download" in tip for tip in error.how_to_fix)

    def test_instance_overrides(self):
        error = LLMError(
            "boom",
            error_code="CF-LLM-099",
            why_it_happened="testing",
            how_to_fix=["nothing"],
        )

        assert error.error_code == "CF-LLM-099"
        assert error.why_it_happened == "testing"
        assert error.how_to_fix == ["nothing"]
        assert LLMError.error_code == "CF-LLM-000"

    def test_extra_attributes(self):
        assert RateLimitError("slow down", retry_after=3.0).retry_after == 3.0
        assert ConfigValidationError("bad", field="layout").field == "layout"
        assert ConceptMapValidationError("bad", ["dup"]).problems == ["dup"]


class TestRootCause:
    """Tests for get_root_cause()."""

    def test_follows_cause_chain(self):
        root = ConnectionError("refused")
        try:
            try:
                raise root
            except ConnectionError as e:
                raise LLMError("Cannot connect") from e
        except LLMError as wrapped:
            assert wrapped.get_root_cause() is root

    def test_no_chain(self):
        error = ValueError("x")

        assert get_root_cause(error) is error
