"""
Main configuration class for ConceptForge.

This module provides the Config dataclass that aggregates all sub-configs
and handles initialization, validation, and dictionary parsing.

Architecture Context
--------------------
Configuration sits at the Core layer and is consumed by every other module.
The Config object is typically created once at startup and passed to the
ConceptMapBuilder, the LLM factory and the tagger.

    User's conceptforge.yaml
           ↓
    load_config() → Config object
           ↓
    Passed to: ConceptMapBuilder, get_llm_client(), SpacyTagger

Configuration Hierarchy
-----------------------
    Config
    ├── ConceptMapConfig   # Concept cap, excerpt and prompt limits
    ├── LayoutConfig       # Canvas size, iterations, seed
    ├── NLPConfig          # spaCy model
    └── LLMConfig          # Provider, model, API keys

Environment Variables
---------------------
Secrets use ${VAR_NAME} syntax, optionally with a default:

    llm:
      claude:
        api_key: ${ANTHROPIC_API_KEY}
        model: ${CLAUDE_MODEL:claude-3-haiku-20240307}

Usage Example
-------------
    config = load_config()
    cap = config.concept_map.max_concepts
    canvas = (config.layout.width, config.layout.height)
"""

from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional

from conceptforge.core.config.concept_map import (
    ConceptMapConfig,
    LayoutConfig,
    NLPConfig,
)
from conceptforge.core.config.llm import LLM_PROVIDERS, LLMConfig, LLMProviderConfig
from conceptforge.core.exceptions import ConfigValidationError

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class Config:
    """Main ConceptForge configuration."""

    concept_map: ConceptMapConfig = field(default_factory=ConceptMapConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    nlp: NLPConfig = field(default_factory=NLPConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    log_level: str = "INFO"

    # Runtime paths (set after loading)
    _base_path: Path = field(default_factory=Path.cwd, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration after initialization.

        Validates:
        - Concept and excerpt limits are positive
        - Canvas is large enough for the layout margins
        - Provider and log level are known values
        """
        assert isinstance(
            self.concept_map, ConceptMapConfig
        ), "concept_map must be ConceptMapConfig"
        assert isinstance(self.layout, LayoutConfig), "layout must be LayoutConfig"
        assert isinstance(self.llm, LLMConfig), "llm must be LLMConfig"

        self._validate_concept_map()
        self._validate_layout()

        if self.llm.default_provider not in LLM_PROVIDERS:
            raise ConfigValidationError(
                f"llm.default_provider must be one of {LLM_PROVIDERS}, "
                f"got: {self.llm.default_provider}",
                field="llm.default_provider",
            )

        self.log_level = self.log_level.upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, "
                f"got: {self.log_level}",
                field="log_level",
            )

    def _validate_concept_map(self) -> None:
        """Check concept-map limits."""
        cm = self.concept_map
        positive = {
            "max_concepts": cm.max_concepts,
            "excerpts_per_concept": cm.excerpts_per_concept,
            "excerpt_max_chars": cm.excerpt_max_chars,
            "context_max_chars": cm.context_max_chars,
            "definition_max_tokens": cm.definition_max_tokens,
            "relationship_text_chars": cm.relationship_text_chars,
            "relationship_max_tokens": cm.relationship_max_tokens,
            "max_concurrent_definitions": cm.max_concurrent_definitions,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ConfigValidationError(
                    f"concept_map.{name} must be positive, got: {value}",
                    field=f"concept_map.{name}",
                )
        if cm.min_frequency < 2:
            raise ConfigValidationError(
                f"concept_map.min_frequency must be at least 2, got: {cm.min_frequency}",
                field="concept_map.min_frequency",
            )

    def _validate_layout(self) -> None:
        """Check canvas size and iteration count."""
        if self.layout.width <= 200 or self.layout.height <= 200:
            raise ConfigValidationError(
                "layout.width and layout.height must exceed 200 "
                f"(got {self.layout.width}x{self.layout.height})",
                field="layout",
            )
        if self.layout.iterations < 0:
            raise ConfigValidationError(
                f"layout.iterations must not be negative, got: {self.layout.iterations}",
                field="layout.iterations",
            )

    @property
    def base_path(self) -> Path:
        """Directory the configuration was loaded for."""
        return self._base_path

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        result: dict[str, Any] = {}
        for key, value in asdict(self).items():
            if key.startswith("_"):
                continue
            result[key] = value
        return result

    @staticmethod
    def _filter_fields(cls_type: Any, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Filter dict to only keys that match dataclass fields, handling None."""
        if not data:
            return {}
        valid_keys = {f.name for f in fields(cls_type) if not f.name.startswith("_")}
        return {k: v for k, v in data.items() if k in valid_keys}

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], base_path: Optional[Path] = None
    ) -> "Config":
        """Create Config from dictionary."""
        # Import here to avoid circular dependency
        from conceptforge.core.config_loaders import expand_env_vars

        data = expand_env_vars(data or {})

        config = cls(
            concept_map=ConceptMapConfig(
                **cls._filter_fields(ConceptMapConfig, data.get("concept_map"))
            ),
            layout=LayoutConfig(**cls._filter_fields(LayoutConfig, data.get("layout"))),
            nlp=NLPConfig(**cls._filter_fields(NLPConfig, data.get("nlp"))),
            llm=cls._parse_llm_config(data),
            log_level=data.get("log_level", "INFO"),
        )

        if base_path:
            config._base_path = base_path

        return config

    @classmethod
    def _parse_llm_config(cls, data: Dict[str, Any]) -> LLMConfig:
        """Parse LLM config with nested per-provider blocks."""
        llm_data = data.get("llm") or {}
        defaults = LLMConfig()

        def provider(name: str, fallback: LLMProviderConfig) -> LLMProviderConfig:
            block = cls._filter_fields(LLMProviderConfig, llm_data.get(name))
            return LLMProviderConfig(**{**asdict(fallback), **block})

        return LLMConfig(
            default_provider=llm_data.get("default_provider", defaults.default_provider),
            ollama=provider("ollama", defaults.ollama),
            claude=provider("claude", defaults.claude),
        )
