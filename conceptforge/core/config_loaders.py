"""
Configuration Loading and Management Functions.

Handles loading, saving, and applying environment overrides to the
ConceptForge configuration.

Configuration precedence: 1. Env vars, 2. YAML file, 3. Defaults

Environment variables
---------------------
- CONCEPTFORGE_LLM_PROVIDER: provider name (whitelisted)
- CONCEPTFORGE_LLM_MODEL: model for the default provider
- CONCEPTFORGE_LOG_LEVEL: logging level
- ANTHROPIC_API_KEY: Claude API key
- OLLAMA_HOST: Ollama server URL
"""

import os
import re
from pathlib import Path
from typing import Any, Optional, TYPE_CHECKING

import yaml

from conceptforge.core.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from conceptforge.core.config import Config

CONFIG_FILENAMES = ("conceptforge.yaml", "conceptforge.yml")

_MODEL_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9._:\-/]+$")


class _Logger:
    """Lazy logger holder.

    Rule #6: Encapsulates logger state in smallest scope.
    Avoids slow startup from rich library import.
    """

    _instance = None

    @classmethod
    def get(cls) -> Any:
        """Get logger (lazy-loaded)."""
        if cls._instance is None:
            from conceptforge.core.logging import get_logger

            cls._instance = get_logger(__name__)
        return cls._instance


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Handles nested structures including:
    - Strings with ${VAR_NAME} or ${VAR_NAME:default} syntax
    - Nested dictionaries
    - Nested lists

    Args:
        value: Configuration value (string, dict, list, or primitive)

    Returns:
        Value with all environment variables expanded
    """
    if isinstance(value, str):
        pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

        def replace_env_var(match: re.Match) -> str:
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    # Return primitives (int, float, bool, None) unchanged
    return value


def _apply_env_overrides(config: "Config") -> "Config":
    """
    Apply environment variable overrides to configuration.

    Environment variables take precedence over config file values.
    """
    _apply_api_key_overrides(config)
    _apply_llm_config_overrides(config)
    _apply_logging_overrides(config)
    return config


def _apply_api_key_overrides(config: "Config") -> None:
    """Apply provider credentials and endpoints from environment."""
    anthropic_key = os.environ.get("ANTHROPIC_API_KEY")
    if anthropic_key:
        config.llm.claude.api_key = anthropic_key

    ollama_host = os.environ.get("OLLAMA_HOST")
    if ollama_host:
        config.llm.ollama.url = ollama_host


def _apply_llm_config_overrides(config: "Config") -> None:
    """Apply LLM provider and model overrides.

    Unknown providers and malformed model names are ignored with a warning.
    """
    from conceptforge.core.config.llm import LLM_PROVIDERS

    provider = os.environ.get("CONCEPTFORGE_LLM_PROVIDER")
    if provider:
        provider = provider.strip().lower()
        if provider in LLM_PROVIDERS:
            config.llm.default_provider = provider
        else:
            _Logger.get().warning(
                "Ignoring unknown LLM provider from environment",
                provider=provider,
            )

    model = os.environ.get("CONCEPTFORGE_LLM_MODEL")
    if model:
        if _MODEL_NAME_PATTERN.match(model):
            config.llm.provider_config().model = model
        else:
            _Logger.get().warning("Ignoring malformed model name", model=model)


def _apply_logging_overrides(config: "Config") -> None:
    """Apply log level from environment."""
    from conceptforge.core.config.config import VALID_LOG_LEVELS

    level = os.environ.get("CONCEPTFORGE_LOG_LEVEL")
    if level and level.upper() in VALID_LOG_LEVELS:
        config.log_level = level.upper()


def find_config_file(base_path: Path) -> Optional[Path]:
    """Find a config file in base_path, if any."""
    for filename in CONFIG_FILENAMES:
        candidate = base_path / filename
        if candidate.exists():
            return candidate
    return None


def load_config(
    config_path: Optional[Path] = None, base_path: Optional[Path] = None
) -> "Config":
    """
    Load configuration from YAML file with environment variable overrides.

    Unreadable or malformed YAML falls back to defaults with a warning;
    values that parse but fail validation raise ConfigValidationError.

    Args:
        config_path: Path to config file. Defaults to conceptforge.yaml in base_path.
        base_path: Base path for the project. Defaults to current directory.

    Returns:
        Config object with all settings.
    """
    # Lazy import to avoid circular dependency
    from conceptforge.core.config import Config

    base_path = base_path or Path.cwd()

    if config_path is None:
        config_path = find_config_file(base_path)
    if config_path is None or not config_path.exists():
        return _create_default_config(base_path)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        _Logger.get().warning(
            "Could not load config, using defaults",
            path=str(config_path),
            error=str(e),
        )
        return _create_default_config(base_path)

    if not isinstance(data, dict):
        raise ConfigValidationError(
            f"Config file {config_path} must contain a mapping at top level"
        )

    config = Config.from_dict(data, base_path)
    return _apply_env_overrides(config)


def _create_default_config(base_path: Path) -> "Config":
    """
    Create default configuration with environment overrides.

    Rule #4: Extracted to reduce duplication (<60 lines)
    """
    from conceptforge.core.config import Config

    config = Config()
    config._base_path = base_path
    return _apply_env_overrides(config)


def save_config(config: "Config", config_path: Optional[Path] = None) -> Path:
    """Save configuration to YAML file."""
    if config_path is None:
        config_path = config.base_path / CONFIG_FILENAMES[0]

    config_dict = config.to_dict()

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

    return config_path
