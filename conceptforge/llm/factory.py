"""
LLM provider factory.

Create and configure LLM clients based on configuration.
"""

from typing import Callable, Dict, Optional

from conceptforge.core.config import Config
from conceptforge.core.logging import get_logger
from conceptforge.llm.base import ConfigurationError, LLMClient

logger = get_logger(__name__)


def _create_ollama_client(config: Config) -> LLMClient:
    """
    Create Ollama client.

    Rule #4: Function <60 lines
    """
    from conceptforge.llm.ollama import OllamaClient

    provider = config.llm.ollama
    return OllamaClient(
        url=provider.url or None,
        model=provider.model,
        timeout=provider.timeout,
        temperature=provider.temperature,
    )


def _create_claude_client(config: Config) -> LLMClient:
    """
    Create Claude client.

    Rule #4: Function <60 lines
    """
    from conceptforge.llm.claude import ClaudeClient

    provider = config.llm.claude
    return ClaudeClient(
        api_key=provider.api_key or None,
        model=provider.model,
        temperature=provider.temperature,
    )


_PROVIDER_FACTORIES: Dict[str, Callable[[Config], LLMClient]] = {
    "ollama": _create_ollama_client,
    "claude": _create_claude_client,
    "anthropic": _create_claude_client,
}


def get_llm_client(config: Config, provider: Optional[str] = None) -> LLMClient:
    """
    Get an LLM client for the configured (or explicitly named) provider.

    Args:
        config: ConceptForge configuration
        provider: Provider name overriding llm.default_provider

    Returns:
        Configured LLMClient

    Raises:
        ConfigurationError: If the provider name is unknown
    """
    name = (provider or config.llm.default_provider).lower()
    factory = _PROVIDER_FACTORIES.get(name)
    if factory is None:
        raise ConfigurationError(
            f"Unknown LLM provider '{name}'. "
            f"Choose one of: {', '.join(sorted(_PROVIDER_FACTORIES))}"
        )

    client = factory(config)
    logger.debug("Created LLM client", provider=name, model=client.model_name)
    return client
