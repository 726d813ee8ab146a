"""
LLM Provider Integrations.

The completion service used for concept definitions and relationship
proposals. Two providers are bundled:

- OllamaClient: local models served by Ollama (default)
- ClaudeClient: Anthropic Claude models (``claude`` extra)

Usage Example
-------------
    from conceptforge.llm import get_llm_client

    client = get_llm_client(config)
    text = await client.complete("Define 'osmosis' in one sentence.", 100)
"""

from conceptforge.llm.base import (
    CompletionService,
    GenerationConfig,
    LLMClient,
    LLMError,
    RateLimitError,
)
from conceptforge.llm.factory import get_llm_client

__all__ = [
    "CompletionService",
    "GenerationConfig",
    "LLMClient",
    "LLMError",
    "RateLimitError",
    "get_llm_client",
]
