"""
Base LLM Provider Interface.

This module defines the LLMClient interface that all completion providers
implement, and the CompletionService protocol the concept-map pipeline
depends on.

Architecture Context
--------------------
    ┌──────────────────────┐     ┌────────────────────────┐
    │ ConceptNodeBuilder   │     │ RelationshipInferencer │
    │ (definitions)        │     │ (edge proposals)       │
    └──────────┬───────────┘     └───────────┬────────────┘
               │  await complete(prompt, max_tokens)
               └──────────────┬──────────────┘
                   ┌──────────┴──────────┐
                   │      LLMClient      │
                   │   (abstract base)   │
                   └──────────┬──────────┘
                 ┌────────────┴────────────┐
                 ↓                         ↓
            ┌─────────┐               ┌─────────┐
            │  Ollama │               │  Claude │
            │  Client │               │  Client │
            └─────────┘               └─────────┘

Interface Contract
------------------
Implementations must provide:
- generate(): Blocking text generation
- is_available(): Check if provider is ready
- model_name: The model in use

complete() is implemented here once: it runs generate() in a worker thread
so the async pipeline can issue several definition requests at a time.

Failures raise LLMError (or a subclass). Clients do not retry; the caller
treats a failed completion as fatal.
"""

import asyncio
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from conceptforge.core.exceptions import (
    ConfigurationError,
    LLMError,
    RateLimitError,
)

__all__ = [
    "CompletionService",
    "ConfigurationError",
    "GenerationConfig",
    "LLMClient",
    "LLMError",
    "RateLimitError",
]


@runtime_checkable
class CompletionService(Protocol):
    """Anything that can complete a prompt asynchronously."""

    async def complete(self, prompt: str, max_tokens: int) -> str:
        ...


@dataclass
class GenerationConfig:
    """
    Configuration for text generation.

    Attributes:
        max_tokens: Maximum tokens to generate
        temperature: Creativity (0=deterministic, 1=creative)
        top_p: Nucleus sampling parameter
        stop_sequences: Strings that stop generation
        seed: Random seed for reproducibility (if supported)
    """

    max_tokens: int = 1024
    temperature: float = 0.3  # Low default for factual accuracy
    top_p: float = 1.0
    stop_sequences: Optional[List[str]] = None
    seed: Optional[int] = None


class LLMClient(ABC):
    """
    Abstract base class for LLM providers.

    All LLM providers must implement this interface.
    """

    #: Temperature used by complete() when no config is given
    default_temperature: float = 0.3

    # Guards _usage; complete() calls generate() from worker threads
    _usage_lock = threading.Lock()

    def _get_usage(self) -> Dict[str, int]:
        """Get or initialize the usage accumulator. Caller holds _usage_lock."""
        if not hasattr(self, "_usage"):
            self._usage = {
                "prompt_tokens": 0,
                "completion_tokens": 0,
                "total_tokens": 0,
            }
        return self._usage

    def _record_usage(
        self,
        prompt_tokens: int = 0,
        completion_tokens: int = 0,
    ) -> None:
        """Record token usage from a generation call."""
        with self._usage_lock:
            usage = self._get_usage()
            usage["prompt_tokens"] += prompt_tokens
            usage["completion_tokens"] += completion_tokens
            usage["total_tokens"] += prompt_tokens + completion_tokens

    def get_usage(self) -> Dict[str, int]:
        """
        Get cumulative token usage.

        Returns:
            Dict with prompt_tokens, completion_tokens, total_tokens
        """
        with self._usage_lock:
            return dict(self._get_usage())

    def reset_usage(self) -> None:
        """Reset token usage counters to zero."""
        with self._usage_lock:
            usage = self._get_usage()
            for key in usage:
                usage[key] = 0

    @abstractmethod
    def generate(
        self,
        prompt: str,
        config: Optional[GenerationConfig] = None,
        **kwargs: Any,
    ) -> str:
        """
        Generate text from prompt.

        Args:
            prompt: Input prompt
            config: Generation configuration

        Returns:
            Generated text
        """
        pass

    async def complete(self, prompt: str, max_tokens: int) -> str:
        """
        Complete a prompt without blocking the event loop.

        Args:
            prompt: Input prompt
            max_tokens: Response length cap

        Returns:
            Generated text

        Raises:
            LLMError: If the provider call fails
        """
        config = GenerationConfig(
            max_tokens=max_tokens, temperature=self.default_temperature
        )
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.generate, prompt, config)

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available and configured."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name."""
        pass
