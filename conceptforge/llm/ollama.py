"""
Ollama local LLM provider.

Uses a local Ollama server for inference via the generate API.
"""

import os
from typing import Any, Dict, Optional

import requests

from conceptforge.core.logging import get_logger
from conceptforge.llm.base import (
    GenerationConfig,
    LLMClient,
    LLMError,
)

logger = get_logger(__name__)


class OllamaClient(LLMClient):
    """
    Ollama local inference client.

    Requires Ollama server running locally or at specified URL.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        model: str = "qwen2.5:14b",
        timeout: int = 120,
        temperature: float = 0.3,
    ):
        """
        Initialize Ollama client.

        Args:
            url: Ollama server URL (defaults to OLLAMA_HOST or localhost)
            model: Model name
            timeout: Request timeout in seconds
            temperature: Default temperature for complete()
        """
        self.url = (
            url or os.environ.get("OLLAMA_HOST", "http://localhost:11434")
        ).rstrip("/")
        self._model_name = model
        self.timeout = timeout
        self.default_temperature = temperature

    @property
    def model_name(self) -> str:
        return self._model_name

    def is_available(self) -> bool:
        """Check if Ollama server is available."""
        try:
            response = requests.get(f"{self.url}/api/tags", timeout=2)
            return response.status_code == 200
        except requests.RequestException:
            return False

    def _build_options(self, config: GenerationConfig) -> Dict[str, Any]:
        """Build Ollama options dictionary.

        Rule #4: No large functions - Extracted from generate
        """
        options: Dict[str, Any] = {
            "temperature": config.temperature,
            "top_p": config.top_p,
            "num_predict": config.max_tokens,
        }
        if config.stop_sequences:
            options["stop"] = config.stop_sequences
        if config.seed is not None:
            options["seed"] = config.seed
        return options

    def generate(
        self,
        prompt: str,
        config: Optional[GenerationConfig] = None,
        **kwargs: Any,
    ) -> str:
        """Generate text from prompt."""
        config = config or GenerationConfig()

        try:
            response = requests.post(
                f"{self.url}/api/generate",
                json={
                    "model": self._model_name,
                    "prompt": prompt,
                    "stream": False,
                    "options": self._build_options(config),
                },
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise LLMError(f"Ollama timed out after {self.timeout}s") from e
        except requests.ConnectionError as e:
            raise LLMError(
                f"Cannot connect to Ollama at {self.url}. "
                "Make sure Ollama is running."
            ) from e
        except requests.RequestException as e:
            raise LLMError(f"Ollama request failed: {e}") from e

        if response.status_code != 200:
            raise LLMError(f"Ollama returned status {response.status_code}")

        data = response.json()
        text = data.get("response", "")
        if not text:
            raise LLMError("Empty response from Ollama")

        self._record_usage(
            prompt_tokens=data.get("prompt_eval_count", 0) or 0,
            completion_tokens=data.get("eval_count", 0) or 0,
        )
        logger.debug(
            "Ollama generation complete",
            model=self._model_name,
            completion_tokens=data.get("eval_count", 0),
        )
        return text.strip()
