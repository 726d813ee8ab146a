"""
LLM configuration.

Provides configuration for the completion-service providers: Ollama (local,
default) and Anthropic Claude.
"""

from dataclasses import dataclass, field

LLM_PROVIDERS = ("ollama", "claude")


@dataclass
class LLMProviderConfig:
    """Individual LLM provider configuration."""

    model: str = ""
    api_key: str = ""
    url: str = ""
    temperature: float = (
        0.3  # Generation temperature (0.0-1.0), low for factual accuracy
    )
    timeout: int = 120  # Request timeout in seconds


@dataclass
class LLMConfig:
    """LLM providers configuration."""

    default_provider: str = "ollama"  # Local LLM via an Ollama server
    ollama: LLMProviderConfig = field(
        default_factory=lambda: LLMProviderConfig(
            model="qwen2.5:14b", url="http://localhost:11434"
        )
    )
    claude: LLMProviderConfig = field(
        default_factory=lambda: LLMProviderConfig(model="claude-3-haiku-20240307")
    )

    def provider_config(self) -> LLMProviderConfig:
        """Get the config block of the default provider."""
        if self.default_provider == "claude":
            return self.claude
        return self.ollama
