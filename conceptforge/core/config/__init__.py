"""
Configuration Management for ConceptForge.

Dataclass-based configuration that maps to a YAML file, with environment
variable expansion for secrets and deployment-specific values.

Public API
----------
    from conceptforge.core.config import Config, load_config
    from conceptforge.core.config import ConceptMapConfig, LayoutConfig

Architecture
------------
    config/
    ├── concept_map.py   # ConceptMapConfig, LayoutConfig, NLPConfig
    ├── llm.py           # LLMConfig, LLMProviderConfig
    └── config.py        # Main Config class
"""

from conceptforge.core.config.config import Config
from conceptforge.core.config.concept_map import (
    ConceptMapConfig,
    LayoutConfig,
    NLPConfig,
)
from conceptforge.core.config.llm import LLM_PROVIDERS, LLMConfig, LLMProviderConfig
from conceptforge.core.config_loaders import (
    expand_env_vars,
    load_config,
    save_config,
)

__all__ = [
    "Config",
    "ConceptMapConfig",
    "LayoutConfig",
    "NLPConfig",
    "LLMConfig",
    "LLMProviderConfig",
    "LLM_PROVIDERS",
    "expand_env_vars",
    "load_config",
    "save_config",
]
