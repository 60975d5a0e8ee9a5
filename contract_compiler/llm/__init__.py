from .analyzer import LLMAnalyzer, parse_response
from .config import LLMConfig, load_llm_config
from .interfaces import (
    BaseClient,
    CompletionResult,
    ProviderAuthError,
    ProviderConfigError,
    ProviderError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from .prompt_builder import build_prompt, system_prompt
from .service import get_client

__all__ = [
    "LLMAnalyzer",
    "parse_response",
    "LLMConfig",
    "load_llm_config",
    "BaseClient",
    "CompletionResult",
    "ProviderError",
    "ProviderTimeoutError",
    "ProviderAuthError",
    "ProviderConfigError",
    "ProviderUnavailableError",
    "build_prompt",
    "system_prompt",
    "get_client",
]
