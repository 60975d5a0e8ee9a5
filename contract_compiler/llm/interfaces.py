from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class CompletionResult:
    text: str
    meta: Dict[str, Any] = field(default_factory=dict)


class ProviderError(Exception):
    def __init__(self, provider: str, detail: str):
        super().__init__(detail)
        self.provider = provider
        self.detail = detail


class ProviderTimeoutError(ProviderError):
    def __init__(self, provider: str, timeout: float):
        super().__init__(provider, f"{provider} timeout {timeout}s")
        self.timeout = timeout


class ProviderAuthError(ProviderError):
    pass


class ProviderConfigError(ProviderError):
    pass


class ProviderUnavailableError(ProviderError):
    """Raised when a provider cannot be reached."""
    pass


class BaseClient(ABC):
    provider: str
    model: str
    mode: str

    @abstractmethod
    def complete(
        self,
        system: str,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> CompletionResult:  # pragma: no cover - interface
        ...
