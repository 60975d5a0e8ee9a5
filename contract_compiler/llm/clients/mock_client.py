from __future__ import annotations

from typing import Optional

from ..interfaces import BaseClient, CompletionResult, ProviderTimeoutError

EMPTY_RESPONSE = '{"anomalies": []}'


class MockClient(BaseClient):
    """Offline client returning a fixed JSON body."""

    def __init__(self, model: str, response: Optional[str] = None):
        self.provider = "mock"
        self.model = model
        self.mode = "mock"
        self.response = EMPTY_RESPONSE if response is None else response
        self.calls: list = []

    def _check_timeout(self, timeout: float):
        if timeout and timeout < 0.05:
            raise ProviderTimeoutError(self.provider, timeout)

    def complete(
        self,
        system: str,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> CompletionResult:
        self._check_timeout(timeout)
        self.calls.append({"system": system, "prompt": prompt})
        return CompletionResult(
            text=self.response,
            meta={"provider": self.provider, "model": self.model, "mode": self.mode},
        )
