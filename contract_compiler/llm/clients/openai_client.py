from __future__ import annotations

import httpx

from ..config import LLMConfig
from ..interfaces import (
    BaseClient,
    CompletionResult,
    ProviderAuthError,
    ProviderConfigError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)


class OpenAIClient(BaseClient):
    def __init__(self, cfg: LLMConfig):
        self.provider = "openai"
        self.model = cfg.model
        self.mode = "live"
        self._api_key = cfg.openai_api_key or ""
        self._base = cfg.openai_base.rstrip("/")

    def _post(self, payload: dict, timeout: float) -> dict:
        try:
            r = httpx.post(
                f"{self._base}/chat/completions",
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=timeout,
            )
        except httpx.TimeoutException:
            raise ProviderTimeoutError(self.provider, timeout)
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(self.provider, str(exc))
        if r.status_code in (401, 403):
            raise ProviderAuthError(self.provider, r.text)
        if r.status_code >= 500:
            raise ProviderUnavailableError(self.provider, r.text)
        if r.status_code >= 400:
            raise ProviderConfigError(self.provider, r.text)
        try:
            return r.json()
        except ValueError:
            raise ProviderUnavailableError(self.provider, "invalid JSON body")

    def complete(
        self,
        system: str,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> CompletionResult:
        data = self._post(
            {
                "model": self.model,
                "messages": [
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                "max_tokens": max_tokens,
                "temperature": temperature,
                "response_format": {"type": "json_object"},
            },
            timeout,
        )
        choices = data.get("choices") or [{}]
        text = (choices[0].get("message") or {}).get("content") or ""
        usage = data.get("usage") or {}
        return CompletionResult(
            text=text,
            meta={"provider": self.provider, "model": self.model, "mode": self.mode, "usage": usage},
        )
