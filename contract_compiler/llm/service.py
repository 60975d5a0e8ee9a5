from __future__ import annotations

from .clients.mock_client import MockClient
from .config import LLMConfig
from .interfaces import BaseClient


def get_client(cfg: LLMConfig) -> BaseClient:
    if cfg.provider == "openai" and cfg.valid:
        from .clients.openai_client import OpenAIClient

        return OpenAIClient(cfg)
    return MockClient(cfg.model)


__all__ = ["get_client"]
