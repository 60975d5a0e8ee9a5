from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger

from contract_compiler.config import LLM_TIMEOUT_S, env_float, env_int

ALLOWED_PROVIDERS = {"openai", "mock"}


@dataclass
class LLMConfig:
    provider: str = "mock"
    model: str = "mock-static"
    openai_api_key: Optional[str] = None
    openai_base: str = "https://api.openai.com/v1"
    timeout_s: int = 40
    max_tokens: int = 2000
    temperature: float = 0.2
    valid: bool = True
    missing: List[str] = field(default_factory=list)
    mode: str = "mock"  # mock|live|mock-or-error


def load_llm_config() -> LLMConfig:
    load_dotenv()
    provider = os.getenv("LLM_PROVIDER", "mock").strip().lower() or "mock"
    if provider not in ALLOWED_PROVIDERS:
        logger.warning("unsupported LLM_PROVIDER={!r}; using mock", provider)
        provider = "mock"

    cfg = LLMConfig(provider=provider)
    cfg.timeout_s = env_int("LLM_TIMEOUT_S", LLM_TIMEOUT_S)
    cfg.max_tokens = env_int("LLM_MAX_TOKENS", 2000)
    cfg.temperature = env_float("LLM_TEMPERATURE", 0.2)

    key = ""
    if provider == "openai":
        key = (os.getenv("OPENAI_API_KEY") or "").strip()
        cfg.openai_api_key = key or None
        cfg.openai_base = os.getenv("OPENAI_BASE_URL") or cfg.openai_base
        cfg.model = os.getenv("LLM_MODEL") or "gpt-4o-mini"
        cfg.missing = [] if key else ["OPENAI_API_KEY"]
    else:
        cfg.model = os.getenv("LLM_MODEL") or "mock-static"

    cfg.valid = provider == "mock" or not cfg.missing
    if provider == "mock":
        cfg.mode = "mock"
    elif cfg.valid:
        cfg.mode = "live"
    else:
        cfg.mode = "mock-or-error"

    masked = (key[:4] + "***") if key else ""
    logger.info(
        "LLM config: provider={} model={} base={} key={} valid={}",
        cfg.provider,
        cfg.model,
        cfg.openai_base if provider == "openai" else "",
        masked,
        cfg.valid,
    )
    return cfg


__all__ = ["ALLOWED_PROVIDERS", "LLMConfig", "load_llm_config"]
