from __future__ import annotations

import os


def env_int(name: str, default: int) -> int:
    """Read ``name`` from the environment as an integer."""

    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):  # tolerate floats or junk values
        try:
            return int(float(str(raw)))
        except (TypeError, ValueError):
            return default


def env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# External calls
LLM_TIMEOUT_S = env_int("LLM_TIMEOUT_S", 40)


__all__ = ["env_int", "env_float", "env_flag", "LLM_TIMEOUT_S"]
