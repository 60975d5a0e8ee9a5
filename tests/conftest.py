from pathlib import Path

import httpx
import pytest
from loguru import logger

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _test_env(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "mock")
    monkeypatch.setenv("PYTHONHASHSEED", "0")
    for name in ("OPENAI_API_KEY", "OPENAI_BASE_URL", "LLM_MODEL", "CONTRACT_COMPILER_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def _no_network(monkeypatch):
    orig_httpx = httpx.Client.request

    def block_httpx(self, method, url, *args, **kwargs):
        u = str(url)
        if u.startswith("http://localhost") or u.startswith("https://localhost"):
            return orig_httpx(self, method, url, *args, **kwargs)
        raise RuntimeError("External HTTP blocked")

    monkeypatch.setattr(httpx.Client, "request", block_httpx)
    yield
    monkeypatch.setattr(httpx.Client, "request", orig_httpx)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    # sinks added by init_logging point at the per-test captured stderr
    logger.remove()


@pytest.fixture
def sample_contract_path() -> Path:
    return FIXTURES / "sample_contract.txt"


@pytest.fixture
def sample_contract_text(sample_contract_path) -> str:
    return sample_contract_path.read_text(encoding="utf-8")
