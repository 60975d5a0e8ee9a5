from __future__ import annotations

"""Central logging configuration using loguru."""

import sys

from loguru import logger

from contract_compiler.config import env_flag


def init_logging(debug: bool | None = None):
    """Configure the loguru stderr sink.

    The level is DEBUG when ``debug`` is true or, if ``debug`` is ``None``,
    when ``CONTRACT_COMPILER_DEBUG=1``; otherwise WARNING so that reports on
    stdout stay clean.
    """
    if debug is None:
        debug = env_flag("CONTRACT_COMPILER_DEBUG")
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if debug else "WARNING",
        backtrace=True,
        diagnose=bool(debug),
    )
    return logger


__all__ = ["init_logging", "logger"]
