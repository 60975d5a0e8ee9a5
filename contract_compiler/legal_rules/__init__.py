"""Symbolic reasoning over the contract graph."""

from .reasoner import DETECTORS, analyze, get_detector

__all__ = ["DETECTORS", "analyze", "get_detector"]
