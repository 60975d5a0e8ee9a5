"""Contract compiler: clause graph construction and anomaly reasoning."""

__version__ = "0.1.0"
