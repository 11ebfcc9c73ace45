"""Fixed-point pricing engine for log-normal (RMM) trading curves."""

__version__ = "0.1.0"
__all__ = ["__version__"]
