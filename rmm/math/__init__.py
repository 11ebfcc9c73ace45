"""Mathematical utilities for the pricing engine.

This package provides the fixed-point primitives the curves are built on:
- fixed_point: 18-decimal rounding primitives and LogExpMath exp / ln
- gaussian: pdf / cdf / ppf of the standard normal in WAD
"""

from rmm.math.gaussian import cdf, pdf, ppf

__all__ = ["cdf", "pdf", "ppf"]
