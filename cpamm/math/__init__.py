"""Mathematical utilities for the AMM core.

This package provides the integer pool math:
- ConstantProductMath: swap output, deposit ratio and share accounting
"""

from cpamm.math.constant_product import ConstantProductMath, constant_product

__all__ = ["ConstantProductMath", "constant_product"]
