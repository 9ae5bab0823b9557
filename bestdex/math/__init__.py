"""Mathematical utilities for the router.

This package provides fixed-point primitives for venue and profit math:
- wad: 18-decimal fixed-point arithmetic with explicit rounding
"""

from bestdex.math.wad import wad_div, wad_mul

__all__ = ["wad_div", "wad_mul"]
