# File: utils/__init__.py
"""Pure Python utilities for Pet Care.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: Date/time parsing, formatting, interval arithmetic
    - math_utils: Amount rounding and percentages

Usage:
    from . import dt_utils
    from .math_utils import round_amount
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
