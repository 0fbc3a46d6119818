"""
Mathematical programming (LP / MIP) models.
"""

from .model import MpModel  # noqa: F401
from .piecewise import PiecewiseLinearFunction  # noqa: F401


__all__ = [
    "MpModel",
    "PiecewiseLinearFunction",
]
