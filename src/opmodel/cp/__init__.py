"""
Constraint programming and scheduling models.
"""

from .cumul import CumulFunctionExpr, Segment  # noqa: F401
from .interval import IntervalVar  # noqa: F401
from .model import CpModel  # noqa: F401
from .search import SearchPhase, ValueSelector, VarSelector  # noqa: F401


__all__ = [
    "CpModel",
    "CumulFunctionExpr",
    "IntervalVar",
    "SearchPhase",
    "Segment",
    "ValueSelector",
    "VarSelector",
]
