"""
opmodel: an optimization modeling layer backed by OR-Tools.

Public API:
- MpModel: linear / mixed integer linear model solved by a pywraplp backend
- CpModel: constraint programming and scheduling model solved by CP-SAT
- NumExpr, IntExpr, NumVar, IntVar: expressions and variables
- Constraint, Range: constraints
- Objective, ObjectiveSense, SolveStatus: objectives and solve outcome

Notes:
- Models are built symbolically with Python operators and forwarded to
  the solver engine, which does all the search.
"""

from __future__ import annotations

# Runtime version discovery with graceful fallback
# if package metadata is missing
from importlib.metadata import version, PackageNotFoundError


__version__: str
try:
    # Package name should match the installed distribution
    __version__ = version("opmodel")
except PackageNotFoundError:
    __version__ = "0.0.0"


from .constants import INFINITY, INT_MAX, INTERVAL_MAX, INTERVAL_MIN  # noqa: E402,F401,E501
from .constants import ObjectiveSense, SolveStatus, VarType  # noqa: E402,F401
from .constraint import Constraint, Range  # noqa: E402,F401
from .cp import CpModel, IntervalVar, SearchPhase  # noqa: E402,F401
from .cp import ValueSelector, VarSelector  # noqa: E402,F401
from .errors import ModelerError, NoSolutionError  # noqa: E402,F401
from .errors import UnsupportedOperationError  # noqa: E402,F401
from .expr import IntExpr, IntVar, NumExpr, NumVar  # noqa: E402,F401
from .modeler import Modeler  # noqa: E402,F401
from .mp import MpModel, PiecewiseLinearFunction  # noqa: E402,F401
from .objective import Objective, StaticLex  # noqa: E402,F401


__all__ = [
    "CpModel",
    "MpModel",
    "Modeler",
    "NumExpr",
    "IntExpr",
    "NumVar",
    "IntVar",
    "IntervalVar",
    "Constraint",
    "Range",
    "Objective",
    "StaticLex",
    "ObjectiveSense",
    "SolveStatus",
    "VarType",
    "SearchPhase",
    "VarSelector",
    "ValueSelector",
    "PiecewiseLinearFunction",
    "ModelerError",
    "NoSolutionError",
    "UnsupportedOperationError",
    "INFINITY",
    "INT_MAX",
    "INTERVAL_MIN",
    "INTERVAL_MAX",
    "__version__",
]
