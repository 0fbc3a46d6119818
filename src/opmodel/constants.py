"""
Constants shared by the mathematical programming and constraint
programming models.
"""

import enum
import math


# A default "infinity" value, same as pywraplp.Solver.infinity()
INFINITY = math.inf

# Largest bound accepted for integer variables
INT_MAX = 2**31 - 1

# Bounds of the scheduling horizon
INTERVAL_MIN = 0
INTERVAL_MAX = 2**30 - 1


class ObjectiveSense(enum.Enum):
    """
    Optimization direction of an objective.
    """
    MINIMIZE = -1
    MAXIMIZE = 1
    UNKNOWN = 0

    @classmethod
    def from_string(cls, value):
        for sense in cls:
            if sense.name.lower() == str(value).strip().lower():
                return sense
        return cls.UNKNOWN

    @classmethod
    def from_int(cls, value):
        for sense in cls:
            if sense.value == value:
                return sense
        return cls.UNKNOWN


class SolveStatus(enum.Enum):
    """
    Engine independent solve status.
    """
    OPTIMAL = "optimal"
    FEASIBLE = "feasible"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    UNKNOWN = "unknown"
    MODEL_INVALID = "model_invalid"
    ABNORMAL = "abnormal"
    NOT_SOLVED = "not_solved"

    @property
    def has_solution(self):
        return self in (SolveStatus.OPTIMAL, SolveStatus.FEASIBLE)

    def __str__(self):
        return self.name.capitalize()


class VarType(enum.Enum):
    """
    Type of a decision variable.
    """
    FLOAT = "float"
    INT = "int"
    BOOL = "bool"
