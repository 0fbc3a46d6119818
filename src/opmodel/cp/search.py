"""
Search phases: the order in which the search instantiates variables and
the values it tries first.
"""

import enum

from ortools.sat.python import cp_model


class VarSelector(enum.Enum):
    FIRST = cp_model.CHOOSE_FIRST
    SMALLEST_MIN = cp_model.CHOOSE_LOWEST_MIN
    LARGEST_MAX = cp_model.CHOOSE_HIGHEST_MAX
    SMALLEST_DOMAIN = cp_model.CHOOSE_MIN_DOMAIN_SIZE
    LARGEST_DOMAIN = cp_model.CHOOSE_MAX_DOMAIN_SIZE


class ValueSelector(enum.Enum):
    MIN = cp_model.SELECT_MIN_VALUE
    MAX = cp_model.SELECT_MAX_VALUE
    LOWER_HALF = cp_model.SELECT_LOWER_HALF
    UPPER_HALF = cp_model.SELECT_UPPER_HALF


class SearchPhase:
    """
    A list of variables with the heuristics used to instantiate them.
    """
    def __init__(self, variables, var_selector=VarSelector.FIRST,
                 value_selector=ValueSelector.MIN):
        self.variables = list(variables)
        self.var_selector = var_selector
        self.value_selector = value_selector

    def __str__(self):
        return (f"SearchPhase({len(self.variables)} variables, "
                f"{self.var_selector.name}, {self.value_selector.name})")
