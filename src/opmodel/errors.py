"""
Exceptions raised by the modeling layer.
"""


class ModelerError(Exception):
    """
    Base class of the errors raised while building or solving a model.
    """
    pass


class UnsupportedOperationError(ModelerError):
    """
    The requested construct cannot be forwarded to the solver engine
    behind the model (e.g. a quadratic term in a linear solver).
    """
    pass


class NoSolutionError(ModelerError):
    """
    A solution value was requested but the model has no solution.
    """
    pass
