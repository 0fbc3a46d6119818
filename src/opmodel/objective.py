"""
Objective of a model.
"""

from .constants import ObjectiveSense
from .errors import ModelerError
from .expr import NumExpr, is_number


class Objective:
    """
    An optimization direction and the expression to optimize. Changes made
    to the active objective of a model are forwarded to the solver engine.
    """
    def __init__(self, modeler, sense, expr, name=None):
        if not isinstance(sense, ObjectiveSense) or \
                sense == ObjectiveSense.UNKNOWN:
            raise ModelerError(f"Unknown objective sense {sense}")
        self._modeler = modeler
        self._sense = sense
        self._expr = self._check_expr(expr)
        self._name = name or None

    def _check_expr(self, expr):
        if is_number(expr):
            return self._modeler.linear_num_expr(expr)
        if isinstance(expr, StaticLex):
            if expr.get_modeler() is not self._modeler:
                raise ModelerError("Objective criteria belong to another "
                                   "model")
            return expr
        if not isinstance(expr, NumExpr):
            raise ModelerError(
                f"Objective must be a NumExpr, got {type(expr)}"
            )
        if expr.get_modeler() is not self._modeler:
            raise ModelerError("Objective expression belongs to another model")
        return expr

    def get_modeler(self):
        return self._modeler

    def get_name(self):
        return self._name

    def set_name(self, name):
        self._name = name or None

    def get_sense(self):
        return self._sense

    def set_sense(self, sense):
        if sense == ObjectiveSense.UNKNOWN:
            raise ModelerError("Cannot set an unknown objective sense")
        self._update(sense, self._expr)

    def get_num_expr(self):
        return self._expr

    def set_num_expr(self, expr):
        self._update(self._sense, self._check_expr(expr))

    def _update(self, sense, expr):
        previous = self._sense, self._expr
        self._sense, self._expr = sense, expr
        try:
            self._modeler._objective_changed(self)
        except ModelerError:
            self._sense, self._expr = previous
            raise

    def clear_expr(self):
        self.set_num_expr(0)

    def __str__(self):
        return f"{self._sense.name.lower()}({self._expr})"

    def __repr__(self):
        return f"<Objective {self}>"


class StaticLex:
    """
    Criteria optimized in lexicographic order: each criterion is optimized
    without degrading the ones before it.
    """
    def __init__(self, modeler, exprs):
        if not exprs:
            raise ModelerError("static_lex() of no expression")
        self._modeler = modeler
        self.exprs = list(exprs)

    def get_modeler(self):
        return self._modeler

    def is_constant(self):
        return all(e.is_constant() for e in self.exprs)

    def __len__(self):
        return len(self.exprs)

    def __iter__(self):
        return iter(self.exprs)

    def __str__(self):
        return f"static_lex({', '.join(str(e) for e in self.exprs)})"
