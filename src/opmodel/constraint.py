"""
Constraints on expressions.

Constraints are symbolic: building one does not change the model, adding
it with `Modeler.add()` forwards it to the solver engine.
"""

import math

from .errors import ModelerError


def _fmt_bound(value):
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# --- Base 'Constraint' class ---
class Constraint:
    """
    A constraint of a model. Logical combinations are built with the
    operators `&` (and), `|` (or), `~` (not) and `>>` (implication).
    """
    def __init__(self, modeler, name=None):
        self._modeler = modeler
        self._name = name or None
        self.handle = None

    def get_modeler(self):
        return self._modeler

    def get_name(self):
        return self._name

    def set_name(self, name):
        self._name = name or None

    def is_added(self):
        return self.handle is not None

    # --- Logical operators ---
    def __and__(self, other):
        return self._modeler.and_(self, other)

    def __or__(self, other):
        return self._modeler.or_(self, other)

    def __invert__(self):
        return self._modeler.not_(self)

    def __rshift__(self, other):
        return self._modeler.if_then(self, other)

    def if_then_else(self, then_ct, else_ct):
        return self._modeler.if_then_else(self, then_ct, else_ct)

    # --- A constraint used in arithmetic is its 0/1 truth value ---
    def to_expr(self):
        return self._modeler.to_expr(self)

    def __add__(self, other):
        return self.to_expr() + other

    def __radd__(self, other):
        return other + self.to_expr()

    def __sub__(self, other):
        return self.to_expr() - other

    def __rsub__(self, other):
        return other - self.to_expr()

    def __mul__(self, other):
        return self.to_expr() * other

    def __rmul__(self, other):
        return other * self.to_expr()

    def __neg__(self):
        return -self.to_expr()

    def __bool__(self):
        raise ModelerError(
            f"Constraint '{self}' has no truth value, add it to a model. "
            "Use model.range(lb, expr, ub) instead of chained comparisons"
        )

    def __hash__(self):
        return id(self)

    def __repr__(self):
        return f"<{type(self).__name__} {self}>"


class Range(Constraint):
    """
    A linear constraint: lb <= expr <= ub.
    """
    def __init__(self, modeler, lb, expr, ub, name=None):
        Constraint.__init__(self, modeler, name)
        self._lb = lb
        self._expr = expr
        self._ub = ub

    def get_lb(self):
        return self._lb

    def get_ub(self):
        return self._ub

    def set_lb(self, lb):
        self.set_bounds(lb, self._ub)

    def set_ub(self, ub):
        self.set_bounds(self._lb, ub)

    def set_bounds(self, lb, ub):
        previous = self._lb, self._ub
        self._lb, self._ub = lb, ub
        if self.is_added():
            try:
                self._modeler._update_range(self)
            except ModelerError:
                self._lb, self._ub = previous
                raise

    def get_num_expr(self):
        return self._expr

    def linear_bounds(self):
        """
        Returns the bounds of the variable part of the expression, that is
        with its constant moved to the bounds.
        """
        constant = self._expr.constant
        return self._lb - constant, self._ub - constant

    def __str__(self):
        if self._lb == self._ub:
            return f"{self._expr} == {_fmt_bound(self._ub)}"
        if math.isinf(self._lb):
            return f"{self._expr} <= {_fmt_bound(self._ub)}"
        if math.isinf(self._ub):
            return f"{self._expr} >= {_fmt_bound(self._lb)}"
        return (f"{_fmt_bound(self._lb)} <= {self._expr} "
                f"<= {_fmt_bound(self._ub)}")


class NotEqual(Constraint):
    """
    expr != value
    """
    def __init__(self, modeler, expr, value, name=None):
        Constraint.__init__(self, modeler, name)
        self.expr = expr
        self.value = value

    def __str__(self):
        return f"{self.expr} != {_fmt_bound(self.value)}"


class BoolConstant(Constraint):
    """
    The constraint that is always (or never) satisfied.
    """
    def __init__(self, modeler, value, name=None):
        Constraint.__init__(self, modeler, name)
        self.value = bool(value)

    def __str__(self):
        return "true" if self.value else "false"


class And(Constraint):
    def __init__(self, modeler, constraints, name=None):
        Constraint.__init__(self, modeler, name)
        self.constraints = tuple(constraints)

    def __str__(self):
        return "(" + " & ".join(str(c) for c in self.constraints) + ")"


class Or(Constraint):
    def __init__(self, modeler, constraints, name=None):
        Constraint.__init__(self, modeler, name)
        self.constraints = tuple(constraints)

    def __str__(self):
        return "(" + " | ".join(str(c) for c in self.constraints) + ")"


class Not(Constraint):
    def __init__(self, modeler, constraint, name=None):
        Constraint.__init__(self, modeler, name)
        self.constraint = constraint

    def __str__(self):
        return f"~({self.constraint})"


class IfThen(Constraint):
    def __init__(self, modeler, if_ct, then_ct, name=None):
        Constraint.__init__(self, modeler, name)
        self.if_ct = if_ct
        self.then_ct = then_ct

    def __str__(self):
        return f"({self.if_ct}) >> ({self.then_ct})"


# --- Global constraints ---
class AllDiff(Constraint):
    def __init__(self, modeler, exprs, name=None):
        Constraint.__init__(self, modeler, name)
        self.exprs = list(exprs)

    def __str__(self):
        return "all_diff(" + ", ".join(str(e) for e in self.exprs) + ")"


class AllowedAssignments(Constraint):
    """
    The tuple of expressions takes one of the given tuples of values, or
    none of them if `forbidden` is set.
    """
    def __init__(self, modeler, exprs, tuples, forbidden=False, name=None):
        Constraint.__init__(self, modeler, name)
        self.exprs = list(exprs)
        self.tuples = [tuple(t) for t in tuples]
        self.forbidden = forbidden
        for t in self.tuples:
            if len(t) != len(self.exprs):
                raise ModelerError(
                    f"Tuple {t} does not match {len(self.exprs)} expressions"
                )

    def __str__(self):
        kind = "forbidden" if self.forbidden else "allowed"
        exprs = ", ".join(str(e) for e in self.exprs)
        return f"{kind}_assignments([{exprs}], {len(self.tuples)} tuples)"


class Inverse(Constraint):
    """
    f[invf[i]] == i and invf[f[i]] == i.
    """
    def __init__(self, modeler, f, invf, name=None):
        Constraint.__init__(self, modeler, name)
        self.f = list(f)
        self.invf = list(invf)
        if len(self.f) != len(self.invf):
            raise ModelerError("inverse expects two arrays of the same size")

    def __str__(self):
        return f"inverse({len(self.f)} variables)"
