"""
Symbolic expressions and decision variables.

Expressions are linear combinations of variables plus a constant. They are
built with the usual Python operators and handed over to the modeler that
created their variables; the modeler forwards them to the solver engine
when they end up in a constraint or an objective. Non linear operations
(product of two expressions, integer division, ...) are delegated to the
modeler, which either forwards them through auxiliary variables or raises
an UnsupportedOperationError.
"""

import math
import numbers

from .constants import VarType
from .errors import ModelerError


def is_number(value):
    return isinstance(value, numbers.Real)


def is_integral(value):
    try:
        return float(value).is_integer()
    except (OverflowError, ValueError):
        return False


def _fmt(value):
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# --- Wrapper for 'NumExpr' class ---
class NumExpr:
    """
    A linear expression: a dictionary of {variable: coefficient} plus a
    constant.
    """
    def __init__(self, modeler, terms=None, constant=0):
        self._modeler = modeler
        self.terms = dict(terms) if terms else {}
        self.constant = constant

    def get_modeler(self):
        return self._modeler

    def get_constant(self):
        return self.constant

    def get_coefficient(self, var):
        return self.terms.get(var, 0)

    def variables(self):
        return [var for var, coeff in self.terms.items() if coeff != 0]

    def is_constant(self):
        return all(coeff == 0 for coeff in self.terms.values())

    def is_integral(self):
        """True if the expression only takes integer values."""
        if not is_integral(self.constant):
            return False
        for var, coeff in self.terms.items():
            if coeff == 0:
                continue
            if not isinstance(var, IntVar) or not is_integral(coeff):
                return False
        return True

    def bounds(self):
        """
        Returns (lb, ub) computed from the bounds of the variables.
        """
        lb = ub = self.constant
        for var, coeff in self.terms.items():
            if coeff == 0:
                continue
            low, high = var.get_lb() * coeff, var.get_ub() * coeff
            if coeff < 0:
                low, high = high, low
            lb += low
            ub += high
        return lb, ub

    def evaluate(self, value_of):
        """
        Evaluates the expression given a function returning the value of
        each variable.
        """
        total = self.constant
        for var, coeff in self.terms.items():
            if coeff != 0:
                total += coeff * value_of(var)
        return total

    @property
    def value(self):
        return self._modeler.get_value(self)

    def copy(self):
        return make_expr(self._modeler, self.terms, self.constant)

    def add(self, other, coeff=1):
        """Adds another expression, variable or number in place."""
        if is_number(other):
            self.constant += other * coeff
        elif isinstance(other, NumExpr):
            self._check_modeler(other)
            for var, c in other.terms.items():
                self.terms[var] = self.terms.get(var, 0) + c * coeff
            self.constant += other.constant * coeff
        else:
            raise ModelerError(f"Cannot add type {type(other)} to NumExpr")
        if isinstance(self, IntExpr) and not NumExpr.is_integral(self):
            raise ModelerError(
                f"Integer expression {self} cannot hold a fractional term"
            )
        return self

    def _check_modeler(self, other):
        if other._modeler is not self._modeler:
            raise ModelerError(
                "Cannot combine expressions of different models"
            )

    def _operand(self, other):
        """
        Converts the other operand of a binary operator, returns None if
        the operation is not supported for its type.
        """
        if is_number(other):
            return other
        if isinstance(other, NumExpr):
            self._check_modeler(other)
            return other
        return self._modeler._convert(other)

    def _scaled(self, factor):
        terms = {var: coeff * factor for var, coeff in self.terms.items()}
        return make_expr(self._modeler, terms, self.constant * factor)

    def _combined(self, other, coeff, self_coeff=1):
        expr = NumExpr(self._modeler)
        expr.add(self, self_coeff)
        expr.add(other, coeff)
        return make_expr(self._modeler, expr.terms, expr.constant)

    # --- Overload operators to build expressions ---
    def __add__(self, other):
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._combined(other, 1)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._combined(other, -1)

    def __rsub__(self, other):
        # other - self
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._combined(other, 1, self_coeff=-1)

    def __mul__(self, other):
        other = self._operand(other)
        if other is None:
            return NotImplemented
        if is_number(other):
            return self._scaled(other)
        if other.is_constant():
            return self._scaled(other.constant)
        if self.is_constant():
            return other._scaled(self.constant)
        return self._modeler.prod(self, other)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        if is_number(other):
            if other == 0:
                raise ZeroDivisionError("division of an expression by zero")
            return self._scaled(1 / other)
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._modeler.div(self, other)

    def __rtruediv__(self, other):
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._modeler.div(other, self)

    def __floordiv__(self, other):
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._modeler.div(self, other)

    def __rfloordiv__(self, other):
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._modeler.div(other, self)

    def __mod__(self, other):
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._modeler.mod(self, other)

    def __neg__(self):
        return self._scaled(-1)

    def __pos__(self):
        return self

    def __abs__(self):
        return self._modeler.abs(self)

    # --- Overload comparison operators to create constraints ---
    def __le__(self, other):
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._modeler.le(self, other)

    def __ge__(self, other):
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._modeler.ge(self, other)

    def __eq__(self, other):
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._modeler.eq(self, other)

    def __ne__(self, other):
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._modeler.neq(self, other)

    def __lt__(self, other):
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._modeler.lt(self, other)

    def __gt__(self, other):
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return self._modeler.gt(self, other)

    def __hash__(self):
        return id(self)

    def __str__(self):
        parts = []
        for var, coeff in self.terms.items():
            if coeff == 0:
                continue
            if coeff == 1:
                text = str(var)
            elif coeff == -1:
                text = f"-{var}"
            else:
                text = f"{_fmt(coeff)}*{var}"
            parts.append(text)
        if self.constant != 0 or not parts:
            parts.append(_fmt(self.constant))
        text = " + ".join(parts)
        return text.replace("+ -", "- ")

    def __repr__(self):
        return f"<{type(self).__name__} {self}>"


class IntExpr(NumExpr):
    """
    An expression taking integer values only.
    """
    pass


def make_expr(modeler, terms=None, constant=0):
    """
    Builds an IntExpr when all variables are integer and all coefficients
    integral, a NumExpr otherwise.
    """
    expr = NumExpr(modeler, terms, constant)
    if expr.is_integral():
        return IntExpr(modeler, expr.terms, constant)
    return expr


# --- Wrapper for 'Var' classes ---
class NumVar(NumExpr):
    """
    A decision variable. The engine object is kept in `handle`.
    """
    def __init__(self, modeler, handle, lb, ub, name=None,
                 var_type=VarType.FLOAT):
        NumExpr.__init__(self, modeler)
        self.terms = {self: 1}
        self.handle = handle
        self.index = -1
        self._lb = lb
        self._ub = ub
        self._name = name or None
        self._type = var_type

    def get_name(self):
        return self._name

    def set_name(self, name):
        self._modeler._rename_var(self, name)
        self._name = name or None

    def get_lb(self):
        return self._lb

    def get_ub(self):
        return self._ub

    def set_lb(self, lb):
        self._modeler._set_var_bounds(self, lb, self._ub)
        self._lb = lb

    def set_ub(self, ub):
        self._modeler._set_var_bounds(self, self._lb, ub)
        self._ub = ub

    def set_bounds(self, lb, ub):
        self._modeler._set_var_bounds(self, lb, ub)
        self._lb = lb
        self._ub = ub

    def get_type(self):
        return self._type

    def add(self, other, coeff=1):
        raise ModelerError(
            f"Variable {self} cannot be modified in place, use '+'"
        )

    def __str__(self):
        if self._name:
            return self._name
        return f"_x{self.index}"

    def __repr__(self):
        return f"<{type(self).__name__} {self}>"


class IntVar(NumVar, IntExpr):
    """
    An integer (or boolean) decision variable. An explicit set of values
    may restrict its domain.
    """
    def __init__(self, modeler, handle, lb, ub, name=None,
                 var_type=VarType.INT, values=None):
        NumVar.__init__(self, modeler, handle, lb, ub, name, var_type)
        self._values = sorted(set(values)) if values is not None else None

    def get_domain(self):
        """
        Returns the values of the domain, either a sorted list or a range.
        """
        if self._values is not None:
            return [v for v in self._values if self._lb <= v <= self._ub]
        if math.isinf(self._lb) or math.isinf(self._ub):
            raise ModelerError(f"Variable {self} has an infinite domain")
        return range(int(self._lb), int(self._ub) + 1)
