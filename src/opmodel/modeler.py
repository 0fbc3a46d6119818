"""
Base class of the models.

A modeler owns an optimization model held by an external solver engine. It
exposes factory methods for variables, expressions, constraints and
objectives, and forwards whatever is added to the model to the engine.
Subclasses bind the modeler to a specific engine.
"""

import collections.abc

from absl import logging

from .constants import INFINITY, INT_MAX, ObjectiveSense, SolveStatus
from .constants import VarType
from .constraint import Constraint, Range
from .errors import ModelerError, NoSolutionError, UnsupportedOperationError
from .expr import IntExpr, NumExpr, NumVar, is_number, make_expr
from .objective import Objective, StaticLex


def _param_key(name):
    return str(name).replace("_", "").replace(" ", "").lower()


class Modeler:
    """
    Abstract modeler. Subclasses must create their engine before calling
    this constructor and implement the engine hooks (methods starting with
    '_new_var', '_post', '_set_objective', ...).
    """

    # Parameters: {normalized name: name of the setter method}
    _PARAMS = {
        "timelimit": "_set_time_limit",
        "threads": "_set_threads",
        "logoutput": "_set_log_output",
        "relativegap": "_set_relative_gap",
    }

    def __init__(self, name=None, params=None):
        self._name = name or None
        self._vars = []
        self._vars_by_name = {}
        self._constraints = []
        self._objective = None
        self._status = SolveStatus.NOT_SOLVED
        self._params = {}
        self._ended = False
        logging.info("Created %s '%s'", type(self).__name__, self)
        for key, value in (params or {}).items():
            self.set_param(key, value)

    def get_name(self):
        return self._name

    def __str__(self):
        return self._name or "anonymous"

    def __repr__(self):
        return f"<{type(self).__name__} {self}>"

    def _check_alive(self):
        if self._ended:
            raise ModelerError(f"Model '{self}' has been ended")

    # --- Variables ---
    def num_var(self, lb=0.0, ub=INFINITY, name=None):
        """
        Creates a continuous variable in [lb, ub].
        """
        return self._register(self._new_var(VarType.FLOAT, lb, ub, name))

    def int_var(self, min=0, max=INT_MAX, name=None):
        """
        Creates an integer variable in [min, max].
        """
        return self._register(self._new_var(VarType.INT, min, max, name))

    def bool_var(self, name=None):
        """
        Creates a 0-1 variable.
        """
        return self._register(self._new_var(VarType.BOOL, 0, 1, name))

    def num_vars(self, keys, lb=0.0, ub=INFINITY, namer=None):
        """
        Creates a dictionary of continuous variables indexed by `keys`.
        The optional `namer` gives the name of the variable of a key.
        """
        return {
            key: self.num_var(lb, ub, namer(key) if namer else None)
            for key in keys
        }

    def int_vars(self, keys, min=0, max=INT_MAX, namer=None):
        """
        Creates integer variables: a list if `keys` is a count, a
        dictionary indexed by the keys otherwise.
        """
        if isinstance(keys, int):
            return [
                self.int_var(min, max, namer(i) if namer else None)
                for i in range(keys)
            ]
        return {
            key: self.int_var(min, max, namer(key) if namer else None)
            for key in keys
        }

    def bool_vars(self, keys, keys2=None, namer=None):
        """
        Creates a dictionary of 0-1 variables indexed by `keys`, or by the
        pairs of (keys, keys2) when a second set of keys is given.
        """
        if keys2 is None:
            return {
                key: self.bool_var(namer(key) if namer else None)
                for key in keys
            }
        keys2 = list(keys2)
        return {
            (k1, k2): self.bool_var(namer(k1, k2) if namer else None)
            for k1 in keys
            for k2 in keys2
        }

    def _register(self, var):
        name = var.get_name()
        if name is not None:
            if name in self._vars_by_name:
                raise ModelerError(f"Variable '{name}' already exists")
            self._vars_by_name[name] = var
        var.index = len(self._vars)
        self._vars.append(var)
        return var

    def _rename_var(self, var, name):
        old = var.get_name()
        if name and name != old and name in self._vars_by_name:
            raise ModelerError(f"Variable '{name}' already exists")
        if old is not None:
            self._vars_by_name.pop(old, None)
        if name:
            self._vars_by_name[name] = var

    def get_var_by_name(self, name):
        if name not in self._vars_by_name:
            raise ModelerError(f"Variable '{name}' not found.")
        return self._vars_by_name[name]

    def get_vars(self):
        return list(self._vars)

    def linear_num_expr(self, value=0.0):
        return NumExpr(self, constant=value)

    def linear_int_expr(self, value=0):
        if not float(value).is_integer():
            raise ModelerError(f"Integer expression cannot start at {value}")
        return IntExpr(self, constant=int(value))

    # --- Expressions ---
    def _convert(self, value):
        """
        Converts a modeling object that is not an expression to an
        expression, None if it cannot be converted.
        """
        return None

    def _as_expr(self, value):
        if is_number(value):
            return make_expr(self, constant=value)
        if isinstance(value, NumExpr):
            if value.get_modeler() is not self:
                raise ModelerError(
                    f"Expression {value} belongs to another model"
                )
            return value
        expr = self._convert(value)
        if expr is None:
            raise ModelerError(f"Cannot convert {type(value)} to NumExpr")
        return expr

    def sum(self, *exprs):
        """
        Sum of expressions, given as arguments or as one iterable.
        """
        if len(exprs) == 1 and not isinstance(exprs[0], NumExpr) and \
                isinstance(exprs[0], collections.abc.Iterable):
            exprs = exprs[0]
        total = NumExpr(self)
        for expr in exprs:
            total.add(self._as_expr(expr))
        return make_expr(self, total.terms, total.constant)

    def scal_prod(self, left, right):
        """
        Scalar product of a list of values and a list of expressions,
        given in either order.
        """
        left, right = list(left), list(right)
        if len(left) != len(right):
            raise ModelerError(
                f"Scalar product of arrays of size {len(left)} and "
                f"{len(right)}"
            )
        if all(is_number(v) for v in right):
            left, right = right, left
        total = NumExpr(self)
        for value, expr in zip(left, right):
            total.add(self._as_expr(expr), value)
        return make_expr(self, total.terms, total.constant)

    scalar_product = scal_prod

    def diff(self, expr1, expr2):
        return self._as_expr(expr1) - expr2

    def negative(self, expr):
        return -self._as_expr(expr)

    def prod(self, expr1, expr2):
        """
        Product of two expressions. Products of two non constant
        expressions are forwarded by engines supporting them only.
        """
        expr1, expr2 = self._as_expr(expr1), self._as_expr(expr2)
        if expr2.is_constant():
            return expr1 * expr2.constant
        if expr1.is_constant():
            return expr2 * expr1.constant
        return self._product(expr1, expr2)

    def _product(self, expr1, expr2):
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support the product of "
            f"{expr1} and {expr2}"
        )

    def div(self, expr1, expr2):
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support division by an "
            "expression"
        )

    def mod(self, expr1, expr2):
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support modulo"
        )

    def abs(self, expr):
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support absolute values"
        )

    def to_expr(self, ct):
        raise UnsupportedOperationError(
            f"{type(self).__name__} cannot use constraint '{ct}' as an "
            "expression"
        )

    # --- Constraints ---
    def range(self, lb, expr, ub, name=None):
        """
        Creates the constraint lb <= expr <= ub.
        """
        if lb > ub:
            raise ModelerError(f"Empty range [{lb}, {ub}]")
        return Range(self, lb, self._as_expr(expr), ub, name)

    def _relation(self, expr1, expr2, lb, ub, name):
        # expr1 - expr2 in [lb, ub]
        if is_number(expr2):
            return Range(self, lb + expr2, self._as_expr(expr1), ub + expr2,
                         name)
        if is_number(expr1):
            return Range(self, expr1 - ub, self._as_expr(expr2), expr1 - lb,
                         name)
        expr = self._as_expr(expr1) - self._as_expr(expr2)
        return Range(self, lb, expr, ub, name)

    def le(self, expr1, expr2, name=None):
        return self._relation(expr1, expr2, -INFINITY, 0, name)

    def ge(self, expr1, expr2, name=None):
        return self._relation(expr1, expr2, 0, INFINITY, name)

    def eq(self, expr1, expr2, name=None):
        return self._relation(expr1, expr2, 0, 0, name)

    def lt(self, expr1, expr2, name=None):
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support strict inequalities"
        )

    def gt(self, expr1, expr2, name=None):
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support strict inequalities"
        )

    def neq(self, expr1, expr2, name=None):
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support '!=' constraints"
        )

    def and_(self, *constraints):
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support logical constraints"
        )

    def or_(self, *constraints):
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support logical constraints"
        )

    def not_(self, ct):
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support logical constraints"
        )

    def if_then(self, if_ct, then_ct):
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support logical constraints"
        )

    def if_then_else(self, if_ct, then_ct, else_ct):
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support logical constraints"
        )

    # --- Objective ---
    def _criteria(self, expr):
        if isinstance(expr, StaticLex):
            return expr
        return self._as_expr(expr)

    def minimize(self, expr):
        return Objective(self, ObjectiveSense.MINIMIZE, self._criteria(expr))

    def maximize(self, expr):
        return Objective(self, ObjectiveSense.MAXIMIZE, self._criteria(expr))

    def static_lex(self, *exprs):
        """
        Several criteria optimized in order, to pass to minimize() or
        maximize(). Arguments are expressions or one iterable of them.
        """
        if len(exprs) == 1 and not is_number(exprs[0]) and \
                not isinstance(exprs[0], NumExpr):
            exprs = exprs[0]
        return StaticLex(self, [self._as_expr(e) for e in exprs])

    def get_objective(self):
        return self._objective

    def _objective_changed(self, objective):
        if objective is self._objective and not self._ended:
            self._set_objective(objective)

    # --- Adding to the model ---
    def add(self, item, name=None):
        """
        Adds a constraint, an objective or an iterable of them to the
        model. Variables are part of the model from their creation, adding
        them does nothing. Returns the model.
        """
        self._check_alive()
        if isinstance(item, Objective):
            if item.get_modeler() is not self:
                raise ModelerError("Objective belongs to another model")
            if name:
                item.set_name(name)
            if self._objective is not None and self._objective is not item:
                logging.warning(
                    "Model '%s': objective %s replaces %s",
                    self, item, self._objective,
                )
            self._set_objective(item)
            self._objective = item
        elif isinstance(item, Constraint):
            if item.get_modeler() is not self:
                raise ModelerError(f"Constraint '{item}' belongs to another "
                                   "model")
            if item.is_added():
                raise ModelerError(f"Constraint '{item}' is already added")
            if name:
                item.set_name(name)
            self._post(item)
            self._constraints.append(item)
        elif isinstance(item, NumVar):
            if item.get_modeler() is not self:
                raise ModelerError(f"Variable {item} belongs to another model")
        elif isinstance(item, collections.abc.Iterable) and \
                not isinstance(item, (str, NumExpr)):
            for element in item:
                self.add(element)
        else:
            raise ModelerError(f"Cannot add {type(item)} to a model")
        return self

    def add_range(self, lb, expr, ub, name=None):
        return self.add(self.range(lb, expr, ub, name))

    def add_eq(self, expr1, expr2, name=None):
        return self.add(self.eq(expr1, expr2, name))

    def add_le(self, expr1, expr2, name=None):
        return self.add(self.le(expr1, expr2, name))

    def add_ge(self, expr1, expr2, name=None):
        return self.add(self.ge(expr1, expr2, name))

    def get_constraints(self):
        return list(self._constraints)

    # --- Solution ---
    def solve(self):
        """
        Solves the model, returns True if a solution is available.
        """
        raise NotImplementedError

    def get_status(self):
        return self._status

    def _check_solution(self):
        self._check_alive()
        if not self._status.has_solution:
            raise NoSolutionError(
                f"Model '{self}' has no solution (status: {self._status})"
            )

    def get_value(self, expr):
        """
        Returns the value of a variable or an expression in the solution.
        """
        self._check_solution()
        if is_number(expr):
            return expr
        return self._as_expr(expr).evaluate(self._var_value)

    def get_values(self, exprs):
        return [self.get_value(expr) for expr in exprs]

    def get_objective_value(self):
        raise NotImplementedError

    def get_best_objective_value(self):
        raise NotImplementedError

    def _statistics(self):
        counts = collections.Counter(v.get_type() for v in self._vars)
        return {
            "variables": len(self._vars),
            "integer variables": counts[VarType.INT],
            "binary variables": counts[VarType.BOOL],
            "constraints": len(self._constraints),
        }

    def print_information(self):
        """
        Logs the statistics of the model.
        """
        logging.info("Model '%s':", self)
        for key, value in self._statistics().items():
            logging.info("  - number of %s: %s", key, value)
        if self._objective is not None:
            logging.info("  - objective: %s", self._objective)

    def end(self):
        """
        Releases the solver engine. The model cannot be used anymore.
        """
        self._ended = True

    # --- Configuration ---
    def set_param(self, name, value):
        """
        Sets a solver parameter, e.g. set_param("TimeLimit", 60).
        """
        key = _param_key(name)
        if key not in self._PARAMS:
            raise ModelerError(
                f"Unknown parameter '{name}' for {type(self).__name__}"
            )
        getattr(self, self._PARAMS[key])(value)
        self._params[key] = value
        logging.debug("Model '%s': parameter %s = %s", self, name, value)

    def get_param(self, name, default=None):
        return self._params.get(_param_key(name), default)

    # --- Engine hooks ---
    def _new_var(self, var_type, lb, ub, name):
        raise NotImplementedError

    def _set_var_bounds(self, var, lb, ub):
        raise NotImplementedError

    def _post(self, ct):
        raise NotImplementedError

    def _update_range(self, rng):
        raise NotImplementedError

    def _set_objective(self, objective):
        raise NotImplementedError

    def _var_value(self, var):
        raise NotImplementedError
