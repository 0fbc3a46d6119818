"""
Constraint programming models solved by CP-SAT.

CP-SAT works on integers only: variables are integer variables and every
coefficient must be integral. Non linear expressions (min, max, element,
products...) are forwarded through auxiliary variables defined by CP-SAT
equality constraints, and constraints used in logical expressions are
reified into 0-1 variables.
"""

import math

from absl import logging
from ortools.sat.python import cp_model
from ortools.util.python import sorted_interval_list

from ..constants import INFINITY, INT_MAX, SolveStatus, VarType
from ..constraint import And, AllDiff, AllowedAssignments, BoolConstant
from ..constraint import Constraint, IfThen, Inverse, Not, NotEqual, Or
from ..constraint import Range
from ..errors import ModelerError, UnsupportedOperationError
from ..expr import IntVar, is_integral, is_number
from ..modeler import Modeler
from ..objective import StaticLex
from .cumul import CumulConstraint, CumulFunctionExpr, CumulMixin
from .interval import IntervalMixin, SchedulingConstraint
from .search import SearchPhase, ValueSelector, VarSelector


Domain = sorted_interval_list.Domain

_STATUS = {
    cp_model.OPTIMAL: SolveStatus.OPTIMAL,
    cp_model.FEASIBLE: SolveStatus.FEASIBLE,
    cp_model.INFEASIBLE: SolveStatus.INFEASIBLE,
    cp_model.UNKNOWN: SolveStatus.UNKNOWN,
    cp_model.MODEL_INVALID: SolveStatus.MODEL_INVALID,
}

_SEARCH_TYPES = {
    "automatic": cp_model.AUTOMATIC_SEARCH,
    "fixed": cp_model.FIXED_SEARCH,
}

# Bounds of auxiliary variables, far enough from int64 overflows
_AUX_BOUND = 2**48


def _clip(value):
    return max(-_AUX_BOUND, min(_AUX_BOUND, value))


def _ceil(value):
    if value <= -INFINITY:
        return cp_model.INT_MIN
    if abs(value - round(value)) < 1e-9:
        return int(round(value))
    return math.ceil(value)


def _floor(value):
    if value >= INFINITY:
        return cp_model.INT_MAX
    if abs(value - round(value)) < 1e-9:
        return int(round(value))
    return math.floor(value)


class _SolutionCollector(cp_model.CpSolverSolutionCallback):
    """
    Stores the values of the model variables for each solution.
    """
    def __init__(self, variables, limit=None):
        cp_model.CpSolverSolutionCallback.__init__(self)
        self._variables = variables
        self._limit = limit
        self.solutions = []

    def on_solution_callback(self):
        if self._limit is not None and len(self.solutions) >= self._limit:
            return
        self.solutions.append([self.value(v.handle) for v in self._variables])
        if self._limit is not None and len(self.solutions) >= self._limit:
            self.stop_search()


class CpModel(IntervalMixin, CumulMixin, Modeler):
    """
    A constraint programming model. Besides linear constraints, it accepts
    logical combinations of constraints, global constraints, interval
    variables and cumul functions.
    """

    _PARAMS = dict(Modeler._PARAMS, **{
        "randomseed": "_set_random_seed",
        "solutionlimit": "_set_solution_limit",
        "searchtype": "_set_search_type",
    })

    def __init__(self, name=None, params=None):
        self.cp = cp_model.CpModel()
        self.solver = cp_model.CpSolver()
        # {id(constraint): (constraint, 0-1 variable)}
        self._reified = {}
        self._points = {}
        self._intervals = []
        self._phases = []
        self._true = None
        self._solution_limit = None
        self._solutions = None
        self._current = None
        # values and proved bounds of lexicographic criteria
        self._lex_values = None
        self._lex_bounds = None
        Modeler.__init__(self, name, params)

    # --- Variables ---
    def num_var(self, lb=0.0, ub=INFINITY, name=None):
        raise UnsupportedOperationError(
            "CpModel only supports integer variables"
        )

    def int_var(self, min=0, max=INT_MAX, name=None, values=None):
        """
        Creates an integer variable in [min, max], or taking one of the
        given `values`.
        """
        if values is not None:
            values = sorted({self._integer(v) for v in values})
            if not values:
                raise ModelerError(f"Empty domain for '{name}'")
            var = self._new_var(VarType.INT, values[0], values[-1], name,
                                values)
            return self._register(var)
        return Modeler.int_var(self, min, max, name)

    def _new_var(self, var_type, lb, ub, name, values=None):
        self._check_alive()
        if var_type == VarType.FLOAT:
            raise UnsupportedOperationError(
                "CpModel only supports integer variables"
            )
        lb, ub = self._integer(lb), self._integer(ub)
        if lb > ub:
            raise ModelerError(f"Empty domain [{lb}, {ub}] for '{name}'")
        label = name or ""
        if var_type == VarType.BOOL:
            handle = self.cp.new_bool_var(label)
        elif values is not None:
            handle = self.cp.new_int_var_from_domain(
                Domain.from_values(values), label
            )
        else:
            handle = self.cp.new_int_var(lb, ub, label)
        return IntVar(self, handle, lb, ub, name, var_type, values)

    def _aux_var(self, lb, ub):
        return self._register(
            self._new_var(VarType.INT, _clip(lb), _clip(ub), None)
        )

    def _set_var_bounds(self, var, lb, ub):
        self._check_alive()
        domain = Domain(self._integer(lb), self._integer(ub))
        if var._values is not None:
            domain = domain.intersection_with(Domain.from_values(var._values))
        if domain.is_empty():
            raise ModelerError(f"Empty domain [{lb}, {ub}] for {var}")
        proto = var.handle.proto
        proto.domain.clear()
        proto.domain.extend(domain.flattened_intervals())

    def _true_literal(self):
        if self._true is None:
            self._true = self._aux_var(1, 1)
        return self._true.handle

    def _integer(self, value):
        if not is_integral(value):
            raise UnsupportedOperationError(
                f"CpModel only supports integer values, got {value}"
            )
        return int(value)

    # --- Translation to CP-SAT expressions ---
    def _linear(self, expr):
        """
        Returns the CP-SAT linear expression of the variable terms of an
        expression, then its constant.
        """
        expr = self._as_expr(expr)
        handles, coeffs = [], []
        for var, coeff in expr.terms.items():
            if coeff != 0:
                handles.append(var.handle)
                coeffs.append(self._integer(coeff))
        if not handles:
            return 0, expr.constant
        return cp_model.LinearExpr.weighted_sum(handles, coeffs), expr.constant

    def _affine(self, expr):
        """
        Returns a CP-SAT expression with at most one variable. Larger
        expressions are replaced by an auxiliary variable.
        """
        expr = self._as_expr(expr)
        if len(expr.variables()) > 1:
            return self._var(expr).handle
        linear, constant = self._linear(expr)
        return linear + self._integer(constant)

    def _var(self, expr):
        """
        Returns an IntVar equal to the expression.
        """
        expr = self._as_expr(expr)
        if isinstance(expr, IntVar):
            return expr
        lb, ub = expr.bounds()
        var = self._aux_var(_ceil(lb), _floor(ub))
        self._post_enforced(self.eq(var, expr), [])
        return var

    def _domain(self, ct):
        """
        Returns the linear part and the domain of a Range or a NotEqual.
        """
        if isinstance(ct, Range):
            lb, ub = ct.linear_bounds()
            linear, _ = self._linear(ct.get_num_expr())
            lb, ub = _ceil(lb), _floor(ub)
            if lb > ub:
                return linear, Domain.from_values([])
            return linear, Domain(lb, ub)
        linear, constant = self._linear(ct.expr)
        value = ct.value - constant
        if not is_integral(value):
            return linear, Domain(cp_model.INT_MIN, cp_model.INT_MAX)
        return linear, Domain(int(value), int(value)).complement()

    # --- Expressions ---
    def _convert(self, value):
        if isinstance(value, Constraint) and value.get_modeler() is self:
            return self.to_expr(value)
        return None

    def to_expr(self, ct):
        """
        Returns the 0-1 variable equal to the truth value of a constraint.
        """
        return self._reify(ct)

    def _bounded(self, expr):
        lb, ub = self._as_expr(expr).bounds()
        return _clip(_ceil(lb)), _clip(_floor(ub))

    def _flatten(self, exprs):
        if len(exprs) == 1 and not is_number(exprs[0]) and \
                not isinstance(exprs[0], IntVar) and \
                hasattr(exprs[0], "__iter__"):
            exprs = exprs[0]
        return [self._as_expr(e) for e in exprs]

    def max(self, *exprs):
        """
        Maximum of expressions, given as arguments or as one iterable.
        """
        exprs = self._flatten(exprs)
        if not exprs:
            raise ModelerError("max() of no expression")
        bounds = [self._bounded(e) for e in exprs]
        target = self._aux_var(max(b[0] for b in bounds),
                               max(b[1] for b in bounds))
        self.cp.add_max_equality(target.handle,
                                 [self._affine(e) for e in exprs])
        return target

    def min(self, *exprs):
        """
        Minimum of expressions, given as arguments or as one iterable.
        """
        exprs = self._flatten(exprs)
        if not exprs:
            raise ModelerError("min() of no expression")
        bounds = [self._bounded(e) for e in exprs]
        target = self._aux_var(min(b[0] for b in bounds),
                               min(b[1] for b in bounds))
        self.cp.add_min_equality(target.handle,
                                 [self._affine(e) for e in exprs])
        return target

    def abs(self, expr):
        lb, ub = self._bounded(expr)
        if lb >= 0:
            low, high = lb, ub
        elif ub <= 0:
            low, high = -ub, -lb
        else:
            low, high = 0, max(-lb, ub)
        target = self._aux_var(low, high)
        self.cp.add_abs_equality(target.handle, self._affine(expr))
        return target

    def _product(self, expr1, expr2):
        lb1, ub1 = self._bounded(expr1)
        lb2, ub2 = self._bounded(expr2)
        products = [lb1 * lb2, lb1 * ub2, ub1 * lb2, ub1 * ub2]
        target = self._aux_var(min(products), max(products))
        self.cp.add_multiplication_equality(
            target.handle, [self._affine(expr1), self._affine(expr2)]
        )
        return target

    def _divisor(self, expr):
        # CP-SAT rejects divisors that may be 0
        if is_number(expr):
            if expr == 0:
                raise ZeroDivisionError("division by zero")
            return self._integer(expr), max(abs(expr), 1)
        lb, ub = self._bounded(expr)
        if lb == ub == 0:
            raise ZeroDivisionError("division by zero")
        if lb <= 0 <= ub:
            domain = Domain(lb, ub).intersection_with(
                Domain(0, 0).complement()
            )
            var = self._register(IntVar(
                self, self.cp.new_int_var_from_domain(domain, ""),
                lb, ub, None, VarType.INT,
            ))
            self._post_enforced(self.eq(var, expr), [])
            return var.handle, max(-lb, ub)
        return self._affine(expr), max(abs(lb), abs(ub))

    def div(self, expr1, expr2):
        """
        Integer division rounded towards 0.
        """
        lb, ub = self._bounded(expr1)
        divisor, _ = self._divisor(expr2)
        bound = max(abs(lb), abs(ub))
        target = self._aux_var(-bound, bound)
        self.cp.add_division_equality(target.handle, self._affine(expr1),
                                      divisor)
        return target

    def mod(self, expr1, expr2):
        """
        Remainder of the integer division rounded towards 0.
        """
        lb, ub = self._bounded(expr1)
        divisor, largest = self._divisor(expr2)
        low = -(largest - 1) if lb < 0 else 0
        high = largest - 1 if ub > 0 else 0
        target = self._aux_var(low, high)
        self.cp.add_modulo_equality(target.handle, self._affine(expr1),
                                    divisor)
        return target

    def element(self, array, index):
        """
        Expression equal to array[index], `array` being a list of numbers
        or expressions.
        """
        array = [self._as_expr(e) for e in array]
        if not array:
            raise ModelerError("element() of an empty array")
        bounds = [self._bounded(e) for e in array]
        target = self._aux_var(min(b[0] for b in bounds),
                               max(b[1] for b in bounds))
        self.cp.add_element(self._affine(index),
                            [self._affine(e) for e in array],
                            target.handle)
        return target

    def count(self, exprs, value):
        """
        Number of expressions equal to `value`.
        """
        return self.sum(self.to_expr(self.eq(e, value)) for e in exprs)

    # --- Constraints ---
    def range(self, lb, expr, ub, name=None):
        if isinstance(expr, CumulFunctionExpr):
            if lb > ub:
                raise ModelerError(f"Empty range [{lb}, {ub}]")
            return CumulConstraint(self, expr, lb, ub, name)
        return Modeler.range(self, lb, expr, ub, name)

    def neq(self, expr1, expr2, name=None):
        if is_number(expr2):
            return NotEqual(self, self._as_expr(expr1), expr2, name)
        if is_number(expr1):
            return NotEqual(self, self._as_expr(expr2), expr1, name)
        return NotEqual(self, self._as_expr(expr1) - expr2, 0, name)

    def lt(self, expr1, expr2, name=None):
        if is_number(expr2):
            return Range(self, -INFINITY, self._as_expr(expr1),
                         math.ceil(expr2) - 1, name)
        if is_number(expr1):
            return Range(self, math.floor(expr1) + 1, self._as_expr(expr2),
                         INFINITY, name)
        return self._relation(expr1, expr2, -INFINITY, -1, name)

    def gt(self, expr1, expr2, name=None):
        return self.lt(expr2, expr1, name)

    def _constraints_of(self, constraints):
        if len(constraints) == 1 and not isinstance(constraints[0],
                                                    Constraint):
            constraints = constraints[0]
        constraints = list(constraints)
        for ct in constraints:
            if not isinstance(ct, Constraint):
                raise ModelerError(f"{ct} is not a constraint")
        return constraints

    def and_(self, *constraints):
        return And(self, self._constraints_of(constraints))

    def or_(self, *constraints):
        return Or(self, self._constraints_of(constraints))

    def not_(self, ct):
        return Not(self, ct)

    def if_then(self, if_ct, then_ct):
        return IfThen(self, if_ct, then_ct)

    def if_then_else(self, if_ct, then_ct, else_ct):
        return And(self, [IfThen(self, if_ct, then_ct),
                          IfThen(self, Not(self, if_ct), else_ct)])

    def constraint(self, value=True):
        """
        The constraint always satisfied (True) or never satisfied (False).
        """
        return BoolConstant(self, value)

    def all_diff(self, *exprs, name=None):
        return AllDiff(self, self._flatten(exprs), name)

    def allowed_assignments(self, exprs, tuples, name=None):
        return AllowedAssignments(self, exprs, tuples, False, name)

    def forbidden_assignments(self, exprs, tuples, name=None):
        return AllowedAssignments(self, exprs, tuples, True, name)

    def inverse(self, f, invf, name=None):
        return Inverse(self, f, invf, name)

    def pack(self, load, where, weights, name=None):
        """
        Bin packing: item i of weight weights[i] goes to bin where[i] and
        load[j] is the total weight of bin j.
        """
        where = list(where)
        if len(where) != len(weights):
            raise ModelerError("pack() expects one weight per item")
        constraints = []
        for j, bin_load in enumerate(load):
            assigned = [self.to_expr(self.eq(w, j)) for w in where]
            constraints.append(
                self.eq(bin_load, self.scal_prod(weights, assigned))
            )
        for w in where:
            constraints.append(self.range(0, w, len(load) - 1))
        return And(self, constraints, name)

    # --- Posting ---
    def _post(self, ct):
        try:
            self._post_enforced(ct, [])
        except TypeError as e:
            raise ModelerError(f"Cannot add '{ct}': {e}") from e

    def _post_enforced(self, ct, enforcement):
        """
        Posts a constraint to CP-SAT, enforced by the literals of
        `enforcement`.
        """
        if isinstance(ct, (Range, NotEqual)):
            linear, domain = self._domain(ct)
            handle = self.cp.add_linear_expression_in_domain(linear, domain)
        elif isinstance(ct, BoolConstant):
            if ct.value:
                ct.handle = True
                return
            handle = self.cp.add_bool_or([])
        elif isinstance(ct, And):
            for child in ct.constraints:
                self._post_enforced(child, enforcement)
            ct.handle = True
            return
        elif isinstance(ct, Or):
            handle = self.cp.add_bool_or(
                [self._reify(c).handle for c in ct.constraints]
            )
        elif isinstance(ct, Not):
            child = ct.constraint
            if isinstance(child, (Range, NotEqual)):
                linear, domain = self._domain(child)
                handle = self.cp.add_linear_expression_in_domain(
                    linear, domain.complement()
                )
            else:
                handle = self.cp.add_bool_and([~self._reify(child).handle])
        elif isinstance(ct, IfThen):
            literal = self._reify(ct.if_ct).handle
            self._post_enforced(ct.then_ct, list(enforcement) + [literal])
            ct.handle = True
            return
        elif isinstance(ct, SchedulingConstraint):
            ct.post(self, enforcement)
            ct.handle = True
            return
        else:
            handle = self._post_global(ct, enforcement)
        if enforcement:
            handle.only_enforce_if(list(enforcement))
        ct.handle = handle

    def _post_global(self, ct, enforcement):
        if enforcement:
            raise UnsupportedOperationError(
                f"Constraint '{ct}' cannot be used in a logical expression"
            )
        if isinstance(ct, AllDiff):
            return self.cp.add_all_different(
                [self._affine(e) for e in ct.exprs]
            )
        if isinstance(ct, AllowedAssignments):
            exprs = [self._affine(e) for e in ct.exprs]
            tuples = [[self._integer(v) for v in t] for t in ct.tuples]
            if ct.forbidden:
                return self.cp.add_forbidden_assignments(exprs, tuples)
            return self.cp.add_allowed_assignments(exprs, tuples)
        if isinstance(ct, Inverse):
            return self.cp.add_inverse(
                [self._var(e).handle for e in ct.f],
                [self._var(e).handle for e in ct.invf],
            )
        raise UnsupportedOperationError(
            f"CpModel does not support {type(ct).__name__} constraints"
        )

    def _reify(self, ct):
        """
        Returns a 0-1 variable b with b == 1 <=> ct holds.
        """
        if ct.get_modeler() is not self:
            raise ModelerError(f"Constraint '{ct}' belongs to another model")
        if id(ct) in self._reified:
            return self._reified[id(ct)][1]
        b = self._aux_var(0, 1)
        literal = b.handle
        if isinstance(ct, (Range, NotEqual)):
            linear, domain = self._domain(ct)
            self.cp.add_linear_expression_in_domain(
                linear, domain
            ).only_enforce_if(literal)
            self.cp.add_linear_expression_in_domain(
                linear, domain.complement()
            ).only_enforce_if(~literal)
        elif isinstance(ct, BoolConstant):
            b.set_bounds(int(ct.value), int(ct.value))
        elif isinstance(ct, (And, Or)):
            children = [self._reify(c).handle for c in ct.constraints]
            negated = [~c for c in children]
            if isinstance(ct, And):
                self.cp.add_bool_and(children).only_enforce_if(literal)
                self.cp.add_bool_or(negated).only_enforce_if(~literal)
            else:
                self.cp.add_bool_or(children).only_enforce_if(literal)
                self.cp.add_bool_and(negated).only_enforce_if(~literal)
        elif isinstance(ct, Not):
            child = self._reify(ct.constraint)
            self.cp.add(b.handle + child.handle == 1)
        elif isinstance(ct, IfThen):
            condition = self._reify(ct.if_ct).handle
            then = self._reify(ct.then_ct).handle
            self.cp.add_bool_or([~condition, then]).only_enforce_if(literal)
            self.cp.add_bool_and([condition, ~then]).only_enforce_if(~literal)
        else:
            raise UnsupportedOperationError(
                f"Constraint '{ct}' cannot be used in a logical expression"
            )
        self._reified[id(ct)] = (ct, b)
        return b

    def _update_range(self, rng):
        raise UnsupportedOperationError(
            "CP-SAT constraints cannot be modified once added, "
            "set the bounds before adding the range"
        )

    # --- Objective ---
    def _objective_expr(self, expr):
        linear, constant = self._linear(expr)
        return linear + self._integer(constant)

    def _set_objective(self, objective):
        expr = objective.get_num_expr()
        if isinstance(expr, StaticLex):
            # every criterion must translate, the first one is posted
            for criterion in expr:
                self._objective_expr(criterion)
            expr = expr.exprs[0]
        self._post_objective(objective.get_sense(), expr)

    def _post_objective(self, sense, expr):
        if expr.is_constant():
            self.cp.clear_objective()
            return
        linear = self._objective_expr(expr)
        if sense.value < 0:
            self.cp.minimize(linear)
        else:
            self.cp.maximize(linear)

    # --- Search ---
    def search_phase(self, variables, var_selector=VarSelector.FIRST,
                     value_selector=ValueSelector.MIN):
        return SearchPhase([self._var(v) for v in variables], var_selector,
                           value_selector)

    def set_search_phases(self, phases):
        """
        Adds the search phases to the model, in order.
        """
        if isinstance(phases, SearchPhase):
            phases = [phases]
        for phase in phases:
            self.cp.add_decision_strategy(
                [v.handle for v in phase.variables],
                phase.var_selector.value,
                phase.value_selector.value,
            )
            self._phases.append(phase)
        # presolve would otherwise fix variables before the phases apply
        self.solver.parameters.keep_all_feasible_solutions_in_presolve = True

    # --- Solution ---
    def solve(self):
        """
        Solves the model, returns True if a solution has been found.
        """
        self._check_alive()
        self._solutions = self._current = None
        self._lex_values = self._lex_bounds = None
        criteria = None
        if self._objective is not None:
            criteria = self._objective.get_num_expr()
        if isinstance(criteria, StaticLex) and not criteria.is_constant():
            logging.info("Solving model '%s' with CP-SAT, %d criteria...",
                         self, len(criteria))
            self._solve_lex(self._objective)
        else:
            logging.info("Solving model '%s' with CP-SAT...", self)
            status = self.solver.solve(self.cp)
            self._status = _STATUS.get(status, SolveStatus.UNKNOWN)

        if self._status.has_solution:
            if self._objective is not None:
                logging.info("%s solution found. Objective: %s",
                             self._status, self.get_objective_values())
            else:
                logging.info("%s solution found.", self._status)
        elif self._status == SolveStatus.INFEASIBLE:
            logging.info("Model is infeasible.")
        elif self._status == SolveStatus.MODEL_INVALID:
            logging.error("Invalid model: %s", self.cp.validate())
        else:
            logging.info("Solver did not find a solution (%s).", self._status)
        return self._status.has_solution

    def _solve_lex(self, objective):
        """
        Optimizes the criteria one after the other. The value reached by a
        criterion is kept by a constraint enforced by a literal that is
        only fixed to true during this solve.
        """
        criteria = objective.get_num_expr()
        minimize = objective.get_sense().value < 0
        status, values, bounds = None, None, []
        literals = []
        try:
            for i, expr in enumerate(criteria):
                if expr.is_constant():
                    bounds.append(expr.constant)
                    continue
                linear = self._objective_expr(expr)
                self._post_objective(objective.get_sense(), expr)
                result = _STATUS.get(self.solver.solve(self.cp),
                                     SolveStatus.UNKNOWN)
                logging.info("Criterion %d: %s", i, result)
                if not result.has_solution:
                    if values is None:
                        status = result
                    break
                values = [self.solver.value(v.handle) for v in self._vars]
                bounds.append(self.solver.best_objective_bound)
                if status in (None, SolveStatus.OPTIMAL):
                    status = result
                value = self.solver.value(linear)
                if result == SolveStatus.OPTIMAL:
                    reached = linear == value
                elif minimize:
                    reached = linear <= value
                else:
                    reached = linear >= value
                literal = self._aux_var(1, 1)
                literals.append(literal)
                self.cp.add(reached).only_enforce_if(literal.handle)
        finally:
            for literal in literals:
                literal.set_bounds(0, 1)
            self._set_objective(objective)

        self._status = status
        if values is not None:
            self._current = values
            self._lex_values = [self.get_value(e) for e in criteria]
            self._lex_bounds = bounds

    def start_new_search(self):
        """
        Enumerates the solutions of a model without objective. Move from one
        solution to the next with next().
        """
        self._check_alive()
        if self._objective is not None:
            raise ModelerError("Cannot enumerate the solutions of a model "
                               "with an objective")
        collector = _SolutionCollector(self._vars, self._solution_limit)
        self.solver.parameters.enumerate_all_solutions = True
        try:
            status = self.solver.solve(self.cp, collector)
        finally:
            self.solver.parameters.enumerate_all_solutions = False
        logging.info("Search found %d solutions (%s)",
                     len(collector.solutions), self.solver.status_name(status))
        self._solutions = collector.solutions
        self._current = None
        self._lex_values = self._lex_bounds = None
        self._status = SolveStatus.NOT_SOLVED

    def next(self):
        """
        Moves to the next solution, returns False when there is none left.
        """
        if not self._solutions:
            self._current = None
            self._status = SolveStatus.NOT_SOLVED
            return False
        self._current = self._solutions.pop(0)
        self._status = SolveStatus.FEASIBLE
        return True

    def end_search(self):
        self._solutions = self._current = None
        self._status = SolveStatus.NOT_SOLVED

    def solutions(self, limit=None):
        """
        Iterates over the solutions of a model without objective. The model
        is positioned on each solution in turn.
        """
        previous = self._solution_limit
        if limit is not None:
            self._solution_limit = limit
        try:
            self.start_new_search()
        finally:
            self._solution_limit = previous
        try:
            while self.next():
                yield self
        finally:
            self.end_search()

    def _var_value(self, var):
        if self._current is not None:
            if var.index >= len(self._current):
                raise ModelerError(
                    f"Variable {var} was created after the solution was found"
                )
            return self._current[var.index]
        return self.solver.value(var.handle)

    def get_value(self, expr):
        if isinstance(expr, Constraint) and id(expr) not in self._reified:
            raise ModelerError(
                f"Constraint '{expr}' was not used as an expression"
            )
        return Modeler.get_value(self, expr)

    def get_min(self, var):
        return self.get_value(var)

    def get_max(self, var):
        return self.get_value(var)

    def is_fixed(self, var):
        """
        True when the variable has a single possible value: its value in
        the solution if there is one, else a domain reduced to one value.
        """
        if not isinstance(var, IntVar) or var.get_modeler() is not self:
            raise ModelerError(f"{var} is not a variable of model '{self}'")
        if self._status.has_solution:
            return True
        return var.get_lb() == var.get_ub()

    def get_objective_value(self):
        self._check_solution()
        if self._lex_values is not None:
            return self._lex_values[0]
        return self.solver.objective_value

    def get_objective_values(self):
        """
        Returns the value of each criterion of the objective.
        """
        self._check_solution()
        if self._lex_values is not None:
            return list(self._lex_values)
        return [self.solver.objective_value]

    def get_best_objective_value(self):
        self._check_solution()
        if self._lex_bounds is not None:
            return self._lex_bounds[0]
        return self.solver.best_objective_bound

    # --- Starting point ---
    def set_starting_point(self, values):
        """
        Hints a full or partial solution to the search. `values` maps
        variables to values, as a dict or as (variable, value) pairs.
        """
        self._check_alive()
        self.cp.clear_hints()
        for var, value in dict(values).items():
            if not isinstance(var, IntVar) or var.get_modeler() is not self:
                raise ModelerError(f"{var} is not a variable of model "
                                   f"'{self}'")
            self.cp.add_hint(var.handle, self._integer(value))

    def clear_starting_point(self):
        self._check_alive()
        self.cp.clear_hints()

    def _statistics(self):
        stats = Modeler._statistics(self)
        stats["interval variables"] = len(self._intervals)
        stats["search phases"] = len(self._phases)
        return stats

    def print_information(self):
        Modeler.print_information(self)
        logging.info("%s", self.cp.model_stats())

    def end(self):
        if not self._ended:
            self._reified.clear()
            self._points.clear()
            self._solutions = self._current = None
        Modeler.end(self)

    # --- Configuration ---
    def _set_time_limit(self, seconds):
        self.solver.parameters.max_time_in_seconds = float(seconds)

    def _set_threads(self, count):
        self.solver.parameters.num_workers = int(count)

    def _set_log_output(self, enabled):
        self.solver.parameters.log_search_progress = bool(enabled)

    def _set_random_seed(self, seed):
        self.solver.parameters.random_seed = int(seed)

    def _set_relative_gap(self, gap):
        self.solver.parameters.relative_gap_limit = float(gap)

    def _set_solution_limit(self, limit):
        self._solution_limit = int(limit) if limit else None

    def _set_search_type(self, search_type):
        key = str(search_type).lower()
        if key not in _SEARCH_TYPES:
            raise ModelerError(f"Unknown search type '{search_type}'")
        self.solver.parameters.search_branching = _SEARCH_TYPES[key]
