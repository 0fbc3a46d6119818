"""
Mathematical programming models solved by an OR-Tools linear solver.

The model builds its variables, ranges and objective directly in a
pywraplp.Solver, CBC being the default backend.
"""

from absl import logging
from ortools.linear_solver import pywraplp

from ..constants import INFINITY, SolveStatus, VarType
from ..constraint import Range
from ..errors import ModelerError, UnsupportedOperationError
from ..expr import IntVar, NumVar
from ..modeler import Modeler
from ..objective import StaticLex
from .piecewise import PiecewiseLinearFunction


_STATUS = {
    pywraplp.Solver.OPTIMAL: SolveStatus.OPTIMAL,
    pywraplp.Solver.FEASIBLE: SolveStatus.FEASIBLE,
    pywraplp.Solver.INFEASIBLE: SolveStatus.INFEASIBLE,
    pywraplp.Solver.UNBOUNDED: SolveStatus.UNBOUNDED,
    pywraplp.Solver.ABNORMAL: SolveStatus.ABNORMAL,
    pywraplp.Solver.MODEL_INVALID: SolveStatus.MODEL_INVALID,
    pywraplp.Solver.NOT_SOLVED: SolveStatus.NOT_SOLVED,
}


def _bound(value):
    # pywraplp represents infinite bounds with Solver.infinity()
    if value >= INFINITY:
        return pywraplp.Solver.infinity()
    if value <= -INFINITY:
        return -pywraplp.Solver.infinity()
    return value


class MpModel(Modeler):
    """
    A linear or mixed integer linear programming model.

    `solver_id` selects the pywraplp backend: 'CBC' (the default), 'SCIP',
    'GLOP', ... Logical constraints and products of variables are not
    supported.
    """
    def __init__(self, name=None, solver_id="CBC", params=None):
        self.solver = pywraplp.Solver.CreateSolver(solver_id)
        if not self.solver:
            raise ModelerError(f"Could not create {solver_id} solver instance")
        self.solver_id = solver_id
        self._solver_params = pywraplp.MPSolverParameters()
        Modeler.__init__(self, name, params)

    # --- Engine hooks ---
    def _new_var(self, var_type, lb, ub, name):
        self._check_alive()
        if lb > ub:
            raise ModelerError(f"Empty domain [{lb}, {ub}] for '{name}'")
        label = name or ""
        if var_type == VarType.FLOAT:
            handle = self.solver.NumVar(_bound(lb), _bound(ub), label)
            return NumVar(self, handle, lb, ub, name, var_type)
        if var_type == VarType.BOOL:
            handle = self.solver.BoolVar(label)
        elif var_type == VarType.INT:
            handle = self.solver.IntVar(_bound(lb), _bound(ub), label)
        else:
            raise ModelerError(f"Unknown variable type {var_type}")
        return IntVar(self, handle, lb, ub, name, var_type)

    def _set_var_bounds(self, var, lb, ub):
        self._check_alive()
        var.handle.SetBounds(_bound(lb), _bound(ub))

    def _post(self, ct):
        if not isinstance(ct, Range):
            raise UnsupportedOperationError(
                f"MpModel only supports linear constraints, got '{ct}'"
            )
        lb, ub = ct.linear_bounds()
        row = self.solver.RowConstraint(_bound(lb), _bound(ub),
                                        ct.get_name() or "")
        for var, coeff in ct.get_num_expr().terms.items():
            if coeff != 0:
                row.SetCoefficient(var.handle, coeff)
        ct.handle = row

    def _update_range(self, rng):
        self._check_alive()
        lb, ub = rng.linear_bounds()
        rng.handle.SetBounds(_bound(lb), _bound(ub))

    def _set_objective(self, objective):
        expr = objective.get_num_expr()
        if isinstance(expr, StaticLex):
            raise UnsupportedOperationError(
                "MpModel does not support lexicographic objectives"
            )
        ort_objective = self.solver.Objective()
        # Clear existing objective terms
        ort_objective.Clear()
        for var, coeff in expr.terms.items():
            if coeff != 0:
                ort_objective.SetCoefficient(var.handle, coeff)
        ort_objective.SetOffset(expr.constant)
        if objective.get_sense().value < 0:
            ort_objective.SetMinimization()
        else:
            ort_objective.SetMaximization()

    def _var_value(self, var):
        return var.handle.solution_value()

    # --- Piecewise linear functions ---
    def piecewise_linear(self, preslope, points, postslope):
        """
        Creates a piecewise linear function going through `points`, with
        slope `preslope` before the first point and `postslope` after the
        last one.
        """
        return PiecewiseLinearFunction(self, preslope, points, postslope)

    def _piecewise(self, function, expr):
        """
        Returns an expression equal to function(expr), using a convex
        combination of breakpoints selected by binary segment variables.
        """
        expr = self._as_expr(expr)
        lb, ub = expr.bounds()
        if lb <= -INFINITY or ub >= INFINITY:
            raise UnsupportedOperationError(
                f"Piecewise linear function of the unbounded expression "
                f"{expr}, set finite bounds on its variables"
            )
        xs = [lb] + [x for x in function.breakpoints() if lb < x < ub]
        if ub > lb:
            xs.append(ub)
        if len(xs) == 1:
            return self.linear_num_expr(function.value_at(lb))
        weights = [self.num_var(0.0, 1.0) for _ in xs]
        segments = [self.bool_var() for _ in xs[1:]]
        self.add(self.sum(weights) == 1)
        self.add(self.sum(segments) == 1)
        self.add(expr == self.scal_prod(xs, weights))
        for i, weight in enumerate(weights):
            # a breakpoint weight is positive only on its adjacent segments
            adjacent = segments[max(0, i - 1):i + 1]
            self.add(weight <= self.sum(adjacent))
        return self.scal_prod([function.value_at(x) for x in xs], weights)

    # --- Solution ---
    def solve(self):
        """
        Solves the model, returns True if a solution has been found.
        """
        self._check_alive()
        logging.info("Solving model '%s' with %s...", self,
                     self.solver.SolverVersion())
        status = self.solver.Solve(self._solver_params)
        self._status = _STATUS.get(status, SolveStatus.UNKNOWN)

        if self._status.has_solution:
            logging.info("%s solution found. Objective: %s",
                         self._status, self.solver.Objective().Value())
        elif self._status == SolveStatus.INFEASIBLE:
            logging.info("Model is infeasible.")
        elif self._status == SolveStatus.UNBOUNDED:
            logging.info("Model is unbounded.")
        else:
            logging.info("Solver did not find a solution (%s).", self._status)
        return self._status.has_solution

    def get_objective_value(self):
        self._check_solution()
        return self.solver.Objective().Value()

    def get_best_objective_value(self):
        self._check_solution()
        return self.solver.Objective().BestBound()

    def get_reduced_cost(self, var):
        self._check_solution()
        return var.handle.reduced_cost()

    def get_dual(self, rng):
        self._check_solution()
        if not rng.is_added():
            raise ModelerError(f"Constraint '{rng}' is not in the model")
        return rng.handle.dual_value()

    def export_as_lp_string(self):
        """
        Returns the model in LP format.
        """
        self._check_alive()
        return self.solver.ExportModelAsLpFormat(False)

    def _statistics(self):
        stats = Modeler._statistics(self)
        stats["solver variables"] = self.solver.NumVariables()
        stats["solver constraints"] = self.solver.NumConstraints()
        return stats

    def end(self):
        if not self._ended:
            self.solver.Clear()
        Modeler.end(self)

    # --- Configuration ---
    def _set_time_limit(self, seconds):
        # OR-Tools uses ms
        self.solver.set_time_limit(int(seconds * 1000))

    def _set_threads(self, count):
        if not self.solver.SetNumThreads(int(count)):
            logging.warning("Solver %s ignores the number of threads",
                            self.solver_id)

    def _set_log_output(self, enabled):
        if enabled:
            self.solver.EnableOutput()
        else:
            self.solver.SuppressOutput()

    def _set_relative_gap(self, gap):
        self._solver_params.SetDoubleParam(
            pywraplp.MPSolverParameters.RELATIVE_MIP_GAP, float(gap)
        )
