"""
Cumul functions: step functions of time built from interval variables.

A cumul function is a sum of elementary functions: pulses (a height
during an interval), steps at the start or end of an interval and steps
at a fixed time. Constraining a cumul function bounds its value at every
point in time, which models resources (workers, cash, stock levels...).
"""

import collections

from absl import logging
from ortools.sat.python import cp_model

from ..constants import INFINITY, INTERVAL_MAX, INTERVAL_MIN
from ..constraint import Constraint
from ..errors import ModelerError, UnsupportedOperationError
from ..expr import is_number
from .interval import IntervalVar, SchedulingConstraint


Segment = collections.namedtuple("Segment", ["start", "end", "value"])


class _Elementary:
    """
    An elementary cumul function. `height` is an int or, for pulses of
    variable height, an integer variable of the model.
    """
    def __init__(self, kind, interval, height, time=None):
        self.kind = kind
        self.interval = interval
        self.height = height
        self.time = time

    def __str__(self):
        if self.kind == "step":
            return f"step({self.time}, {self.height})"
        return f"{self.kind}({self.interval}, {self.height})"


class CumulFunctionExpr:
    """
    A sum of elementary cumul functions, each with a sign. Built with `+`,
    `-` and unary `-`, constrained with `<=`, `>=` or `model.range()`.
    """
    def __init__(self, model, terms=()):
        self._model = model
        # list of (sign, _Elementary)
        self.terms = list(terms)

    def get_modeler(self):
        return self._model

    def initial_level(self):
        """
        Value of the function at the origin, set by the fixed steps at or
        before INTERVAL_MIN.
        """
        return sum(sign * e.height for sign, e in self.terms
                   if e.kind == "step" and e.time <= INTERVAL_MIN)

    def _other_terms(self, other):
        if isinstance(other, CumulFunctionExpr):
            if other._model is not self._model:
                raise ModelerError(
                    "Cannot combine cumul functions of different models"
                )
            return other.terms
        if is_number(other) and other == 0:
            return []
        return None

    def __add__(self, other):
        terms = self._other_terms(other)
        if terms is None:
            return NotImplemented
        return CumulFunctionExpr(self._model, self.terms + terms)

    def __radd__(self, other):
        # sum() starts from 0
        return self.__add__(other)

    def __sub__(self, other):
        terms = self._other_terms(other)
        if terms is None:
            return NotImplemented
        negated = [(-sign, e) for sign, e in terms]
        return CumulFunctionExpr(self._model, self.terms + negated)

    def __iadd__(self, other):
        terms = self._other_terms(other)
        if terms is None:
            return NotImplemented
        self.terms.extend(terms)
        return self

    def __isub__(self, other):
        terms = self._other_terms(other)
        if terms is None:
            return NotImplemented
        self.terms.extend((-sign, e) for sign, e in terms)
        return self

    def __neg__(self):
        return CumulFunctionExpr(self._model,
                                 [(-sign, e) for sign, e in self.terms])

    def __le__(self, other):
        if not is_number(other):
            return NotImplemented
        return self._model.range(-INFINITY, self, other)

    def __ge__(self, other):
        if not is_number(other):
            return NotImplemented
        return self._model.range(other, self, INFINITY)

    def __hash__(self):
        return id(self)

    def __str__(self):
        if not self.terms:
            return "0"
        text = " + ".join(
            str(e) if sign > 0 else f"-{e}" for sign, e in self.terms
        )
        return text.replace("+ -", "- ")

    def __repr__(self):
        return f"<CumulFunctionExpr {self}>"


def _events(function):
    """
    Returns the level of a cumul function at the origin, then its later
    changes as (time, change, presence literal or None) with fixed changes.
    """
    initial, events = 0, []
    for sign, e in function.terms:
        if not isinstance(e.height, int):
            raise UnsupportedOperationError(
                f"Cumul function '{function}' with variable heights can "
                "only be bounded from above"
            )
        height = sign * e.height
        if e.kind == "step":
            if e.time <= INTERVAL_MIN:
                initial += height
            else:
                events.append((e.time, height, None))
            continue
        interval = e.interval
        active = None if interval.presence is None else \
            interval.presence.handle
        if e.kind == "pulse":
            events.append((interval.start.handle, height, active))
            events.append((interval.end.handle, -height, active))
        elif e.kind == "step_at_start":
            events.append((interval.start.handle, height, active))
        else:
            events.append((interval.end.handle, height, active))
    return initial, events


def _level_at(model, initial, events, point):
    """
    Returns the value of a cumul function at time `point`, a CP-SAT
    expression.
    """
    literals, changes = [], []
    for time, change, active in events:
        if time is point:
            known = True
        elif isinstance(time, int) and isinstance(point, int):
            known = time <= point
        else:
            known = None
        if known is False:
            continue
        if known:
            if active is None:
                initial += change
                continue
            happened = active
        else:
            before = model._aux_var(0, 1).handle
            model.cp.add(time <= point).only_enforce_if(before)
            model.cp.add(time > point).only_enforce_if(~before)
            if active is None:
                happened = before
            else:
                happened = model._aux_var(0, 1).handle
                model.cp.add_bool_and([active, before]).only_enforce_if(
                    happened
                )
                model.cp.add_bool_or([~active, ~before]).only_enforce_if(
                    ~happened
                )
        literals.append(happened)
        changes.append(change)
    if not literals:
        return initial
    return cp_model.LinearExpr.weighted_sum(literals, changes) + initial


def _post_bounds(model, level, lb, ub, enforcement):
    if lb > -INFINITY:
        model.cp.add(level >= model._integer(lb)).only_enforce_if(
            enforcement
        )
    if ub < INFINITY:
        model.cp.add(level <= model._integer(ub)).only_enforce_if(
            enforcement
        )


class CumulConstraint(SchedulingConstraint):
    """
    lb <= f(t) <= ub at every time t.
    """
    def __init__(self, model, function, lb, ub, name=None):
        Constraint.__init__(self, model, name)
        self.function = function
        self.lb = lb
        self.ub = ub

    def _is_resource(self):
        # only non negative pulses, bounded from above
        if self.lb > 0 or self.ub >= INFINITY:
            return False
        for sign, e in self.function.terms:
            if e.kind != "pulse" or sign < 0:
                return False
            if not isinstance(e.height, int) and e.height.get_lb() < 0:
                return False
            if isinstance(e.height, int) and e.height < 0:
                return False
        return True

    def post(self, model, enforcement):
        self._check_unconditional(enforcement)
        # steps at the origin hold over the whole horizon, everything else
        # starts from 0
        initial = self.function.initial_level()
        if not self.lb <= initial <= self.ub:
            logging.warning("Constraint '%s' cannot be satisfied", self)
            model.cp.add_bool_or([])
            return
        if self._is_resource():
            intervals = [e.interval.handle for _, e in self.function.terms]
            demands = [
                e.height if isinstance(e.height, int) else e.height.handle
                for _, e in self.function.terms
            ]
            model.cp.add_cumulative(intervals, demands,
                                    model._integer(self.ub))
            return
        self._post_reservoir(model)

    def _post_reservoir(self, model):
        initial, events = _events(self.function)
        if not events:
            return
        times = [time for time, _, _ in events]
        changes = [change for _, change, _ in events]
        actives = [model._true_literal() if active is None else active
                   for _, _, active in events]
        # reservoir levels start at 0, shift the bounds by the initial level
        total = sum(abs(change) for change in changes)
        if self.lb <= -INFINITY:
            min_level = -total
        else:
            min_level = model._integer(self.lb) - initial
        if self.ub >= INFINITY:
            max_level = total
        else:
            max_level = model._integer(self.ub) - initial
        model.cp.add_reservoir_constraint_with_active(
            times, changes, actives, min_level, max_level
        )

    def __str__(self):
        if self.lb <= -INFINITY:
            return f"{self.function} <= {self.ub}"
        if self.ub >= INFINITY:
            return f"{self.function} >= {self.lb}"
        return f"{self.lb} <= {self.function} <= {self.ub}"


class AlwaysIn(SchedulingConstraint):
    """
    vmin <= f(t) <= vmax for every t of a fixed window [start, end), or of
    an interval variable when it is present.
    """
    def __init__(self, model, function, window, vmin, vmax, name=None):
        Constraint.__init__(self, model, name)
        self.function = function
        self.window = window
        self.vmin = vmin
        self.vmax = vmax

    def post(self, model, enforcement):
        self._check_unconditional(enforcement)
        initial, events = _events(self.function)
        if isinstance(self.window, IntervalVar):
            start = self.window.start.handle
            end = self.window.end.handle
            if self.window.presence is not None:
                enforcement = [self.window.presence.handle]
        else:
            start, end = self.window

        # the level only changes at events: bound it at the window start
        # and at every event inside the window
        level = _level_at(model, initial, events, start)
        _post_bounds(model, level, self.vmin, self.vmax, enforcement)
        for time, _, active in events:
            condition = list(enforcement)
            if active is not None:
                condition.append(active)
            if isinstance(time, int) and isinstance(start, int):
                if time < start:
                    continue
            else:
                # false only when the event is before the window
                inside = model._aux_var(0, 1).handle
                model.cp.add(time < start).only_enforce_if(~inside)
                condition.append(inside)
            if isinstance(time, int) and isinstance(end, int):
                if time >= end:
                    continue
            else:
                inside = model._aux_var(0, 1).handle
                model.cp.add(time >= end).only_enforce_if(~inside)
                condition.append(inside)
            level = _level_at(model, initial, events, time)
            _post_bounds(model, level, self.vmin, self.vmax, condition)

    def __str__(self):
        if isinstance(self.window, IntervalVar):
            window = str(self.window)
        else:
            window = f"[{self.window[0]}, {self.window[1]})"
        return (f"always_in({self.function}, {window}, {self.vmin}, "
                f"{self.vmax})")


class CumulMixin:
    """
    Cumul function factories of a CpModel.
    """
    def cumul_function_expr(self):
        """
        Returns the cumul function equal to 0 everywhere.
        """
        return CumulFunctionExpr(self)

    def _elementary(self, kind, interval, height, time=None):
        if interval is not None and interval.get_modeler() is not self:
            raise ModelerError(f"Interval {interval} belongs to another model")
        return CumulFunctionExpr(
            self, [(1, _Elementary(kind, interval, height, time))]
        )

    def pulse(self, interval, height, height_max=None):
        """
        Function equal to `height` during the interval, 0 elsewhere. With a
        `height_max`, the height is a value of [height, height_max] chosen
        by the solver.
        """
        if height_max is None or height_max == height:
            return self._elementary("pulse", interval, self._integer(height))
        if height > height_max:
            raise ModelerError(f"Empty height range [{height}, {height_max}]")
        var = self._aux_var(height, height_max)
        return self._elementary("pulse", interval, var)

    def step_at_start(self, interval, height):
        return self._elementary("step_at_start", interval,
                                self._integer(height))

    def step_at_end(self, interval, height):
        return self._elementary("step_at_end", interval,
                                self._integer(height))

    def step(self, time, height):
        """
        Function equal to `height` from `time` on.
        """
        return self._elementary("step", None, self._integer(height),
                                self._integer(time))

    def always_in(self, function, window, vmin, vmax, name=None):
        """
        Bounds a cumul function to [vmin, vmax] over a window: an interval
        variable (only when it is present) or a fixed (start, end) pair.
        """
        if not isinstance(function, CumulFunctionExpr) or \
                function.get_modeler() is not self:
            raise ModelerError(f"{function} is not a cumul function of "
                               f"model '{self}'")
        if vmin > vmax:
            raise ModelerError(f"Empty range [{vmin}, {vmax}]")
        if isinstance(window, IntervalVar):
            if window.get_modeler() is not self:
                raise ModelerError(f"Interval {window} belongs to another "
                                   "model")
        else:
            start, end = window
            window = (self._integer(start), self._integer(end))
            if window[0] > window[1]:
                raise ModelerError(f"Empty window [{start}, {end})")
        return AlwaysIn(self, function, window, vmin, vmax, name)

    def get_segments(self, function):

        """
        Returns the value of a cumul function in the solution as a list of
        segments [start, end) covering [INTERVAL_MIN, INTERVAL_MAX).
        """
        self._check_solution()
        deltas = collections.defaultdict(int)
        for sign, e in function.terms:
            if e.interval is not None and not self.is_present(e.interval):
                continue
            if isinstance(e.height, int):
                height = sign * e.height
            else:
                height = sign * self._var_value(e.height)
            if e.kind == "pulse":
                deltas[self._var_value(e.interval.start)] += height
                deltas[self._var_value(e.interval.end)] -= height
            elif e.kind == "step_at_start":
                deltas[self._var_value(e.interval.start)] += height
            elif e.kind == "step_at_end":
                deltas[self._var_value(e.interval.end)] += height
            else:
                deltas[e.time] += height

        segments = []
        start, level = INTERVAL_MIN, 0
        for time in sorted(deltas):
            if deltas[time] == 0:
                continue
            if time > start:
                segments.append(Segment(start, time, level))
                start = time
            level += deltas[time]
        segments.append(Segment(start, INTERVAL_MAX, level))
        return segments
