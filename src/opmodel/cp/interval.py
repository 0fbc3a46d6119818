"""
Interval variables and the scheduling constraints on them.

An interval variable is the time span [start, end) of an activity, of
length `size`. An optional interval may be absent from the schedule, in
which case the constraints on it are ignored.
"""

from ..constants import INTERVAL_MAX, INTERVAL_MIN
from ..constraint import Constraint
from ..errors import ModelerError, UnsupportedOperationError


class IntervalVar:
    """
    An interval variable. Its start, size and end are integer variables
    of the model, and `presence` is the 0-1 variable telling whether an
    optional interval is present (None for a mandatory interval).
    """
    def __init__(self, model, handle, start, size, end, presence=None,
                 name=None):
        self._model = model
        self.handle = handle
        self.start = start
        self.size = size
        self.end = end
        self.presence = presence
        self._name = name or None
        self.index = -1

    def get_modeler(self):
        return self._model

    def get_name(self):
        return self._name

    def set_name(self, name):
        self._name = name or None

    def is_optional(self):
        return self.presence is not None

    def set_present(self):
        if self.presence is not None:
            self.presence.set_bounds(1, 1)

    def set_absent(self):
        if self.presence is None:
            raise ModelerError(f"Interval {self} is not optional")
        self.presence.set_bounds(0, 0)

    def get_start_min(self):
        return self.start.get_lb()

    def get_start_max(self):
        return self.start.get_ub()

    def set_start_min(self, value):
        self.start.set_lb(value)

    def set_start_max(self, value):
        self.start.set_ub(value)

    def get_end_min(self):
        return self.end.get_lb()

    def get_end_max(self):
        return self.end.get_ub()

    def set_end_min(self, value):
        self.end.set_lb(value)

    def set_end_max(self, value):
        self.end.set_ub(value)

    def get_size_min(self):
        return self.size.get_lb()

    def get_size_max(self):
        return self.size.get_ub()

    def set_size_min(self, value):
        self.size.set_lb(value)

    def set_size_max(self, value):
        self.size.set_ub(value)

    # intervals have no intensity function: length == size
    get_length_min = get_size_min
    get_length_max = get_size_max
    set_length_min = set_size_min
    set_length_max = set_size_max

    def __lt__(self, other):
        """a < b: a ends before b starts."""
        if not isinstance(other, IntervalVar):
            return NotImplemented
        return self._model.end_before_start(self, other)

    def __gt__(self, other):
        if not isinstance(other, IntervalVar):
            return NotImplemented
        return self._model.end_before_start(other, self)

    def __hash__(self):
        return id(self)

    def __str__(self):
        if self._name:
            return self._name
        return f"_itv{self.index}"

    def __repr__(self):
        return f"<IntervalVar {self}>"


# --- Scheduling constraints ---
class SchedulingConstraint(Constraint):
    """
    A constraint posting itself on a CpModel. `enforcement` is the list of
    CP-SAT literals that must hold for the constraint to apply.
    """
    def post(self, model, enforcement):
        raise NotImplementedError

    def _check_unconditional(self, enforcement):
        if enforcement:
            raise UnsupportedOperationError(
                f"Constraint '{self}' cannot be used in a logical expression"
            )


# {kind: (point of a, point of b, equality)}
_PRECEDENCES = {
    "start_before_start": ("start", "start", False),
    "start_before_end": ("start", "end", False),
    "end_before_start": ("end", "start", False),
    "end_before_end": ("end", "end", False),
    "start_at_start": ("start", "start", True),
    "start_at_end": ("start", "end", True),
    "end_at_start": ("end", "start", True),
    "end_at_end": ("end", "end", True),
}


class Precedence(SchedulingConstraint):
    """
    A temporal constraint between a point of `a` and a point of `b`, e.g.
    end_before_start: end(a) + delay <= start(b). It only applies when both
    intervals are present.
    """
    def __init__(self, model, kind, a, b, delay=0, name=None):
        if kind not in _PRECEDENCES:
            raise ModelerError(f"Unknown precedence '{kind}'")
        Constraint.__init__(self, model, name)
        self.kind = kind
        self.a = a
        self.b = b
        self.delay = delay

    def post(self, model, enforcement):
        point_a, point_b, equality = _PRECEDENCES[self.kind]
        first = getattr(self.a, point_a) + self.delay
        second = getattr(self.b, point_b)
        if equality:
            ct = model.eq(first, second)
        else:
            ct = model.le(first, second)
        literals = list(enforcement)
        for interval in (self.a, self.b):
            if interval.presence is not None:
                literals.append(interval.presence.handle)
        model._post_enforced(ct, literals)

    def __str__(self):
        delay = f", {self.delay}" if self.delay else ""
        return f"{self.kind}({self.a}, {self.b}{delay})"


class NoOverlap(SchedulingConstraint):
    """
    The present intervals do not overlap in time.
    """
    def __init__(self, model, intervals, name=None):
        Constraint.__init__(self, model, name)
        self.intervals = list(intervals)

    def post(self, model, enforcement):
        self._check_unconditional(enforcement)
        model.cp.add_no_overlap([itv.handle for itv in self.intervals])

    def __str__(self):
        return "no_overlap(" + ", ".join(str(i) for i in self.intervals) + ")"


class Span(SchedulingConstraint):
    """
    `a` covers exactly the present intervals of `bs`: it starts with the
    first one and ends with the last one. It is absent if all of them are.
    """
    def __init__(self, model, a, bs, name=None):
        Constraint.__init__(self, model, name)
        self.a = a
        self.bs = list(bs)

    def post(self, model, enforcement):
        self._check_unconditional(enforcement)
        a, cp = self.a, model.cp
        if not self.bs:
            raise ModelerError(f"Interval {a} cannot span no interval")
        present_a = a.presence.handle if a.presence is not None else None
        optional = [b for b in self.bs if b.presence is not None]
        if present_a is not None:
            # a present <=> one of bs present
            if len(optional) < len(self.bs):
                cp.add_bool_and([present_a])
            for b in optional:
                cp.add_implication(b.presence.handle, present_a)
        if len(optional) == len(self.bs):
            ct = cp.add_bool_or([b.presence.handle for b in optional])
            if present_a is not None:
                ct.only_enforce_if(present_a)

        first = model.min([model.start_of(b, INTERVAL_MAX) for b in self.bs])
        last = model.max([model.end_of(b, INTERVAL_MIN) for b in self.bs])
        literals = [present_a] if present_a is not None else []
        model._post_enforced(model.eq(a.start, first), literals)
        model._post_enforced(model.eq(a.end, last), literals)

    def __str__(self):
        return f"span({self.a}, [" + ", ".join(str(b) for b in self.bs) + "])"


class Alternative(SchedulingConstraint):
    """
    If `a` is present, exactly one interval of `bs` is present and
    synchronized with it. If `a` is absent, all of them are.
    """
    def __init__(self, model, a, bs, name=None):
        Constraint.__init__(self, model, name)
        self.a = a
        self.bs = list(bs)

    def post(self, model, enforcement):
        self._check_unconditional(enforcement)
        a = self.a
        presences = model.sum(model.presence_of(b) for b in self.bs)
        model._post_enforced(model.eq(presences, model.presence_of(a)), [])
        for b in self.bs:
            literals = [b.presence.handle] if b.presence is not None else []
            model._post_enforced(model.eq(a.start, b.start), literals)
            model._post_enforced(model.eq(a.end, b.end), literals)

    def __str__(self):
        return (f"alternative({self.a}, ["
                + ", ".join(str(b) for b in self.bs) + "])")


class IntervalMixin:
    """
    Interval variables and scheduling constraints of a CpModel.
    """

    # --- Interval variables ---
    def interval_var(self, size=None, name=None, optional=False,
                     start_min=INTERVAL_MIN, start_max=INTERVAL_MAX,
                     end_min=INTERVAL_MIN, end_max=INTERVAL_MAX,
                     size_min=0, size_max=INTERVAL_MAX):
        """
        Creates an interval variable. `size` fixes its size, otherwise it
        is in [size_min, size_max]. An optional interval may be absent.
        """
        self._check_alive()
        if size is not None:
            size_min = size_max = size
        start = self._aux_var(start_min, start_max)
        length = self._aux_var(size_min, size_max)
        end = self._aux_var(end_min, end_max)
        label = name or ""
        if optional:
            presence = self._aux_var(0, 1)
            handle = self.cp.new_optional_interval_var(
                start.handle, length.handle, end.handle, presence.handle, label
            )
        else:
            presence = None
            handle = self.cp.new_interval_var(
                start.handle, length.handle, end.handle, label
            )
        interval = IntervalVar(self, handle, start, length, end, presence,
                               name)
        interval.index = len(self._intervals)
        self._intervals.append(interval)
        return interval

    def interval_vars(self, keys, size=None, optional=False, namer=None):
        """
        Creates a dictionary of interval variables indexed by `keys`, or a
        list if `keys` is a count.
        """
        if isinstance(keys, int):
            return [
                self.interval_var(size, namer(i) if namer else None, optional)
                for i in range(keys)
            ]
        return {
            key: self.interval_var(size, namer(key) if namer else None,
                                   optional)
            for key in keys
        }

    def get_intervals(self):
        return list(self._intervals)

    # --- Expressions on intervals ---
    def presence_of(self, interval):
        """
        0-1 expression, 1 when the interval is present.
        """
        if interval.presence is None:
            return self.linear_int_expr(1)
        return interval.presence

    def start_of(self, interval, absent_value=0):
        return self._point_of(interval, interval.start, absent_value)

    def end_of(self, interval, absent_value=0):
        return self._point_of(interval, interval.end, absent_value)

    def size_of(self, interval, absent_value=0):
        return self._point_of(interval, interval.size, absent_value)

    length_of = size_of

    def overlap_length(self, a, b, end=None, absent_value=0):
        """
        Length of the overlap of interval `a` with interval `b`, or with the
        fixed interval [b, end) when `end` is given. Equals `absent_value`
        when one of the intervals is absent.
        """
        if a.get_modeler() is not self:
            raise ModelerError(f"Interval {a} belongs to another model")
        absent_value = self._integer(absent_value)
        if end is None:
            if not isinstance(b, IntervalVar) or b.get_modeler() is not self:
                raise ModelerError(
                    f"overlap_length() needs an interval of model '{self}' "
                    "or a start and an end"
                )
            start, stop = b.start, b.end
            intervals = (a, b)
        else:
            start, stop = self._integer(b), self._integer(end)
            intervals = (a,)
        overlap = self.max(self.min(a.end, stop) - self.max(a.start, start),
                           0)
        literals = [i.presence.handle for i in intervals
                    if i.presence is not None]
        if not literals:
            return overlap

        result = self._aux_var(min(overlap.get_lb(), absent_value),
                               max(overlap.get_ub(), absent_value))
        if len(literals) == 1:
            present = literals[0]
        else:
            present = self._aux_var(0, 1).handle
            self.cp.add_bool_and(literals).only_enforce_if(present)
            self.cp.add_bool_or([~lit for lit in literals]).only_enforce_if(
                ~present
            )
        self.cp.add(result.handle == overlap.handle).only_enforce_if(present)
        self.cp.add(result.handle == absent_value).only_enforce_if(~present)
        return result


    def _point_of(self, interval, var, absent_value):
        if interval.presence is None:
            return var
        absent_value = self._integer(absent_value)
        key = (var.index, absent_value)
        if key not in self._points:
            lb = min(var.get_lb(), absent_value)
            ub = max(var.get_ub(), absent_value)
            point = self._aux_var(lb, ub)
            present = interval.presence.handle
            self._post_enforced(self.eq(point, var), [present])
            self._post_enforced(self.eq(point, absent_value), [~present])
            self._points[key] = point
        return self._points[key]

    # --- Precedences ---
    def start_before_start(self, a, b, delay=0):
        return Precedence(self, "start_before_start", a, b, delay)

    def start_before_end(self, a, b, delay=0):
        return Precedence(self, "start_before_end", a, b, delay)

    def end_before_start(self, a, b, delay=0):
        return Precedence(self, "end_before_start", a, b, delay)

    def end_before_end(self, a, b, delay=0):
        return Precedence(self, "end_before_end", a, b, delay)

    def start_at_start(self, a, b, delay=0):
        return Precedence(self, "start_at_start", a, b, delay)

    def start_at_end(self, a, b, delay=0):
        return Precedence(self, "start_at_end", a, b, delay)

    def end_at_start(self, a, b, delay=0):
        return Precedence(self, "end_at_start", a, b, delay)

    def end_at_end(self, a, b, delay=0):
        return Precedence(self, "end_at_end", a, b, delay)

    # --- Resource constraints ---
    def no_overlap(self, intervals, name=None):
        return NoOverlap(self, intervals, name)

    def span(self, a, bs, name=None):
        return Span(self, a, bs, name)

    def alternative(self, a, bs, name=None):
        return Alternative(self, a, bs, name)

    # --- Solution ---
    def is_present(self, interval):
        self._check_solution()
        if interval.presence is None:
            return True
        return self._var_value(interval.presence) == 1

    def _check_present(self, interval):
        if not self.is_present(interval):
            raise ModelerError(f"Interval {interval} is absent")

    def get_start(self, interval):
        self._check_present(interval)
        return self._var_value(interval.start)

    def get_end(self, interval):
        self._check_present(interval)
        return self._var_value(interval.end)

    def get_size(self, interval):
        self._check_present(interval)
        return self._var_value(interval.size)

    get_length = get_size

    def get_domain(self, interval):
        """
        Returns a printable summary of the interval in the solution, e.g.
        'masonry[1: 0 -- 35 --> 35]'.
        """
        if not self.is_present(interval):
            return f"{interval}[0]"
        return (f"{interval}[1: {self.get_start(interval)} -- "
                f"{self.get_size(interval)} --> {self.get_end(interval)}]")
