"""
Piecewise linear functions of mathematical programming models.
"""

from ..errors import ModelerError


class PiecewiseLinearFunction:
    """
    A piecewise linear function going through `points` (pairs of x, y
    sorted by increasing x), with slope `preslope` before the first point
    and slope `postslope` after the last one.

    Calling the function on an expression returns an expression of the
    model equal to the function value:

        f = model.piecewise_linear(30, [(200, 6000), (400, 22000)], 130)
        model.add(cost == f(quantity))
    """
    def __init__(self, model, preslope, points, postslope):
        self._model = model
        self.preslope = preslope
        self.points = [(float(x), float(y)) for x, y in points]
        self.postslope = postslope
        if not self.points:
            raise ModelerError("A piecewise linear function needs a point")
        for (x1, _), (x2, _) in zip(self.points, self.points[1:]):
            if x2 <= x1:
                raise ModelerError(
                    "Points of a piecewise linear function must be sorted "
                    "by strictly increasing x"
                )

    def breakpoints(self):
        return [x for x, _ in self.points]

    def value_at(self, x):
        """
        Returns the value of the function at the number x.
        """
        first_x, first_y = self.points[0]
        if x <= first_x:
            return first_y + self.preslope * (x - first_x)
        for (x1, y1), (x2, y2) in zip(self.points, self.points[1:]):
            if x <= x2:
                return y1 + (y2 - y1) * (x - x1) / (x2 - x1)
        last_x, last_y = self.points[-1]
        return last_y + self.postslope * (x - last_x)

    def __call__(self, expr):
        return self._model._piecewise(self, expr)

    def __str__(self):
        points = ", ".join(f"({x:g}, {y:g})" for x, y in self.points)
        return f"piecewise({self.preslope}, [{points}], {self.postslope})"
