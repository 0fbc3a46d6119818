"""Transportation with piecewise linear shipping costs.

The shipping cost of a route is a convex or a concave piecewise linear
function of the shipped quantity.
"""

from collections.abc import Sequence

from absl import app
from absl import flags

from opmodel import MpModel


_CONVEX = flags.DEFINE_boolean(
    "convex", True, "Use the convex cost function, the concave one otherwise."
)

SUPPLIES = [1000, 850, 1250]
DEMANDS = [900, 1200, 600, 400]

# (preslope, points, postslope)
CONVEX_COST = (30, [(200, 6000), (400, 22000)], 130)
CONCAVE_COST = (120, [(200, 24000), (400, 40000)], 50)


def build(convex=True):
    """Returns the model and the quantities shipped on each route."""
    model = MpModel("transport")
    preslope, points, postslope = CONVEX_COST if convex else CONCAVE_COST
    cost = model.piecewise_linear(preslope, points, postslope)

    shipped = {}
    costs = []
    for s, supply in enumerate(SUPPLIES):
        for d in range(len(DEMANDS)):
            # a route cannot ship more than its supply
            shipped[s, d] = model.num_var(0, supply, f"x_{s}_{d}")
            y = model.num_var(0, name=f"y_{s}_{d}")
            model.add(y == cost(shipped[s, d]))
            costs.append(y)

    for s, supply in enumerate(SUPPLIES):
        model.add(model.sum(shipped[s, d] for d in range(len(DEMANDS)))
                  == supply)
    for d, demand in enumerate(DEMANDS):
        model.add(model.sum(shipped[s, d] for s in range(len(SUPPLIES)))
                  == demand)

    model.add(model.minimize(model.sum(costs)))
    return model, shipped


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    model, shipped = build(_CONVEX.value)
    if model.solve():
        print(f"Solution status: {model.get_status()}")
        for s in range(len(SUPPLIES)):
            values = [model.get_value(shipped[s, d])
                      for d in range(len(DEMANDS))]
            print(f"   {s}: " + "\t".join(f"{v:g}" for v in values))
        print(f"   Cost = {model.get_objective_value()}")
    model.end()


if __name__ == "__main__":
    app.run(main)
