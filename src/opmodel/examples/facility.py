"""Facility location: open warehouses of limited capacity and assign each
store to an open warehouse, minimizing fixed and supply costs."""

from collections.abc import Sequence

from absl import app

from opmodel import CpModel


CAPACITY = [3, 1, 2, 4, 1]
FIXED_COST = [480, 200, 320, 340, 300]
# COST[store][location]
COST = [
    [24, 74, 31, 51, 84],
    [57, 54, 86, 61, 68],
    [57, 67, 29, 91, 71],
    [54, 54, 65, 82, 94],
    [98, 81, 16, 61, 27],
    [13, 92, 34, 94, 87],
    [54, 72, 41, 12, 78],
    [54, 64, 65, 89, 89],
]


def build():
    """Returns the model, the supplier of each store and the open flags."""
    nb_locations, nb_stores = len(CAPACITY), len(COST)
    model = CpModel("Facility")
    suppliers = model.int_vars(nb_stores, 0, nb_locations - 1,
                               namer=lambda s: f"supplier_{s}")
    open_ = model.int_vars(nb_locations, 0, 1, namer=lambda j: f"open_{j}")

    for supplier in suppliers:
        model.add(model.element(open_, supplier) == 1)
    for j in range(nb_locations):
        model.add(model.count(suppliers, j) <= CAPACITY[j])

    fixed_cost = model.scal_prod(FIXED_COST, open_)
    supply_cost = model.sum(model.element(COST[s], suppliers[s])
                            for s in range(nb_stores))
    model.add(model.minimize(fixed_cost + supply_cost))
    return model, suppliers, open_


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    model, suppliers, open_ = build()
    if model.solve():
        print(f"Solution status: {model.get_status()}")
        print(f"Optimal value: {model.get_objective_value()}")
        for j, flag in enumerate(open_):
            print(f"Facility {j} is open: {model.get_value(flag)}")
        for s, supplier in enumerate(suppliers):
            print(f"Store {s} is supplied by {model.get_value(supplier)}")
    model.end()


if __name__ == "__main__":
    app.run(main)
