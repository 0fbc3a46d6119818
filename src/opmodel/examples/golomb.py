"""Golomb ruler: place marks on a ruler so that all distances between two
marks differ, minimizing the length of the ruler."""

from collections.abc import Sequence

from absl import app
from absl import flags

from opmodel import CpModel


_ORDER = flags.DEFINE_integer("order", 8, "Number of marks.")
_TIME_LIMIT = flags.DEFINE_float("time_limit", 60.0,
                                 "Time limit in seconds.")


def build(order=8):
    """Returns the model and the mark variables."""
    max_length = (order - 1) * (order - 1)
    model = CpModel("Golomb")
    marks = model.int_vars(order, 0, max_length, namer=lambda i: f"marks_{i}")

    distances = [marks[i] - marks[j] for i in range(1, order)
                 for j in range(i)]
    model.add(model.all_diff(distances))

    model.add(marks[0] == 0)
    for i in range(1, order):
        model.add(marks[i] > marks[i - 1])
    # symmetry breaking
    model.add(marks[1] - marks[0] < marks[order - 1] - marks[order - 2])

    model.add(model.minimize(marks[order - 1]))
    return model, marks


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    model, marks = build(_ORDER.value)
    model.set_param("TimeLimit", _TIME_LIMIT.value)
    if model.solve():
        print(f"Solution status: {model.get_status()}")
        print("Position of ruler marks:",
              " ".join(str(v) for v in model.get_values(marks)))
    model.end()


if __name__ == "__main__":
    app.run(main)
