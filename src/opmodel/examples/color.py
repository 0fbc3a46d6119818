"""Map coloring: neighboring countries get different colors, four colors
at most."""

from collections.abc import Sequence

from absl import app

from opmodel import CpModel


COUNTRIES = ["Belgium", "Denmark", "France", "Germany", "Luxembourg",
             "Netherlands"]
COLORS = ["Yellow", "Red", "Green", "Blue"]
NEIGHBORS = [
    ("Belgium", "France"),
    ("Belgium", "Germany"),
    ("Belgium", "Netherlands"),
    ("Belgium", "Luxembourg"),
    ("Denmark", "Germany"),
    ("France", "Germany"),
    ("France", "Luxembourg"),
    ("Germany", "Luxembourg"),
    ("Germany", "Netherlands"),
]


def build():
    """Returns the model and the color variable of each country."""
    model = CpModel("Color")
    colors = model.int_vars(COUNTRIES, 0, len(COLORS) - 1,
                            namer=lambda c: c)
    for a, b in NEIGHBORS:
        model.add(colors[a] != colors[b])
    return model, colors


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    model, colors = build()
    if model.solve():
        print(f"Solution status: {model.get_status()}")
        for country in COUNTRIES:
            print(f"\t{country}: {COLORS[model.get_value(colors[country])]}")
    model.end()


if __name__ == "__main__":
    app.run(main)
