"""The diet problem: choose quantities of foods meeting nutrient
requirements at minimum cost."""

from collections.abc import Sequence

from absl import app

from opmodel import MpModel


# name, unit cost, min quantity, max quantity
FOODS = [
    ("Roasted Chicken", 0.84, 0, 10),
    ("Spaghetti W/ Sauce", 0.78, 0, 10),
    ("Tomato,Red,Ripe,Raw", 0.27, 0, 10),
    ("Apple,Raw,W/Skin", 0.24, 0, 10),
    ("Grapes", 0.32, 0, 10),
    ("Chocolate Chip Cookies", 0.03, 0, 10),
    ("Lowfat Milk", 0.23, 0, 10),
    ("Raisin Brn", 0.34, 0, 10),
    ("Hotdog", 0.31, 0, 10),
]

# name, min amount, max amount
NUTRIENTS = [
    ("Calories", 2000, 2500),
    ("Calcium", 800, 1600),
    ("Iron", 10, 30),
    ("Vit_A", 5000, 50000),
    ("Dietary_Fiber", 25, 100),
    ("Carbohydrates", 0, 300),
    ("Protein", 50, 100),
]

# amount of each nutrient in a unit of food, in the order of NUTRIENTS
FOOD_NUTRIENTS = {
    "Roasted Chicken": [277.4, 21.9, 1.8, 77.4, 0.0, 0.0, 42.2],
    "Spaghetti W/ Sauce": [358.2, 80.2, 2.3, 3055.2, 11.6, 58.3, 8.2],
    "Tomato,Red,Ripe,Raw": [25.8, 6.2, 0.6, 766.3, 1.4, 5.7, 1.0],
    "Apple,Raw,W/Skin": [81.4, 9.7, 0.2, 73.1, 3.7, 21.0, 0.3],
    "Grapes": [15.1, 3.4, 0.1, 24.0, 0.2, 4.1, 0.2],
    "Chocolate Chip Cookies": [78.1, 6.2, 0.4, 101.8, 0.0, 9.3, 0.9],
    "Lowfat Milk": [121.2, 296.7, 0.1, 500.2, 0.0, 11.7, 8.1],
    "Raisin Brn": [115.1, 12.9, 16.8, 1250.2, 4.0, 27.9, 4.0],
    "Hotdog": [242.1, 23.5, 2.3, 0.0, 0.0, 18.0, 10.4],
}


def build(solver_id="CBC"):
    """
    Returns the model, the quantity of each food and the amount of each
    nutrient.
    """
    model = MpModel("diet", solver_id=solver_id)
    quantities = {}
    for name, _, qmin, qmax in FOODS:
        quantities[name] = model.num_var(qmin, qmax, name)

    amounts = {}
    for n, (nutrient, nmin, nmax) in enumerate(NUTRIENTS):
        amounts[nutrient] = model.sum(
            quantities[food] * FOOD_NUTRIENTS[food][n] for food, *_ in FOODS
        )
        model.add_range(nmin, amounts[nutrient], nmax, nutrient)

    model.add(model.minimize(model.scal_prod(
        [cost for _, cost, _, _ in FOODS],
        [quantities[food] for food, *_ in FOODS],
    )))
    model.print_information()
    return model, quantities, amounts


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    model, quantities, amounts = build()
    if not model.solve():
        print("*** Problem has no solution!")
        model.end()
        return
    print(f"Total cost: {model.get_objective_value()}")
    print("Foods:")
    for name, var in quantities.items():
        print(f"\tFood {name}: {model.get_value(var)}")
    print("Nutrients:")
    for name, amount in amounts.items():
        print(f"\tNutrient {name}: {model.get_value(amount)}")
    model.end()


if __name__ == "__main__":
    app.run(main)
