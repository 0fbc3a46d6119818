"""House building with earliness and tardiness costs.

The tasks of a house are linked by precedences. Some tasks cost money
when they start before a release date or end after a due date, the
objective minimizes these costs.
"""

from collections.abc import Sequence

from absl import app

from opmodel import CpModel


TASKS = [
    ("masonry", 35),
    ("carpentry", 15),
    ("plumbing", 40),
    ("ceiling", 15),
    ("roofing", 5),
    ("painting", 10),
    ("windows", 5),
    ("facade", 10),
    ("garden", 5),
    ("moving", 5),
]

PRECEDENCES = [
    ("masonry", "carpentry"),
    ("masonry", "plumbing"),
    ("masonry", "ceiling"),
    ("carpentry", "roofing"),
    ("ceiling", "painting"),
    ("roofing", "windows"),
    ("roofing", "facade"),
    ("plumbing", "facade"),
    ("roofing", "garden"),
    ("plumbing", "garden"),
    ("windows", "moving"),
    ("facade", "moving"),
    ("garden", "moving"),
    ("painting", "moving"),
]

# (task, release date, cost per day of earliness)
EARLINESS = [("masonry", 25, 200), ("carpentry", 75, 300),
             ("ceiling", 75, 100)]
# (task, due date, cost per day of tardiness)
TARDINESS = [("moving", 100, 400)]


def add_precedences(model, tasks):
    for before, after in PRECEDENCES:
        model.add(tasks[before] < tasks[after])


def build():
    """Returns the model and the interval of each task."""
    model = CpModel("SchedTime")
    tasks = {name: model.interval_var(size=duration, name=name)
             for name, duration in TASKS}
    add_precedences(model, tasks)

    costs = [weight * model.max(0, release - model.start_of(tasks[name]))
             for name, release, weight in EARLINESS]
    costs += [weight * model.max(0, model.end_of(tasks[name]) - due)
              for name, due, weight in TARDINESS]
    model.add(model.minimize(model.sum(costs)))
    return model, tasks


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    model, tasks = build()
    if model.solve():
        print(f"Solution status: {model.get_status()}")
        print(f"Cost: {model.get_objective_value()}")
        for task in tasks.values():
            print(model.get_domain(task))
    model.end()


if __name__ == "__main__":
    app.run(main)
