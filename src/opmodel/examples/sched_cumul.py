"""Building five houses with three workers and a cash budget.

Each task needs a worker and costs 200 per day of duration, paid when the
task starts. The budget receives 30000 every 60 days. The objective
minimizes the date at which the last house is finished.
"""

from collections.abc import Sequence

from absl import app

from opmodel import CpModel
from opmodel.examples.sched_time import PRECEDENCES, TASKS


# seconds
TIME_LIMIT = 30
NB_WORKERS = 3
RELEASE_DATES = [31, 0, 90, 120, 90]
NB_PAYMENTS = 5
PAYMENT_PERIOD = 60
PAYMENT = 30000
COST_PER_DAY = 200


def make_house(model, house, release_date, workers, cash):
    """
    Creates the tasks of a house, adds their usage of workers and cash.
    Returns the tasks.
    """
    tasks = {
        name: model.interval_var(size=duration, name=f"H{house}-{name}")
        for name, duration in TASKS
    }
    for task in tasks.values():
        workers += model.pulse(task, 1)
        cash -= model.step_at_start(task, COST_PER_DAY * task.get_size_min())
    tasks["masonry"].set_start_min(release_date)
    for before, after in PRECEDENCES:
        model.add(tasks[before] < tasks[after])
    return tasks


def build():
    """
    Returns the model, the tasks of each house and the workers and cash
    cumul functions.
    """
    model = CpModel("SchedCumul")
    workers = model.cumul_function_expr()
    cash = model.cumul_function_expr()
    for p in range(NB_PAYMENTS):
        cash += model.step(PAYMENT_PERIOD * p, PAYMENT)

    houses = [make_house(model, house, release, workers, cash)
              for house, release in enumerate(RELEASE_DATES)]

    model.add(cash >= 0)
    model.add(workers <= NB_WORKERS)
    model.add(model.minimize(
        model.max(model.end_of(tasks["moving"]) for tasks in houses)
    ))
    return model, houses, workers, cash


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    model, houses, workers, cash = build()
    model.set_param("TimeLimit", TIME_LIMIT)
    if model.solve():
        print(f"Solution status: {model.get_status()}")
        print(f"Solution with objective {model.get_objective_value()}")
        for tasks in houses:
            for task in tasks.values():
                print(model.get_domain(task))
        for segment in model.get_segments(cash):
            print(f"Cash is {segment.value} in "
                  f"[{segment.start} .. {segment.end})")
        for segment in model.get_segments(workers):
            print(f"# Workers is {segment.value} in "
                  f"[{segment.start} .. {segment.end})")
    model.end()


if __name__ == "__main__":
    app.run(main)
