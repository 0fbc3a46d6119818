import unittest

from opmodel import CpModel, ModelerError, SolveStatus
from opmodel import UnsupportedOperationError, ValueSelector, VarSelector


class TestCpModel(unittest.TestCase):
    def setUp(self):
        self.m = CpModel("cp")
        self.x = self.m.int_var(0, 10, "x")
        self.y = self.m.int_var(0, 10, "y")

    def solve(self):
        self.assertTrue(self.m.solve())
        self.assertIn(self.m.get_status(),
                      (SolveStatus.OPTIMAL, SolveStatus.FEASIBLE))

    def test_linear_model(self):
        self.m.add(self.x + 2 * self.y <= 14)
        self.m.add(3 * self.x - self.y >= 0)
        self.m.add(self.x - self.y <= 2)
        self.m.add(self.m.maximize(3 * self.x + 4 * self.y))
        self.solve()
        self.assertEqual(self.m.get_status(), SolveStatus.OPTIMAL)
        self.assertEqual(self.m.get_objective_value(), 34)
        self.assertEqual(self.m.get_values([self.x, self.y]), [6, 4])
        self.assertEqual(self.m.get_best_objective_value(), 34)

    def test_integer_only(self):
        with self.assertRaises(UnsupportedOperationError):
            self.m.num_var(0, 1)
        with self.assertRaises(UnsupportedOperationError):
            self.m.add(self.x * 0.5 <= 3)
        with self.assertRaises(UnsupportedOperationError):
            self.m.add(self.m.minimize(self.x * 0.5))
        self.assertEqual(self.m.get_constraints(), [])
        self.assertIsNone(self.m.get_objective())

    def test_integral_float_coefficients(self):
        self.m.add(2.0 * self.x == 6.0)
        self.solve()
        self.assertEqual(self.m.get_value(self.x), 3)

    def test_strict_inequalities_and_not_equal(self):
        self.m.add(self.x < 3)
        self.m.add(self.x > 0.5)
        self.m.add(self.x != 1)
        self.m.add(self.y > self.x)
        self.m.add(self.m.minimize(self.y))
        self.solve()
        self.assertEqual(self.m.get_value(self.x), 2)
        self.assertEqual(self.m.get_value(self.y), 3)

    def test_domain_values(self):
        z = self.m.int_var(name="z", values=[1, 4, 9])
        self.m.add(z >= 2)
        self.m.add(self.m.minimize(z))
        self.solve()
        self.assertEqual(self.m.get_value(z), 4)

    def test_variable_bounds(self):
        self.x.set_bounds(4, 6)
        self.m.add(self.m.maximize(self.x))
        self.solve()
        self.assertEqual(self.m.get_value(self.x), 6)
        with self.assertRaises(ModelerError):
            self.x.set_bounds(7, 5)

    def test_logical_constraints(self):
        self.m.add((self.x == 3) | (self.x == 7))
        self.m.add((self.x >= 5) >> (self.y == 1))
        self.m.add(~(self.y == 1))
        self.m.add(self.m.maximize(self.x + self.y))
        self.solve()
        self.assertEqual(self.m.get_value(self.x), 3)
        self.assertEqual(self.m.get_value(self.y), 10)

    def test_and_if_then_else(self):
        self.m.add(self.m.if_then_else(self.x >= 5, self.y == 0,
                                       self.y == 10))
        self.m.add((self.x <= 6) & (self.x != 5))
        self.m.add(self.m.maximize(self.x * 10 + self.y))
        self.solve()
        self.assertEqual(self.m.get_value(self.x), 6)
        self.assertEqual(self.m.get_value(self.y), 0)

    def test_constraint_as_expression(self):
        cts = [self.x >= 3, self.y >= 3, self.x + self.y <= 8]
        satisfied = self.m.sum(cts)
        self.m.add(satisfied == 3)
        self.solve()
        self.assertEqual(self.m.get_value(satisfied), 3)
        self.assertEqual(self.m.get_value(cts[0]), 1)
        with self.assertRaises(ModelerError):
            self.m.get_value(self.x <= 1)

    def test_bool_constant(self):
        self.m.add(self.m.constraint(True))
        self.m.add((self.x == 4) | self.m.constraint(False))
        self.solve()
        self.assertEqual(self.m.get_value(self.x), 4)
        other = CpModel("false")
        other.add(other.constraint(False))
        self.assertFalse(other.solve())
        self.assertEqual(other.get_status(), SolveStatus.INFEASIBLE)

    def test_non_linear_expressions(self):
        self.m.add(self.x == 7)
        self.m.add(self.y == 3)
        exprs = {
            "max": self.m.max(self.x, self.y, 5),
            "min": self.m.min([self.x, self.y]),
            "abs": abs(self.y - self.x),
            "prod": self.x * self.y,
            "div": self.x // self.y,
            "mod": self.x % self.y,
            "element": self.m.element([10, 20, 30, 40], self.y),
            "count": self.m.count([self.x, self.y, self.x], 7),
        }
        self.solve()
        values = {k: self.m.get_value(e) for k, e in exprs.items()}
        self.assertEqual(values, {
            "max": 7, "min": 3, "abs": 4, "prod": 21, "div": 2, "mod": 1,
            "element": 40, "count": 2,
        })

    def test_division_by_variable_containing_zero(self):
        self.m.add(self.x == 9)
        self.m.add(self.y <= 4)
        q = self.x // self.y
        self.m.add(self.m.minimize(q))
        self.solve()
        self.assertEqual(self.m.get_value(self.y), 4)
        self.assertEqual(self.m.get_value(q), 2)

    def test_all_diff(self):
        xs = self.m.int_vars(4, 0, 3)
        self.m.add(self.m.all_diff(xs))
        self.m.add(xs[0] >= 3)
        self.solve()
        values = self.m.get_values(xs)
        self.assertEqual(sorted(values), [0, 1, 2, 3])
        self.assertEqual(values[0], 3)

    def test_allowed_and_forbidden_assignments(self):
        tuples = [(1, 2), (3, 4), (5, 6)]
        self.m.add(self.m.allowed_assignments([self.x, self.y], tuples))
        self.m.add(self.m.forbidden_assignments([self.x, self.y], [(5, 6)]))
        self.m.add(self.m.maximize(self.x))
        self.solve()
        self.assertEqual(self.m.get_values([self.x, self.y]), [3, 4])
        with self.assertRaises(ModelerError):
            self.m.allowed_assignments([self.x, self.y], [(1, 2, 3)])

    def test_inverse(self):
        f = self.m.int_vars(3, 0, 2)
        invf = self.m.int_vars(3, 0, 2)
        self.m.add(self.m.inverse(f, invf))
        self.m.add(f[0] == 2)
        self.m.add(f[1] == 0)
        self.solve()
        self.assertEqual(self.m.get_values(invf), [1, 2, 0])

    def test_pack(self):
        where = self.m.int_vars(3, 0, 1)
        load = self.m.int_vars(2, 0, 5)
        self.m.add(self.m.pack(load, where, [3, 2, 4]))
        self.solve()
        self.assertEqual(sum(self.m.get_values(load)), 9)
        self.assertTrue(all(v <= 5 for v in self.m.get_values(load)))

    def test_global_constraint_in_logic_is_unsupported(self):
        ct = self.m.all_diff([self.x, self.y]) | (self.x == 1)
        with self.assertRaises(UnsupportedOperationError):
            self.m.add(ct)

    def test_solution_enumeration(self):
        model = CpModel("enumeration")
        a = model.int_var(0, 2, "a")
        b = model.int_var(0, 2, "b")
        model.add(a + b == 2)
        found = sorted((m.get_value(a), m.get_value(b))
                       for m in model.solutions())
        self.assertEqual(found, [(0, 2), (1, 1), (2, 0)])
        self.assertEqual(len(list(model.solutions(limit=2))), 2)
        self.assertEqual(model.get_status(), SolveStatus.NOT_SOLVED)

    def test_enumeration_needs_no_objective(self):
        self.m.add(self.m.minimize(self.x))
        with self.assertRaises(ModelerError):
            self.m.start_new_search()

    def test_search_phase(self):
        phase = self.m.search_phase([self.x, self.y],
                                    VarSelector.FIRST, ValueSelector.MAX)
        self.m.set_search_phases([phase])
        self.m.set_param("SearchType", "fixed")
        self.m.set_param("Threads", 1)
        self.m.add(self.x + self.y <= 12)
        self.solve()
        self.assertEqual(self.m.get_value(self.x), 10)
        self.assertEqual(self.m.get_value(self.y), 2)
        with self.assertRaises(ModelerError):
            self.m.set_param("SearchType", "random")

    def test_refused_range_update_keeps_bounds(self):
        rng = self.m.range(4, self.x, 4)
        self.m.add(rng)
        with self.assertRaises(UnsupportedOperationError):
            rng.set_ub(8)
        self.assertEqual((rng.get_lb(), rng.get_ub()), (4, 4))
        self.solve()
        self.assertEqual(self.m.get_value(self.x), 4)

    def test_refused_objective_change_keeps_objective(self):
        objective = self.m.maximize(self.x)
        self.m.add(objective)
        self.assertIs(objective.get_modeler(), self.m)
        with self.assertRaises(UnsupportedOperationError):
            objective.set_num_expr(self.x * 0.5)
        self.assertEqual(str(objective.get_num_expr()), "x")
        self.solve()
        self.assertEqual(self.m.get_objective_value(), 10)

    def test_min_max_and_fixed(self):
        z = self.m.int_var(3, 3, "z")
        self.assertTrue(self.m.is_fixed(z))
        self.assertFalse(self.m.is_fixed(self.x))
        self.m.add(self.x + self.y == 7)
        self.m.add(self.m.maximize(self.x))
        self.solve()
        self.assertTrue(self.m.is_fixed(self.x))
        self.assertEqual(self.m.get_min(self.x), 7)
        self.assertEqual(self.m.get_max(self.y), 0)
        other = CpModel("other")
        with self.assertRaises(ModelerError):
            self.m.is_fixed(other.int_var(0, 1, "w"))

    def test_print_information(self):
        self.m.add(self.x <= self.y)
        self.m.add(self.m.minimize(self.x))
        with self.assertLogs("absl", level="INFO") as logs:
            self.m.print_information()
        output = "\n".join(logs.output)
        self.assertIn("number of variables: 2", output)
        self.assertIn("number of constraints: 1", output)
        self.assertIn("minimize(x)", output)

    def test_solution_limit(self):
        model = CpModel("limit")
        a = model.int_var(0, 3, "a")
        b = model.int_var(0, 3, "b")
        model.add(a + b == 3)
        model.set_param("SolutionLimit", 2)
        values = [(s.get_value(a), s.get_value(b)) for s in model.solutions()]
        self.assertEqual(len(values), 2)
        for va, vb in values:
            self.assertEqual(va + vb, 3)

    def test_values_during_enumeration(self):
        model = CpModel("enumeration")
        a = model.int_var(0, 2, "a")
        b = model.int_var(0, 2, "b")
        total = a + 2 * b
        model.add(a + b == 2)
        totals = sorted(s.get_value(total) for s in model.solutions())
        self.assertEqual(totals, [2, 3, 4])
        with self.assertRaises(ModelerError):
            for s in model.solutions():
                s.get_value(model.max(a, b))

    def test_starting_point(self):
        self.m.add(self.x + self.y <= 12)
        self.m.set_starting_point({self.x: 3, self.y: 5})
        self.m.solver.parameters.fix_variables_to_their_hinted_value = True
        self.solve()
        self.assertEqual(self.m.get_values([self.x, self.y]), [3, 5])
        with self.assertRaises(ModelerError):
            self.m.set_starting_point([(CpModel("other").int_var(), 1)])

    def test_lexicographic_objective(self):
        self.m.add(self.x + self.y <= 12)
        self.m.add(self.m.maximize(self.m.static_lex(self.x, self.y)))
        self.solve()
        self.assertEqual(self.m.get_status(), SolveStatus.OPTIMAL)
        self.assertEqual(self.m.get_values([self.x, self.y]), [10, 2])
        self.assertEqual(self.m.get_objective_values(), [10, 2])
        self.assertEqual(self.m.get_objective_value(), 10)
        # the optimum of a solve does not constrain the next one
        self.m.add(self.x <= 6)
        self.solve()
        self.assertEqual(self.m.get_objective_values(), [6, 6])

    def test_lexicographic_objective_needs_integers(self):
        with self.assertRaises(UnsupportedOperationError):
            self.m.add(self.m.minimize(
                self.m.static_lex([self.x, 0.5 * self.y])
            ))
        self.assertIsNone(self.m.get_objective())

    def test_infeasible(self):
        self.m.add(self.x + self.y >= 25)
        self.assertFalse(self.m.solve())
        self.assertEqual(self.m.get_status(), SolveStatus.INFEASIBLE)

    def test_parameters(self):
        m = CpModel("params", params={"TimeLimit": 5, "RandomSeed": 3})
        self.assertEqual(m.solver.parameters.max_time_in_seconds, 5)
        self.assertEqual(m.solver.parameters.random_seed, 3)
        m.set_param("LogOutput", False)
        self.assertFalse(m.solver.parameters.log_search_progress)


if __name__ == "__main__":
    unittest.main()
