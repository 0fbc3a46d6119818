import unittest

from opmodel import INFINITY, IntVar, ModelerError, MpModel, NoSolutionError
from opmodel import NumVar, ObjectiveSense, SolveStatus, VarType
from opmodel import UnsupportedOperationError


def build_basic_model():
    m = MpModel("basic")
    x = m.bool_var("x")
    y = m.bool_var("y")
    z = m.int_var(0, 10, "z")
    return m, x, y, z


class TestMpModel(unittest.TestCase):
    def solve_and_assert_optimal(self, model):
        self.assertTrue(model.solve())
        self.assertEqual(model.get_status(), SolveStatus.OPTIMAL)
        self.assertIsNotNone(model.get_objective_value())

    def test_variable_creation(self):
        m = MpModel("var_creation")
        x = m.num_var(0, 5, "x")
        y = m.bool_var("y")
        z = m.int_var(0, 3, "z")
        self.assertIsInstance(x, NumVar)
        self.assertIsInstance(y, IntVar)
        self.assertIsInstance(z, IntVar)
        self.assertEqual(x.get_name(), "x")
        self.assertEqual(y.get_type(), VarType.BOOL)
        self.assertEqual(z.get_type(), VarType.INT)
        self.assertEqual((z.get_lb(), z.get_ub()), (0, 3))
        self.assertIsNone(m.num_var().get_name())
        # Duplicate name should raise
        with self.assertRaises(ModelerError):
            m.num_var(name="x")

    def test_variable_collections(self):
        m = MpModel("collections")
        xs = m.num_vars(["a", "b"], 0, 1, namer=lambda k: f"x_{k}")
        self.assertEqual(sorted(xs), ["a", "b"])
        self.assertEqual(xs["a"].get_name(), "x_a")
        zs = m.int_vars(3, 0, 4)
        self.assertEqual(len(zs), 3)
        bs = m.bool_vars([1, 2], ["u", "v"])
        self.assertEqual(len(bs), 4)
        self.assertIn((2, "v"), bs)

    def test_objective_maximization(self):
        m, x, y, z = build_basic_model()
        m.add(m.maximize(x + y + 2 * z))
        m.add(x + 2 * y + 3 * z <= 7, "c1")
        m.add(x + y >= 1, "c2")
        self.solve_and_assert_optimal(m)
        self.assertAlmostEqual(m.get_objective_value(), 5)
        self.assertAlmostEqual(m.get_value(z), 2)
        self.assertAlmostEqual(m.get_value(x + 2 * z), 5)
        # integral objective: the proved bound is below the next integer
        bound = m.get_best_objective_value()
        self.assertGreaterEqual(bound, 5 - 1e-6)
        self.assertLess(bound, 6)

    def test_constraint_senses(self):
        m, x, y, z = build_basic_model()
        m.add_le(x + y + z, 5, "le")
        m.add_ge(x + 2 * y, 1, "ge")
        m.add_eq(2 * z, 4, "eq")
        m.add(m.maximize(z))
        self.solve_and_assert_optimal(m)
        self.assertAlmostEqual(m.get_value(z), 2)
        self.assertIn(round(m.get_value(x)), (0, 1))
        self.assertEqual([c.get_name() for c in m.get_constraints()],
                         ["le", "ge", "eq"])

    def test_infeasible_model_status(self):
        m = MpModel("infeasible")
        x = m.bool_var("x")
        m.add(x + 0 <= 0, "c1")
        m.add(x + 0 >= 1, "c2")
        m.add(m.maximize(x))
        self.assertFalse(m.solve())
        self.assertEqual(m.get_status(), SolveStatus.INFEASIBLE)
        with self.assertRaises(NoSolutionError):
            m.get_value(x)

    def test_get_var_by_name(self):
        m, x, y, z = build_basic_model()
        self.assertIs(m.get_var_by_name("x"), x)
        self.assertIs(m.get_var_by_name("y"), y)
        with self.assertRaises(ModelerError):
            m.get_var_by_name("nope")
        z.set_name("w")
        self.assertIs(m.get_var_by_name("w"), z)

    def test_invalid_items(self):
        m, x, y, z = build_basic_model()
        with self.assertRaises(ModelerError):
            m.add("not a constraint")
        with self.assertRaises(ModelerError):
            m.range(3, x, 1)
        ct = x <= 1
        m.add(ct)
        with self.assertRaises(ModelerError):
            m.add(ct)

    def test_range_bounds_update(self):
        m = MpModel("range")
        x = m.num_var(0, 10, "x")
        rng = m.range(1, x + 1, 4)
        m.add(rng)
        m.add(m.maximize(x))
        self.solve_and_assert_optimal(m)
        self.assertAlmostEqual(m.get_value(x), 3)
        rng.set_ub(6)
        self.solve_and_assert_optimal(m)
        self.assertAlmostEqual(m.get_value(x), 5)

    def test_variable_bounds_update(self):
        m = MpModel("bounds")
        x = m.num_var(0, 10, "x")
        m.add(m.maximize(x))
        x.set_ub(7)
        self.solve_and_assert_optimal(m)
        self.assertAlmostEqual(m.get_value(x), 7)

    def test_objective_changes(self):
        m = MpModel("objective")
        x = m.num_var(0, 10, "x")
        y = m.num_var(0, 10, "y")
        m.add(x + y <= 12)
        objective = m.maximize(x + 2 * y + 1)
        m.add(objective)
        self.solve_and_assert_optimal(m)
        self.assertAlmostEqual(m.get_objective_value(), 23)
        objective.set_sense(ObjectiveSense.MINIMIZE)
        self.solve_and_assert_optimal(m)
        self.assertAlmostEqual(m.get_objective_value(), 1)
        # adding another objective replaces the active one
        m.add(m.maximize(x))
        self.solve_and_assert_optimal(m)
        self.assertAlmostEqual(m.get_objective_value(), 10)

    def test_lexicographic_objective_is_unsupported(self):
        m, x, y, z = build_basic_model()
        with self.assertRaises(UnsupportedOperationError):
            m.add(m.maximize(m.static_lex(x, z)))
        self.assertIsNone(m.get_objective())

    def test_lp_duals_and_reduced_costs(self):
        m = MpModel("lp", solver_id="GLOP")
        x = m.num_var(0, INFINITY, "x")
        y = m.num_var(0, INFINITY, "y")
        c1 = m.le(x + y, 4)
        m.add(c1)
        m.add(m.maximize(3 * x + y))
        self.solve_and_assert_optimal(m)
        self.assertAlmostEqual(m.get_objective_value(), 12)
        self.assertAlmostEqual(m.get_dual(c1), 3)
        self.assertAlmostEqual(m.get_reduced_cost(y), -2)

    def test_piecewise_linear(self):
        m = MpModel("piecewise")
        f = m.piecewise_linear(1, [(2, 2), (4, 8)], 0)
        self.assertEqual(f.value_at(0), 0)
        self.assertEqual(f.value_at(3), 5)
        self.assertEqual(f.value_at(10), 8)
        x = m.num_var(0, 6, "x")
        y = m.num_var(-INFINITY, INFINITY, "y")
        m.add(y == f(x))
        m.add(x == 3)
        m.add(m.minimize(y))
        self.solve_and_assert_optimal(m)
        self.assertAlmostEqual(m.get_value(y), 5)

    def test_piecewise_needs_bounded_argument(self):
        m = MpModel("piecewise")
        f = m.piecewise_linear(1, [(2, 2)], 0)
        x = m.num_var(0, INFINITY, "x")
        with self.assertRaises(ModelerError):
            f(x)
        with self.assertRaises(ModelerError):
            m.piecewise_linear(1, [(2, 2), (1, 0)], 0)

    def test_set_param(self):
        m = MpModel("params", params={"TimeLimit": 10})
        self.assertEqual(m.get_param("timelimit"), 10)
        m.set_param("relative_gap", 0.01)
        self.assertEqual(m.get_param("RelativeGap"), 0.01)
        with self.assertRaises(ModelerError):
            m.set_param("NoSuchParameter", 1)

    def test_unbounded_model(self):
        m = MpModel("unbounded")
        x = m.num_var(0, INFINITY, "x")
        m.add(m.maximize(x))
        m.solve()
        self.assertIn(
            m.get_status(),
            (SolveStatus.UNBOUNDED, SolveStatus.INFEASIBLE,
             SolveStatus.ABNORMAL, SolveStatus.OPTIMAL),
        )

    def test_end(self):
        m, x, y, z = build_basic_model()
        m.end()
        with self.assertRaises(ModelerError):
            m.num_var()
        with self.assertRaises(ModelerError):
            m.solve()

    def test_export_as_lp_string(self):
        m, x, y, z = build_basic_model()
        m.add(x + y <= 1, "c1")
        m.add(m.maximize(x + z))
        self.assertIn("c1", m.export_as_lp_string())


if __name__ == "__main__":
    unittest.main()
