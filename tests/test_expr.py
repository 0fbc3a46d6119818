import unittest

from opmodel import CpModel, IntExpr, MpModel, NumExpr, Range
from opmodel import ModelerError, UnsupportedOperationError


class TestExpr(unittest.TestCase):
    def setUp(self):
        self.m = MpModel("expr")
        self.x = self.m.num_var(0, 10, "x")
        self.y = self.m.num_var(0, 10, "y")

    def test_linear_arithmetic(self):
        expr = 2 * self.x + 3 * self.y - 5
        self.assertIsInstance(expr, NumExpr)
        self.assertEqual(expr.get_coefficient(self.x), 2)
        self.assertEqual(expr.get_coefficient(self.y), 3)
        self.assertEqual(expr.get_constant(), -5)
        self.assertEqual(str(expr), "2*x + 3*y - 5")

    def test_subtraction_and_negation(self):
        expr = 10 - self.x - (self.y - self.x)
        self.assertEqual(expr.get_coefficient(self.x), 0)
        self.assertEqual(expr.get_coefficient(self.y), -1)
        self.assertEqual(expr.get_constant(), 10)
        self.assertEqual((-self.x).get_coefficient(self.x), -1)

    def test_operands_are_not_modified(self):
        expr = self.x + 1
        total = expr + self.y
        self.assertEqual(expr.get_coefficient(self.y), 0)
        self.assertEqual(total.get_coefficient(self.y), 1)

    def test_division_by_number(self):
        expr = (4 * self.x + 2) / 2
        self.assertEqual(expr.get_coefficient(self.x), 2)
        self.assertEqual(expr.get_constant(), 1)
        with self.assertRaises(ZeroDivisionError):
            self.x / 0

    def test_bounds(self):
        self.assertEqual((self.x - 2 * self.y + 1).bounds(), (-19, 11))

    def test_comparisons_build_ranges(self):
        ct = self.x + self.y <= 4
        self.assertIsInstance(ct, Range)
        self.assertEqual(ct.get_ub(), 4)
        self.assertEqual(ct.get_lb(), -float("inf"))
        ct = 3 <= self.x
        self.assertIsInstance(ct, Range)
        self.assertEqual(ct.get_lb(), 3)
        ct = self.x == self.y
        self.assertEqual((ct.get_lb(), ct.get_ub()), (0, 0))
        self.assertEqual(ct.get_num_expr().get_coefficient(self.y), -1)

    def test_constraint_has_no_truth_value(self):
        with self.assertRaises(ModelerError):
            bool(self.x <= 1)

    def test_expressions_key_dictionaries(self):
        costs = {self.x: 1, self.y: 2}
        self.assertEqual(costs[self.x], 1)
        self.assertEqual(costs[self.y], 2)

    def test_mixing_models_raises(self):
        other = MpModel("other")
        z = other.num_var(name="z")
        with self.assertRaises(ModelerError):
            self.x + z

    def test_mp_refuses_non_linear(self):
        with self.assertRaises(UnsupportedOperationError):
            self.x * self.y
        with self.assertRaises(UnsupportedOperationError):
            self.x != 1
        with self.assertRaises(UnsupportedOperationError):
            abs(self.x)

    def test_mp_refuses_division_by_expression(self):
        with self.assertRaises(UnsupportedOperationError):
            self.x / self.y
        with self.assertRaises(UnsupportedOperationError):
            6 / self.x

    def test_sum_and_scalar_product(self):
        total = self.m.sum([self.x, self.y, 3])
        self.assertEqual(total.get_constant(), 3)
        prod = self.m.scal_prod([self.x, self.y], [2, 5])
        self.assertEqual(prod.get_coefficient(self.y), 5)
        prod = self.m.scalar_product([2, 5], [self.x, self.y])
        self.assertEqual(prod.get_coefficient(self.x), 2)
        with self.assertRaises(ModelerError):
            self.m.scal_prod([1], [self.x, self.y])


class TestIntExpr(unittest.TestCase):
    def setUp(self):
        self.m = CpModel("intexpr")
        self.a = self.m.int_var(0, 5, "a")
        self.b = self.m.int_var(-3, 3, "b")

    def test_integer_operations_stay_integer(self):
        self.assertIsInstance(2 * self.a - self.b + 1, IntExpr)
        self.assertIsInstance(self.m.sum([self.a, self.b]), IntExpr)
        self.assertNotIsInstance(self.a / 2, IntExpr)
        self.assertNotIsInstance(self.a * 0.5, IntExpr)
        self.assertIsInstance(self.a * 2.0, IntExpr)

    def test_integer_expression_in_place(self):
        expr = self.m.linear_int_expr(1)
        expr.add(self.a, 3)
        self.assertEqual(expr.get_coefficient(self.a), 3)
        with self.assertRaises(ModelerError):
            expr.add(self.a, 0.5)
        with self.assertRaises(ModelerError):
            self.m.linear_int_expr(0.5)

    def test_variables_cannot_be_modified_in_place(self):
        with self.assertRaises(ModelerError):
            self.a.add(1)

    def test_division_by_expression(self):
        self.m.add(self.a == 5)
        self.m.add(self.b == 2)
        quotients = [self.a / self.b, 12 / self.b, (self.a + 2) / self.b]
        self.assertTrue(self.m.solve())
        self.assertEqual(self.m.get_values(quotients), [2, 6, 3])

    def test_domain(self):
        self.assertEqual(list(self.a.get_domain()), [0, 1, 2, 3, 4, 5])
        c = self.m.int_var(name="c", values=[5, 1, 3])
        self.assertEqual(c.get_domain(), [1, 3, 5])
        self.assertEqual((c.get_lb(), c.get_ub()), (1, 5))


if __name__ == "__main__":
    unittest.main()
