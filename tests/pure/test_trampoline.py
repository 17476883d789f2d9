import unittest

from lambed.lang.error import NotAFunction, StepLimitExceeded
from lambed.pure.trampoline import Fixed, Pro, Trampoline, fix, fix_result


def count_to(limit):
    return lambda n: Pro(n + 1, "inc") if n < limit else Fixed(n)


class FixTestCase(unittest.TestCase):

    def test_equality(self):
        self.assertEqual(Pro(1), Pro(1))
        self.assertEqual(Fixed(1), Fixed(1))
        self.assertNotEqual(Pro(1), Fixed(1))
        self.assertNotEqual(Pro(1), Pro(2))

    def test_rule(self):
        self.assertEqual("beta", Pro(1, "beta").rule)
        self.assertIsNone(Pro(1).rule)


class TrampolineTestCase(unittest.TestCase):

    def test_fix(self):
        cases = {0: 0, 1: 1, 10: 10}
        for limit, expected in cases.items():
            self.assertEqual(expected, fix(0, count_to(limit)))

    def test_no_recursion(self):
        self.assertEqual(100000, fix(0, count_to(100000)))

    def test_steps(self):
        trampoline = Trampoline(count_to(10))
        self.assertEqual(10, trampoline.run(0))
        self.assertEqual(10, trampoline.steps)

        self.assertEqual(10, trampoline.run(10))
        self.assertEqual(0, trampoline.steps)

    def test_max_steps(self):
        self.assertEqual(10, fix_result(0, count_to(10), max_steps=10))

        with self.assertRaises(StepLimitExceeded) as context:
            fix_result(0, count_to(10), max_steps=9)
        self.assertEqual(9, context.exception.max_steps)

    def test_error_short_circuits(self):
        seen = []

        def step(n):
            seen.append(n)
            if n == 3:
                raise NotAFunction(n)
            return Pro(n + 1)

        self.assertRaises(NotAFunction, fix_result, 0, step)
        self.assertEqual([0, 1, 2, 3], seen)

        seen.clear()
        self.assertRaises(NotAFunction, fix, 0, step)
        self.assertEqual([0, 1, 2, 3], seen)

    def test_on_progress(self):
        seen = []
        fix_result(0, count_to(3), on_progress=lambda result: seen.append((result.rule, result.value)))
        self.assertEqual([("inc", 1), ("inc", 2), ("inc", 3)], seen)


if __name__ == '__main__':
    unittest.main()
