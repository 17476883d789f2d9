import unittest

from lambed.lang.error import NotAFunction, StepLimitExceeded
from lambed.pure.environment import Environment, LetFrame, ParamFrame
from lambed.pure.evaluator import step
from lambed.pure.term import Abs, App, Let, Value, Var
from lambed.pure.trampoline import Fixed, Pro
from lambed.pure.zipper import TOP, AbsCtx, AppLeft, AppRight, LetCtx, Location


def moved(result):
    """Unwraps a navigation result that must have made progress."""
    assert isinstance(result, Pro), result
    return result.value


ID = Abs("x", None, Var("x"))


class LocationTestCase(unittest.TestCase):

    def test_top(self):
        loc = Location.top(Value(1))
        self.assertEqual(Value(1), loc.get())
        self.assertEqual(TOP, loc.context)
        self.assertEqual(Environment(), loc.env)

    def test_set(self):
        loc = Location.top(Value(1)).set(Value(2))
        self.assertEqual(Location.top(Value(2)), loc)

    def test_down_abs(self):
        loc = moved(Location.top(Abs("x", "Int", Var("x"))).down())
        self.assertEqual(Var("x"), loc.get())
        self.assertEqual(AbsCtx(TOP), loc.context)
        self.assertEqual([ParamFrame("x", "Int")], list(loc.env))

    def test_down_app(self):
        loc = moved(Location.top(App(ID, Value(1))).down())
        self.assertEqual(ID, loc.get())
        self.assertEqual(AppLeft(TOP, Value(1)), loc.context)
        self.assertEqual(0, len(loc.env))

    def test_down_let(self):
        loc = moved(Location.top(Let("x", (None, Value(1)), Var("x"))).down())
        self.assertEqual(Var("x"), loc.get())
        self.assertEqual(LetCtx(TOP), loc.context)
        self.assertEqual([LetFrame("x", (None, Value(1)))], list(loc.env))

    def test_cannot_move(self):
        should_fail = [
            lambda: Location.top(Value(1)).down(),
            lambda: Location.top(Var("x")).down(),
            lambda: Location.top(ID).up(),
            lambda: Location.top(App(ID, Value(1))).left(),
            lambda: Location.top(App(ID, Value(1))).right(),
        ]
        for navigate in should_fail:
            self.assertIsInstance(navigate(), Fixed)

        loc = Location.top(Value(1))
        self.assertIs(loc, loc.down().value)

    def test_up_reassembles(self):
        cases = [
            Abs("x", "Int", Var("x")),
            App(ID, Value(1)),
            Let("x", (None, Value(1)), Var("x")),
        ]
        for term in cases:
            loc = moved(moved(Location.top(term).down()).up())
            self.assertEqual(Location.top(term), loc, term)

    def test_up_after_take(self):
        loc = moved(Location.top(Let("x", (None, Value(1)), Var("x"))).down())
        __, thunk = loc.env.take("x")
        loc = moved(loc.set(thunk).up())
        self.assertEqual(Location.top(Let("x", None, Value(1))), loc)

    def test_left_right(self):
        loc = moved(Location.top(App(Var("f"), Var("a"))).down())

        right = moved(loc.right())
        self.assertEqual(Var("a"), right.get())
        self.assertEqual(AppRight(Var("f"), TOP), right.context)
        self.assertIsInstance(right.right(), Fixed)

        left = moved(right.left())
        self.assertEqual(Var("f"), left.get())
        self.assertEqual(AppLeft(TOP, Var("a")), left.context)
        self.assertIsInstance(left.left(), Fixed)

        self.assertEqual(App(Var("f"), Var("a")), moved(right.up()).get())

    def test_rebuild(self):
        term = Let("z", (None, Value(0)), Abs("x", None, App(App(Var("f"), Var("a")), Var("x"))))
        loc = Location.top(term)
        for navigate in [Location.down, Location.down, Location.down, Location.down, Location.right]:
            loc = moved(navigate(loc))

        self.assertEqual(Var("a"), loc.get())
        self.assertEqual(term, loc.rebuild())
        self.assertEqual(2, len(loc.env))

    def test_fix(self):
        term = Abs("x", None, App(Var("f"), Var("x")))
        loc = moved(moved(Location.top(term).down()).down())
        self.assertEqual(term, loc.fix(Fixed))
        self.assertEqual(0, len(loc.env))

    def test_fix_result(self):
        rules = []
        loc = Location.top(App(ID, Value(42)))
        self.assertEqual(Value(42), loc.fix_result(step, on_progress=lambda result: rules.append(result.rule)))
        self.assertEqual(["beta", "descend", "force", "ascend", "drop"], rules)

        self.assertEqual(Value(42), loc.fix_result(step, max_steps=5))
        with self.assertRaises(StepLimitExceeded):
            loc.fix_result(step, max_steps=4)

    def test_fix_result_propagates_errors(self):
        with self.assertRaises(NotAFunction) as context:
            Location.top(App(Value(0), Value(1))).fix_result(step)
        self.assertEqual(0, context.exception.value)


if __name__ == '__main__':
    unittest.main()
