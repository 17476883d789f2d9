"""Iterate-to-fixed-point driver. A step function returns Pro(new_value) when it made progress and Fixed(value) when
it could not; the driver loops instead of recursing, so reduction depth never touches the Python call stack.
"""

from lambed.lang.error import StepLimitExceeded


class Fix:
    """Result of one step. Only the two subclasses below are ever instantiated."""
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        return type(self) is type(other) and self.value == other.value

    def __repr__(self):
        return f"{type(self).__name__}({self.value!r})"


class Pro(Fix):
    """Progress. rule optionally names the rewrite that was applied (used for tracing)."""
    __slots__ = ("rule",)

    def __init__(self, value, rule=None):
        super().__init__(value)
        self.rule = rule


class Fixed(Fix):
    """Fixed point: value is returned unchanged."""
    __slots__ = ()


class Trampoline:
    """Runs step to a fixed point, counting progress results in self.steps.

    Any exception raised by step propagates out of run immediately, abandoning the loop. If max_steps is set, making
    progress more than max_steps times raises StepLimitExceeded. on_progress(result) is called after every Pro.
    """

    def __init__(self, step, max_steps=None, on_progress=None):
        self.step = step
        self.max_steps = max_steps
        self.on_progress = on_progress
        self.steps = 0

    def run(self, value):
        self.steps = 0
        while True:
            result = self.step(value)
            if isinstance(result, Fixed):
                return result.value

            self.steps += 1
            if self.max_steps is not None and self.steps > self.max_steps:
                raise StepLimitExceeded(self.max_steps)
            if self.on_progress is not None:
                self.on_progress(result)
            value = result.value


def fix(value, step):
    """Unbounded fixed point of step starting from value. Any exception raised by step propagates unchanged; fix is
    fix_result without a step bound or progress callback.
    """
    return Trampoline(step).run(value)


def fix_result(value, step, max_steps=None, on_progress=None):
    """Bounded fixed point of step starting from value; see Trampoline. Any exception raised by step propagates
    unchanged, and StepLimitExceeded is raised once step has made progress more than max_steps times.
    """
    return Trampoline(step, max_steps, on_progress).run(value)
