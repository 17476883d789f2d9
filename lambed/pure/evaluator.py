"""Call-by-need reduction to head normal form.

Beta-reduction does not substitute: `{|x| M N}` is rewritten to the let node `[x := N] M`, and N is only forced when
a lookup of x reaches it. Let nodes are pushed under abstractions (`[x := N] |y| M` becomes `|y| [x := N] M`) or
dropped when they cannot matter any more, and are otherwise entered so their binding is in the environment while the
body is reduced.

Basic program flow:
    1. evaluate wraps the term in a Location at the top of an empty context and environment
    2. step rewrites the focus once, descends into it, or reports a local fixed point
    3. on a local fixed point the focus moves up a level (normal form is only established locally), and the whole
       evaluation ends when the focus is fixed at the top

Let thunks are single-use: forcing one leaves the frame spent, and a second reference to the same name is a
ReferenceNotFound rather than a cached value. Pushing a let under an abstraction only checks the abstraction's own
parameter name; bound variables are never renamed.
"""

from lambed.lang.error import GenericException, NotAFunction
from lambed.pure.environment import ParamFrame
from lambed.pure.term import Abs, App, Let, Value, Var
from lambed.pure.trampoline import Fixed, Pro
from lambed.pure.zipper import Location


def step(loc):
    """Shallow step: one rewrite of loc's focus, a descent into it, or Fixed(loc) if the focus is in head normal form
    within its context.
    """
    term = loc.get()

    if isinstance(term, (Value, Abs)):
        return Fixed(loc)

    if isinstance(term, Var):
        if isinstance(loc.env.find(term.name), ParamFrame):
            return Fixed(loc)  # still abstract, the reference is its own normal form
        __, thunk = loc.env.take(term.name)
        return Pro(loc.set(thunk), "force")

    if isinstance(term, App):
        fun = term.function
        if isinstance(fun, Value):
            raise NotAFunction(fun.value)
        if isinstance(fun, Abs):
            return Pro(loc.set(Let(fun.name, (fun.annotation, term.argument), fun.body)), "beta")
        return loc.down()

    if isinstance(term, Let):
        body = term.body
        if isinstance(body, Value):
            return Pro(loc.set(body), "drop")
        if isinstance(body, Abs):
            if body.name == term.name:
                return Pro(loc.set(body), "drop")
            return Pro(loc.set(Abs(body.name, body.annotation, Let(term.name, term.pending, body.body))), "push")
        return loc.down()

    raise GenericException("cannot evaluate '{}'", repr(term), internal=True)


class Evaluator:
    """Reduces terms to head normal form. Each call to evaluate gets a fresh Location and Environment, so an Evaluator
    can be reused, but not shared between threads (steps is per-instance).

    max_steps bounds the number of progress steps (None is unbounded). If error_handler is given, every progress step
    is registered with it as (rule, rebuilt whole term).
    """

    def __init__(self, max_steps=None, error_handler=None):
        self.max_steps = max_steps
        self.error_handler = error_handler
        self.steps = 0

    def _progress(self, result):
        self.steps += 1
        if self.error_handler is not None:
            self.error_handler.register_step(result.rule, result.value.rebuild)

    def evaluate(self, term):
        self.steps = 0
        return Location.top(term).fix_result(step, self.max_steps, self._progress)


def evaluate(term, max_steps=None):
    """Head normal form of term. Raises an EvalError subclass if evaluation fails."""
    return Evaluator(max_steps).evaluate(term)
