"""Tree zipper over terms. A Location is the focused term, its context (the term with a hole where the focus is,
stored innermost-first as a chain of frames) and the environment of bindings collected on the way down.

Every navigation takes a Location and returns Pro(new_location) if it could move, or Fixed(location) unchanged if it
could not. Binder frames are pushed to the environment and to the context together and are popped together, which is
what lets up() rebuild the Abs/Let node without the context having to store the binder's name.

A Location is consumed by navigation: the environment object is mutated in place and handed to the new Location.
"""

from dataclasses import dataclass

from lambed.pure.environment import Environment
from lambed.pure.term import Abs, App, Let, Term
from lambed.pure.trampoline import Fixed, Pro, fix, fix_result


class Context:
    """Superclass of the context frames."""


@dataclass(frozen=True)
class Top(Context):
    """The focus is the whole term."""


@dataclass(frozen=True)
class AbsCtx(Context):
    """The focus is an abstraction body; name and annotation are in the matching ParamFrame."""
    parent: Context


@dataclass(frozen=True)
class AppLeft(Context):
    """The focus is the function side; right is the argument, not yet visited."""
    parent: Context
    right: Term


@dataclass(frozen=True)
class AppRight(Context):
    """The focus is the argument side; left is the function side."""
    left: Term
    parent: Context


@dataclass(frozen=True)
class LetCtx(Context):
    """The focus is a let body; name and pending thunk are in the matching LetFrame."""
    parent: Context


TOP = Top()


@dataclass
class Location:
    term: Term
    context: Context
    env: Environment

    @classmethod
    def top(cls, term):
        return cls(term, TOP, Environment())

    def get(self):
        return self.term

    def set(self, term):
        return Location(term, self.context, self.env)

    def down(self):
        term, ctx, env = self.term, self.context, self.env
        if isinstance(term, Abs):
            env.push_param(term.name, term.annotation)
            return Pro(Location(term.body, AbsCtx(ctx), env), "descend")
        if isinstance(term, App):
            return Pro(Location(term.function, AppLeft(ctx, term.argument), env), "descend")
        if isinstance(term, Let):
            env.push_let(term.name, term.pending)
            return Pro(Location(term.body, LetCtx(ctx), env), "descend")
        return Fixed(self)

    def up(self):
        term, ctx, env = self.term, self.context, self.env
        if isinstance(ctx, AbsCtx):
            name, annotation = env.pop_param()
            return Pro(Location(Abs(name, annotation, term), ctx.parent, env), "ascend")
        if isinstance(ctx, AppLeft):
            return Pro(Location(App(term, ctx.right), ctx.parent, env), "ascend")
        if isinstance(ctx, AppRight):
            return Pro(Location(App(ctx.left, term), ctx.parent, env), "ascend")
        if isinstance(ctx, LetCtx):
            name, pending = env.pop_let()
            return Pro(Location(Let(name, pending, term), ctx.parent, env), "ascend")
        return Fixed(self)

    def left(self):
        ctx = self.context
        if isinstance(ctx, AppRight):
            return Pro(Location(ctx.left, AppLeft(ctx.parent, self.term), self.env), "left")
        return Fixed(self)

    def right(self):
        ctx = self.context
        if isinstance(ctx, AppLeft):
            return Pro(Location(ctx.right, AppRight(self.term, ctx.parent), self.env), "right")
        return Fixed(self)

    def rebuild(self):
        """Returns the whole term this Location represents, without moving or touching the environment."""
        term, ctx = self.term, self.context
        frames = list(self.env)
        while not isinstance(ctx, Top):
            if isinstance(ctx, AbsCtx):
                frame = frames.pop()
                term = Abs(frame.name, frame.annotation, term)
            elif isinstance(ctx, AppLeft):
                term = App(term, ctx.right)
            elif isinstance(ctx, AppRight):
                term = App(ctx.left, term)
            else:
                frame = frames.pop()
                term = Let(frame.name, frame.pending, term)
            ctx = ctx.parent
        return term

    @staticmethod
    def ascending(step):
        """Wraps step so that a local fixed point moves the focus up a level instead of stopping. The wrapped step is
        only fixed once step is fixed at the top.
        """
        def wrapped(loc):
            result = step(loc)
            if isinstance(result, Fixed):
                return result.value.up()
            return result
        return wrapped

    def fix(self, step):
        """Term at the fixed point of step, ascending between local fixed points."""
        return fix(self, Location.ascending(step)).get()

    def fix_result(self, step, max_steps=None, on_progress=None):
        """Like fix, but bounded by max_steps; exceptions raised by step propagate."""
        return fix_result(self, Location.ascending(step), max_steps, on_progress).get()
