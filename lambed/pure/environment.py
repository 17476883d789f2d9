"""Bindings pending while the zipper is inside binders. Frames are pushed when descending into an Abs or a Let and
popped when ascending back out, in lock-step with the zipper's context, so the innermost scope is always the last
frame.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from lambed.lang.error import GenericException, ReferenceNotFound
from lambed.pure.term import Term, Var


@dataclass
class ParamFrame:
    """Parameter of an enclosing abstraction that has not been applied: it is still abstract."""
    name: str
    annotation: Optional[str]

    def take(self):
        # the parameter stays in scope, a lookup just yields a reference to it
        return self.annotation, Var(self.name)


@dataclass
class LetFrame:
    """Deferred binding pushed by a Let. pending is emptied by the first lookup."""
    name: str
    pending: Optional[Tuple[Optional[str], Term]]

    def take(self):
        pending, self.pending = self.pending, None
        return pending


class Environment:
    """Ordered stack of ParamFrames and LetFrames, outermost first."""

    def __init__(self):
        self.frames = []

    def push_param(self, name, annotation=None):
        self.frames.append(ParamFrame(name, annotation))

    def push_let(self, name, pending):
        self.frames.append(LetFrame(name, pending))

    def pop_param(self):
        """Pops the innermost frame, which must be a ParamFrame, and returns (name, annotation)."""
        frame = self._pop(ParamFrame)
        return frame.name, frame.annotation

    def pop_let(self):
        """Pops the innermost frame, which must be a LetFrame, and returns (name, pending)."""
        frame = self._pop(LetFrame)
        return frame.name, frame.pending

    def _pop(self, kind):
        if not self.frames or not isinstance(self.frames[-1], kind):
            found = type(self.frames[-1]).__name__ if self.frames else "nothing"
            raise GenericException("tried to pop a {}, found {}", (kind.__name__, found), internal=True)
        return self.frames.pop()

    def find(self, name):
        """Returns the innermost frame binding name, or None. Does not consume anything."""
        for frame in reversed(self.frames):
            if frame.name == name:
                return frame
        return None

    def take(self, name):
        """Looks up name innermost-first and consumes it. Returns (annotation, term).

        - ParamFrame: returns a reference to the parameter itself; the frame is left untouched.
        - LetFrame: returns its thunk and leaves the frame spent. A spent frame still shadows outer frames with the
          same name, so a second lookup raises ReferenceNotFound instead of finding an outer binding.
        """
        frame = self.find(name)
        taken = frame.take() if frame is not None else None
        if taken is None:
            raise ReferenceNotFound(name)
        return taken

    def __len__(self):
        return len(self.frames)

    def __iter__(self):
        return iter(self.frames)

    def __eq__(self, other):
        return isinstance(other, Environment) and self.frames == other.frames

    def __repr__(self):
        return f"Environment({self.frames!r})"
