"""Abstract syntax of the lambda calculus evaluated by lambed.

```
<term> ::= <value>                          ; "Value": int, float or str literal, already normal
         | <name>                           ; "Var": reference, reducible only through environment lookup
         | "|" <name>[":" <ann>] "|" <term> ; "Abs": single-argument abstraction, optionally annotated
         | "{" <term> <term> "}"            ; "App": application of a function to one argument
         | "[" <name> ":=" <term> "]" <term>; "Let": deferred binding, never written by hand (see below)
```

Let nodes are produced by the evaluator in place of beta-reduction: `{|x| M N}` becomes `[x := N] M`, and N is only
forced when x is looked up. A let whose thunk has been forced is "spent" and renders as `[x] M`.

Terms are immutable, so a rewrite always builds new nodes; subterms are never shared between two evaluations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple, Union

Primitive = Union[int, float, str]


class Term(ABC):
    """Superclass of the five term shapes. The set is closed: the evaluator dispatches over exactly these."""

    @property
    @abstractmethod
    def nodes(self):
        """Direct subterms, left to right."""

    def display(self, indents=0):
        """Recursively displays the term tree with readable format.

        Format:
        <Term>(expr='<expr>', nodes=[
            <Term>(expr='<expr>', nodes=[
                ...
                <Term>(expr='<expr>')  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{type(self).__name__}(expr='{self}'"
        if self.nodes:
            result += ", nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"


def _binder(name, annotation):
    return name if annotation is None else f"{name}:{annotation}"


@dataclass(frozen=True)
class Value(Term):
    value: Primitive

    @property
    def nodes(self):
        return []

    def __str__(self):
        if isinstance(self.value, str):
            escaped = self.value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").replace("\t", "\\t")
            return f'"{escaped}"'
        return repr(self.value)


@dataclass(frozen=True)
class Var(Term):
    name: str

    @property
    def nodes(self):
        return []

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Abs(Term):
    name: str
    annotation: Optional[str]
    body: Term

    @property
    def nodes(self):
        return [self.body]

    def __str__(self):
        # |x| |y| M is printed as |x y| M
        params, body = [], self
        while isinstance(body, Abs):
            params.append(_binder(body.name, body.annotation))
            body = body.body
        return f"|{' '.join(params)}| {body}"


@dataclass(frozen=True)
class App(Term):
    function: Term
    argument: Term

    @property
    def nodes(self):
        return [self.function, self.argument]

    def __str__(self):
        # {{f a} b} is printed as {f a b}
        args, fun = [], self
        while isinstance(fun, App):
            args.append(fun.argument)
            fun = fun.function
        return "{" + " ".join(str(term) for term in [fun] + args[::-1]) + "}"


@dataclass(frozen=True)
class Let(Term):
    """pending is (annotation, thunk) while the binding is unforced, None once it has been consumed."""
    name: str
    pending: Optional[Tuple[Optional[str], Term]]
    body: Term

    @property
    def nodes(self):
        if self.pending is None:
            return [self.body]
        return [self.pending[1], self.body]

    def __str__(self):
        if self.pending is None:
            return f"[{self.name}] {self.body}"
        annotation, thunk = self.pending
        return f"[{_binder(self.name, annotation)} := {thunk}] {self.body}"


def abstraction(params, body):
    """Curries params (names, or (name, annotation) pairs) around body: abstraction(["x", "y"], M) == |x| |y| M."""
    for param in reversed(list(params)):
        name, annotation = (param, None) if isinstance(param, str) else param
        body = Abs(name, annotation, body)
    return body


def application(fun, *args):
    """Left-folds args onto fun: application(f, a, b) == {{f a} b}."""
    if not args:
        raise ValueError("application needs at least one argument")
    for arg in args:
        fun = App(fun, arg)
    return fun
