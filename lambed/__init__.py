"""Call-by-need lambda calculus evaluator.

For reference:
- "pure": the evaluator core, independent of any surface syntax (lambed/pure)
- "lang": surface syntax, error reporting, sessions and the interactive shell (lambed/lang)

Basic program flow:
    1. Parser: turns a line of text into a term (lambed/lang/parser.py)
    2. Evaluator: reduces the term to head normal form by iterating a shallow step over a zipper, with a trampoline
       instead of recursion, so deeply nested terms do not grow the Python call stack (lambed/pure/evaluator.py)
    3. Session/Shell: prints the head normal form, or the error, and moves on to the next line
"""

from lambed.lang.error import (EvalError, GenericException, NotAFunction, ParseError, ReferenceNotFound,
                               StepLimitExceeded)
from lambed.lang.parser import parse
from lambed.pure.evaluator import Evaluator, evaluate
from lambed.pure.term import Abs, App, Let, Term, Value, Var, abstraction, application

__version__ = "0.1.0"
