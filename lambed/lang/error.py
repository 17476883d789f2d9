"""Error handling for lambed. Only GenericExceptions should be encountered during evaluation: if another type of error
is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Evaluation errors are terminal for the term that raised them (there is no partial result), but in interactive mode the
handler is not fatal, so the next line starts over with a fresh environment.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be displayed by ErrorHandler. msg is a format string whose slots are
    filled with exprs (bolded); exprs[0] is the offending expr, and start/end delimit the offending span within it.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))
        self.expr = exprs[0]
        self.end = end if end != -1 else len(self.expr)

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(msg.format(*exprs))


class ParseError(GenericException):
    """Malformed surface syntax. exprs[0] is always the whole source so the caret lines up."""


class EvalError(GenericException):
    """Raised by the evaluator. The offending source position is unknown at that point, so there is no diagnosis."""

    def __init__(self, msg, exprs=None):
        super().__init__(msg, exprs, diagnosis=False)


class ReferenceNotFound(EvalError):
    """A name is unbound, or is let-bound but its thunk has already been forced."""

    def __init__(self, name):
        self.name = name
        super().__init__("reference error: '{}' not found", name)


class NotAFunction(EvalError):
    """The function side of an application reduced to a primitive value."""

    def __init__(self, value):
        self.value = value
        super().__init__("type error: '{}' is not a function", repr(value))


class StepLimitExceeded(EvalError):
    def __init__(self, max_steps):
        self.max_steps = max_steps
        super().__init__("no head normal form reached within {} steps", str(max_steps))


class ErrorHandler:
    """Context manager that will silently suppress Python errors and display lambed errors instead. Also the sink for
    reduction steps (see register_step).
    """
    ERROR = "red"
    STEP = "cyan"

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose
        self.origin = (None, None, None)  # (path, line, line num) currently being handled
        self.steps = 0

    def register_file(self, path):
        self.origin = (path, None, None)

    def register_line(self, path, line, line_num):
        """Records where an error would come from. Should be called prior to Session add/run."""
        self.origin = (path, line, line_num)

    def remove_line(self, path):
        """Forgets the line once Session add/run succeeded."""
        self.origin = (path, None, None)

    def register_step(self, rule, expr):
        """Counts a reduction step; prints it if verbose. expr is a callable so the whole term is only rebuilt when it
        is actually going to be shown.
        """
        self.steps += 1
        if self.verbose:
            print(colored(f"{rule}: ", ErrorHandler.STEP, attrs=["bold"]) + str(expr()))

    @staticmethod
    def diagnose(error):
        """Returns offending part of error.expr highlighted and bolded, with a caret line under it."""
        end = max(error.end, error.start + 1)
        highlighted = colored(error.expr[error.start:end], ErrorHandler.ERROR, attrs=["bold"])
        caret = colored("^" + "~" * (end - error.start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return f"  {error.expr[:error.start]}{highlighted}{error.expr[end:]}\n  {' ' * error.start}{caret}"

    def throw(self, error):
        """Prints error, prefixed with the line recorded in self.origin if there is one, then exits if fatal."""
        path, line, line_num = self.origin
        error_msg = f"  File '{path}', line {line_num}:\n    {line}\n" if line else ""

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        self.origin = (path, None, None)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum nesting depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            detail = f"{exc_type.__name__}: {exc_val}".replace("{", "{{").replace("}", "}}")
            self.throw(GenericException(f"unknown error: '{detail}'", internal=True))
            do_exit = True

        return not do_exit
