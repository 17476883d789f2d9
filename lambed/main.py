"""Uses the lambed evaluator to interpret files of terms or run in command-line mode. Also uses the error handling
context manager. Called from the lambed console script and from `python -m lambed`.
"""

import argparse

from lambed.lang.error import ErrorHandler
from lambed.lang.session import Session
from lambed.lang.shell import Shell


def main(argv=None):
    """Runs lambed. argv defaults to sys.argv[1:]."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="lambed", description="call-by-need lambda calculus evaluator")
        parser.add_argument("file", help="file to evaluate, one term per line (if empty, goes to command-line mode)",
                            nargs="?")
        parser.add_argument("--max-steps", type=int, default=Session.MAX_STEPS, metavar="N",
                            help="give up on a term after N reduction steps, 0 for no limit (default %(default)s)")
        parser.add_argument("--trace", action="store_true", help="print every reduction step")
        args = parser.parse_args(argv)

        if args.max_steps < 0:
            parser.error("--max-steps cannot be negative")
        error_handler.verbose = args.trace

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, max_steps=args.max_steps)
            sess.run()
        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, max_steps=args.max_steps)).cmdloop()
