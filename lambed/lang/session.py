"""Session control for lambed. Evaluates one term per logical line, either from a file or from the command line.
Every line gets its own Evaluator run and therefore a fresh environment: nothing carries over between lines.
"""

from lambed.lang.error import GenericException
from lambed.lang.parser import parse
from lambed.pure.evaluator import Evaluator


class Session:
    """Governs a lambed session: parses lines, queues them and evaluates them with the session's step budget."""
    SH_FILE = "<in>"     # command-line interpreter filename
    MAX_STEPS = 100000   # default step budget per term, 0 or None means unbounded

    def __init__(self, error_handler, path, cmd_line, max_steps=MAX_STEPS):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.evaluator = Evaluator(max_steps or None, error_handler)
        self.to_exec = {}         # dict of line num: (source, term) to evaluate
        self.results = []         # head normal forms not yet popped

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            exprs = []
            add_to_prev = False

            try:
                with open(path, "r") as file:
                    for line_num, line in enumerate(file):
                        __, add_to_prev = self.preprocess_line(line, line_num + 1, add_to_prev, exprs)
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            for expr, line_num in exprs:
                with self.error_handler:
                    self.add(expr, line_num)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def scan(line):
        """Returns line cut at its first ';;' and the number of '{' minus the number of '}'. Both ignore anything inside
        a string literal.
        """
        depth = 0
        in_string = False
        idx = 0
        while idx < len(line):
            char = line[idx]
            if in_string:
                if char == "\\":
                    idx += 1  # skip the escaped character
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif line.startswith(";;", idx):
                return line[:idx], depth
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
            idx += 1
        return line, depth

    @staticmethod
    def preprocess_line(line, line_num, add_to_prev, exprs=None):
        """Preprocesses a line from a file or command-line. Strips ';;' comments and surrounding whitespace. exprs keeps
        track of a file's (expr, first line num) pairs and is ignored in command-line mode; add_to_prev tells whether
        line continues the previous one. Returns the updated line and whether the next line continues this one, which is
        the case while '{' outnumbers '}' outside of string literals.
        """
        line = Session.scan(line)[0].strip()
        if not line:
            return line, add_to_prev

        if exprs is not None:
            if add_to_prev and exprs:
                prev, prev_line_num = exprs.pop()
                line = f"{prev} {line}"
                line_num = prev_line_num
            exprs.append((line, line_num))

        return line, Session.scan(line)[1] > 0

    def add(self, expr, line_num):
        """Parses expr and queues it for evaluation. Raises ValueError if expr is empty."""
        if not expr.strip():
            raise ValueError("empty expr")

        self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised
        self.to_exec[line_num] = (expr, parse(expr))
        self.error_handler.remove_line(self.path)

    def run(self):
        """Evaluates every queued term in line order. In command-line mode the results are appended to self.results; in
        file mode each one is printed as soon as it is reached, so the output of earlier lines survives a fatal error on
        a later one. A non-fatal error on one line does not stop the following lines.
        """
        for line_num, (expr, term) in sorted(self.to_exec.items()):
            del self.to_exec[line_num]
            with self.error_handler:
                self.error_handler.register_line(self.path, expr, line_num)
                result = self.evaluator.evaluate(term)
                self.error_handler.remove_line(self.path)

                if self.cmd_line:
                    self.results.append(result)
                else:
                    print(result)

    def pop(self):
        """Returns the oldest result that has not been popped yet."""
        return self.results.pop(0)
