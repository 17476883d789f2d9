"""Handles interactive/command-line mode for lambed. Uses cmd as backend, and readline (when the platform has it) for
line editing and a persistent history.
"""

import cmd
import os

try:
    import readline
except ImportError:
    readline = None

from lambed.lang.error import GenericException


class Shell(cmd.Cmd):
    """Lambda calculus interpreter shell."""
    intro = "lambed: call-by-need lambda calculus :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations
    HISTORY_FILE = os.path.expanduser("~/.lambed_history")

    def __init__(self, sess, *args, history_file=HISTORY_FILE, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.history_file = history_file

        self._tmp_line = ""
        self.line_num = 0

    def preloop(self):
        """Loads history, if there is any."""
        if readline is not None and self.history_file and os.path.exists(self.history_file):
            readline.read_history_file(self.history_file)

    def postloop(self):
        """Saves history."""
        if readline is not None and self.history_file:
            try:
                readline.write_history_file(self.history_file)
            except OSError:
                raise GenericException("history file '{}' could not be written", self.history_file, diagnosis=False)

    def default(self, line):
        """Evaluates an arbitrary term and prints its head normal form."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(self._tmp_line + " " + line, self.line_num, False)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                try:
                    self.sess.add(line, self.line_num)
                except ValueError:
                    return  # if line is empty (e.g. only a comment), do nothing

                self.sess.run()

                if self.sess.results:
                    print(self.sess.pop())

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to lambed!\n\n"
              "lambed reduces lambda calculus terms to head normal form, lazily: an argument \n"
              "is only evaluated when the function actually uses it. Literals are integers, \n"
              "floats and \"strings\"; |x y| body is a function of x and y, and {f a b} \n"
              "applies f to a and then to b.\n\n"
              "Try it out by typing '{|x y| x 1 2}'. This applies a function that keeps its \n"
              "first argument, giving '1' as the result.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
