import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from lambed.main import main


class MainTestCase(unittest.TestCase):

    def run_main(self, contents, *args):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "terms.lc")
            with open(path, "w") as file:
                file.write(contents)

            out = io.StringIO()
            with redirect_stdout(out):
                main([path, *args])
        return out.getvalue()

    def test_file(self):
        output = self.run_main("{|x| x 42}\n{|x y| x \"a\" \"b\"}\n|x| x\n")
        self.assertEqual('42\n"a"\n|x| x\n', output)

    def test_trace(self):
        output = self.run_main("{|x| x 42}\n", "--trace")
        self.assertIn("beta", output)
        self.assertTrue(output.endswith("42\n"))

    def test_max_steps(self):
        with self.assertRaises(SystemExit):
            self.run_main("{|x| x 42}\n", "--max-steps", "2")

    def test_results_before_fatal_error(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "terms.lc")
            with open(path, "w") as file:
                file.write('{|x| x 42}\n{|x| x "a;;b"}\nfree\n{|x| x 1}\n')

            out = io.StringIO()
            with redirect_stdout(out), self.assertRaises(SystemExit) as context:
                main([path])

        self.assertEqual(1, context.exception.code)
        output = out.getvalue()
        self.assertTrue(output.startswith('42\n"a;;b"\n'), output)
        self.assertIn("not found", output)
        self.assertNotIn("\n1\n", output)

    def test_negative_max_steps(self):
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
            self.run_main("42\n", "--max-steps", "-1")


if __name__ == '__main__':
    unittest.main()
