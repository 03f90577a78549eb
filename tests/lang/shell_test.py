import io
import unittest
from contextlib import redirect_stdout

from calculator.lang.error import ErrorHandler
from calculator.lang.session import Session
from calculator.lang.shell import Shell


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.shell = Shell(Session(ErrorHandler(), Session.SH_FILE))

    def run_lines(self, *lines):
        out = io.StringIO()
        with redirect_stdout(out):
            for line in lines:
                self.shell.onecmd(line)
        return out.getvalue()

    def test_default(self):
        self.assertEqual("a\n", self.run_lines("(λx.x) a"))
        self.assertIn("(5)", self.run_lines("add 2 3"))
        self.assertEqual("", self.run_lines("double := λf.λx.f (f x)"))
        self.assertEqual("g (g y)\n", self.run_lines("double g y"))

    def test_errors(self):
        out = self.run_lines("(λx x. x)", "a)")
        self.assertIn("naming error: ", out)
        self.assertIn("syntax error: ", out)

        # the shell keeps going after an error
        self.assertEqual("b\n", self.run_lines("(λx.x) b"))

    def test_line_continuation(self):
        self.assertEqual("", self.run_lines("((λx.x)"))
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)

        self.assertEqual("b\n", self.run_lines("b)"))
        self.assertEqual(Shell.prompt, self.shell.prompt)

    def test_keywords(self):
        out = self.run_lines("keywords")
        self.assertIn("succ", out)
        self.assertIn("λn.λf.λx.f (n f x)", out)

        self.run_lines("remove succ")
        self.assertNotIn("succ", self.shell.sess.parser.sources)
        self.assertIn("syntax error: ", self.run_lines("remove succ"))

    def test_exit(self):
        self.assertTrue(self.shell.onecmd("exit"))
        with redirect_stdout(io.StringIO()):
            self.assertTrue(self.shell.onecmd("EOF"))
        self.assertFalse(self.shell.emptyline())


if __name__ == '__main__':
    unittest.main()
