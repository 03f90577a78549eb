"""Session control for the lambda calculator: the text-in/text-out top level, and interpretation of .lc files or
command-line input.

A .lc file is read line by line:

```
;; comment until the end of the line
succ2 := λn.succ (succ n)   ;; keyword definition
succ2 3                     ;; anything else is reduced and printed
```

Lines with unbalanced opening parentheses continue on the next line.
"""

from calculator.lang.error import ExpressionSizeLimit, FileNotReadable, LambdaError
from calculator.lang.lexical import Parser
from calculator.lang.numerical import number
from calculator.pure.builder import build
from calculator.pure.printer import format


def evaluate(expression, parser):
    """Returns the reduced Expression of expression (a string)."""
    reduced = build(parser.tokenize(expression))
    return reduced.beta_reduce()


def solve(expression, parser):
    """Returns the reduced text of expression. Raises a LambdaError at the first failure."""
    return format(evaluate(expression, parser))


def simplify(expression, parser):
    """Returns the reduced text of expression, or the one-line message of the error that prevented it."""
    if not expression:
        return expression

    try:
        return solve(expression, parser)
    except LambdaError as error:
        return str(error)
    except RecursionError:
        return str(ExpressionSizeLimit())


class Session:
    """Governs a lambda calculator session, with control over its keywords."""
    SH_FILE = "<in>"  # command-line interpreter filename
    COMMENT = ";;"
    DECLARE = ":="

    def __init__(self, error_handler, path=SH_FILE, parser=None, prelude=True):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path  # used for error messages
        self.parser = parser if parser is not None else Parser(prelude)

        self.to_exec = {}  # dict of line num: expressions to reduce
        self.results = []  # list of (text, number or None) of reduced expressions

        if path == Session.SH_FILE:
            self.error_handler.fatal = False
        else:
            self.load(path)

    def load(self, path):
        """Adds every statement of the file at path."""
        try:
            with open(path, "r", encoding="utf-8") as file:
                lines = file.readlines()
        except OSError:
            raise FileNotReadable(path) from None

        statement = ""
        for line_num, line in enumerate(lines, 1):
            statement, add_to_prev = Session.preprocess_line(f"{statement} {line}")
            if not add_to_prev:
                if statement:
                    self.add(statement, line_num)
                statement = ""

        if statement:
            self.add(statement, len(lines))

    @staticmethod
    def preprocess_line(line):
        """Strips comments and surrounding whitespace from line. Returns the line and whether or not it continues on
        the next line.
        """
        if Session.COMMENT in line:
            line = line[:line.index(Session.COMMENT)]
        line = line.strip()
        return line, line.count("(") > line.count(")")

    def add(self, line, line_num=None):
        """Adds a statement to the current session. Keywords are registered at once, while reduction is delayed until
        run is called.
        """
        if line_num is None:
            line_num = max(self.to_exec, default=0) + 1
        self.error_handler.register_line(self.path, line, line_num)  # in case error is raised

        if Session.DECLARE in line:
            name, expression = line.split(Session.DECLARE, 1)
            self.define(name, expression)
        else:
            self.to_exec[line_num] = line

        self.error_handler.remove_line(self.path)  # error was not raised

    def define(self, name, expression):
        name = name.strip()
        if name in self.parser.keywords:
            self.error_handler.warn(f"keyword '{name}' redefined")
        self.parser.add_keyword(name, expression)

    def run(self):
        """Runs this session's pending expressions by reducing and printing them. Will raise any errors that are
        encountered.
        """
        for line_num, line in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, line, line_num)

            try:
                reduced = evaluate(line, self.parser)
                self.results.append((format(reduced), number(reduced)))
            finally:
                del self.to_exec[line_num]

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Returns the oldest result that hasn't been popped yet."""
        return self.results.pop(0)
