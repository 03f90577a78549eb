"""Error handling for the lambda calculator. Only LambdaErrors should be encountered during running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every LambdaError keeps the offending value (character, name, number) in `expr`, so that callers other than the
text-in/text-out driver can react to it programmatically. `str(error)` is the one-line message shown to users.
"""

import sys

from termcolor import colored


class LambdaError(Exception):
    """Templates an error message: `template` is formatted with the offending expr and prefixed with `category`."""
    category = "internal"
    template = "an unforeseen error has occurred"
    internal = False

    def __init__(self, expr=None):
        self.expr = expr
        super().__init__(expr)

    @classmethod
    def from_message(cls, msg):
        """Returns an error of this class carrying a free-form message instead of the class template."""
        error = cls(msg)
        error.template = "{}"
        return error

    @property
    def msg(self):
        return self.template.format(self.expr)

    def __str__(self):
        return f"{self.category} error: {self.msg}"


# syntax errors: raised while tokenizing or registering keywords

class UnexpectedCharacter(LambdaError):
    category = "syntax"
    template = "unexpected '{}' character"


class InvalidName(LambdaError):
    category = "syntax"
    template = "\"{}\" is not a valid variable name"


class IncompleteFunction(LambdaError):
    category = "syntax"
    template = "incomplete lambda function declaration at the end of the expression"


class InvalidKeyword(LambdaError):
    category = "syntax"
    template = "\"{}\" is not a valid keyword"


class UnmatchedParenthesis(LambdaError):
    category = "syntax"
    template = "closing parenthesis without matching open parenthesis"


class EmptyExpression(LambdaError):
    category = "syntax"
    template = "expression does not contain any λ-term"


# naming errors: raised by the symbol binder (and the tokenizer for keywords)

class ReservedName(LambdaError):
    category = "naming"
    template = "\"{}\" is reserved as a keyword or free term, so it cannot be assigned to a variable"


class UnavailableName(LambdaError):
    category = "naming"
    template = "\"{}\" has already been used as a function variable, so it cannot be used as a free term"


class ActiveName(LambdaError):
    category = "naming"
    template = "\"{}\" cannot be assigned multiple times in the same function"


class RecursiveKeyword(LambdaError):
    category = "naming"
    template = "\"{}\" cannot be used inside its own definition"


# input errors

class NumberTooLarge(LambdaError):
    category = "input"
    template = "{} is greater than maximum integer limit (255)"


class FileNotReadable(LambdaError):
    category = "input"
    template = "'{}' could not be opened"


# internal errors: raised by the reduction engine

class InternalFailure(LambdaError):
    internal = True


class ExpressionSizeLimit(LambdaError):
    template = "expression reached the maximum size limit"
    internal = True


# output errors: raised by the printer

class CharacterLimitExceeded(LambdaError):
    category = "output"
    template = "character limit exceeded"


class ErrorHandler:
    """Context manager that will silently suppress Python errors and print lambda calculator errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Adds path to the traceback, with no line yet."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Marks line as the statement being processed in path."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Clears the statement of path once it has been processed without errors."""
        self.traceback[path] = (None, None)

    def _location(self):
        """Returns 'file:line: ' of the innermost registered line, or an empty string."""
        for file, (line, line_num) in reversed(list(self.traceback.items())):
            if line:
                return f"{file}:{line_num}: "
        return ""

    def warn(self, msg):
        """Prints runtime warning message."""
        warning_msg = colored(self._location(), attrs=["bold"])
        warning_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + msg
        print(warning_msg)

    def throw(self, error):
        """Prints error using self.traceback. error must be a LambdaError, and self.traceback must be a dict of
        file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg
        else:
            error_msg = colored(self._location(), attrs=["bold"])

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored(f"{error.category} error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if self.fatal:
            sys.exit(1)
        # if error occurred, reset traceback (no need if error is fatal)
        self.traceback = {file: (None, None) for file in self.traceback}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(LambdaError.from_message("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(ExpressionSizeLimit())
        elif exc_type is not None and issubclass(exc_type, LambdaError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(InternalFailure.from_message(f"unknown error: '{exc_type.__name__}: {exc_val}'"))
            do_exit = True

        return not do_exit
