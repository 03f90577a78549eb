"""Lexical analysis for the lambda calculator: tokenization of arbitrary string expressions and the keyword table.

All grammar can be loosely defined as follows:

```
<expr>    ::= <item>*
<item>    ::= "(" <expr> ")"
            | "λ" <var>+ "." <expr>  ; "\" can be typed instead of "λ"; the body extends as far right as possible
            | <var>                  ; alphabetic character followed by alphanumeric characters or '_'
            | <number>               ; natural number up to 255, expanded into its Church numeral
            | <keyword>              ; variable name or operator (e.g. `+`, `==`) registered with add_keyword
```

Keywords are expanded inline at tokenization. Names written inside a keyword body are qualified as `$keyword$name`,
so they can never capture (or be captured by) the names of the expression the keyword is used in. The symbol binder
strips these qualifiers once the expression is built.
"""

import re

from calculator.lang.error import IncompleteFunction, InvalidKeyword, InvalidName, LambdaError, RecursiveKeyword
from calculator.lang.error import ReservedName, UnexpectedCharacter, UnmatchedParenthesis
from calculator.lang.numerical import MAX_NUMBER_INPUT, cnumber
from calculator.pure.builder import Token

EXPRESSION_PARSER = re.compile(r"[()λ\\.]|[0-9]+|[+\-*/%^&|!?<>=]+|\S\w*", re.ASCII)
VARIABLE_VALIDATOR = re.compile(r"\A[a-zA-Z]\w*\Z", re.ASCII)
NUMBER_VALIDATOR = re.compile(r"\A[0-9]+\Z")
KEYWORD_VALIDATOR = re.compile(r"\A[+\-*/%^&|!?<>=]+\Z|\A[a-zA-Z]\w*\Z", re.ASCII)

LAMBDAS = ("λ", "\\")

# default keywords, in dependency order
PRELUDE = [
    ("true", "λx.λy.x"),
    ("false", "λx.λy.y"),
    ("not", "λp.p false true"),
    ("and", "λp.λq.p q p"),
    ("or", "λp.λq.p p q"),

    ("null", "λf.λx.x"),
    ("succ", "λn.λf.λx.f (n f x)"),
    ("pred", "λn.λf.λx.n (λg.λh.h (g f)) (λu.x) (λu.u)"),

    ("add", "λm.λn.m succ n"),
    ("sub", "λm.λn.n pred m"),
    ("mul", "λm.λn.m (add n) null"),
    ("pow", "λb.λe.e b"),

    ("is_null", "λn.n (λx.false) true"),
    ("is_ge", "λm.λn.is_null (sub n m)"),
    ("is_le", "λm.λn.is_null (sub m n)"),
    ("is_eq", "λm.λn.and (is_ge m n) (is_le m n)"),

    ("++", "succ"),
    ("--", "pred"),
]


class Parser:
    """Tokenizer holding the keyword table. Keywords are stored as token lists, so a keyword body is a snapshot of
    the keywords it uses at the time it is defined.
    """
    MAX_NUMBER_INPUT = MAX_NUMBER_INPUT

    def __init__(self, prelude=False):
        self.keywords = {}  # dict of name: tokens
        self.sources = {}   # dict of name: expression the keyword was defined with

        if prelude:
            for name, expression in PRELUDE:
                self.add_keyword(name, expression)

    @staticmethod
    def qualify(name, keyword):
        return name if keyword is None else f"${keyword}${name}"

    def tokenize(self, text, keyword=None):
        """Returns the tokens of text wrapped in one outer group, or [] if text has no tokens. If keyword is given,
        text is the body of that keyword.
        """
        tokens = []
        expecting_param = False  # right after a λ
        in_params = False        # after at least one parameter, before the '.'
        closure_depth = 0
        bound = []               # (name, closure_depth) of the parameters in scope

        for match in EXPRESSION_PARSER.finditer(text.strip()):
            part = match.group()

            if part in ("(", ")"):
                if expecting_param:
                    raise InvalidName(part)
                if in_params:
                    raise UnexpectedCharacter(part)

                if part == "(":
                    closure_depth += 1
                    tokens.append(Token.open())
                elif closure_depth == 0:
                    raise UnmatchedParenthesis()
                else:
                    closure_depth -= 1
                    bound = [(name, depth) for name, depth in bound if depth <= closure_depth]
                    tokens.append(Token.close())

            elif part in LAMBDAS:
                if expecting_param:
                    raise InvalidName(part)
                if in_params:
                    raise UnexpectedCharacter(part)
                expecting_param = True

            elif part == ".":
                if expecting_param:
                    raise InvalidName(part)
                if not in_params:
                    raise UnexpectedCharacter(part)
                in_params = False

            elif expecting_param or in_params:
                if not VARIABLE_VALIDATOR.match(part):
                    raise InvalidName(part)
                if part in self.keywords and part != keyword:
                    raise ReservedName(part)

                bound.append((part, closure_depth))
                tokens.append(Token.func(Parser.qualify(part, keyword)))
                expecting_param = False
                in_params = True

            elif part == keyword and any(name == part for name, __ in bound):
                tokens.append(Token.var(Parser.qualify(part, keyword)))  # parameter spelled like its keyword

            elif part == keyword and part in self.keywords:
                raise RecursiveKeyword(part)

            elif part in self.keywords:
                tokens += self.keywords[part]

            elif NUMBER_VALIDATOR.match(part):
                tokens += cnumber(int(part), Parser.MAX_NUMBER_INPUT)

            elif VARIABLE_VALIDATOR.match(part):
                tokens.append(Token.var(Parser.qualify(part, keyword)))

            else:
                raise InvalidName(part)

        if expecting_param or in_params:
            raise IncompleteFunction()

        if not tokens:
            return tokens

        tokens += [Token.close()] * closure_depth  # unclosed groups end with the expression
        return [Token.open()] + tokens + [Token.close()]

    def add_keyword(self, name, expression):
        """Registers name as a keyword for expression. Raises a LambdaError if either is invalid."""
        name = name.strip()
        expression = expression.strip()

        if not KEYWORD_VALIDATOR.match(name):
            raise InvalidKeyword(name)

        tokens = self.tokenize(expression, name)
        if not tokens:
            raise InvalidKeyword(name)

        self.keywords[name] = tokens
        self.sources[name] = expression

    def create_keyword(self, name, expression):
        """Same as add_keyword, but returns the registered expression, or an empty string if it couldn't be
        registered.
        """
        try:
            self.add_keyword(name, expression)
        except LambdaError:
            return ""
        return expression.strip()

    def remove_keyword(self, name):
        self.keywords.pop(name.strip(), None)
        self.sources.pop(name.strip(), None)
