"""Symbol binder: turns a token stream into an Expression whose bound variables are addressed by (depth, position).

The token stream is read as an implicit outer group. Inside a group, leading FUNC tokens are the group's parameters and
everything up to the matching CLOSE is its application spine. A FUNC token found where an expression is expected opens
an abstraction of its own, which extends to the end of the enclosing group: `x λy.y z` = `x (λy.y z)`.

While building, every spelling is in one of three states:
    - LiveParameter:   bound by a group that is still open
    - ClosedParameter: bound by a group that has been closed; it can be bound again but not used as a free term
    - Constant:        free term
"""

import re
from dataclasses import dataclass

from calculator.lang.error import ActiveName, EmptyExpression, InternalFailure, ReservedName, UnavailableName
from calculator.lang.error import UnmatchedParenthesis
from calculator.pure.lexical import Abstraction, BoundVariable, Expression, FreeVariable, Param
from calculator.pure.naming import NameSpace

QUALIFIER = re.compile(r"\A\$\S+?\$")  # `$keyword$` prefix of names written inside a keyword body


@dataclass(frozen=True)
class Token:
    """Token of the stream consumed by the binder: OPEN/CLOSE delimit a group, FUNC binds a parameter, VAR uses a
    name.
    """
    OPEN = "open"
    CLOSE = "close"
    FUNC = "func"
    VAR = "var"

    kind: str
    name: str = None

    @classmethod
    def open(cls):
        return cls(Token.OPEN)

    @classmethod
    def close(cls):
        return cls(Token.CLOSE)

    @classmethod
    def func(cls, name):
        return cls(Token.FUNC, name)

    @classmethod
    def var(cls, name):
        return cls(Token.VAR, name)

    def __repr__(self):
        if self.name is None:
            return self.kind.upper()
        return f"{self.kind.upper()}({self.name})"


@dataclass
class LiveParameter:
    level: int
    position: int
    copy_id: int


@dataclass
class ClosedParameter:
    name_id: int
    copy_id: int


@dataclass
class Constant:
    name_id: int


class Builder:
    """Builds one Expression. Not reusable: create a new Builder (or call build) per token stream."""

    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.pos = 0

        self.level = 0
        self.names = {}     # dict of spelling: LiveParameter/ClosedParameter/Constant
        self.listings = []  # spellings by NameID

    def build(self):
        if not self.tokens:
            raise EmptyExpression()

        root = self.parse_closure(top=True)
        copies = self.make_copies()
        renames = self.make_name_remap()  # must run last: renames spellings in place
        return Expression(root, NameSpace(self.listings, copies, renames))

    def _next(self):
        """Returns the next token, or None at the end of the stream."""
        if self.pos >= len(self.tokens):
            return None
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def parse_closure(self, name=None, top=False):
        """Parses one group. If name is given, the group is an inline abstraction binding name, which ends before the
        CLOSE of its enclosing group instead of consuming it. top marks the implicit outer group, which must end with
        the stream.
        """
        self.level += 1
        params = []
        inner = []

        if name is not None:
            self.bind(params, name)

        while self._peek() is not None and self._peek().kind == Token.FUNC:
            self.bind(params, self._next().name)

        while True:
            token = self._peek()
            if token is None:
                break  # unclosed groups end with the stream

            if token.kind == Token.CLOSE:
                if top:
                    raise UnmatchedParenthesis()
                if name is None:
                    self._next()
                break

            self._next()
            if token.kind == Token.OPEN:
                inner.append(self.parse_closure())
            elif token.kind == Token.FUNC:
                inner.append(self.parse_closure(token.name))
            elif token.kind == Token.VAR:
                inner.append(self.make_variable(token.name))
            else:
                raise InternalFailure()

        return self.end_closure(params, inner)

    def make_variable(self, name):
        """Resolves a spelling used in a spine."""
        state = self.names.get(name)

        if isinstance(state, Constant):
            return FreeVariable(state.name_id)
        elif isinstance(state, LiveParameter):
            return BoundVariable(self.level - state.level, state.position)
        elif isinstance(state, ClosedParameter):
            raise UnavailableName(name)

        # first free use of a spelling defines it
        self.names[name] = Constant(len(self.listings))
        self.listings.append(name)
        return FreeVariable(len(self.listings) - 1)

    def bind(self, params, name):
        """Binds name as the next parameter of the group being parsed."""
        state = self.names.get(name)

        if state is None:
            self.names[name] = LiveParameter(self.level, len(params), 0)
            params.append(Param(len(self.listings), 0))
            self.listings.append(name)
        elif isinstance(state, ClosedParameter):
            copy_id = state.copy_id + 1
            self.names[name] = LiveParameter(self.level, len(params), copy_id)
            params.append(Param(state.name_id, copy_id))
        elif isinstance(state, LiveParameter):
            raise ActiveName(name)
        else:
            raise ReservedName(name)

    def end_closure(self, params, inner):
        self.level -= 1

        for param in params:
            self.names[self.listings[param.name_id]] = ClosedParameter(param.name_id, param.copy_id)

        if not params and len(inner) == 1:
            return inner[0].lowered()  # (a) => a
        return Abstraction(params, inner)

    def make_copies(self):
        """Initial duplication counters: one past the last copy id handed out for parameters, 0 for constants."""
        copies = []
        for name in self.listings:
            state = self.names[name]
            copies.append(0 if isinstance(state, Constant) else state.copy_id + 1)
        return copies

    def make_name_remap(self):
        """Strips keyword qualifiers from spellings. A stripped spelling that already exists is unified with it through
        the returned renames, otherwise it becomes the display name of its NameID.
        """
        remap = {}

        for name_id, name in enumerate(self.listings):
            if not QUALIFIER.match(name):
                continue

            short_name = QUALIFIER.sub("", name, count=1)
            base = self.names.get(short_name)

            if base is None:
                self.names[short_name] = ClosedParameter(name_id, 1)
                self.listings[name_id] = short_name
            elif isinstance(base, LiveParameter):
                raise InternalFailure()
            else:
                remap[name_id] = base.name_id

        return remap


def build(tokens):
    """Returns the Expression built from tokens."""
    return Builder(tokens).build()
