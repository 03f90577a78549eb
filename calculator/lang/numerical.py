"""Natural numbers encoded as Church numerals. Note that operations are not implemented here (see the keyword prelude
in lexical.py) and that numerals are expanded into ordinary binder tokens, thus keeping everything as pure as possible.

Source: https://en.wikipedia.org/wiki/Church_encoding#Calculation_with_Church_numerals
"""

from calculator.lang.error import NumberTooLarge
from calculator.pure.builder import Token
from calculator.pure.lexical import Abstraction, BoundVariable

MAX_NUMBER_INPUT = 255

# spellings of the numeral parameters, qualified like keyword names so that they display as plain f and x
F = "$#$f"
X = "$#$x"


def cnumber(num, limit=MAX_NUMBER_INPUT):
    """Returns the tokens of num as a Church numeral (cnum = Church numeral): λf.λx.f (f (... (f x)))."""
    if num > limit:
        raise NumberTooLarge(num)

    tokens = [Token.open(), Token.func(F), Token.func(X)]
    for __ in range(1, num):
        tokens += [Token.var(F), Token.open()]

    if num:
        tokens.append(Token.var(F))
    tokens.append(Token.var(X))

    tokens += [Token.close()] * max(num - 1, 0)
    tokens.append(Token.close())
    return tokens


def _binders(root):
    """Returns (body, f, x) if root binds exactly two parameters, with f and x the addresses of these parameters as
    seen from body. Both λf.λx.M and λf.(λx.M) are accepted.
    """
    if not isinstance(root, Abstraction):
        return None

    if len(root.params) == 2:
        return root.inner, BoundVariable(0, 0), BoundVariable(0, 1)

    if len(root.params) == 1 and len(root.inner) == 1:
        nested = root.inner[0]
        if isinstance(nested, Abstraction) and len(nested.params) == 1:
            return nested.inner, BoundVariable(1, 0), BoundVariable(0, 0)

    return None


def number(expression):
    """Returns the int encoded by a reduced Expression. If it isn't a Church numeral, returns None."""
    binders = _binders(expression.root)
    if binders is None:
        return None
    body, f, x = binders

    num = 0
    while True:
        if list(body) == [x]:
            return num
        if len(body) != 2 or body[0] != f:
            return None

        num += 1
        arg = body[1]
        if arg == x:
            return num
        if not isinstance(arg, Abstraction) or arg.params:
            return None

        # one level deeper
        body = arg.inner
        f = BoundVariable(f.depth + 1, f.position)
        x = BoundVariable(x.depth + 1, x.position)
