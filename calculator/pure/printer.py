"""Turns an Expression back into text.

Bound variables are resolved through a ScopeStack mirroring the (depth, position) addressing of the tree. Parameters
sharing a spelling are told apart by the number of open scopes already binding that spelling: the outermost is
printed bare, the next ones get `_1`, `_2`, ... Sibling scopes therefore start over without a suffix.

```
λf.λx.(f (f x))     ; abstraction: binders, then the body in parentheses if it is an application
a (λx_1.x_1 x)      ; nested abstractions are always parenthesized
```
"""

from calculator.lang.error import CharacterLimitExceeded, InternalFailure
from calculator.pure.lexical import Abstraction, BoundVariable, FreeVariable
from calculator.pure.naming import ScopeStack


class Printer:
    MAX_LENGTH = 255  # maximum length of a rendering

    def __init__(self, name_space):
        self.name_space = name_space
        self.active_copies = [0] * len(name_space)
        self.scopes = ScopeStack()

    def format(self, root):
        """Returns the text of root. Raises CharacterLimitExceeded if it is longer than MAX_LENGTH."""
        # a parameter spelled like a free term must never print as that free term
        for name_id in self.free_names(root):
            self.active_copies[name_id] = 1

        out = self.string_this(root, 0)
        if len(out) > Printer.MAX_LENGTH:
            raise CharacterLimitExceeded()
        return out

    def free_names(self, root):
        """Returns the canonical NameIDs of the free variables of root."""
        names = set()
        stack = [root]
        while stack:
            node = stack.pop()
            if isinstance(node, FreeVariable):
                names.add(self.name_space.absolute(node.name_id))
            elif isinstance(node, Abstraction):
                stack.extend(node.inner)
        return names

    def display(self, name_id, suffix):
        name = self.name_space[name_id]
        return f"{name}_{suffix}" if suffix else name

    def string_this(self, node, depth):
        if isinstance(node, FreeVariable):
            return self.name_space[self.name_space.absolute(node.name_id)]

        elif isinstance(node, BoundVariable):
            return self.display(*self.scopes.resolve(node.depth, node.position))

        elif not isinstance(node, Abstraction):
            raise InternalFailure()

        local_ids = []
        for param in node.params:
            true_id = self.name_space.absolute(param.name_id)
            local_ids.append((true_id, self.active_copies[true_id]))
            self.active_copies[true_id] += 1

        binders = [f"λ{self.display(*local_id)}." for local_id in local_ids]
        if binders and not node.inner:
            binders[-1] = binders[-1][:-1]  # no trailing '.' without a body

        self.scopes.push(local_ids)
        body = " ".join(self.string_this(sub_node, depth + 1) for sub_node in node.inner)
        self.scopes.pop()

        for true_id, __ in local_ids:
            self.active_copies[true_id] -= 1

        if binders and len(node.inner) > 1:
            body = f"({body})"

        out = "".join(binders) + body
        if depth:
            out = f"({out})"

        if len(out) > Printer.MAX_LENGTH:
            raise CharacterLimitExceeded()  # stop early, a parent only grows
        return out


def format(expression):
    """Returns the text of expression."""
    return Printer(expression.name_space).format(expression.root)
