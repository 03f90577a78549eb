"""Name registry shared by the symbol binder, the reduction engine and the printer.

A NameID is an index into `NameSpace.names`. It identifies a class of variable occurrences (every parameter or free
term written with the same spelling), never a single occurrence. Runtime instances of the same bound variable are told
apart by duplication ids, which are minted from the per-name counters in `NameSpace.copies`.
"""

from calculator.lang.error import InternalFailure


class NameSpace:
    """Ordered surface names, their duplication counters, and the renames collapsing keyword-qualified names."""

    def __init__(self, names=None, copies=None, renames=None):
        self.names = list(names) if names is not None else []
        self.copies = list(copies) if copies is not None else [0] * len(self.names)
        self.renames = dict(renames) if renames is not None else {}

        if len(self.names) != len(self.copies):
            raise InternalFailure()

    def __getitem__(self, name_id):
        return self.names[name_id]

    def __len__(self):
        return len(self.names)

    def absolute(self, name_id):
        """Returns the canonical NameID that name_id displays and resolves as."""
        return self.renames.get(name_id, name_id)

    def mint(self, name_id):
        """Returns a fresh duplication id for name_id."""
        copy_id = self.copies[name_id]
        self.copies[name_id] += 1
        return copy_id

    def __repr__(self):
        return f"NameSpace(names={self.names!r}, copies={self.copies!r}, renames={self.renames!r})"


class ScopeStack:
    """Stack of the parameter lists of the currently open abstractions, innermost last.

    This is the (depth, position) addressing convention of bound variables: depth 0 is the innermost enclosing
    abstraction and position indexes its parameter list.
    """

    def __init__(self):
        self._scopes = []

    def push(self, params):
        self._scopes.append(params)

    def pop(self):
        return self._scopes.pop()

    def resolve(self, depth, position):
        """Returns the entry addressed by (depth, position)."""
        if depth >= len(self._scopes):
            raise InternalFailure()
        params = self._scopes[len(self._scopes) - 1 - depth]
        if position >= len(params):
            raise InternalFailure()
        return params[position]

    def __len__(self):
        return len(self._scopes)
