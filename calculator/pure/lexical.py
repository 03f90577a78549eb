"""Pure lambda calculus expression tree and normal-order reducer.

The `pure` directory contains the calculus itself: binding names to positions (builder.py), reducing (this module)
and printing (printer.py). It knows nothing about keywords, numerals or files: see the `lang` directory for those.

An expression is a tree of three node types:

```
<node> ::= Abstraction(params, inner)   ; params are bound in order, inner is an application spine: the first element
                                        ; is applied to the rest, left to right. Both lists may be empty.
         | BoundVariable(depth, position)
                                        ; reference to a parameter: depth counts enclosing Abstractions outwards
                                        ; (0 = innermost), position indexes that Abstraction's params
         | FreeVariable(name_id)        ; free term, identified by its NameID
```

Bound variables are addressed relatively, so a subtree stays valid wherever it is moved as long as the depths that
point outside of it are shifted by the number of Abstractions added or removed on the way.

Reduction is normal order over spines: the head of a spine is reduced against the rest of the spine, consuming one
parameter per argument. A parameter-free head is spliced into the spine it sits in, and arguments left over are
normalized one after the other.
"""

import sys
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field

from calculator.lang.error import ExpressionSizeLimit
from calculator.pure.naming import NameSpace

sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))  # reduction recurses once per nested node


def guard(spent):
    """Raises ExpressionSizeLimit once spent exceeds the cloning budget."""
    if spent > Expression.MAX_DEPTH:
        raise ExpressionSizeLimit()


@dataclass
class Param:
    """Bound parameter of an Abstraction. copy_id tells runtime instances of the same parameter apart."""
    name_id: int
    copy_id: int = field(default=0, compare=False)


class LambdaObject(ABC):
    """Superclass of all expression tree nodes. Reduction methods return the node that replaces self."""

    def reduce(self, name_space):
        """Reduces self to normal form. Only Abstractions can be reduced, so the default is a no-op."""
        return self

    def reduce_in_closure(self, spine, name_space):
        """Drives self as the head of a spine against spine (the elements that follow it), consuming arguments from
        the front of spine while self is an Abstraction with parameters left. Returns the new head. Elements spliced
        out of parameter-free heads are pushed to the front of spine.
        """
        head = self
        while spine:
            head = head.reduce(name_space)
            head = head.expand_closures(spine)

            if not isinstance(head, Abstraction) or not head.params:
                break  # a leaf, or an Abstraction without params nor body

            head.params.popleft()
            beta = spine.popleft()
            head.inner = deque(node.apply_beta(name_space, beta, 0) for node in head.inner)

        head = head.reduce(name_space)
        return head.expand_closures(spine)

    def expand_closures(self, spine):
        """Splices a parameter-free Abstraction: its first element becomes the head and the others are pushed to the
        front of spine, all lowered by one level. Repeats while the head is a parameter-free Abstraction.
        """
        head = self
        while isinstance(head, Abstraction) and not head.params and head.inner:
            first = head.inner.popleft()
            for node in reversed(head.inner):
                spine.appendleft(node.lowered())
            head = first.lowered()
        return head

    @abstractmethod
    def apply_beta(self, name_space, beta, recursion_depth):
        """Substitutes beta for the first parameter of the Abstraction recursion_depth levels up. References to later
        parameters of that Abstraction move down one position.
        """

    @abstractmethod
    def cloned(self, name_space, origin_offset, recursion_depth):
        """Returns an independent copy of self, to be placed origin_offset + 1 levels deeper than it is now. References
        that point outside the copied subtree are shifted accordingly; copied parameters get fresh copy ids.
        Raises ExpressionSizeLimit once origin_offset + recursion_depth exceeds Expression.MAX_DEPTH.
        """

    @abstractmethod
    def lower(self, recursion_depth=0):
        """In-place removal of one enclosing level: references pointing past recursion_depth move one level down."""

    def lowered(self):
        self.lower()
        return self


@dataclass
class Abstraction(LambdaObject):
    params: deque = field(default_factory=deque)
    inner: deque = field(default_factory=deque)

    def __post_init__(self):
        self.params = deque(self.params)
        self.inner = deque(self.inner)

    def reduce(self, name_space):
        if not self.inner:
            return self

        head = self.inner.popleft()
        head = head.reduce_in_closure(self.inner, name_space)

        # cycle the elements left over behind the head, normalizing each of them once
        pending = len(self.inner)
        self.inner.append(head)
        for __ in range(pending):
            self.inner.append(self.inner.popleft().reduce(name_space))

        if not self.params and len(self.inner) == 1:
            return self.inner.popleft().lowered()  # (a) => a
        return self

    def apply_beta(self, name_space, beta, recursion_depth):
        self.inner = deque(node.apply_beta(name_space, beta, recursion_depth + 1) for node in self.inner)
        return self

    def cloned(self, name_space, origin_offset, recursion_depth):
        guard(origin_offset + recursion_depth)

        params = deque(Param(param.name_id, name_space.mint(param.name_id)) for param in self.params)
        inner = deque(node.cloned(name_space, origin_offset, recursion_depth + 1) for node in self.inner)
        return Abstraction(params, inner)

    def lower(self, recursion_depth=0):
        for node in self.inner:
            node.lower(recursion_depth + 1)


@dataclass
class BoundVariable(LambdaObject):
    depth: int
    position: int

    def apply_beta(self, name_space, beta, recursion_depth):
        if self.depth == recursion_depth:
            if self.position == 0:
                return beta.cloned(name_space, recursion_depth, 0)
            self.position -= 1
        return self

    def cloned(self, name_space, origin_offset, recursion_depth):
        guard(origin_offset + recursion_depth)

        if self.depth < recursion_depth:
            return BoundVariable(self.depth, self.position)  # bound inside the copied subtree
        # the +1 accounts for being raised into the Abstraction that receives the copy
        return BoundVariable(self.depth + origin_offset + 1, self.position)

    def lower(self, recursion_depth=0):
        if self.depth > recursion_depth:
            self.depth -= 1


@dataclass
class FreeVariable(LambdaObject):
    name_id: int

    def apply_beta(self, name_space, beta, recursion_depth):
        return self

    def cloned(self, name_space, origin_offset, recursion_depth):
        guard(origin_offset + recursion_depth)
        return FreeVariable(self.name_id)

    def lower(self, recursion_depth=0):
        """Free variables are not addressed by depth, so do nothing."""


@dataclass
class Expression:
    """Root node of a tree plus the NameSpace it was built with. Built by builder.build, reduced in place by
    beta_reduce, read by printer.format.
    """
    MAX_DEPTH = 512  # nesting budget of a substituted copy

    root: LambdaObject
    name_space: NameSpace = field(default_factory=NameSpace, compare=False)

    def beta_reduce(self):
        """In-place normal-order beta reduction of self.root. Raises ExpressionSizeLimit if a copy exceeds the nesting
        budget, or if the reduction nests deeper than the interpreter allows. The expression is then left half-reduced
        and should be discarded.
        """
        try:
            self.root = self.root.reduce(self.name_space)
        except RecursionError:
            raise ExpressionSizeLimit() from None
        return self
