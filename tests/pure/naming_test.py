import unittest

from calculator.lang.error import InternalFailure
from calculator.pure.naming import NameSpace, ScopeStack


class NameSpaceTestCase(unittest.TestCase):

    def test_init(self):
        self.assertRaises(InternalFailure, NameSpace, ["a", "b"], [0])

        name_space = NameSpace(["a", "b"])
        self.assertEqual([0, 0], name_space.copies)
        self.assertEqual(2, len(name_space))
        self.assertEqual("b", name_space[1])

    def test_absolute(self):
        name_space = NameSpace(["x", "$k$x", "y"], [0, 0, 0], {1: 0})
        cases = {0: 0, 1: 0, 2: 2}
        for case, expected in cases.items():
            self.assertEqual(expected, name_space.absolute(case), case)

    def test_mint(self):
        name_space = NameSpace(["x", "y"], [2, 0])
        self.assertEqual(2, name_space.mint(0))
        self.assertEqual(3, name_space.mint(0))
        self.assertEqual(0, name_space.mint(1))
        self.assertEqual([4, 1], name_space.copies)


class ScopeStackTestCase(unittest.TestCase):

    def test_resolve(self):
        scopes = ScopeStack()
        scopes.push(["f", "x"])
        scopes.push(["y"])

        cases = {(0, 0): "y", (1, 0): "f", (1, 1): "x"}
        for (depth, position), expected in cases.items():
            self.assertEqual(expected, scopes.resolve(depth, position))

        should_raise = [(2, 0), (0, 1), (1, 2)]
        for depth, position in should_raise:
            self.assertRaises(InternalFailure, scopes.resolve, depth, position)

    def test_push_pop(self):
        scopes = ScopeStack()
        self.assertEqual(0, len(scopes))

        scopes.push(["x"])
        scopes.push(["x"])
        self.assertEqual(2, len(scopes))
        self.assertEqual(["x"], scopes.pop())
        self.assertEqual(1, len(scopes))


if __name__ == '__main__':
    unittest.main()
