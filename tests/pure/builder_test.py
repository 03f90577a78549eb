import unittest

from calculator.lang.error import ActiveName, EmptyExpression, ReservedName, UnavailableName, UnmatchedParenthesis
from calculator.lang.lexical import Parser
from calculator.pure.builder import Token, build
from calculator.pure.lexical import Abstraction, BoundVariable, FreeVariable, Param


def tree(text):
    return build(Parser().tokenize(text))


class BuilderTestCase(unittest.TestCase):

    def test_build(self):
        cases = {
            "a": FreeVariable(0),
            "λx.x": Abstraction([Param(0)], [BoundVariable(0, 0)]),
            "λx.a x": Abstraction([Param(0)], [FreeVariable(1), BoundVariable(0, 0)]),
            "λx.λy.x": Abstraction([Param(0), Param(1)], [BoundVariable(0, 0)]),
            "λx y.y": Abstraction([Param(0), Param(1)], [BoundVariable(0, 1)]),
            "λx.(λy.x y)": Abstraction([Param(0)], [
                Abstraction([Param(1)], [BoundVariable(1, 0), BoundVariable(0, 0)])
            ]),
            "x λy.y z": Abstraction([], [
                FreeVariable(0), Abstraction([Param(1)], [BoundVariable(0, 0), FreeVariable(2)])
            ]),
            "λx.((x))": Abstraction([Param(0)], [BoundVariable(0, 0)]),
            "λx.(x a)": Abstraction([Param(0)], [Abstraction([], [BoundVariable(1, 0), FreeVariable(1)])]),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, tree(case).root, case)

    def test_inline_abstraction(self):
        # an inline λ ends with its enclosing group, not with the whole expression
        expected = Abstraction([], [
            Abstraction([], [FreeVariable(0), Abstraction([Param(1)], [BoundVariable(0, 0)])]),
            FreeVariable(2)
        ])
        self.assertEqual(expected, tree("(a λx.x) b").root)

    def test_errors(self):
        self.assertRaises(EmptyExpression, build, [])
        self.assertRaises(UnmatchedParenthesis, build, [Token.var("a"), Token.close()])

        should_raise = {
            "λx x.x": ActiveName,
            "λx.λx.x": ActiveName,
            "(λx.x) x": UnavailableName,
            "(λx.x) (λy.x)": UnavailableName,
            "a λa.a": ReservedName,
        }
        for case, error in should_raise.items():
            self.assertRaises(error, tree, case)

        with self.assertRaises(ActiveName) as context:
            tree("λx x. x")
        self.assertEqual("x", context.exception.expr)

    def test_rebinding(self):
        expression = tree("(λx.x) (λx.x)")
        first, second = expression.root.inner
        self.assertEqual(0, first.params[0].copy_id)
        self.assertEqual(1, second.params[0].copy_id)

        self.assertEqual(["x"], expression.name_space.names)
        self.assertEqual([2], expression.name_space.copies)

    def test_copies(self):
        expression = tree("λx.a x")
        self.assertEqual(["x", "a"], expression.name_space.names)
        self.assertEqual([1, 0], expression.name_space.copies)

    def test_name_remap(self):
        # a qualified free name joins the free name it is spelled like
        expression = build([Token.open(), Token.var("$k$a"), Token.var("a"), Token.close()])
        self.assertEqual({0: 1}, expression.name_space.renames)
        self.assertEqual(1, expression.name_space.absolute(0))

        # otherwise it takes the bare spelling
        expression = build([Token.open(), Token.func("$k$x"), Token.var("$k$x"), Token.close()])
        self.assertEqual(["x"], expression.name_space.names)
        self.assertEqual({}, expression.name_space.renames)

        expression = build([Token.open(), Token.var("$p$a"), Token.var("$q$a"), Token.close()])
        self.assertEqual(["a", "$q$a"], expression.name_space.names)
        self.assertEqual({1: 0}, expression.name_space.renames)


if __name__ == '__main__':
    unittest.main()
