import numpy as np
import pytest

from linkgraph import (
    AffExpr,
    ConstraintShape,
    EqualTo,
    FunctionKind,
    GreaterThan,
    Graph,
    Interval,
    LessThan,
    NonlinearExpr,
    QuadExpr,
    ScalarConstraint,
    SetKind,
    UnsupportedShapeError,
)
from linkgraph.core.canonical import canonicalize, from_local, to_local
from linkgraph.core.expressions import LocalAffineFunction, LocalNonlinearFunction, LocalVariable


@pytest.fixture
def xy():
    graph = Graph("g")
    node = graph.add_node("n")
    return node.add_variable("x"), node.add_variable("y")


def test_affine_constant_moves_into_set(xy):
    x, y = xy
    expr = AffExpr.from_terms([(1.0, x), (2.0, y)], constant=1.0)
    func, con_set, shape = canonicalize(ScalarConstraint(expr, LessThan(3.0)))
    assert func.constant == 0.0
    assert func.terms == {x: 1.0, y: 2.0}
    assert con_set == LessThan(2.0)
    assert shape == ConstraintShape(FunctionKind.AFFINE, SetKind.LESS_THAN)
    assert expr.constant == 1.0


def test_quadratic_constant_moves_into_interval(xy):
    x, y = xy
    expr = QuadExpr.from_terms([(1.0, x, y)], aff=AffExpr.from_terms([(1.0, x)], constant=-2.0))
    func, con_set, shape = canonicalize(ScalarConstraint(expr, Interval(0.0, 1.0)))
    assert func.aff.constant == 0.0
    assert con_set == Interval(2.0, 3.0)
    assert shape == ConstraintShape.of("quadratic", "interval")


def test_variable_and_nonlinear_are_kept_as_written(xy):
    x, y = xy
    func, con_set, shape = canonicalize(ScalarConstraint(x, GreaterThan(0.0)))
    assert func is x
    assert shape.function is FunctionKind.VARIABLE
    tree = NonlinearExpr("+", (NonlinearExpr("sin", (x,)), 1.0))
    func, con_set, shape = canonicalize(ScalarConstraint(tree, EqualTo(0.0)))
    assert func is tree
    assert con_set == EqualTo(0.0)
    assert shape == ConstraintShape(FunctionKind.NONLINEAR, SetKind.EQUAL_TO)


def test_unsupported_function_and_set(xy):
    x, _ = xy
    with pytest.raises(UnsupportedShapeError, match="function float"):
        canonicalize(ScalarConstraint(1.0, LessThan(0.0)))
    with pytest.raises(UnsupportedShapeError, match="set tuple"):
        canonicalize(ScalarConstraint(x, (0.0, 1.0)))


def test_interval_bounds_validated():
    with pytest.raises(ValueError):
        Interval(2.0, 1.0)


def test_shape_from_strings_rejects_unknown_kind():
    with pytest.raises(ValueError):
        ConstraintShape.of("cubic", "less_than")


def test_to_local_builds_column_arrays(xy):
    x, y = xy
    columns = {x: 7, y: 3}
    local = to_local(AffExpr.from_terms([(1.5, x), (-2.0, y)], 0.5), columns.__getitem__)
    assert isinstance(local, LocalAffineFunction)
    np.testing.assert_array_equal(local.columns, np.array([7, 3]))
    np.testing.assert_allclose(local.coefficients, np.array([1.5, -2.0]))
    assert local.constant == 0.5


def test_to_local_rewrites_nonlinear_leaves(xy):
    x, y = xy
    tree = NonlinearExpr("*", (x, NonlinearExpr("cos", (y,)), 3))
    local = to_local(tree, {x: 0, y: 1}.__getitem__)
    assert isinstance(local, LocalNonlinearFunction)
    assert local.args[0] == LocalVariable(0)
    assert local.args[1].args == (LocalVariable(1),)
    assert local.args[2] == 3


def test_from_local_inverts_to_local(xy):
    x, y = xy
    columns = {x: 4, y: 9}
    variables = {col: var for var, col in columns.items()}
    quad = QuadExpr.from_terms([(2.0, x, y)], aff=AffExpr.from_terms([(1.0, y)]))
    back = from_local(to_local(quad, columns.__getitem__), variables.__getitem__)
    assert back == quad
    tree = NonlinearExpr("+", (x, AffExpr.from_terms([(1.0, y)])))
    assert from_local(to_local(tree, columns.__getitem__), variables.__getitem__) == tree


def test_nonlinear_arguments_are_checked(xy):
    x, y = xy
    tree = NonlinearExpr("*", (x, NonlinearExpr("exp", (AffExpr.from_terms([(1.0, y)]), 2))))
    func, _, shape = canonicalize(ScalarConstraint(tree, LessThan(0.0)))
    assert func is tree
    with pytest.raises(UnsupportedShapeError, match="of 'exp'"):
        canonicalize(ScalarConstraint(NonlinearExpr("exp", (None,)), LessThan(0.0)))
