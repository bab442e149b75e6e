import numpy as np
import pytest

from linkgraph import AffExpr, Graph, NonlinearExpr, QuadExpr, extract_variables, referenced_variables
from linkgraph.core.expressions import (
    LocalAffineFunction,
    LocalNonlinearFunction,
    LocalQuadraticFunction,
    LocalVariable,
)


@pytest.fixture
def xyz():
    graph = Graph("g")
    node = graph.add_node("n")
    return node.add_variable("x"), node.add_variable("y"), node.add_variable("z")


def test_affine_yields_each_key_once(xyz):
    x, y, _ = xyz
    expr = AffExpr.from_terms([(1.0, x), (2.0, y), (3.0, x)], constant=4.0)
    assert extract_variables(expr) == [x, y]
    assert expr.terms[x] == 4.0


def test_quadratic_deduplicates_pairs_and_affine_part(xyz):
    x, y, _ = xyz
    # x*y + x*y + x <= 1
    expr = QuadExpr.from_terms(
        [(1.0, x, y), (1.0, x, y)],
        aff=AffExpr.from_terms([(1.0, x)]),
    )
    found = extract_variables(expr)
    assert set(found) == {x, y}
    assert len(found) == 2


def test_quadratic_pairs_are_unordered(xyz):
    x, y, z = xyz
    expr = QuadExpr.from_terms([(1.0, x, y), (2.0, y, x), (1.0, z, z)])
    assert expr.quad_terms() == [(3.0, x, y), (1.0, z, z)]
    assert extract_variables(expr) == [x, y, z]


def test_nonlinear_keeps_repeats(xyz):
    x, y, _ = xyz
    expr = NonlinearExpr("+", (x, NonlinearExpr("*", (x, y)), 2.0))
    assert extract_variables(expr) == [x, x, y]


def test_nonlinear_ignores_affine_children(xyz):
    x, y, z = xyz
    expr = NonlinearExpr("sin", (AffExpr.from_terms([(2.0, z)], 1.0), y))
    assert extract_variables(expr) == [y]
    assert referenced_variables(expr) == [z, y]


def test_nonlinear_nested_depth(xyz):
    x, y, z = xyz
    expr = NonlinearExpr("exp", (NonlinearExpr("log", (NonlinearExpr("^", (z, 2)),)), x))
    assert extract_variables(expr) == [z, x]


def test_referenced_variables_deduplicates(xyz):
    x, y, _ = xyz
    expr = NonlinearExpr("+", (x, NonlinearExpr("*", (x, y)), QuadExpr.from_terms([(1.0, y, x)])))
    assert referenced_variables(expr) == [x, y]


def test_single_variable_function(xyz):
    x, _, _ = xyz
    assert extract_variables(x) == [x]


def test_local_variants_follow_the_same_rules():
    aff = LocalAffineFunction(np.array([3, 1, 3]), np.array([1.0, 2.0, 3.0]))
    assert extract_variables(aff) == [LocalVariable(3), LocalVariable(1)]
    quad = LocalQuadraticFunction(
        rows=np.array([0, 0]),
        cols=np.array([1, 1]),
        coefficients=np.array([1.0, 1.0]),
        affine=LocalAffineFunction(np.array([0]), np.array([1.0])),
    )
    assert extract_variables(quad) == [LocalVariable(0), LocalVariable(1)]
    nl = LocalNonlinearFunction("*", (LocalVariable(2), LocalVariable(2), aff))
    assert extract_variables(nl) == [LocalVariable(2), LocalVariable(2)]


def test_local_affine_rejects_misaligned_arrays():
    with pytest.raises(ValueError, match="same shape"):
        LocalAffineFunction(np.array([0, 1]), np.array([1.0]))


def test_unknown_expression_rejected():
    with pytest.raises(TypeError):
        extract_variables("x + y")
    with pytest.raises(TypeError):
        referenced_variables(NonlinearExpr("f", ("x",)))
