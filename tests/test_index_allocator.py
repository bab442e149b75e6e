from hypothesis import given, settings
from hypothesis import strategies as st

from linkgraph import (
    AffExpr,
    ConstraintShape,
    EqualTo,
    FunctionKind,
    GreaterThan,
    Graph,
    Interval,
    LessThan,
    QuadExpr,
    ScalarConstraint,
    SetKind,
)


def _constraint(choice: int, x, y) -> ScalarConstraint:
    if choice == 0:
        return ScalarConstraint(AffExpr.from_terms([(1.0, x), (1.0, y)]), LessThan(1.0))
    if choice == 1:
        return ScalarConstraint(AffExpr.from_terms([(1.0, x)], 2.0), EqualTo(0.0))
    if choice == 2:
        return ScalarConstraint(x, GreaterThan(0.0))
    return ScalarConstraint(QuadExpr.from_terms([(1.0, x, y)]), Interval(-1.0, 1.0))


def _single_graph():
    graph = Graph("g")
    node = graph.add_node("n")
    x, y = node.add_variable("x"), node.add_variable("y")
    return graph, node, x, y


@settings(max_examples=50, deadline=None)
@given(st.lists(st.integers(min_value=0, max_value=3), max_size=25))
def test_indices_are_dense_per_shape(choices):
    graph, node, x, y = _single_graph()
    edge = graph.add_edge([node])
    counts = {}
    for choice in choices:
        ref = edge.add_constraint(_constraint(choice, x, y))
        counts[ref.shape] = counts.get(ref.shape, 0) + 1
        assert ref.index.value == counts[ref.shape]
    for shape, count in counts.items():
        refs = edge.list_constraints(shape.function, shape.set)
        assert [ref.index.value for ref in refs] == list(range(1, count + 1))
        assert edge.num_constraints(shape.function, shape.set) == count


def test_next_index_is_pure():
    graph, node, x, y = _single_graph()
    edge = graph.add_edge([node])
    first = edge.next_constraint_index(FunctionKind.AFFINE, SetKind.LESS_THAN)
    second = edge.next_constraint_index("affine", "less_than")
    assert first == second
    assert first.value == 1
    assert edge.num_constraints("affine", "less_than") == 0


def test_indices_are_independent_per_element():
    graph, node, x, y = _single_graph()
    e1 = graph.add_edge([node], label="e1")
    e2 = graph.add_edge([node], label="e2")
    r1 = e1.add_constraint(_constraint(0, x, y))
    r2 = e1.add_constraint(_constraint(0, x, y))
    r3 = e2.add_constraint(_constraint(0, x, y))
    assert (r1.index.value, r2.index.value, r3.index.value) == (1, 2, 1)
    assert r1 != r3


def test_mirrored_backends_allocate_their_own_slots(nested):
    nested.leaf.mirror_edge(nested.edge, nested.root)
    other = nested.root.add_edge([nested.n1], label="outer")
    other.add_constraint(_constraint(0, nested.u, nested.v))
    refs = [
        nested.edge.add_constraint(_constraint(0, nested.u, nested.v)) for _ in range(3)
    ]
    shape = ConstraintShape(FunctionKind.AFFINE, SetKind.LESS_THAN)
    for k, ref in enumerate(refs, start=1):
        assert ref.index.value == k
        assert nested.root.backend.local_constraint(ref).index.value == k
        assert nested.leaf.backend.local_constraint(ref).index.value == k
    assert nested.root.backend.num_constraints(nested.edge, shape) == 3
    assert nested.root.backend.num_constraints(other, shape) == 1
    assert [nested.root.backend.local_constraint(ref).row for ref in refs] == [1, 2, 3]
    assert [nested.leaf.backend.local_constraint(ref).row for ref in refs] == [0, 1, 2]
    assert nested.root.backend.store.num_constraints == 4
