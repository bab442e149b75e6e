from types import SimpleNamespace

import pytest

from linkgraph import Graph


@pytest.fixture
def linked():
    """Two sub-graphs with their own backends, coupled by an edge on the parent.

    root (backend Z)
      left  (backend X): node a, variable x
      right (backend Y): node b, variable y
      edge "link" couples a and b
    """
    root = Graph("root")
    left = root.add_subgraph("left")
    right = root.add_subgraph("right")
    a = left.add_node("a")
    b = right.add_node("b")
    x = a.add_variable("x")
    y = b.add_variable("y")
    edge = root.add_edge([a, b], label="link")
    return SimpleNamespace(root=root, left=left, right=right, a=a, b=b, x=x, y=y, edge=edge)


@pytest.fixture
def nested():
    """Three levels with separate backends; the leaf edge is mirrored upward."""
    root = Graph("root")
    mid = root.add_subgraph("mid")
    leaf = mid.add_subgraph("leaf")
    n1 = leaf.add_node("n1")
    n2 = leaf.add_node("n2")
    u = n1.add_variable("u")
    v = n2.add_variable("v")
    edge = leaf.add_edge([n1, n2], label="inner")
    return SimpleNamespace(root=root, mid=mid, leaf=leaf, n1=n1, n2=n2, u=u, v=v, edge=edge)
