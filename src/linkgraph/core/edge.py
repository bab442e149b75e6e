from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

from .exceptions import UnknownObjectError
from .indices import ConstraintIndex, ConstraintRef, ConstraintShape

if TYPE_CHECKING:
    from .backend import GraphBackend
    from .expressions import ScalarConstraint, VariableRef
    from .graph import Graph
    from .node import Node


class Edge:
    """A coupling between nodes, owned by the graph that created it.

    Linking constraints added to an edge are stored in the backend of
    :func:`optimizer_graph` and mirrored into every graph listed for the edge
    in its source graph's ``edge_to_graphs``.
    """

    def __init__(self, source_graph: "Graph", label: str, nodes: Iterable["Node"]):
        self.source_graph = source_graph
        self.label = label
        self.nodes: Tuple["Node", ...] = tuple(dict.fromkeys(nodes))
        self._obj_dict: Dict[str, Any] = {}

    def __str__(self) -> str:
        return self.label

    __repr__ = __str__

    # Object dictionary -------------------------------------------------------

    def __setitem__(self, name: str, value: Any) -> None:
        self._obj_dict[name] = value

    def __getitem__(self, name: str) -> Any:
        try:
            return self._obj_dict[name]
        except KeyError:
            raise UnknownObjectError(self, name) from None

    def __contains__(self, name: str) -> bool:
        return name in self._obj_dict

    def object_dictionary(self) -> Dict[str, Any]:
        return self._obj_dict

    # Containment -------------------------------------------------------------

    @property
    def optimizer_graph(self) -> "Graph":
        return self.source_graph.optimizer_graph

    @property
    def backend(self) -> "GraphBackend":
        return self.optimizer_graph.backend

    def containing_graphs(self) -> List["Graph"]:
        return containing_graphs(self)

    # Constraints -------------------------------------------------------------

    def add_constraint(self, constraint: "ScalarConstraint", name: str = "") -> ConstraintRef:
        from .registration import add_constraint

        return add_constraint(self, constraint, name)

    def next_constraint_index(self, function_kind, set_kind) -> ConstraintIndex:
        return self.backend.next_constraint_index(self, ConstraintShape.of(function_kind, set_kind))

    def num_constraints(self, function_kind, set_kind) -> int:
        from .queries import num_constraints

        return num_constraints(self, function_kind, set_kind)

    def list_constraint_types(self) -> List[ConstraintShape]:
        from .queries import list_constraint_types

        return list_constraint_types(self)

    def list_constraints(self, function_kind, set_kind) -> List[ConstraintRef]:
        from .queries import list_constraints

        return list_constraints(self, function_kind, set_kind)

    def all_variables(self) -> List["VariableRef"]:
        from .queries import all_variables

        return all_variables(self)

    def constraint_object(
        self, ref: ConstraintRef, graph: Optional["Graph"] = None
    ) -> "ScalarConstraint":
        from .queries import constraint_object

        return constraint_object(ref, graph)


def source_graph(edge: Edge) -> "Graph":
    return edge.source_graph


def optimizer_graph(edge: Edge) -> "Graph":
    return edge.source_graph.optimizer_graph


def graph_backend(edge: Edge) -> "GraphBackend":
    return optimizer_graph(edge).backend


def containing_graphs(edge: Edge) -> List["Graph"]:
    """The optimizer graph of ``edge`` followed by every graph mirroring it.

    Graphs that share a backend with an earlier entry are skipped.
    """
    graphs = [optimizer_graph(edge)]
    seen = {id(graphs[0].backend)}
    for graph in edge.source_graph.edge_to_graphs.get(edge, ()):
        if id(graph.backend) not in seen:
            seen.add(id(graph.backend))
            graphs.append(graph)
    return graphs


def set_object(edge: Edge, name: str, value: Any) -> None:
    edge[name] = value


def get_object(edge: Edge, name: str) -> Any:
    return edge[name]


def object_dictionary(edge: Edge) -> Dict[str, Any]:
    return edge.object_dictionary()
