from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

from .exceptions import UnknownObjectError
from .expressions import VariableRef

if TYPE_CHECKING:
    from .backend import GraphBackend
    from .graph import Graph


class Node:
    """A scope of local variables inside a graph.

    Variables are registered in the node's home backend, the backend of its
    graph's optimizer graph, as soon as they are created.
    """

    def __init__(self, graph: "Graph", label: str):
        self.source_graph = graph
        self.label = label
        self._variables: List[VariableRef] = []
        self._obj_dict: Dict[str, Any] = {}

    def __str__(self) -> str:
        return self.label

    __repr__ = __str__

    @property
    def optimizer_graph(self) -> "Graph":
        return self.source_graph.optimizer_graph

    @property
    def backend(self) -> "GraphBackend":
        return self.optimizer_graph.backend

    @property
    def variables(self) -> List[VariableRef]:
        return list(self._variables)

    @property
    def num_variables(self) -> int:
        return len(self._variables)

    def add_variable(self, name: str = "") -> VariableRef:
        var = VariableRef(self, len(self._variables), name or f"{self.label}[{len(self._variables)}]")
        self._variables.append(var)
        self.backend.add_variable(var)
        if name:
            self._obj_dict[name] = var
        return var

    def owns(self, var: VariableRef) -> bool:
        return (
            var.node is self
            and 0 <= var.index < len(self._variables)
            and self._variables[var.index] == var
        )

    def __getitem__(self, name: str) -> Any:
        try:
            return self._obj_dict[name]
        except KeyError:
            raise UnknownObjectError(self, name) from None

    def __setitem__(self, name: str, value: Any) -> None:
        self._obj_dict[name] = value
