from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from .backend import BackendConfig, GraphBackend, ModelStore
from .edge import Edge, containing_graphs
from .exceptions import DuplicateLabelError
from .node import Node

logger = logging.getLogger(__name__)


class Graph:
    """A container of nodes, edges and sub-graphs.

    Each graph has an optimizer graph whose backend stores its data: itself by
    default, or the parent's optimizer graph for sub-graphs created with
    ``share_backend=True``.
    """

    def __init__(
        self,
        label: str = "graph",
        *,
        config: Optional[BackendConfig] = None,
        store: Optional[ModelStore] = None,
        parent: Optional["Graph"] = None,
        optimizer_graph: Optional["Graph"] = None,
    ):
        self.label = label
        self.parent = parent
        self.optimizer_graph: "Graph" = optimizer_graph if optimizer_graph is not None else self
        self._backend: Optional[GraphBackend] = None
        if self.optimizer_graph is self:
            self._backend = GraphBackend(self, config=config, store=store)
        elif config is not None or store is not None:
            raise ValueError("A graph sharing its parent's backend cannot take its own config or store")
        self._nodes: Dict[str, Node] = {}
        self._edges: Dict[str, Edge] = {}
        self._subgraphs: Dict[str, "Graph"] = {}
        self.edge_to_graphs: Dict[Edge, List["Graph"]] = {}

    def __repr__(self) -> str:
        return f"Graph({self.label!r})"

    @property
    def backend(self) -> GraphBackend:
        if self.optimizer_graph is self:
            return self._backend
        return self.optimizer_graph.backend

    # Structure ---------------------------------------------------------------

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    @property
    def subgraphs(self) -> List["Graph"]:
        return list(self._subgraphs.values())

    def add_node(self, label: Optional[str] = None) -> Node:
        label = label or f"{self.label}.n{len(self._nodes) + 1}"
        if label in self._nodes:
            raise DuplicateLabelError("Node", label, self)
        node = Node(self, label)
        self._nodes[label] = node
        return node

    def add_edge(self, nodes: Iterable[Node], label: Optional[str] = None) -> Edge:
        label = label or f"{self.label}.e{len(self._edges) + 1}"
        if label in self._edges:
            raise DuplicateLabelError("Edge", label, self)
        edge = Edge(self, label, nodes)
        if not edge.nodes:
            raise ValueError("An edge must couple at least one node")
        self._edges[label] = edge
        return edge

    def add_subgraph(
        self,
        label: Optional[str] = None,
        *,
        share_backend: bool = False,
        config: Optional[BackendConfig] = None,
        store: Optional[ModelStore] = None,
    ) -> "Graph":
        label = label or f"{self.label}.g{len(self._subgraphs) + 1}"
        if label in self._subgraphs:
            raise DuplicateLabelError("Subgraph", label, self)
        subgraph = Graph(
            label,
            config=config,
            store=store,
            parent=self,
            optimizer_graph=self.optimizer_graph if share_backend else None,
        )
        self._subgraphs[label] = subgraph
        return subgraph

    def node(self, label: str) -> Node:
        return self._nodes[label]

    def edge(self, label: str) -> Edge:
        return self._edges[label]

    def ancestors(self) -> List["Graph"]:
        found = []
        graph = self.parent
        while graph is not None:
            found.append(graph)
            graph = graph.parent
        return found

    # Mirroring ---------------------------------------------------------------

    def mirror_edge(self, edge: Edge, graph: "Graph") -> None:
        """Also store ``edge``'s constraints in the backend of enclosing ``graph``.

        Constraints already on the edge are replayed into the new backend.
        """
        if edge.source_graph is not self:
            raise ValueError(f"Edge {edge} belongs to graph '{edge.source_graph.label}'")
        if graph is not self and graph not in self.ancestors():
            raise ValueError(f"Graph '{graph.label}' does not enclose '{self.label}'")
        backend = graph.backend
        if any(g.backend is backend for g in containing_graphs(edge)):
            raise ValueError(f"Backend of '{graph.label}' already holds edge {edge}")

        from .registration import replay_constraints

        replay_constraints(edge, graph)
        self.edge_to_graphs.setdefault(edge, []).append(graph)
        logger.debug("Mirroring edge %s into graph %s", edge, graph.label)
