"""Registration of linking constraints into every backend that holds an edge.

A constraint on an edge gets its :class:`ConstraintRef` from the edge's primary
backend, then is stored in each graph returned by :func:`containing_graphs`.
Variables a backend has never seen are registered there first, which is how a
parent backend learns about variables living in sub-graph backends.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple

from .canonical import canonicalize
from .edge import Edge, containing_graphs, graph_backend
from .exceptions import MissingVariableError, PartialRegistrationError
from .expressions import ScalarConstraint, VariableRef, referenced_variables
from .indices import ConstraintRef

if TYPE_CHECKING:
    from .graph import Graph

logger = logging.getLogger(__name__)


def add_constraint(edge: Edge, constraint: ScalarConstraint, name: str = "") -> ConstraintRef:
    function, con_set, shape = canonicalize(constraint)
    primary = graph_backend(edge)
    ref = ConstraintRef(edge, primary.next_constraint_index(edge, shape))
    graphs = containing_graphs(edge)

    if primary.config.registration == "best_effort":
        staged = [(graph, None) for graph in graphs]
    else:
        staged = [(graph, _stage(graph, ref, function)) for graph in graphs]
    _commit_in_order(ref, function, con_set, staged, name)
    return ref


def replay_constraints(edge: Edge, graph: "Graph") -> List[ConstraintRef]:
    """Copy every constraint already on ``edge`` into the backend of ``graph``.

    All constraints are staged before the first one is stored.
    """
    primary = graph_backend(edge)
    staged = []
    for index in primary.element_constraints.get(edge, ()):
        ref = primary.constraint_ref(edge, index)
        con = primary.constraint_object(ref)
        staged.append((ref, con, primary.constraint_name(ref), _stage(graph, ref, con.func)))
    for ref, con, name, missing in staged:
        _commit(graph, ref, con.func, con.set, missing, name)
    return [ref for ref, *_ in staged]


def _commit_in_order(
    ref: ConstraintRef,
    function: Any,
    con_set: Any,
    staged: Sequence[Tuple["Graph", Optional[List[VariableRef]]]],
    name: str,
) -> None:
    """Commit ``ref`` graph by graph; ``None`` entries are staged on the way.

    The first failure is raised as is. A failure after at least one commit is
    reported as :class:`PartialRegistrationError`; committed backends keep the
    constraint.
    """
    succeeded: List["Graph"] = []
    for graph, missing in staged:
        try:
            if missing is None:
                missing = _stage(graph, ref, function)
            _commit(graph, ref, function, con_set, missing, name)
        except Exception as exc:
            if not succeeded:
                raise
            raise PartialRegistrationError(
                ref, succeeded=succeeded, failed=graph, cause=exc
            ) from exc
        succeeded.append(graph)


def _stage(graph: "Graph", ref: ConstraintRef, function: Any) -> List[VariableRef]:
    """Validate ``function`` against ``graph``'s backend; return variables it lacks."""
    backend = graph.backend
    backend.check_supports(ref.shape)
    missing = []
    for var in referenced_variables(function):
        _check_home(var)
        if not backend.has_variable(var):
            missing.append(var)
    return missing


def _check_home(var: VariableRef) -> None:
    owns = getattr(var.node, "owns", None)
    if owns is None or not owns(var):
        raise MissingVariableError(var)


def _commit(
    graph: "Graph",
    ref: ConstraintRef,
    function: Any,
    con_set: Any,
    missing: Sequence[VariableRef],
    name: str,
) -> None:
    backend = graph.backend
    for var in missing:
        if backend.has_variable(var):
            continue
        backend.add_variable(var)
        logger.debug("Introduced variable %r into backend of graph %s", var, graph.label)
    backend.add_element_constraint(ref, function, con_set, name)
