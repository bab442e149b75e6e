from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .exceptions import ConstraintNotFoundError
from .expressions import ScalarConstraint, VariableRef, extract_variables
from .indices import ConstraintRef, ConstraintShape

if TYPE_CHECKING:
    from .backend import GraphBackend
    from .graph import Graph


def _backend_of(element: Any, backend: Optional["GraphBackend"]) -> "GraphBackend":
    return backend if backend is not None else element.backend


def list_constraint_types(
    element: Any, backend: Optional["GraphBackend"] = None
) -> List[ConstraintShape]:
    indices = _backend_of(element, backend).element_constraints.get(element, ())
    return list(dict.fromkeys(index.shape for index in indices))


def list_constraints(
    element: Any,
    function_kind,
    set_kind,
    backend: Optional["GraphBackend"] = None,
) -> List[ConstraintRef]:
    shape = ConstraintShape.of(function_kind, set_kind)
    gb = _backend_of(element, backend)
    return [
        gb.constraint_ref(element, index)
        for index in gb.element_constraints.get(element, ())
        if index.shape == shape
    ]


def num_constraints(
    element: Any,
    function_kind,
    set_kind,
    backend: Optional["GraphBackend"] = None,
) -> int:
    shape = ConstraintShape.of(function_kind, set_kind)
    return _backend_of(element, backend).num_constraints(element, shape)


def constraint_object(ref: ConstraintRef, graph: Optional["Graph"] = None) -> ScalarConstraint:
    """The constraint behind ``ref`` with graph-level variables.

    Read from the backend of ``graph`` when given, else the element's primary backend.
    """
    if graph is None:
        return ref.element.backend.constraint_object(ref)
    if not graph.backend.has_constraint(ref):
        raise ConstraintNotFoundError(ref, graph)
    return graph.backend.constraint_object(ref)


def constraint_name(ref: ConstraintRef) -> str:
    return ref.element.backend.constraint_name(ref)


def constraint_variables(ref: ConstraintRef) -> List[VariableRef]:
    return extract_variables(constraint_object(ref).func)


def all_variables(edge: Any) -> List[VariableRef]:
    """Distinct variables used by the constraints registered on ``edge``."""
    gb = edge.backend
    found: Dict[VariableRef, None] = {}
    for index in gb.element_constraints.get(edge, ()):
        for var in constraint_variables(gb.constraint_ref(edge, index)):
            found.setdefault(var, None)
    return list(found.keys())
