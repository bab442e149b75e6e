import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _load_version

from .core.backend import BackendConfig, GraphBackend, InMemoryModelStore, ModelStore
from .core.edge import (
    Edge,
    containing_graphs,
    get_object,
    graph_backend,
    object_dictionary,
    optimizer_graph,
    set_object,
    source_graph,
)
from .core.exceptions import (
    ConstraintNotFoundError,
    DuplicateLabelError,
    LinkGraphError,
    MissingVariableError,
    PartialRegistrationError,
    UnknownObjectError,
    UnsupportedShapeError,
)
from .core.expressions import (
    AffExpr,
    LocalVariable,
    NonlinearExpr,
    QuadExpr,
    ScalarConstraint,
    VariableRef,
    extract_variables,
    referenced_variables,
)
from .core.graph import Graph
from .core.indices import (
    ConstraintIndex,
    ConstraintRef,
    ConstraintShape,
    FunctionKind,
    SetKind,
)
from .core.node import Node
from .core.queries import (
    all_variables,
    constraint_name,
    constraint_object,
    constraint_variables,
    list_constraint_types,
    list_constraints,
    num_constraints,
)
from .core.registration import add_constraint
from .core.sets import EqualTo, GreaterThan, Interval, LessThan

logging.getLogger(__name__).addHandler(logging.NullHandler())

try:
    __version__ = _load_version("linkgraph")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "Graph",
    "Node",
    "Edge",
    "GraphBackend",
    "BackendConfig",
    "ModelStore",
    "InMemoryModelStore",
    "VariableRef",
    "LocalVariable",
    "AffExpr",
    "QuadExpr",
    "NonlinearExpr",
    "ScalarConstraint",
    "EqualTo",
    "LessThan",
    "GreaterThan",
    "Interval",
    "FunctionKind",
    "SetKind",
    "ConstraintShape",
    "ConstraintIndex",
    "ConstraintRef",
    "add_constraint",
    "extract_variables",
    "referenced_variables",
    "containing_graphs",
    "source_graph",
    "optimizer_graph",
    "graph_backend",
    "set_object",
    "get_object",
    "object_dictionary",
    "list_constraint_types",
    "list_constraints",
    "num_constraints",
    "all_variables",
    "constraint_object",
    "constraint_name",
    "constraint_variables",
    "LinkGraphError",
    "UnknownObjectError",
    "UnsupportedShapeError",
    "MissingVariableError",
    "PartialRegistrationError",
    "DuplicateLabelError",
    "ConstraintNotFoundError",
    "__version__",
]
