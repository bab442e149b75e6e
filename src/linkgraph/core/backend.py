from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple, Union

from .canonical import from_local, to_local
from .exceptions import ConstraintNotFoundError, MissingVariableError, UnsupportedShapeError
from .expressions import LocalVariable, ScalarConstraint, VariableRef
from .indices import ConstraintIndex, ConstraintRef, ConstraintShape, FunctionKind, SetKind

logger = logging.getLogger(__name__)

REGISTRATION_MODES = ("atomic", "best_effort")


@dataclass(frozen=True)
class BackendConfig:
    """
    Switches for a graph backend.

    * ``supported_functions`` / ``supported_sets`` restrict which constraint
      shapes the backend accepts; ``None`` accepts every kind.
    * ``registration`` selects how a constraint spanning several backends is
      committed: ``"atomic"`` stages every backend before touching any of them,
      ``"best_effort"`` commits backend by backend and reports partial results.
    """

    supported_functions: Optional[Tuple[Union[FunctionKind, str], ...]] = None
    supported_sets: Optional[Tuple[Union[SetKind, str], ...]] = None
    registration: str = "atomic"  # "atomic" | "best_effort"

    def normalized(self) -> "BackendConfig":
        registration = (self.registration or "atomic").lower().replace("-", "_")
        if registration not in REGISTRATION_MODES:
            raise ValueError(f"Unsupported registration mode: {self.registration}")
        functions = self.supported_functions
        if functions is not None:
            functions = tuple(_coerce_kind(FunctionKind, item) for item in functions)
        sets = self.supported_sets
        if sets is not None:
            sets = tuple(_coerce_kind(SetKind, item) for item in sets)
        return replace(
            self,
            supported_functions=functions,
            supported_sets=sets,
            registration=registration,
        )

    def supports(self, shape: ConstraintShape) -> bool:
        if self.supported_functions is not None and shape.function not in self.supported_functions:
            return False
        if self.supported_sets is not None and shape.set not in self.supported_sets:
            return False
        return True


def _coerce_kind(enum_type, value):
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).lower())
    except ValueError:
        raise ValueError(f"Unknown {enum_type.__name__}: {value!r}") from None


class ModelStore(Protocol):
    num_variables: int
    num_constraints: int

    def add_variable(self) -> int:
        """Allocate a new variable column."""

    def add_constraint(self, function: Any, con_set: Any) -> int:
        """Store a backend-local constraint and return its row."""

    def get_constraint(self, row: int) -> Tuple[Any, Any]:
        """Return the (function, set) stored at ``row``."""


@dataclass
class InMemoryModelStore:
    rows: List[Tuple[Any, Any]] = field(default_factory=list)
    num_variables: int = 0

    @property
    def num_constraints(self) -> int:
        return len(self.rows)

    def add_variable(self) -> int:
        column = self.num_variables
        self.num_variables += 1
        return column

    def add_constraint(self, function: Any, con_set: Any) -> int:
        self.rows.append((function, con_set))
        return len(self.rows) - 1

    def get_constraint(self, row: int) -> Tuple[Any, Any]:
        if not 0 <= row < len(self.rows):
            raise KeyError(f"Row {row} not found in store")
        return self.rows[row]


@dataclass(frozen=True)
class BackendConstraint:
    element: Any
    index: ConstraintIndex
    row: int
    ref: ConstraintRef
    name: str = ""


class GraphBackend:
    """Constraint and variable bookkeeping for one optimizer graph.

    Keeps its own column space for variables and, per element, a dense index
    space for each constraint shape. Graph-level :class:`ConstraintRef` objects
    resolve to local entries through ``_by_ref``.

    Not thread-safe: index allocation is a read followed by a write.
    """

    def __init__(
        self,
        graph: Any,
        config: Optional[BackendConfig] = None,
        store: Optional[ModelStore] = None,
    ):
        self.graph = graph
        self.config = (config or BackendConfig()).normalized()
        self.store = store if store is not None else InMemoryModelStore()
        self._columns: Dict[VariableRef, int] = {}
        self._variables: Dict[int, VariableRef] = {}
        self.element_constraints: Dict[Any, List[ConstraintIndex]] = {}
        self._counts: Dict[Tuple[Any, ConstraintShape], int] = {}
        self._entries: Dict[Tuple[Any, ConstraintIndex], BackendConstraint] = {}
        self._by_ref: Dict[ConstraintRef, BackendConstraint] = {}
        logger.debug("Created backend for graph %s", getattr(graph, "label", graph))

    def __repr__(self) -> str:
        return f"GraphBackend({getattr(self.graph, 'label', self.graph)})"

    # Variables ---------------------------------------------------------------

    @property
    def num_variables(self) -> int:
        return len(self._columns)

    def has_variable(self, var: VariableRef) -> bool:
        return var in self._columns

    def add_variable(self, var: VariableRef) -> LocalVariable:
        if var in self._columns:
            return LocalVariable(self._columns[var])
        column = self.store.add_variable()
        self._columns[var] = column
        self._variables[column] = var
        return LocalVariable(column)

    def add_variables(self, variables: Iterable[VariableRef]) -> List[VariableRef]:
        """Register the absent ``variables``; return the ones that were new."""
        added = []
        for var in variables:
            if var not in self._columns:
                self.add_variable(var)
                added.append(var)
        return added

    def column(self, var: VariableRef) -> int:
        try:
            return self._columns[var]
        except KeyError:
            raise MissingVariableError(var) from None

    def variable(self, column: Union[int, LocalVariable]) -> VariableRef:
        key = column.column if isinstance(column, LocalVariable) else int(column)
        try:
            return self._variables[key]
        except KeyError:
            raise KeyError(f"Column {key} not found in {self!r}") from None

    def all_variables(self) -> List[VariableRef]:
        return list(self._columns.keys())

    # Constraint indices ------------------------------------------------------

    def num_constraints(self, element: Any, shape: ConstraintShape) -> int:
        return self._counts.get((element, shape), 0)

    def next_constraint_index(self, element: Any, shape: ConstraintShape) -> ConstraintIndex:
        return ConstraintIndex(shape, self.num_constraints(element, shape) + 1)

    def supports(self, shape: ConstraintShape) -> bool:
        return self.config.supports(shape)

    def check_supports(self, shape: ConstraintShape) -> None:
        if not self.supports(shape):
            raise UnsupportedShapeError(
                f"Backend of graph '{getattr(self.graph, 'label', self.graph)}' "
                f"does not accept {shape} constraints",
                shape=shape,
            )

    def add_element_constraint(
        self,
        ref: ConstraintRef,
        function: Any,
        con_set: Any,
        name: str = "",
    ) -> BackendConstraint:
        """Store a graph-level constraint, remapped into this backend's columns.

        Every variable in ``function`` must already be registered here.
        """
        self.check_supports(ref.shape)
        if ref in self._by_ref:
            raise ValueError(f"{ref!r} already stored in {self!r}")
        local_function = to_local(function, self.column)
        element = ref.element
        index = self.next_constraint_index(element, ref.shape)
        row = self.store.add_constraint(local_function, con_set)
        entry = BackendConstraint(element=element, index=index, row=row, ref=ref, name=name)
        self.element_constraints.setdefault(element, []).append(index)
        self._counts[(element, ref.shape)] = index.value
        self._entries[(element, index)] = entry
        self._by_ref[ref] = entry
        logger.debug("Stored %r as %s (row %d) in %r", ref, index, row, self)
        return entry

    # Lookup ------------------------------------------------------------------

    def has_constraint(self, ref: ConstraintRef) -> bool:
        return ref in self._by_ref

    def local_constraint(self, ref: ConstraintRef) -> BackendConstraint:
        try:
            return self._by_ref[ref]
        except KeyError:
            raise ConstraintNotFoundError(ref, self.graph) from None

    def constraint_ref(self, element: Any, index: ConstraintIndex) -> ConstraintRef:
        try:
            return self._entries[(element, index)].ref
        except KeyError:
            raise KeyError(f"No constraint {index} on {element} in {self!r}") from None

    def local_function(self, ref: ConstraintRef) -> Tuple[Any, Any]:
        return self.store.get_constraint(self.local_constraint(ref).row)

    def constraint_object(self, ref: ConstraintRef) -> ScalarConstraint:
        local_function, con_set = self.local_function(ref)
        return ScalarConstraint(from_local(local_function, self.variable), con_set)

    def constraint_name(self, ref: ConstraintRef) -> str:
        return self.local_constraint(ref).name
