from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from .indices import FunctionKind


@dataclass(frozen=True, repr=False)
class VariableRef:
    node: Any
    index: int
    name: str = field(default="", compare=False)

    def __repr__(self) -> str:
        if self.name:
            return self.name
        return f"{getattr(self.node, 'label', self.node)}[{self.index}]"


class UnorderedPair:
    __slots__ = ("first", "second")

    def __init__(self, first: VariableRef, second: VariableRef):
        self.first = first
        self.second = second

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnorderedPair):
            return NotImplemented
        return (self.first == other.first and self.second == other.second) or (
            self.first == other.second and self.second == other.first
        )

    def __hash__(self) -> int:
        return hash(frozenset((self.first, self.second)))

    def __iter__(self):
        yield self.first
        yield self.second

    def __repr__(self) -> str:
        return f"UnorderedPair({self.first!r}, {self.second!r})"


@dataclass
class AffExpr:
    terms: Dict[VariableRef, float] = field(default_factory=dict)
    constant: float = 0.0

    @classmethod
    def from_terms(
        cls,
        terms: Iterable[Tuple[float, VariableRef]],
        constant: float = 0.0,
    ) -> "AffExpr":
        merged: Dict[VariableRef, float] = {}
        for coef, var in terms:
            merged[var] = merged.get(var, 0.0) + float(coef)
        return cls(terms=merged, constant=float(constant))


@dataclass
class QuadExpr:
    terms: Dict[UnorderedPair, float] = field(default_factory=dict)
    aff: AffExpr = field(default_factory=AffExpr)

    @classmethod
    def from_terms(
        cls,
        terms: Iterable[Tuple[float, VariableRef, VariableRef]],
        aff: Optional[AffExpr] = None,
    ) -> "QuadExpr":
        merged: Dict[UnorderedPair, float] = {}
        for coef, first, second in terms:
            pair = UnorderedPair(first, second)
            merged[pair] = merged.get(pair, 0.0) + float(coef)
        return cls(terms=merged, aff=aff if aff is not None else AffExpr())

    def quad_terms(self) -> List[Tuple[float, VariableRef, VariableRef]]:
        return [(coef, pair.first, pair.second) for pair, coef in self.terms.items()]


@dataclass
class NonlinearExpr:
    head: str
    args: Tuple[Any, ...] = ()

    def __post_init__(self):
        self.args = tuple(self.args)


@dataclass
class ScalarConstraint:
    func: Any
    set: Any


# Backend-local variants -----------------------------------------------------


@dataclass(frozen=True)
class LocalVariable:
    column: int


@dataclass(eq=False)
class LocalAffineFunction:
    columns: np.ndarray
    coefficients: np.ndarray
    constant: float = 0.0

    def __post_init__(self):
        self.columns = np.asarray(self.columns, dtype=np.int64)
        self.coefficients = np.asarray(self.coefficients, dtype=np.float64)
        if self.columns.shape != self.coefficients.shape:
            raise ValueError(
                f"columns {self.columns.shape} and coefficients "
                f"{self.coefficients.shape} must have the same shape"
            )


@dataclass(eq=False)
class LocalQuadraticFunction:
    rows: np.ndarray
    cols: np.ndarray
    coefficients: np.ndarray
    affine: LocalAffineFunction

    def __post_init__(self):
        self.rows = np.asarray(self.rows, dtype=np.int64)
        self.cols = np.asarray(self.cols, dtype=np.int64)
        self.coefficients = np.asarray(self.coefficients, dtype=np.float64)
        if not (self.rows.shape == self.cols.shape == self.coefficients.shape):
            raise ValueError("quadratic rows, cols and coefficients must align")


@dataclass
class LocalNonlinearFunction:
    head: str
    args: Tuple[Any, ...] = ()


Function = Any  # VariableRef | AffExpr | QuadExpr | NonlinearExpr | Local*


def function_kind(func: Function) -> FunctionKind:
    if isinstance(func, (VariableRef, LocalVariable)):
        return FunctionKind.VARIABLE
    if isinstance(func, (AffExpr, LocalAffineFunction)):
        return FunctionKind.AFFINE
    if isinstance(func, (QuadExpr, LocalQuadraticFunction)):
        return FunctionKind.QUADRATIC
    if isinstance(func, (NonlinearExpr, LocalNonlinearFunction)):
        return FunctionKind.NONLINEAR
    raise TypeError(f"Unsupported constraint function {type(func).__name__}")


def extract_variables(func: Function) -> List[Any]:
    """Variable handles referenced by ``func``.

    Affine and quadratic functions yield each handle once. Nonlinear trees only
    descend into nonlinear children and collect variable leaves, keeping
    repeats; callers that need a set deduplicate themselves.
    """
    if isinstance(func, (VariableRef, LocalVariable)):
        return [func]
    if isinstance(func, AffExpr):
        return list(func.terms.keys())
    if isinstance(func, LocalAffineFunction):
        return [LocalVariable(int(col)) for col in dict.fromkeys(func.columns.tolist())]
    if isinstance(func, QuadExpr):
        quad_vars: List[VariableRef] = []
        for pair in func.terms:
            quad_vars.extend(pair)
        return _union(quad_vars, extract_variables(func.aff))
    if isinstance(func, LocalQuadraticFunction):
        cols: List[LocalVariable] = []
        for row, col in zip(func.rows.tolist(), func.cols.tolist()):
            cols.append(LocalVariable(int(row)))
            cols.append(LocalVariable(int(col)))
        return _union(cols, extract_variables(func.affine))
    if isinstance(func, (NonlinearExpr, LocalNonlinearFunction)):
        leaf_type = VariableRef if isinstance(func, NonlinearExpr) else LocalVariable
        found: List[Any] = []
        for arg in func.args:
            if isinstance(arg, type(func)):
                found.extend(extract_variables(arg))
            elif isinstance(arg, leaf_type):
                found.append(arg)
        return found
    raise TypeError(f"Cannot extract variables from {type(func).__name__}")


def referenced_variables(func: Function) -> List[Any]:
    """Every distinct variable handle anywhere in ``func``, nested affine parts included."""
    seen: Dict[Any, None] = {}
    _collect_variables(func, seen)
    return list(seen.keys())


def _collect_variables(obj: Any, seen: Dict[Any, None]) -> None:
    if isinstance(obj, (NonlinearExpr, LocalNonlinearFunction)):
        for arg in obj.args:
            _collect_variables(arg, seen)
        return
    if isinstance(obj, (VariableRef, LocalVariable, AffExpr, QuadExpr,
                        LocalAffineFunction, LocalQuadraticFunction)):
        for var in extract_variables(obj):
            if var not in seen:
                seen[var] = None
        return
    if isinstance(obj, Real):
        return
    raise TypeError(f"Unsupported expression node {type(obj).__name__}")


def _union(first: List[Any], second: List[Any]) -> List[Any]:
    return list(dict.fromkeys([*first, *second]))
