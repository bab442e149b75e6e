from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class FunctionKind(str, Enum):
    VARIABLE = "variable"
    AFFINE = "affine"
    QUADRATIC = "quadratic"
    NONLINEAR = "nonlinear"


class SetKind(str, Enum):
    EQUAL_TO = "equal_to"
    LESS_THAN = "less_than"
    GREATER_THAN = "greater_than"
    INTERVAL = "interval"


class ValueShape(str, Enum):
    SCALAR = "scalar"


@dataclass(frozen=True)
class ConstraintShape:
    """The (function-kind, set-kind) pair partitioning constraint index namespaces."""

    function: FunctionKind
    set: SetKind

    @classmethod
    def of(
        cls,
        function: Union[FunctionKind, str],
        set_kind: Union[SetKind, str],
    ) -> "ConstraintShape":
        return cls(FunctionKind(function), SetKind(set_kind))

    def __str__(self) -> str:
        return f"{self.function.value}-in-{self.set.value}"


@dataclass(frozen=True)
class ConstraintIndex:
    shape: ConstraintShape
    value: int

    def __str__(self) -> str:
        return f"{self.shape}[{self.value}]"


@dataclass(frozen=True)
class ConstraintRef:
    element: Any
    index: ConstraintIndex
    value_shape: ValueShape = ValueShape.SCALAR

    @property
    def shape(self) -> ConstraintShape:
        return self.index.shape

    def __repr__(self) -> str:
        return f"ConstraintRef({self.element}, {self.index})"
