from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .indices import SetKind


@dataclass(frozen=True)
class EqualTo:
    value: float

    kind = SetKind.EQUAL_TO

    def shifted(self, delta: float) -> "EqualTo":
        return EqualTo(self.value + delta)


@dataclass(frozen=True)
class LessThan:
    upper: float

    kind = SetKind.LESS_THAN

    def shifted(self, delta: float) -> "LessThan":
        return LessThan(self.upper + delta)


@dataclass(frozen=True)
class GreaterThan:
    lower: float

    kind = SetKind.GREATER_THAN

    def shifted(self, delta: float) -> "GreaterThan":
        return GreaterThan(self.lower + delta)


@dataclass(frozen=True)
class Interval:
    lower: float
    upper: float

    kind = SetKind.INTERVAL

    def __post_init__(self):
        if self.lower > self.upper:
            raise ValueError(
                f"Interval lower bound {self.lower} exceeds upper bound {self.upper}"
            )

    def shifted(self, delta: float) -> "Interval":
        return Interval(self.lower + delta, self.upper + delta)


ScalarSet = Union[EqualTo, LessThan, GreaterThan, Interval]

SCALAR_SETS = (EqualTo, LessThan, GreaterThan, Interval)


def set_kind(con_set: object) -> SetKind:
    if isinstance(con_set, SCALAR_SETS):
        return con_set.kind
    raise TypeError(f"Unsupported constraint set {con_set!r}")
