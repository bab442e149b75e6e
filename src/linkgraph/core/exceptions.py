from __future__ import annotations

from typing import Any, Optional, Sequence


class LinkGraphError(Exception):
    """Base class for linkgraph-specific exceptions."""


class UnknownObjectError(LinkGraphError, KeyError):
    def __init__(self, owner: Any, name: str):
        super().__init__(f"No object named '{name}' on {_describe(owner)}")
        self.owner = owner
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class UnsupportedShapeError(LinkGraphError, ValueError):
    def __init__(self, message: str, *, shape: Optional[Any] = None):
        super().__init__(message)
        self.shape = shape


class MissingVariableError(LinkGraphError, LookupError):
    def __init__(self, variable: Any):
        super().__init__(f"Variable {variable!r} does not belong to any node")
        self.variable = variable


class DuplicateLabelError(LinkGraphError, ValueError):
    def __init__(self, kind: str, label: str, graph: Any):
        super().__init__(f"{kind} label '{label}' already used in graph {_describe(graph)}")
        self.kind = kind
        self.label = label


class ConstraintNotFoundError(LinkGraphError, KeyError):
    def __init__(self, ref: Any, graph: Any):
        super().__init__(f"Constraint {ref!r} is not stored in the backend of {_describe(graph)}")
        self.ref = ref
        self.graph = graph

    def __str__(self) -> str:
        return str(self.args[0])


class PartialRegistrationError(LinkGraphError, RuntimeError):
    """A constraint reached some containing backends but not all of them.

    Backends listed in ``succeeded`` keep the constraint; nothing is rolled back.
    """

    def __init__(
        self,
        ref: Any,
        *,
        succeeded: Sequence[Any],
        failed: Any,
        cause: BaseException,
    ):
        done = ", ".join(_describe(g) for g in succeeded) or "-"
        super().__init__(
            f"Constraint {ref!r} registered in [{done}] but failed in "
            f"{_describe(failed)}: {cause}"
        )
        self.ref = ref
        self.succeeded = list(succeeded)
        self.failed = failed
        self.cause = cause


def _describe(obj: Any) -> str:
    label = getattr(obj, "label", None)
    if label is None:
        return repr(obj)
    return f"'{label}'"
