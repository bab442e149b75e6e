from __future__ import annotations

from numbers import Real
from typing import Any, Callable, Tuple

import numpy as np

from .exceptions import UnsupportedShapeError
from .expressions import (
    AffExpr,
    LocalAffineFunction,
    LocalNonlinearFunction,
    LocalQuadraticFunction,
    LocalVariable,
    NonlinearExpr,
    QuadExpr,
    ScalarConstraint,
    UnorderedPair,
    VariableRef,
    function_kind,
)
from .indices import ConstraintShape
from .sets import SCALAR_SETS, set_kind


def canonicalize(constraint: ScalarConstraint) -> Tuple[Any, Any, ConstraintShape]:
    """Split a constraint into (function, set, shape) with constants folded into the set."""
    func, con_set = constraint.func, constraint.set
    if not isinstance(con_set, SCALAR_SETS):
        raise UnsupportedShapeError(
            f"Constraint set {type(con_set).__name__} has no registration rule"
        )
    if isinstance(func, AffExpr):
        func, con_set = AffExpr(dict(func.terms), 0.0), con_set.shifted(-func.constant)
    elif isinstance(func, QuadExpr):
        aff = AffExpr(dict(func.aff.terms), 0.0)
        func, con_set = QuadExpr(dict(func.terms), aff), con_set.shifted(-func.aff.constant)
    elif isinstance(func, NonlinearExpr):
        _check_nonlinear_args(func)
    elif not isinstance(func, VariableRef):
        raise UnsupportedShapeError(
            f"Constraint function {type(func).__name__} has no registration rule"
        )
    return func, con_set, ConstraintShape(function_kind(func), set_kind(con_set))


def to_local(func: Any, column_of: Callable[[VariableRef], int]) -> Any:
    """Rewrite graph-level variable handles in ``func`` into backend columns."""
    if isinstance(func, VariableRef):
        return LocalVariable(column_of(func))
    if isinstance(func, AffExpr):
        columns = np.fromiter((column_of(v) for v in func.terms), dtype=np.int64, count=len(func.terms))
        coefs = np.fromiter(func.terms.values(), dtype=np.float64, count=len(func.terms))
        return LocalAffineFunction(columns, coefs, func.constant)
    if isinstance(func, QuadExpr):
        n = len(func.terms)
        rows = np.fromiter((column_of(p.first) for p in func.terms), dtype=np.int64, count=n)
        cols = np.fromiter((column_of(p.second) for p in func.terms), dtype=np.int64, count=n)
        coefs = np.fromiter(func.terms.values(), dtype=np.float64, count=n)
        return LocalQuadraticFunction(rows, cols, coefs, to_local(func.aff, column_of))
    if isinstance(func, NonlinearExpr):
        return LocalNonlinearFunction(
            func.head, tuple(_arg_to_local(arg, column_of) for arg in func.args)
        )
    raise UnsupportedShapeError(f"Cannot remap {type(func).__name__} into a backend")


def from_local(func: Any, variable_of: Callable[[int], VariableRef]) -> Any:
    """Inverse of :func:`to_local`."""
    if isinstance(func, LocalVariable):
        return variable_of(func.column)
    if isinstance(func, LocalAffineFunction):
        terms = {
            variable_of(int(col)): float(coef)
            for col, coef in zip(func.columns.tolist(), func.coefficients.tolist())
        }
        return AffExpr(terms, float(func.constant))
    if isinstance(func, LocalQuadraticFunction):
        quad = {}
        for row, col, coef in zip(func.rows.tolist(), func.cols.tolist(), func.coefficients.tolist()):
            quad[UnorderedPair(variable_of(int(row)), variable_of(int(col)))] = float(coef)
        return QuadExpr(quad, from_local(func.affine, variable_of))
    if isinstance(func, LocalNonlinearFunction):
        return NonlinearExpr(
            func.head, tuple(_arg_from_local(arg, variable_of) for arg in func.args)
        )
    raise UnsupportedShapeError(f"Cannot map {type(func).__name__} back to graph variables")


def _arg_to_local(arg: Any, column_of: Callable[[VariableRef], int]) -> Any:
    if isinstance(arg, Real):
        return arg
    return to_local(arg, column_of)


def _arg_from_local(arg: Any, variable_of: Callable[[int], VariableRef]) -> Any:
    if isinstance(arg, Real):
        return arg
    return from_local(arg, variable_of)


def _check_nonlinear_args(func: NonlinearExpr) -> None:
    for arg in func.args:
        if isinstance(arg, NonlinearExpr):
            _check_nonlinear_args(arg)
        elif not isinstance(arg, (Real, VariableRef, AffExpr, QuadExpr)):
            raise UnsupportedShapeError(
                f"Nonlinear argument {type(arg).__name__} of '{func.head}' has no registration rule"
            )
