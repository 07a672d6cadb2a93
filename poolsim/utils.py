"""General utilities for poolsim

Contents
--------
- Validation helpers
- Table builders (day/hour expressions → fixed-size integer arrays)
- Rounding helpers
"""

from __future__ import annotations

from typing import Sequence, Union

import numexpr
import numpy as np

from .exceptions import ConfigurationError

__all__ = [
    # Validation
    "check_positive",
    "check_non_negative",
    # Tables
    "TableSource",
    "build_table",
    "round_half_away_from_zero",
]

TableSource = Union[str, Sequence[int]]

# Constants an expression may reference besides its variable. Functions
# (where, exp, log, sin, sqrt, abs, ...) are the ones numexpr provides.
_EXPRESSION_CONSTANTS = {
    "e": np.e,
    "pi": np.pi,
}


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def check_positive(name: str, value: float) -> None:
    """Raise if *value* is not strictly positive."""
    if not value > 0:
        raise ValueError(f"{name} must be positive (got {value}).")


def check_non_negative(name: str, value: float) -> None:
    """Raise if *value* is negative (strict)."""
    if value < 0:
        raise ValueError(f"{name} must be non-negative (got {value}).")


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

def round_half_away_from_zero(values: np.ndarray) -> np.ndarray:
    """Round to the nearest integer, ties away from zero (2.5 → 3, -2.5 → -3).

    Unlike ``np.round``, which rounds ties to even.
    """
    values = np.asarray(values, dtype=float)
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


def build_table(source: TableSource, var_name: str, size: int, *, name: str = "table") -> np.ndarray:
    """Materialize a fixed-size non-negative integer table.

    Parameters
    ----------
    source : str or sequence of int
        Either an arithmetic expression of *var_name* (e.g. ``"10 + 5 * sin(d / 58)"``)
        evaluated for every index in ``[0, size)``, or an explicit list of
        exactly *size* values.
    var_name : str
        Name of the index variable inside the expression (``"d"`` or ``"h"``).
    size : int
        Table length.
    name : str
        Label used in error messages.

    Returns
    -------
    np.ndarray, shape (size,), dtype int64

    Raises
    ------
    ConfigurationError
        If the expression can't be evaluated, or any value is non-finite or
        negative, or an explicit list has the wrong length.

    Examples
    --------
    >>> build_table("h + 1", "h", 4)
    array([1, 2, 3, 4])
    >>> build_table([3, 0, 1], "h", 3)
    array([3, 0, 1])
    """
    if isinstance(source, str):
        values = _evaluate_expression(source, var_name, size, name=name)
    else:
        values = np.asarray(list(source), dtype=float)
        if values.shape != (size,):
            raise ConfigurationError(
                f"{name} must have exactly {size} entries, got {values.size}."
            )

    if not np.isfinite(values).all():
        bad = int(np.flatnonzero(~np.isfinite(values))[0])
        raise ConfigurationError(
            f"{name} is not finite at {var_name}={bad} (got {values[bad]})."
        )

    table = round_half_away_from_zero(values)
    if (table < 0).any():
        bad = int(np.flatnonzero(table < 0)[0])
        raise ConfigurationError(
            f"{name} must be non-negative, got {values[bad]} at {var_name}={bad}."
        )
    return table.astype(np.int64)


def _evaluate_expression(expr: str, var_name: str, size: int, *, name: str) -> np.ndarray:
    """Evaluate *expr* vectorised over ``numpy.arange(size)``."""
    if "__" in expr:
        raise ConfigurationError(f"{name} expression may not contain '__': {expr!r}")

    local_dict = dict(_EXPRESSION_CONSTANTS)
    local_dict[var_name] = np.arange(size, dtype=float)
    try:
        result = numexpr.evaluate(expr, local_dict=local_dict, global_dict={})
    except (
        ArithmeticError, AttributeError, KeyError, NotImplementedError,
        SyntaxError, TypeError, ValueError,
    ) as e:
        raise ConfigurationError(
            f"Can't evaluate {name} expression {expr!r}: {e}"
        ) from e

    try:
        values = np.asarray(result, dtype=float)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"{name} expression {expr!r} did not produce numbers: {e}"
        ) from e
    if values.ndim == 0:
        values = np.full(size, float(values))
    if values.shape != (size,):
        raise ConfigurationError(
            f"{name} expression {expr!r} produced shape {values.shape}, expected ({size},)."
        )
    return values
