"""
Unit tests for utils.py module.

Tests validation helpers, rounding and day/hour table materialization.
"""

import numpy as np
import pytest

from poolsim.exceptions import ConfigurationError
from poolsim.utils import (
    build_table,
    check_non_negative,
    check_positive,
    round_half_away_from_zero,
)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

class TestValidation:

    def test_check_positive_accepts_positive(self):
        check_positive("x", 0.1)

    @pytest.mark.parametrize("value", [0.0, -1.0, float("nan")])
    def test_check_positive_rejects(self, value):
        with pytest.raises(ValueError, match="x must be positive"):
            check_positive("x", value)

    def test_check_non_negative(self):
        check_non_negative("x", 0.0)
        with pytest.raises(ValueError, match="non-negative"):
            check_non_negative("x", -0.5)


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

class TestRounding:

    def test_ties_away_from_zero(self):
        values = np.array([0.5, 1.5, 2.5, -2.5, 2.4, 2.6])
        np.testing.assert_array_equal(
            round_half_away_from_zero(values),
            [1.0, 2.0, 3.0, -3.0, 2.0, 3.0],
        )


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

class TestBuildTable:

    def test_expression_of_index(self):
        table = build_table("h * 2", "h", 24)
        assert table.shape == (24,)
        assert table.dtype == np.int64
        np.testing.assert_array_equal(table, np.arange(24) * 2)

    def test_constant_expression_is_broadcast(self):
        table = build_table("3", "d", 365)
        assert table.shape == (365,)
        assert (table == 3).all()

    def test_numpy_functions_available(self):
        table = build_table("where(h < 12, 1, 5)", "h", 24)
        assert table[:12].tolist() == [1] * 12
        assert table[12:].tolist() == [5] * 12

    def test_expression_is_rounded(self):
        table = build_table("h / 2", "h", 4)
        # 0, 0.5, 1.0, 1.5 -> ties away from zero
        assert table.tolist() == [0, 1, 1, 2]

    def test_explicit_list(self):
        table = build_table([1, 2, 3], "h", 3)
        assert table.tolist() == [1, 2, 3]

    def test_explicit_list_wrong_length(self):
        with pytest.raises(ConfigurationError, match="exactly 24 entries"):
            build_table([1, 2, 3], "h", 24)

    def test_negative_values_rejected(self):
        with pytest.raises(ConfigurationError, match="non-negative"):
            build_table("h - 5", "h", 24)

    def test_non_finite_values_rejected(self):
        with pytest.raises(ConfigurationError, match="not finite"):
            build_table("1 / h", "h", 24)

    def test_syntax_error(self):
        with pytest.raises(ConfigurationError, match="Can't evaluate"):
            build_table("h +* 2", "h", 24)

    def test_unknown_name(self):
        with pytest.raises(ConfigurationError, match="Can't evaluate"):
            build_table("x + 1", "h", 24)

    def test_builtins_unavailable(self):
        with pytest.raises(ConfigurationError):
            build_table("open('f')", "h", 24)

    def test_dunder_rejected(self):
        with pytest.raises(ConfigurationError, match="__"):
            build_table("h.__class__", "h", 24)

    @pytest.mark.parametrize("expr", ["0 * exp.nin", "0 * where.mro", "h.shape"])
    def test_attribute_access_rejected(self, expr):
        with pytest.raises(ConfigurationError, match="Can't evaluate"):
            build_table(expr, "h", 24)

    def test_caller_names_not_visible(self):
        hidden = 5  # noqa: F841
        with pytest.raises(ConfigurationError, match="Can't evaluate"):
            build_table("hidden + h", "h", 24)

    def test_constants_available(self):
        table = build_table("pi * 0 + e * 0 + 1", "h", 24)
        assert (table == 1).all()

    def test_modulo_on_index(self):
        table = build_table("where(d % 7 >= 5, 2, 1)", "d", 14)
        assert table.tolist() == [1, 1, 1, 1, 1, 2, 2] * 2
