"""
Unit tests for ledger.py.

Tests the NaN-rejecting, totally ordered BalanceKey.
"""

import heapq
import math

import pytest

from poolsim.exceptions import InvariantViolationError, PoolSimError
from poolsim.ledger import BalanceKey


class TestBalanceKey:
    """Tests for BalanceKey."""

    def test_default_is_zero(self):
        assert BalanceKey().value == 0.0

    def test_rejects_nan(self):
        """NaN can't be ordered and must never enter the heap."""
        with pytest.raises(InvariantViolationError, match="NaN"):
            BalanceKey(math.nan)

    def test_nan_error_is_poolsim_error(self):
        with pytest.raises(PoolSimError):
            BalanceKey(float("nan"))

    def test_addition_rejects_nan_result(self):
        with pytest.raises(InvariantViolationError):
            BalanceKey(1.0) + math.nan

    def test_total_order(self):
        assert BalanceKey(1.0) < BalanceKey(2.0)
        assert BalanceKey(2.0) >= BalanceKey(2.0)
        assert BalanceKey(0.0) == BalanceKey(-0.0)

    def test_addition_returns_new_key(self):
        key = BalanceKey(2.0)
        assert key + 3.0 == BalanceKey(5.0)
        assert key.value == 2.0

    def test_float_conversion(self):
        assert float(BalanceKey(7.25)) == 7.25

    def test_hashable(self):
        assert len({BalanceKey(1.0), BalanceKey(1.0), BalanceKey(2.0)}) == 2

    def test_immutable(self):
        key = BalanceKey(1.0)
        with pytest.raises(Exception):
            key.value = 2.0

    def test_heap_pops_smallest_first(self):
        heap = [BalanceKey(v) for v in [5.0, 1.0, 3.0, 0.5]]
        heapq.heapify(heap)
        assert [heapq.heappop(heap).value for _ in range(4)] == [0.5, 1.0, 3.0, 5.0]
