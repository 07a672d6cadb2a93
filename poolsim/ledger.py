"""Ordering key for ledger-account balances.

`BalanceKey` wraps an account balance so that it can live in a
`heapq` priority queue. Floats have no total order in the presence of
NaN, so the key refuses NaN at construction time.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .exceptions import InvariantViolationError

__all__ = ["BalanceKey"]


@dataclass(frozen=True, order=True)
class BalanceKey:
    """Totally ordered, hashable account balance.

    Examples
    --------
    >>> BalanceKey(5.0) < BalanceKey(7.5)
    True
    >>> BalanceKey(2.0) + 3.0
    BalanceKey(value=5.0)
    """

    value: float = 0.0

    def __post_init__(self):
        if math.isnan(self.value):
            raise InvariantViolationError(
                "Can't order account balances when NaNs are present."
            )

    def __add__(self, amount: float) -> BalanceKey:
        return BalanceKey(self.value + amount)

    def __float__(self) -> float:
        return self.value
