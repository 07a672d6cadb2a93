"""
Account pooling strategies for poolsim.

Purpose
-------
Models how a payment aggregator holds incoming funds in internal ledger
accounts until the next scheduled withdrawal. Three strategies are
compared on identical traffic; each one owns its state and sees only the
transaction batches fed to it.

Strategies
----------
- PoolPerShop:
    Every shop owns its accounts. A shop receiving n simultaneous
    transactions needs n accounts; slots are never released.

- SinglePool:
    One shared set of accounts, load-balanced by always crediting the
    least-funded free account. Withdrawal greedily matches shop balances
    against account balances, one settlement per transfer.

- SinglePoolWithSingleAccount:
    Same ingestion as SinglePool, but the withdrawal sweeps every account
    into one place and pays every shop from there:
        cost = accounts + shops with a balance

Interface
---------
All strategies implement `AccountsPool`:
    process_transactions(transactions) -> None
    withdraw_all() -> int          (settlement transactions needed)
    total_accounts() -> int
    name -> str

Example
-------
>>> pool = SinglePool()
>>> pool.process_transactions([Transaction(10.0, 0), Transaction(5.0, 1)])
>>> pool.total_accounts()
2
>>> pool.withdraw_all()
3
"""

from __future__ import annotations

import heapq
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .generation import Transaction
from .ledger import BalanceKey

__all__ = [
    "AccountsPool",
    "PoolPerShop",
    "SinglePool",
    "SinglePoolWithSingleAccount",
    "default_pools",
]


class AccountsPool(ABC):
    """Common interface of the pooling strategies."""

    name: str = ""

    @abstractmethod
    def process_transactions(self, transactions: Sequence[Transaction]) -> None:
        """Process all transactions as though they happen in parallel."""

    @abstractmethod
    def withdraw_all(self) -> int:
        """
        Withdraw all money from the pool and distribute it between shops.

        Returns
        -------
        int
            Number of settlement transactions the withdrawal required.
        """

    @abstractmethod
    def total_accounts(self) -> int:
        """Current number of live ledger accounts."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(accounts={self.total_accounts()})"


# ---------------------------------------------------------------------------
# Pool per shop
# ---------------------------------------------------------------------------

class PoolPerShop(AccountsPool):
    """
    Independent, growable list of accounts for every shop.

    Within a batch the i-th transaction of a shop is credited to that
    shop's i-th account. When a batch holds more transactions for a shop
    than it has accounts, zero-balance accounts are appended, so a shop's
    account count is the highest per-batch concurrency it has seen.

    Withdrawal zeroes every balance but keeps the slots, and costs one
    settlement per slot.
    """

    name = "Pool per Shop"

    def __init__(self):
        self.pools: Dict[int, List[float]] = {}

    def process_transactions(self, transactions: Sequence[Transaction]) -> None:
        txs_per_shop: Dict[int, List[float]] = defaultdict(list)
        for tx in transactions:
            txs_per_shop[tx.shop_id].append(tx.amount)

        for shop_id, amounts in txs_per_shop.items():
            pool = self.pools.setdefault(shop_id, [])
            if len(pool) < len(amounts):
                pool.extend([0.0] * (len(amounts) - len(pool)))
            for i, amount in enumerate(amounts):
                pool[i] += amount

    def withdraw_all(self) -> int:
        for pool in self.pools.values():
            pool[:] = [0.0] * len(pool)
        return self.total_accounts()

    def total_accounts(self) -> int:
        return sum(len(pool) for pool in self.pools.values())

    def balances(self, shop_id: int) -> List[float]:
        """Copy of the account balances of *shop_id*."""
        return list(self.pools.get(shop_id, []))


# ---------------------------------------------------------------------------
# Single pool
# ---------------------------------------------------------------------------

class SinglePool(AccountsPool):
    """
    One shared set of accounts kept as a min-heap on balance.

    Every transaction of a batch takes the least-funded account that no
    other transaction of the same batch holds yet, or a new zero-balance
    account when none is free. Touched accounts go back to the heap once
    the batch is done, so a batch of n transactions needs n accounts.
    Alongside, the pool tracks how much money it owes each shop.

    Parameters
    ----------
    accounts : iterable of float, optional
        Initial account balances.
    shop_balances : mapping of int to float, optional
        Initial amounts owed to shops.
    """

    name = "Single Pool"

    def __init__(
        self,
        accounts: Optional[Iterable[float]] = None,
        shop_balances: Optional[Mapping[int, float]] = None,
    ):
        self.pool: List[BalanceKey] = [BalanceKey(float(a)) for a in (accounts or [])]
        heapq.heapify(self.pool)
        self.shop_balances: Dict[int, float] = dict(shop_balances or {})

    def process_transactions(self, transactions: Sequence[Transaction]) -> None:
        updated_accounts = []
        for tx in transactions:
            self.shop_balances[tx.shop_id] = self.shop_balances.get(tx.shop_id, 0.0) + tx.amount
            account = heapq.heappop(self.pool) if self.pool else BalanceKey()
            updated_accounts.append(account + tx.amount)
        for account in updated_accounts:
            heapq.heappush(self.pool, account)

    def withdraw_all(self) -> int:
        """
        Settle every shop balance from the accounts, greedily.

        Accounts are scanned in a fixed order (heap order); exhausted ones
        are skipped. Each transfer of ``min(shop_balance, account_balance)``
        counts as one settlement. The scan stops once every shop is paid or
        every account is empty, then all accounts are reset to zero.
        """
        accounts = self.accounts()
        current = 0
        total_transactions = 0

        for shop_id in list(self.shop_balances):
            balance = self.shop_balances[shop_id]
            while balance > 0.0:
                while current < len(accounts) and accounts[current] == 0.0:
                    current += 1
                if current == len(accounts):
                    break
                amount = min(balance, accounts[current])
                accounts[current] -= amount
                balance -= amount
                total_transactions += 1
            if current == len(accounts):
                break

        self.reset()
        return total_transactions

    def total_accounts(self) -> int:
        return len(self.pool)

    def accounts(self) -> List[float]:
        """Account balances in heap order."""
        return [float(account) for account in self.pool]

    def total_balance(self) -> float:
        """Sum of all account balances."""
        return sum(self.accounts())

    def reset(self) -> None:
        """Zero every account (keeping the count) and forget shop balances."""
        self.pool = [BalanceKey() for _ in self.pool]
        self.shop_balances.clear()


# ---------------------------------------------------------------------------
# Single pool with single account
# ---------------------------------------------------------------------------

class SinglePoolWithSingleAccount(AccountsPool):
    """
    Single pool whose withdrawal first sweeps every account into one.

    Ingestion is delegated to a `SinglePool`. The withdrawal costs one
    transfer per account (the sweep) plus one payout per shop that holds
    a balance, independent of the amounts.
    """

    name = "Single Pool with Single Account"

    def __init__(self, inner: Optional[SinglePool] = None):
        self.inner = inner if inner is not None else SinglePool()

    def process_transactions(self, transactions: Sequence[Transaction]) -> None:
        self.inner.process_transactions(transactions)

    def withdraw_all(self) -> int:
        total_transactions = self.inner.total_accounts() + len(self.inner.shop_balances)
        self.inner.reset()
        return total_transactions

    def total_accounts(self) -> int:
        return self.inner.total_accounts()


def default_pools() -> List[AccountsPool]:
    """Fresh instances of every strategy, in report order."""
    return [PoolPerShop(), SinglePool(), SinglePoolWithSingleAccount()]
