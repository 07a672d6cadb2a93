"""
Unit tests for pools.py.

Tests the three pooling strategies on hand-built batches:
- PoolPerShop: per-shop slots sized by peak concurrency
- SinglePool: least-funded allocation and greedy withdrawal
- SinglePoolWithSingleAccount: sweep-then-pay withdrawal cost
"""

import pytest

from poolsim.exceptions import InvariantViolationError
from poolsim.generation import Transaction
from poolsim.pools import (
    AccountsPool,
    PoolPerShop,
    SinglePool,
    SinglePoolWithSingleAccount,
    default_pools,
)


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------

class TestInterface:

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            AccountsPool()

    def test_default_pools_order(self):
        names = [pool.name for pool in default_pools()]
        assert names == ["Pool per Shop", "Single Pool", "Single Pool with Single Account"]

    def test_default_pools_are_fresh(self):
        first, second = default_pools(), default_pools()
        assert all(a is not b for a, b in zip(first, second))

    @pytest.mark.parametrize("pool_cls", [PoolPerShop, SinglePool, SinglePoolWithSingleAccount])
    def test_empty_pool(self, pool_cls):
        pool = pool_cls()
        assert pool.total_accounts() == 0
        assert pool.withdraw_all() == 0

    @pytest.mark.parametrize("pool_cls", [PoolPerShop, SinglePool, SinglePoolWithSingleAccount])
    def test_empty_batch_is_noop(self, pool_cls):
        pool = pool_cls()
        pool.process_transactions([])
        assert pool.total_accounts() == 0

    def test_repr(self):
        assert repr(SinglePool(accounts=[1.0, 2.0])) == "SinglePool(accounts=2)"


# ---------------------------------------------------------------------------
# PoolPerShop
# ---------------------------------------------------------------------------

class TestPoolPerShop:

    def test_slots_follow_batch_concurrency(self, make_batch):
        pool = PoolPerShop()
        pool.process_transactions(make_batch((1, 0), (2, 0), (3, 1)))
        assert pool.balances(0) == [1.0, 2.0]
        assert pool.balances(1) == [3.0]
        assert pool.total_accounts() == 3

    def test_slots_reused_in_order(self, make_batch):
        pool = PoolPerShop()
        pool.process_transactions(make_batch((1, 0), (2, 0)))
        pool.process_transactions(make_batch((5, 0)))
        assert pool.balances(0) == [6.0, 2.0]
        assert pool.total_accounts() == 2

    def test_account_count_is_peak_concurrency(self, make_batch):
        pool = PoolPerShop()
        pool.process_transactions(make_batch((1, 0)))
        pool.process_transactions(make_batch((1, 0), (1, 0), (1, 0)))
        pool.process_transactions(make_batch((1, 0), (1, 0)))
        assert pool.total_accounts() == 3
        assert pool.balances(0) == [3.0, 2.0, 1.0]

    def test_withdrawal_costs_one_per_slot(self, make_batch):
        pool = PoolPerShop()
        pool.process_transactions(make_batch((1, 0), (2, 0), (3, 1)))
        assert pool.withdraw_all() == 3

    def test_withdrawal_keeps_slots(self, make_batch):
        pool = PoolPerShop()
        pool.process_transactions(make_batch((1, 0), (2, 0), (3, 1)))
        pool.withdraw_all()
        assert pool.total_accounts() == 3
        assert pool.balances(0) == [0.0, 0.0]
        # Slots persist, so an idle period still costs a settlement per slot
        assert pool.withdraw_all() == 3

    def test_unknown_shop_has_no_balances(self):
        assert PoolPerShop().balances(7) == []


# ---------------------------------------------------------------------------
# SinglePool
# ---------------------------------------------------------------------------

class TestSinglePool:

    def test_batch_needs_one_account_per_transaction(self, make_batch):
        pool = SinglePool(accounts=[0.0, 0.0])
        pool.process_transactions(make_batch((10, 0), (20, 1), (5, 0), (7, 2), (3, 1)))
        assert pool.total_accounts() == 5
        assert pool.total_balance() == pytest.approx(45.0)
        assert sorted(pool.accounts()) == [3.0, 5.0, 7.0, 10.0, 20.0]

    def test_shop_balances_tracked(self, make_batch):
        pool = SinglePool()
        pool.process_transactions(make_batch((10, 0), (20, 1), (5, 0)))
        assert pool.shop_balances == {0: 15.0, 1: 20.0}

    def test_least_funded_account_credited(self, make_batch):
        pool = SinglePool(accounts=[50.0, 1.0, 10.0])
        pool.process_transactions(make_batch((4, 2)))
        assert sorted(pool.accounts()) == [5.0, 10.0, 50.0]

    def test_successive_batches_reuse_accounts(self, make_batch):
        pool = SinglePool()
        pool.process_transactions(make_batch((1, 0), (1, 1)))
        pool.process_transactions(make_batch((1, 0)))
        assert pool.total_accounts() == 2
        assert sorted(pool.accounts()) == [1.0, 2.0]

    def test_money_conserved(self, make_batch):
        pool = SinglePool()
        batches = [
            make_batch((3.5, 0), (1.25, 1)),
            make_batch((2, 0), (2, 0), (2, 2)),
            make_batch((0.75, 1)),
        ]
        for batch in batches:
            pool.process_transactions(batch)
        assert pool.total_balance() == pytest.approx(sum(pool.shop_balances.values()))
        assert pool.total_balance() == pytest.approx(11.5)

    def test_withdrawal_splits_shop_across_accounts(self):
        pool = SinglePool(accounts=[10.0, 8.0], shop_balances={0: 15.0})
        assert pool.withdraw_all() == 2
        assert pool.accounts() == [0.0, 0.0]
        assert pool.shop_balances == {}

    def test_withdrawal_keeps_account_count(self):
        pool = SinglePool(accounts=[10.0, 8.0], shop_balances={0: 15.0})
        pool.withdraw_all()
        assert pool.total_accounts() == 2

    def test_withdrawal_one_transfer_per_exact_match(self):
        pool = SinglePool(accounts=[5.0, 7.0], shop_balances={0: 5.0, 1: 7.0})
        assert pool.withdraw_all() == 2

    def test_withdrawal_insufficient_funds_terminates(self):
        pool = SinglePool(accounts=[10.0, 8.0], shop_balances={0: 25.0})
        assert pool.withdraw_all() == 2
        assert pool.accounts() == [0.0, 0.0]

    def test_withdrawal_stops_when_accounts_exhausted(self):
        pool = SinglePool(accounts=[4.0], shop_balances={0: 4.0, 1: 6.0})
        assert pool.withdraw_all() == 1

    def test_withdrawal_skips_empty_accounts(self):
        pool = SinglePool(accounts=[0.0, 0.0, 9.0], shop_balances={3: 9.0})
        assert pool.withdraw_all() == 1

    def test_withdrawal_after_processing(self):
        pool = SinglePool()
        pool.process_transactions([Transaction(10.0, 0), Transaction(5.0, 1)])
        # Heap order [5, 10]: shop 0 takes 5 + 5, shop 1 takes the remaining 5
        assert pool.withdraw_all() == 3

    def test_second_withdrawal_is_free(self, make_batch):
        pool = SinglePool()
        pool.process_transactions(make_batch((10, 0), (5, 1)))
        pool.withdraw_all()
        assert pool.withdraw_all() == 0

    def test_reset(self):
        pool = SinglePool(accounts=[1.0, 2.0], shop_balances={0: 3.0})
        pool.reset()
        assert pool.accounts() == [0.0, 0.0]
        assert pool.shop_balances == {}

    def test_nan_balance_rejected(self):
        with pytest.raises(InvariantViolationError, match="NaN"):
            SinglePool(accounts=[float("nan")])


# ---------------------------------------------------------------------------
# SinglePoolWithSingleAccount
# ---------------------------------------------------------------------------

class TestSinglePoolWithSingleAccount:

    def test_withdrawal_cost_is_accounts_plus_shops(self):
        inner = SinglePool(accounts=[10.0, 8.0], shop_balances={0: 15.0, 1: 3.0})
        pool = SinglePoolWithSingleAccount(inner)
        assert pool.withdraw_all() == 4

    def test_cost_independent_of_amounts(self, make_batch):
        small, large = SinglePoolWithSingleAccount(), SinglePoolWithSingleAccount()
        small.process_transactions(make_batch((1, 0), (1, 1), (1, 2)))
        large.process_transactions(make_batch((1000, 0), (0.5, 1), (77, 2)))
        assert small.withdraw_all() == large.withdraw_all() == 6

    def test_ingestion_matches_single_pool(self, make_batch):
        reference = SinglePool()
        pool = SinglePoolWithSingleAccount()
        batch = make_batch((10, 0), (20, 1), (5, 0))
        reference.process_transactions(batch)
        pool.process_transactions(batch)
        assert pool.total_accounts() == reference.total_accounts()
        assert pool.inner.accounts() == reference.accounts()

    def test_withdrawal_resets_inner_pool(self, make_batch):
        pool = SinglePoolWithSingleAccount()
        pool.process_transactions(make_batch((10, 0), (20, 1)))
        pool.withdraw_all()
        assert pool.total_accounts() == 2
        assert pool.inner.total_balance() == 0.0
        # Accounts persist, shops are settled
        assert pool.withdraw_all() == 2
