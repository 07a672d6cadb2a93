"""Simulation orchestrator for poolsim

Drives the generation pipeline year by year and day by day and feeds the
identical hourly batches to every pooling strategy, collecting global and
per-pool statistics.

Design goals
------------
- Deterministic by default (explicit RNG seed, one generator for the run).
- Strategies share no mutable state; each sees the same read-only batches.
- Any error aborts the whole run; there are no partial results.

Typical usage
-------------
>>> from poolsim.serialization import load_config
>>> config = load_config(Path("config.json"))
>>> sim = PoolSimulation(config, seed=42)
>>> result = sim.run()
>>> result.total_number_of_transactions
1234567
>>> [p.pool_name for p in result.pool_results]
['Pool per Shop', 'Single Pool', 'Single Pool with Single Account']
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
import structlog

from .config import SimConfig
from .constants import DAYS_IN_YEAR
from .generation import AnnualData, DailyData, ShopSizes
from .pools import AccountsPool, default_pools
from .types import PoolResultDict, SimulationResultDict

__all__ = [
    "PoolResult",
    "SimulationResult",
    "PoolStats",
    "GlobalStats",
    "SimulationHistory",
    "simulate_day",
    "PoolSimulation",
]

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PoolResult:
    pool_name: str
    total_number_of_transactions_during_withdrawals: int
    total_number_of_accounts: int

    def to_dict(self) -> PoolResultDict:
        return {
            "pool_name": self.pool_name,
            "total_number_of_transactions_during_withdrawals":
                self.total_number_of_transactions_during_withdrawals,
            "total_number_of_accounts": self.total_number_of_accounts,
        }


@dataclass(frozen=True)
class SimulationResult:
    """Final report of a run.

    Attributes
    ----------
    total_number_of_transactions : int
        Transactions generated over the whole run (same stream for every pool).
    peak_parallel_transactions_number : int
        Largest number of transactions seen within a single hour.
    pool_results : list of PoolResult
        One entry per strategy, in the order the strategies were run.
    seed : int, optional
        Seed that reproduces the run.
    """
    total_number_of_transactions: int
    peak_parallel_transactions_number: int
    pool_results: List[PoolResult]
    seed: Optional[int] = None

    def to_dict(self) -> SimulationResultDict:
        return {
            "seed": self.seed,
            "total_number_of_transactions": self.total_number_of_transactions,
            "peak_parallel_transactions_number": self.peak_parallel_transactions_number,
            "pool_results": [p.to_dict() for p in self.pool_results],
        }

    def to_frame(self) -> pd.DataFrame:
        """Per-pool results as a DataFrame indexed by pool name."""
        return pd.DataFrame(
            [p.to_dict() for p in self.pool_results]
        ).set_index("pool_name")


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

@dataclass
class PoolStats:
    """Running withdrawal cost of one strategy."""
    total_number_of_transactions_during_withdrawals: int = 0

    def results(self, pool: AccountsPool) -> PoolResult:
        return PoolResult(
            pool_name=pool.name,
            total_number_of_transactions_during_withdrawals=(
                self.total_number_of_transactions_during_withdrawals
            ),
            total_number_of_accounts=pool.total_accounts(),
        )


@dataclass
class GlobalStats:
    """Strategy-independent traffic statistics."""
    total_number_of_transactions: int = 0
    peak_parallel_transactions_number: int = 0

    def update(self, daily_data: DailyData) -> None:
        counts = daily_data.counts()
        self.total_number_of_transactions += int(counts.sum())
        self.peak_parallel_transactions_number = max(
            self.peak_parallel_transactions_number, int(counts.max(initial=0))
        )

    def results(self, pool_results: List[PoolResult], seed: Optional[int] = None) -> SimulationResult:
        return SimulationResult(
            total_number_of_transactions=self.total_number_of_transactions,
            peak_parallel_transactions_number=self.peak_parallel_transactions_number,
            pool_results=pool_results,
            seed=seed,
        )


@dataclass
class SimulationHistory:
    """Day-by-day record of a run, for inspection and plotting."""
    rows: List[Dict[str, Any]] = field(default_factory=list)

    def record(
        self,
        year: int,
        daily_data: DailyData,
        pools: Sequence[AccountsPool],
        withdrawals: Sequence[int],
    ) -> None:
        counts = daily_data.counts()
        row: Dict[str, Any] = {
            "year": year,
            "day": daily_data.day,
            "transactions": int(counts.sum()),
            "peak_hourly_transactions": int(counts.max(initial=0)),
            "withdrawal": daily_data.withdrawal,
        }
        for pool, withdrawn in zip(pools, withdrawals):
            row[f"{pool.name} accounts"] = pool.total_accounts()
            row[f"{pool.name} withdrawal transactions"] = withdrawn
        self.rows.append(row)

    def to_frame(self) -> pd.DataFrame:
        """History as a DataFrame indexed by (year, day)."""
        if not self.rows:
            return pd.DataFrame(columns=["year", "day"]).set_index(["year", "day"])
        return pd.DataFrame(self.rows).set_index(["year", "day"])


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

def simulate_day(daily_data: DailyData, pool: AccountsPool, pool_stats: PoolStats) -> int:
    """Feed one day to *pool*; withdraw at the end of withdrawal days.

    Returns the number of withdrawal transactions (0 on other days).
    """
    for transactions in daily_data.transactions:
        pool.process_transactions(transactions)

    if not daily_data.withdrawal:
        return 0
    withdrawn = pool.withdraw_all()
    pool_stats.total_number_of_transactions_during_withdrawals += withdrawn
    return withdrawn


class PoolSimulation:
    """Runs every pooling strategy over the same synthetic traffic.

    Parameters
    ----------
    config : SimConfig
        Validated run configuration.
    seed : int, optional
        Seed for `numpy.random.default_rng`. If None, a seed is drawn from
        fresh OS entropy and exposed as `self.seed` so the run can be
        reproduced.
    pools : sequence of AccountsPool, optional
        Strategies to compare. Defaults to all three, freshly built.
    record_history : bool
        Keep a per-day `SimulationHistory`.
    """

    def __init__(
        self,
        config: SimConfig,
        seed: Optional[int] = None,
        pools: Optional[Sequence[AccountsPool]] = None,
        record_history: bool = False,
    ):
        if seed is None:
            seed = int(np.random.SeedSequence().generate_state(1, dtype=np.uint64)[0])
        self.config = config
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.pools: List[AccountsPool] = list(pools) if pools is not None else default_pools()
        self.pool_stats = [PoolStats() for _ in self.pools]
        self.global_stats = GlobalStats()
        self.history: Optional[SimulationHistory] = SimulationHistory() if record_history else None

    def run(self) -> SimulationResult:
        """Simulate every configured year and return the final report."""
        cfg = self.config
        log = logger.bind(seed=self.seed)
        log.info(
            "simulation_started",
            shops=cfg.simulated_shops_number,
            years=cfg.simulated_years_number,
            pools=[pool.name for pool in self.pools],
        )

        shop_sizes = ShopSizes.generate(self.rng, cfg)
        for year in range(cfg.simulated_years_number):
            annual_data = AnnualData.generate(self.rng, cfg, shop_sizes)
            for day in range(DAYS_IN_YEAR):
                self.step(year, annual_data, day)
            log.info(
                "year_completed",
                year=year,
                total_transactions=self.global_stats.total_number_of_transactions,
                peak_parallel_transactions=self.global_stats.peak_parallel_transactions_number,
            )

        result = self.results()
        log.info(
            "simulation_finished",
            total_transactions=result.total_number_of_transactions,
            peak_parallel_transactions=result.peak_parallel_transactions_number,
        )
        return result

    def step(self, year: int, annual_data: AnnualData, day: int) -> DailyData:
        """Generate day *day* once and feed it to every strategy."""
        daily_data = DailyData.generate(self.rng, self.config, annual_data, day)
        self.global_stats.update(daily_data)

        withdrawals = [
            simulate_day(daily_data, pool, stats)
            for pool, stats in zip(self.pools, self.pool_stats)
        ]
        if daily_data.withdrawal:
            logger.debug(
                "withdrawal",
                year=year,
                day=day,
                withdrawals={pool.name: n for pool, n in zip(self.pools, withdrawals)},
            )
        if self.history is not None:
            self.history.record(year, daily_data, self.pools, withdrawals)
        return daily_data

    def results(self) -> SimulationResult:
        return self.global_stats.results(
            [stats.results(pool) for pool, stats in zip(self.pools, self.pool_stats)],
            seed=self.seed,
        )
