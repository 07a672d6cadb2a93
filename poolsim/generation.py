"""
Synthetic transaction generation for poolsim.

Purpose
-------
Builds the hierarchical traffic model that every pooling strategy consumes:

    shop sizes (once per run)
      → annual orders distribution (once per shop per year)
        → daily data (24 hourly transaction batches per day)

Mathematical Framework
----------------------
For shop s with size z_s, base day table M_d and base hour table H_h:

    H_h^s = trunc(H_h · z_s)
    M_d^s = M_d · k^{n_d^s}

where k is the sale multiplier and n_d^s is the number of times day d was
drawn among the shop's sale days that year. The number of transactions of
shop s at hour h of day d is

    N_{d,h}^s = M_d^s · H_h^s

and every transaction carries an independent positive price.

Key components
--------------
- Transaction:
    Immutable (amount, shop_id) value.
- ShopSizes:
    One positive size per shop, sampled once per run.
- AnnualOrdersDistribution / AnnualData:
    Per-shop seasonal profile for one simulated year.
- DailyData:
    The 24 hourly transaction batches of one day plus the withdrawal flag.

Design principles
-----------------
- Explicit RNG: every `generate` takes the shared `numpy.random.Generator`
- Draw order is fixed: shop sizes, then per shop its sale days, then per
  day its prices hour by hour and shop by shop
- Immutability: generated values are frozen dataclasses

Example
-------
>>> rng = np.random.default_rng(42)
>>> sizes = ShopSizes.generate(rng, config)
>>> annual = AnnualData.generate(rng, config, sizes)
>>> daily = DailyData.generate(rng, config, annual, day=0)
>>> daily.withdrawal
True
>>> len(daily.transactions)
24
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from .config import SimConfig
from .constants import DAYS_IN_YEAR, HOURS_IN_DAY
from .exceptions import ConfigurationError
from .sampling import draw_days, draw_positive
from .utils import check_non_negative, check_positive

__all__ = [
    "Transaction",
    "ShopSizes",
    "AnnualOrdersDistribution",
    "AnnualData",
    "DailyData",
]

_INT64_MAX = int(np.iinfo(np.int64).max)
# Smallest float that no longer converts to int64.
_INT64_LIMIT = float(2 ** 63)


# ---------------------------------------------------------------------------
# Transaction
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Transaction:
    """
    Single customer payment to a shop.

    Parameters
    ----------
    amount : float
        Paid amount (must be positive).
    shop_id : int
        Receiving shop, in ``[0, simulated_shops_number)``.

    Examples
    --------
    >>> Transaction(amount=12.5, shop_id=3)
    Transaction(amount=12.5, shop_id=3)
    """
    amount: float
    shop_id: int

    def __post_init__(self):
        check_positive("amount", self.amount)
        check_non_negative("shop_id", self.shop_id)


# ---------------------------------------------------------------------------
# Shop sizes (per run)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ShopSizes:
    """Positive size factor of every shop, fixed for the whole run."""
    sizes: np.ndarray

    @classmethod
    def generate(cls, rng: np.random.Generator, config: SimConfig) -> ShopSizes:
        """Sample `simulated_shops_number` positive sizes.

        Raises
        ------
        ConfigurationError
            If the size distribution keeps producing non-positive values.
        """
        sizes = draw_positive(
            rng,
            config.shop_size_distribution,
            config.simulated_shops_number,
            name="shop_size_distribution",
            max_attempts=config.max_resample_attempts,
        )
        return cls(sizes=sizes)

    def __len__(self) -> int:
        return len(self.sizes)


# ---------------------------------------------------------------------------
# Annual orders distribution (per shop, per year)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnnualOrdersDistribution:
    """
    Seasonal profile of one shop for one year.

    Attributes
    ----------
    daily_multipliers : np.ndarray, shape (365,)
        Day-of-year multipliers, sale days included.
    default_daily_distribution : np.ndarray, shape (24,)
        Orders per hour on a day with multiplier 1, scaled by shop size.
    """
    daily_multipliers: np.ndarray
    default_daily_distribution: np.ndarray

    @classmethod
    def generate(
        cls,
        rng: np.random.Generator,
        config: SimConfig,
        shop_size: float,
        base_multipliers: np.ndarray,
        base_distribution: np.ndarray,
    ) -> AnnualOrdersDistribution:
        """Derive a shop's profile from the global base tables.

        Sale days are drawn with replacement; a day drawn twice is
        multiplied twice.

        Raises
        ------
        ConfigurationError
            If a multiplier, an hourly count or their product does not fit
            in a 64-bit integer.
        """
        sale_days = draw_days(rng, config.sales_per_year_for_each_shop)
        sale_counts = np.bincount(sale_days, minlength=DAYS_IN_YEAR)
        multipliers = [
            int(base) * config.sale_multiplier ** int(count)
            for base, count in zip(base_multipliers, sale_counts)
        ]
        peak_day = max(range(len(multipliers)), key=multipliers.__getitem__)
        if multipliers[peak_day] > _INT64_MAX:
            raise ConfigurationError(
                f"sale_multiplier={config.sale_multiplier} compounded over "
                f"{int(sale_counts[peak_day])} sale days overflows the multiplier "
                f"of day {peak_day}. Lower sale_multiplier or "
                f"sales_per_year_for_each_shop."
            )

        scaled = np.asarray(base_distribution, dtype=float) * shop_size
        if not (scaled < _INT64_LIMIT).all():
            raise ConfigurationError(
                f"Shop size {shop_size} scales the hourly orders table beyond "
                f"the 64-bit range. Check shop_size_distribution."
            )
        hourly = scaled.astype(np.int64)
        if multipliers[peak_day] * int(hourly.max(initial=0)) > _INT64_MAX:
            raise ConfigurationError(
                f"Orders per hour overflow on day {peak_day} "
                f"(multiplier {multipliers[peak_day]}, size {shop_size})."
            )

        daily_multipliers = np.array(multipliers, dtype=np.int64)
        return cls(
            daily_multipliers=daily_multipliers,
            default_daily_distribution=hourly,
        )

    def orders(self, day: int) -> np.ndarray:
        """Number of orders for each hour of *day*, shape (24,)."""
        if not 0 <= day < DAYS_IN_YEAR:
            raise IndexError(f"day must be in [0, {DAYS_IN_YEAR}), got {day}")
        return self.daily_multipliers[day] * self.default_daily_distribution


@dataclass(frozen=True)
class AnnualData:
    """Seasonal profiles of all shops for one simulated year."""
    shop_distributions: List[AnnualOrdersDistribution]

    @classmethod
    def generate(
        cls,
        rng: np.random.Generator,
        config: SimConfig,
        shop_sizes: ShopSizes,
    ) -> AnnualData:
        """Build a fresh profile for every shop (new sale days each year)."""
        base_multipliers = config.daily_multipliers()
        base_distribution = config.daily_distribution()
        return cls(
            shop_distributions=[
                AnnualOrdersDistribution.generate(
                    rng, config, float(size), base_multipliers, base_distribution
                )
                for size in shop_sizes.sizes
            ]
        )

    def orders(self, day: int) -> np.ndarray:
        """Order counts for *day*, shape (n_shops, 24)."""
        if not self.shop_distributions:
            return np.zeros((0, HOURS_IN_DAY), dtype=np.int64)
        return np.stack([distr.orders(day) for distr in self.shop_distributions])


# ---------------------------------------------------------------------------
# Daily data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DailyData:
    """
    Transactions of one simulated day.

    Attributes
    ----------
    transactions : tuple of 24 lists of Transaction
        ``transactions[h]`` holds every transaction of hour h, grouped by
        shop in id order. Within an hour they are logically simultaneous.
    withdrawal : bool
        True on days where ``day % withdrawal_period_in_days == 0``.
    """
    transactions: Tuple[List[Transaction], ...]
    withdrawal: bool = False
    day: int = field(default=0, compare=False)

    @classmethod
    def generate(
        cls,
        rng: np.random.Generator,
        config: SimConfig,
        annual_data: AnnualData,
        day: int,
    ) -> DailyData:
        """Expand the seasonal profiles of all shops into hourly batches.

        One positive price is consumed per generated transaction, hour by
        hour and, within an hour, shop by shop.
        """
        orders = annual_data.orders(day)
        per_hour = orders.sum(axis=0)
        prices = draw_positive(
            rng,
            config.price_distribution,
            int(per_hour.sum()),
            name="price_distribution",
            max_attempts=config.max_resample_attempts,
        )

        shop_ids = np.arange(orders.shape[0])
        transactions = []
        offset = 0
        for hour in range(HOURS_IN_DAY):
            count = int(per_hour[hour])
            owners = np.repeat(shop_ids, orders[:, hour])
            amounts = prices[offset:offset + count]
            offset += count
            transactions.append([
                Transaction(amount=float(amount), shop_id=int(shop_id))
                for amount, shop_id in zip(amounts, owners)
            ])

        return cls(
            transactions=tuple(transactions),
            withdrawal=(day % config.withdrawal_period_in_days) == 0,
            day=day,
        )

    def counts(self) -> np.ndarray:
        """Number of transactions in each hour, shape (24,)."""
        return np.array([len(txs) for txs in self.transactions], dtype=np.int64)
