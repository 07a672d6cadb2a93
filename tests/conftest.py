"""
Pytest configuration and fixtures for the poolsim test suite.

This module provides reusable fixtures for testing all poolsim components.
Fixtures follow the principle of "arrange-act-assert" with clear separation.
"""

from typing import Any, Dict

import numpy as np
import pytest

from poolsim.config import DistributionConfig, SimConfig
from poolsim.generation import AnnualData, ShopSizes, Transaction


# ---------------------------------------------------------------------------
# Randomness Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def seed() -> int:
    """Standard random seed for reproducibility."""
    return 42


@pytest.fixture
def rng(seed) -> np.random.Generator:
    """Fresh generator seeded with the standard seed."""
    return np.random.default_rng(seed)


# ---------------------------------------------------------------------------
# Config Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def config_data() -> Dict[str, Any]:
    """
    Small but non-trivial configuration as plain JSON data.

    5 shops, 1 year, orders between 8:00 and 20:00, a busier last month,
    two sale days per shop, weekly withdrawals.
    """
    return {
        "simulated_shops_number": 5,
        "simulated_years_number": 1,
        "shop_size_distribution": {"mean": 1.5, "std_dev": 0.5},
        "sales_per_year_for_each_shop": 2,
        "sale_multiplier": 3,
        "default_daily_multipliers": "1 + where(d >= 334, 1, 0)",
        "default_daily_distribution": "where((h >= 8) & (h < 20), 2, 0)",
        "price_distribution": {"mean": 30.0, "std_dev": 10.0},
        "withdrawal_period_in_days": 7,
    }


@pytest.fixture
def small_config(config_data) -> SimConfig:
    """Validated small configuration."""
    return SimConfig.model_validate(config_data)


@pytest.fixture
def price_distribution() -> DistributionConfig:
    """Mostly-positive normal price distribution."""
    return DistributionConfig(mean=30.0, std_dev=10.0)


# ---------------------------------------------------------------------------
# Generation Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def shop_sizes(rng, small_config) -> ShopSizes:
    """Shop sizes for the small configuration."""
    return ShopSizes.generate(rng, small_config)


@pytest.fixture
def annual_data(rng, small_config, shop_sizes) -> AnnualData:
    """One year of seasonal profiles for the small configuration."""
    return AnnualData.generate(rng, small_config, shop_sizes)


# ---------------------------------------------------------------------------
# Transaction Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def make_batch():
    """Factory building a batch of transactions from (amount, shop_id) pairs."""
    def _make(*pairs):
        return [Transaction(amount=float(amount), shop_id=shop_id) for amount, shop_id in pairs]
    return _make
