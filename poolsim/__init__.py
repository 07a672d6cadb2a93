"""
poolsim — Account Pooling Strategy Simulator

A Monte Carlo tool for comparing how a payment aggregator can pool
incoming shop payments into ledger accounts between withdrawals.

Modules
-------
- generation  : Shop sizes, seasonal profiles, daily transaction batches
- pools       : Pooling strategies (per shop, single pool, single account)
- simulation  : Simulation loop, statistics and reports
- config      : Pydantic configuration and application settings

"""

from .config import DistributionConfig, SimConfig
from .pools import AccountsPool, PoolPerShop, SinglePool, SinglePoolWithSingleAccount
from .simulation import PoolSimulation, SimulationResult
