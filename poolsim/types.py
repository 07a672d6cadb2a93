"""
Type definitions for poolsim.

Purpose
-------
Provides TypedDict definitions for the dictionary shapes that cross the
package boundary (saved results, config files).

Type Definitions
----------------
PoolResultDict
    Per-strategy report entry: {"pool_name", "total_number_of_transactions_during_withdrawals",
    "total_number_of_accounts"}

SimulationResultDict
    Full report: {"seed", "total_number_of_transactions",
    "peak_parallel_transactions_number", "pool_results"}

DistributionDict
    Distribution parameters in a config file: {"mean", "std_dev", "kind"?}
"""

from typing import List, Optional

from typing_extensions import NotRequired, TypedDict

__all__ = [
    "PoolResultDict",
    "SimulationResultDict",
    "DistributionDict",
]


class PoolResultDict(TypedDict):
    """
    Report entry of one pooling strategy.

    Attributes
    ----------
    pool_name : str
        Strategy label, e.g. "Single Pool".
    total_number_of_transactions_during_withdrawals : int
        Settlement transactions accumulated over all withdrawals.
    total_number_of_accounts : int
        Live ledger accounts at the end of the run.
    """

    pool_name: str
    total_number_of_transactions_during_withdrawals: int
    total_number_of_accounts: int


class SimulationResultDict(TypedDict):
    """
    Serialized `SimulationResult`.

    Examples
    --------
    >>> result: SimulationResultDict = {
    ...     "seed": 42,
    ...     "total_number_of_transactions": 1000,
    ...     "peak_parallel_transactions_number": 12,
    ...     "pool_results": [],
    ... }
    """

    seed: Optional[int]
    total_number_of_transactions: int
    peak_parallel_transactions_number: int
    pool_results: List[PoolResultDict]


class DistributionDict(TypedDict):
    mean: float
    std_dev: float
    kind: NotRequired[str]
