"""
Plotting utilities for poolsim run histories.

Purpose
-------
Visualizes a `SimulationHistory` frame: daily transaction volume with the
peak hourly load, and the account count of every strategy over time with
withdrawal days marked.

Example
-------
>>> sim = PoolSimulation(config, seed=42, record_history=True)
>>> sim.run()
>>> fig = plot_history(sim.history.to_frame())
>>> fig.savefig("history.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np
import pandas as pd

from .constants import DEFAULT_FIGSIZE, DEFAULT_LINEWIDTH

if TYPE_CHECKING:
    from matplotlib.figure import Figure

__all__ = ["plot_history"]

_ACCOUNTS_SUFFIX = " accounts"


def plot_history(
    frame: pd.DataFrame,
    *,
    figsize: Tuple[int, int] = DEFAULT_FIGSIZE,
    title: Optional[str] = None,
    save_path: Optional[Path] = None,
) -> Figure:
    """
    Plot daily volume and per-strategy account counts.

    Parameters
    ----------
    frame : pd.DataFrame
        Output of `SimulationHistory.to_frame()`.
    figsize : tuple
        Figure size in inches.
    title : str, optional
        Figure title.
    save_path : Path, optional
        If given, the figure is also written there.

    Returns
    -------
    matplotlib.figure.Figure
    """
    import matplotlib.pyplot as plt

    if frame.empty:
        raise ValueError("history is empty; run the simulation with record_history=True")

    x = np.arange(len(frame))
    fig, (ax_volume, ax_accounts) = plt.subplots(2, 1, figsize=figsize, sharex=True)

    ax_volume.plot(x, frame["transactions"], linewidth=DEFAULT_LINEWIDTH, label="Transactions per day")
    ax_peak = ax_volume.twinx()
    ax_peak.plot(
        x, frame["peak_hourly_transactions"],
        color="tab:orange", linewidth=DEFAULT_LINEWIDTH * 0.6, label="Peak hourly transactions",
    )
    ax_volume.set_ylabel("Transactions per day")
    ax_peak.set_ylabel("Peak hourly transactions")
    ax_volume.grid(True, alpha=0.3)

    account_columns = [c for c in frame.columns if c.endswith(_ACCOUNTS_SUFFIX)]
    for column in account_columns:
        ax_accounts.step(
            x, frame[column], where="post",
            linewidth=DEFAULT_LINEWIDTH, label=column[: -len(_ACCOUNTS_SUFFIX)],
        )
    for day in x[frame["withdrawal"].to_numpy(dtype=bool)]:
        ax_accounts.axvline(day, color="gray", alpha=0.1, linewidth=0.5)
    ax_accounts.set_ylabel("Accounts")
    ax_accounts.set_xlabel("Simulated day")
    ax_accounts.legend(loc="upper left")
    ax_accounts.grid(True, alpha=0.3)

    fig.suptitle(title or "Pooling strategies: traffic and accounts")
    fig.tight_layout()

    if save_path is not None:
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=120)
    return fig
