"""
Repeated-search statistics: how many random draws does an order N take?
"""

from __future__ import annotations

import logging
import random
from collections import Counter

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from magic_search import SearchLimitReached, generate, search

logger = logging.getLogger(__name__)

COLUMNS = ["N", "Run", "Attempts", "Constant", "Time", "Solved"]


def benchmark(orders: list[int], runs: int = 5,
              max_attempts: int | None = None,
              seed: int | None = None) -> pd.DataFrame:
    """One row per search; capped runs are kept with Solved=False."""
    rng = random.Random(seed)
    rows = []
    for n in orders:
        for run in range(runs):
            try:
                res = search(n, rng, max_attempts=max_attempts)
            except SearchLimitReached as exc:
                logger.info("N=%d run %d hit the cap (%d attempts)",
                            n, run, exc.attempts)
                rows.append(dict(N=n, Run=run, Attempts=exc.attempts,
                                 Constant=None, Time=np.nan, Solved=False))
                continue
            rows.append(dict(N=n, Run=run, Attempts=res.attempts,
                             Constant=res.constant, Time=res.elapsed,
                             Solved=True))
    return pd.DataFrame(rows, columns=COLUMNS)


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    grouped = df.groupby("N")
    summary = pd.DataFrame({
        "Runs": grouped.size(),
        "SuccessRate": grouped["Solved"].mean() * 100,
        "AvgAttempts": grouped["Attempts"].mean(),
        "StdAttempts": grouped["Attempts"].std(ddof=0),
        "MedianAttempts": grouped["Attempts"].median(),
        "AvgTime": grouped["Time"].mean(),
    })
    return summary.reset_index()


def save_csv(df: pd.DataFrame, path: str) -> None:
    df.to_csv(path, index=False)
    logger.info("Benchmark written to %s", path)


def plot_attempts(df: pd.DataFrame, show: bool = True):
    """Histogram of attempts per order; returns the figure, or None if empty."""
    if df.empty:
        logger.warning("No benchmark runs to plot")
        return None
    orders = sorted(df["N"].unique())
    fig, axes = plt.subplots(1, len(orders), figsize=(6 * len(orders), 4),
                             squeeze=False)
    for ax, n in zip(axes[0], orders):
        sub = df[df.N == n]
        ax.hist(sub["Attempts"], bins=min(20, max(1, len(sub))),
                color="#ffad33", edgecolor="black")
        ax.set_title(f"Attempts until magic • N={n}")
        ax.set_xlabel("Attempts")
        ax.set_ylabel("Runs")
        ax.grid(alpha=0.3)
    plt.tight_layout()
    if show:
        plt.show()
    return fig


def first_cell_histogram(n: int, samples: int,
                         rng: random.Random | None = None) -> pd.Series:
    """How often each value lands in cell (0, 0) over ``samples`` draws."""
    counts = Counter(int(generate(n, rng)[0, 0]) for _ in range(samples))
    return pd.Series(counts, dtype=int).reindex(range(1, n * n + 1),
                                                fill_value=0)
