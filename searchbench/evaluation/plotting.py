"""Plotting utilities for benchmark visualization."""

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import seaborn as sns

from .benchmark import QueryTiming

logger = logging.getLogger(__name__)


def setup_style():
    """Set up consistent plot style."""
    sns.set_theme(style="whitegrid", font_scale=1.1)
    plt.rcParams["figure.figsize"] = (10, 6)
    plt.rcParams["figure.dpi"] = 100


def _short_label(query: str, width: int = 30) -> str:
    return query if len(query) <= width else query[: width - 3] + "..."


def plot_latency_by_query(
    results: list[QueryTiming],
    save_path: Path | str | None = None,
    title: str | None = None,
):
    """Box plot of per-repetition latency for every query, one panel per phase.

    Args:
        results: Rows collected by BenchmarkRunner.
        save_path: Path to save figure. If None, shows interactively.
        title: Plot title.
    """
    setup_style()
    phases = [p for p in ("search", "fetch") if any(r.phase == p for r in results)]
    fig, axes = plt.subplots(1, max(len(phases), 1), squeeze=False)

    palette = {"search": "steelblue", "fetch": "darkorange"}
    for ax, phase in zip(axes[0], phases):
        group = [r for r in results if r.phase == phase]
        sns.boxplot(
            x=[_short_label(r.query) for r in group],
            y=[r.elapsed_us for r in group],
            color=palette[phase],
            ax=ax,
        )
        ax.set_xlabel("Query")
        ax.set_ylabel("Time (microsecs)")
        ax.set_title(phase)
        ax.tick_params(axis="x", rotation=30)

    fig.suptitle(title or "Query latency")
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, bbox_inches="tight")
        logger.info("Saved: %s", save_path)
    else:
        plt.show()
    plt.close(fig)
