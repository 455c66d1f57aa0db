#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright © 2023 Ye Chang yech1990@gmail.com
# Distributed under terms of the GNU license.
#
# Plotting Module - Visualization functions for metagene and pausing analysis

from collections.abc import Mapping, Sequence
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
import polars as pl
from matplotlib.figure import Figure

from .pausing import filter_finite
from .utils import setup_logger

logger = setup_logger(__name__)


def _save_or_show(fig: Figure, output_plot_path: Optional[str]) -> None:
    if output_plot_path:
        fig.tight_layout()
        fig.savefig(output_plot_path, dpi=300, bbox_inches="tight")
        logger.info(f"Plot saved to: {output_plot_path}")
    else:
        plt.show()
    plt.close(fig)


def plot_metagene(
    summary: pl.DataFrame,
    marks: Optional[Sequence[float]] = None,
    title: str = "Metagene Profile",
    output_plot_path: Optional[str] = None,
    figsize: Tuple[int, int] = (10, 5),
) -> Figure:
    """
    Plot mean coverage per position for each group, with a +/- se band.

    Args:
        summary: Output of `summarize` (position, group, mean, se)
        marks: Positions of dashed reference lines, e.g. promoter/body boundaries
        title: Plot title
        output_plot_path: Path to save plot (optional)
        figsize: Figure size (width, height)
    """
    fig, ax = plt.subplots(figsize=figsize)

    groups = summary["group"].unique(maintain_order=True).to_list()
    colors = plt.cm.Set1(np.linspace(0, 1, max(len(groups), 2)))

    for color, group in zip(colors, groups):
        df = summary.filter(pl.col("group") == group).sort("position")
        x = df["position"].to_numpy()
        mean = df["mean"].to_numpy()
        se = df["se"].to_numpy()
        ax.plot(x, mean, color=color, linewidth=1, label=group)
        ax.fill_between(x, mean - se, mean + se, color=color, alpha=0.2)

    for mark in marks or []:
        ax.axvline(mark, color="silver", linestyle="dashed", linewidth=1)

    ax.set_xlim(summary["position"].min(), summary["position"].max())
    ax.set_xlabel("Relative position along gene (5' to 3')")
    ax.set_ylabel("Mean coverage (RPM)")
    ax.set_title(title)
    ax.legend(frameon=False)
    ax.grid(True, alpha=0.3)

    _save_or_show(fig, output_plot_path)
    return fig


def plot_pausing_indices(
    groups: Mapping[str, Sequence[float]],
    pvalue: Optional[float] = None,
    title: str = "Pausing Index",
    output_plot_path: Optional[str] = None,
    figsize: Tuple[int, int] = (5, 5),
) -> Figure:
    """
    Log-scale violin and box plot of the finite pausing indices of each group.

    Args:
        groups: Mapping of group name to pausing indices
        pvalue: Rank-sum p-value to show in the title (optional)
        title: Plot title
        output_plot_path: Path to save plot (optional)
        figsize: Figure size (width, height)
    """
    labels = list(groups)
    data = []
    for label in labels:
        kept, dropped = filter_finite(groups[label])
        # log scale only shows positive values
        positive = kept[kept > 0]
        if dropped or len(positive) < len(kept):
            logger.info(
                f"{label}: plotting {len(positive)} values "
                f"({dropped} non-finite, {len(kept) - len(positive)} non-positive left out)"
            )
        data.append(np.log10(positive))

    fig, ax = plt.subplots(figsize=figsize)
    positions = np.arange(1, len(labels) + 1)
    plotted = [(p, d) for p, d in zip(positions, data) if len(d) > 0]
    # the density estimate needs some spread in the data
    spread = [(p, d) for p, d in plotted if np.ptp(d) > 0]
    if spread:
        ax.violinplot(
            [d for _, d in spread],
            positions=[p for p, _ in spread],
            showextrema=False,
        )
    if plotted:
        ax.boxplot(
            [d for _, d in plotted],
            positions=[p for p, _ in plotted],
            widths=0.15,
            showfliers=False,
        )

    ax.set_xticks(positions)
    ax.set_xticklabels(labels)
    ax.set_ylabel("log10(pausing index)")
    if pvalue is not None:
        title = f"{title} (Mann-Whitney p = {pvalue:.2e})"
    ax.set_title(title)
    ax.grid(True, axis="y", alpha=0.3)

    _save_or_show(fig, output_plot_path)
    return fig
