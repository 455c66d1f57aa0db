#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright © 2023 Ye Chang yech1990@gmail.com
# Distributed under terms of the GNU license.
#
# Pausing Module - Promoter-proximal to gene-body coverage ratios

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np
import polars as pl
from scipy import stats

from .batch import map_intervals
from .config import (
    DEFAULT_BINS,
    DEFAULT_BODY_FRACTION,
    DEFAULT_GROUP_LABELS,
    DEFAULT_PROMOTER_WIDTH,
)
from .coverage import CoverageTrack, GenomicInterval, oriented_replicates
from .errors import CoverageError, ShapeMismatch, WindowOutOfRange
from .utils import setup_logger

logger = setup_logger(__name__)


class GroupComparison(NamedTuple):
    statistic: float
    pvalue: float
    n_a: int
    n_b: int
    dropped_a: int
    dropped_b: int


@dataclass
class PausingIndices:
    """Pausing indices of a gene set in input order; may contain inf and nan."""

    names: list[str]
    values: np.ndarray
    failures: list[tuple[str, CoverageError]] = field(default_factory=list)

    def __post_init__(self):
        self.values = np.asarray(self.values, dtype=np.float64)
        if self.values.ndim != 1:
            raise ValueError("Pausing indices must be 1-dimensional")
        if len(self.values) != len(self.names):
            raise ShapeMismatch(
                f"{len(self.names)} gene names for {len(self.values)} pausing indices"
            )

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self):
        return iter(zip(self.names, self.values.tolist()))

    def finite(self) -> tuple[np.ndarray, int]:
        return filter_finite(self.values)

    def to_polars(self) -> pl.DataFrame:
        return pl.DataFrame(
            {
                "name": pl.Series(self.names, dtype=pl.Utf8),
                "pausing_index": self.values,
            }
        )


def pausing_windows(
    length: int,
    promoter_width: int = DEFAULT_PROMOTER_WIDTH,
    body_fraction: float = DEFAULT_BODY_FRACTION,
) -> tuple[slice, slice]:
    """
    Promoter and gene-body windows of a gene, 0-based half-open.

    The promoter covers [0, promoter_width); the body follows directly and
    spans floor(body_fraction * length) bp. The windows do not overlap.

    Raises:
        WindowOutOfRange: a window is empty or extends past the gene end
    """
    if promoter_width < 1:
        raise ValueError(f"promoter_width must be >= 1 (got {promoter_width})")
    body_end = promoter_width + int(body_fraction * length)
    if length < promoter_width:
        raise WindowOutOfRange(
            f"Gene length {length} is shorter than the {promoter_width} bp promoter window"
        )
    if body_end <= promoter_width:
        raise WindowOutOfRange(f"Gene body window is empty for gene length {length}")
    if body_end > length:
        raise WindowOutOfRange(
            f"Gene body window [{promoter_width}, {body_end}) runs past gene length {length}"
        )
    return slice(0, promoter_width), slice(promoter_width, body_end)


def boundary_marks(
    intervals: Iterable[GenomicInterval],
    bins: int = DEFAULT_BINS,
    promoter_width: int = DEFAULT_PROMOTER_WIDTH,
    body_fraction: float = DEFAULT_BODY_FRACTION,
) -> list[int]:
    """
    Profile positions of the promoter end and the body end for a gene of
    median length, for use as metagene reference lines.

    Returns:
        Two positions in [1, bins]; empty when there are no intervals
    """
    lengths = [interval.length for interval in intervals]
    if not lengths:
        return []
    length = int(np.median(lengths))
    body_end = promoter_width + int(body_fraction * length)
    return [
        min(max(int(round(bp * bins / length)), 1), bins)
        for bp in (promoter_width, body_end)
    ]


def window_ratio(values: np.ndarray, promoter: slice, body: slice) -> float:
    """Mean of the promoter window over mean of the body window; x/0 gives inf."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(np.mean(values[promoter])) / np.float64(np.mean(values[body])))


def compute_index(
    interval: GenomicInterval,
    *tracks: CoverageTrack,
    promoter_width: int = DEFAULT_PROMOTER_WIDTH,
    body_fraction: float = DEFAULT_BODY_FRACTION,
) -> float:
    """
    Pausing index of one gene, averaged over replicates.

    Each replicate gets its own promoter/body ratio before averaging. A zero
    body mean yields inf (nan for 0/0), which is returned as is.

    Args:
        interval: Gene
        *tracks: One coverage track per replicate
        promoter_width: Promoter window size in bp
        body_fraction: Body window size as a fraction of gene length

    Returns:
        Pausing index
    """
    promoter, body = pausing_windows(interval.length, promoter_width, body_fraction)
    ratios = [
        window_ratio(cov, promoter, body)
        for cov in oriented_replicates(interval, tracks)
    ]
    return float(np.mean(ratios))


def compute_all(
    intervals: Iterable[GenomicInterval],
    *tracks: CoverageTrack,
    promoter_width: int = DEFAULT_PROMOTER_WIDTH,
    body_fraction: float = DEFAULT_BODY_FRACTION,
    workers: int | None = None,
    skip_failures: bool = False,
) -> PausingIndices:
    """Pausing indices of a gene set, with the same failure policy as build_matrix."""
    results, failures = map_intervals(
        lambda interval: compute_index(
            interval,
            *tracks,
            promoter_width=promoter_width,
            body_fraction=body_fraction,
        ),
        intervals,
        workers=workers,
        skip_failures=skip_failures,
    )
    indices = PausingIndices(
        [name for name, _ in results], [value for _, value in results], failures
    )
    _, dropped = indices.finite()
    logger.info(
        f"Computed pausing index for {len(indices)} genes ({dropped} non-finite)"
    )
    return indices


def filter_finite(values) -> tuple[np.ndarray, int]:
    """
    Drop infinite and undefined values.

    Args:
        values: Numbers; None counts as undefined

    Returns:
        Tuple of (finite values in input order, number dropped)
    """
    arr = np.asarray(
        [np.nan if v is None else v for v in np.ravel(np.asarray(values, dtype=object))],
        dtype=np.float64,
    )
    mask = np.isfinite(arr)
    return arr[mask], int((~mask).sum())


def compare_groups(
    values_a,
    values_b,
    labels: tuple[str, str] = DEFAULT_GROUP_LABELS,
) -> GroupComparison:
    """
    Two-sided Mann-Whitney U test between the finite values of two groups.

    Args:
        values_a: Pausing indices of the first group
        values_b: Pausing indices of the second group
        labels: Group names used in log messages

    Returns:
        GroupComparison with the test result and how many values each group lost
    """
    kept_a, dropped_a = filter_finite(values_a)
    kept_b, dropped_b = filter_finite(values_b)
    for label, kept, dropped in ((labels[0], kept_a, dropped_a), (labels[1], kept_b, dropped_b)):
        logger.info(f"{label}: {len(kept)} finite pausing indices, {dropped} dropped")
        if len(kept) == 0:
            raise ValueError(f"No finite pausing indices left in group '{label}'")

    result = stats.mannwhitneyu(kept_a, kept_b, alternative="two-sided")
    return GroupComparison(
        statistic=float(result.statistic),
        pvalue=float(result.pvalue),
        n_a=len(kept_a),
        n_b=len(kept_b),
        dropped_a=dropped_a,
        dropped_b=dropped_b,
    )
