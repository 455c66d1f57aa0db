#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright © 2023 Ye Chang yech1990@gmail.com
# Distributed under terms of the GNU license.
#
# Metagene Module - Fixed-length coverage profiles and their group summaries

from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np
import polars as pl

from .batch import map_intervals
from .config import DEFAULT_BINS, DEFAULT_GROUP_LABELS
from .coverage import (
    CoverageTrack,
    GenomicInterval,
    combine_replicates,
    oriented_replicates,
)
from .errors import CoverageError, ShapeMismatch
from .resample import resample_profile
from .utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class ProfileMatrix:
    """Resampled profiles of a gene set, one row per gene in input order."""

    names: list[str]
    values: np.ndarray
    failures: list[tuple[str, CoverageError]] = field(default_factory=list)

    def __post_init__(self):
        self.values = np.asarray(self.values, dtype=np.float64)
        if self.values.ndim != 2:
            raise ValueError("Profile matrix values must be 2-dimensional")
        if self.values.shape[0] != len(self.names):
            raise ShapeMismatch(
                f"{len(self.names)} gene names for {self.values.shape[0]} profile rows"
            )

    def __len__(self) -> int:
        return len(self.names)

    @property
    def bins(self) -> int:
        return self.values.shape[1]

    def row(self, name: str) -> np.ndarray:
        return self.values[self.names.index(name)]

    def to_polars(self) -> pl.DataFrame:
        """Wide table: a `name` column followed by bin_1 .. bin_N."""
        df = pl.from_numpy(
            self.values,
            schema=[f"bin_{i}" for i in range(1, self.bins + 1)],
            orient="row",
        )
        return df.insert_column(0, pl.Series("name", self.names, dtype=pl.Utf8))


def build_profile(
    interval: GenomicInterval, *tracks: CoverageTrack, bins: int = DEFAULT_BINS
) -> np.ndarray:
    """
    Coverage profile of one gene: orient, merge replicates, resample.

    Args:
        interval: Gene
        *tracks: One coverage track per replicate
        bins: Profile length

    Returns:
        Float array of length `bins`
    """
    replicates = oriented_replicates(interval, tracks)
    return resample_profile(combine_replicates(*replicates), bins)


def build_matrix(
    intervals: Iterable[GenomicInterval],
    *tracks: CoverageTrack,
    bins: int = DEFAULT_BINS,
    workers: int | None = None,
    skip_failures: bool = False,
) -> ProfileMatrix:
    """
    Profile every gene of a gene set.

    A failing gene aborts the batch unless `skip_failures` is set, in which
    case it is left out and reported in `ProfileMatrix.failures`.
    """
    results, failures = map_intervals(
        lambda interval: build_profile(interval, *tracks, bins=bins),
        intervals,
        workers=workers,
        skip_failures=skip_failures,
    )
    values = (
        np.vstack([profile for _, profile in results])
        if results
        else np.zeros((0, bins), dtype=np.float64)
    )
    logger.info(f"Built {len(results)} x {bins} profile matrix")
    return ProfileMatrix([name for name, _ in results], values, failures)


def summarize_matrix(matrix: ProfileMatrix, label: str) -> pl.DataFrame:
    """
    Per-position mean and standard error of one gene set.

    NaN entries are ignored. The standard error is the sample standard
    deviation over sqrt(n), and 0 where only one value is defined.

    Returns:
        Polars DataFrame with columns position (1-based), group, mean, se
    """
    values = matrix.values
    defined = ~np.isnan(values)
    counts = defined.sum(axis=0)
    sums = np.where(defined, values, 0.0).sum(axis=0)
    means = np.divide(
        sums, counts, out=np.full(matrix.bins, np.nan), where=counts > 0
    )

    sq_dev = np.where(defined, (values - means) ** 2, 0.0).sum(axis=0)
    variances = np.divide(
        sq_dev, counts - 1, out=np.zeros(matrix.bins), where=counts > 1
    )
    se = np.divide(
        np.sqrt(variances), np.sqrt(counts), out=np.zeros(matrix.bins), where=counts > 1
    )

    return pl.DataFrame(
        {
            "position": np.arange(1, matrix.bins + 1, dtype=np.int64),
            "group": [label] * matrix.bins,
            "mean": means,
            "se": se,
        }
    )


def summarize(
    matrix_a: ProfileMatrix,
    matrix_b: ProfileMatrix,
    labels: tuple[str, str] = DEFAULT_GROUP_LABELS,
) -> pl.DataFrame:
    """
    Metagene summary of two gene sets, paired by position.

    Returns:
        Long table with one block of rows per group and columns
        position, group, mean, se
    """
    if matrix_a.bins != matrix_b.bins:
        raise ShapeMismatch(
            f"Profile lengths differ: {matrix_a.bins} vs {matrix_b.bins}"
        )
    return pl.concat(
        [summarize_matrix(matrix_a, labels[0]), summarize_matrix(matrix_b, labels[1])]
    )
