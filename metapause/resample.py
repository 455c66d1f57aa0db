#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright © 2023 Ye Chang yech1990@gmail.com
# Distributed under terms of the GNU license.
#
# Resample Module - Reduce per-basepair coverage to a fixed number of bins

import numpy as np

from .config import DEFAULT_BINS


def bin_edges(length: int, bins: int = DEFAULT_BINS) -> np.ndarray:
    """
    Integer boundaries of the resampling blocks.

    Block k covers the half-open input range [edges[k], edges[k + 1]), with
    edges[k] = floor(k * length / bins). Every input element lands in exactly
    one block; when length < bins some blocks are empty.

    Args:
        length: Input length
        bins: Number of output blocks

    Returns:
        Array of bins + 1 monotonically increasing integers from 0 to length
    """
    if bins < 1:
        raise ValueError(f"bins must be >= 1 (got {bins})")
    if length < 0:
        raise ValueError(f"length must be >= 0 (got {length})")
    return (np.arange(bins + 1, dtype=np.int64) * length) // bins


def resample_profile(values, bins: int = DEFAULT_BINS) -> np.ndarray:
    """
    Block-average a coverage array to exactly `bins` values.

    NaN inputs are skipped. An infinite input makes its block infinite with the
    same sign (nan if both signs meet), as a plain mean would. A block with
    nothing left to average gets 0, which downstream averaging treats as a real
    observation.

    Args:
        values: Per-basepair coverage of arbitrary length
        bins: Output length

    Returns:
        Float array of length `bins`
    """
    data = np.asarray(values, dtype=np.float64).ravel()
    edges = bin_edges(len(data), bins)

    def block_totals(x):
        cum = np.concatenate(([0], np.cumsum(x)))
        return cum[edges[1:]] - cum[edges[:-1]]

    finite = np.isfinite(data)
    bin_sums = block_totals(np.where(finite, data, 0.0))
    bin_counts = block_totals(~np.isnan(data)).astype(np.int64)
    pos_inf = block_totals(data == np.inf)
    neg_inf = block_totals(data == -np.inf)

    result = np.divide(
        bin_sums,
        bin_counts,
        out=np.zeros(bins, dtype=np.float64),
        where=bin_counts != 0,
    )
    result[pos_inf > 0] = np.inf
    result[neg_inf > 0] = -np.inf
    result[(pos_inf > 0) & (neg_inf > 0)] = np.nan
    return result
