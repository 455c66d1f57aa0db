#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright © 2023 Ye Chang yech1990@gmail.com
# Distributed under terms of the GNU license.
#
# Data I/O Module - Handles input/output operations

from collections.abc import Mapping

import numpy as np
import polars as pl

from .coverage import GenomicInterval, intervals_from_frame
from .metagene import ProfileMatrix
from .pausing import PausingIndices
from .utils import ensure_parent_dir, setup_logger

logger = setup_logger(__name__)


def _read_columns(
    file_name: str, separator: str, schema: dict[str, pl.DataType]
) -> pl.DataFrame:
    """Read a headerless table and name/cast its leading columns by position."""
    df = pl.read_csv(
        file_name,
        separator=separator,
        has_header=False,
        comment_prefix="#",
        infer_schema=False,
    )
    if df.width < len(schema):
        raise ValueError(
            f"{file_name}: expected at least {len(schema)} columns, found {df.width}"
        )
    return df.select(
        [
            pl.col(old).cast(dtype).alias(new)
            for old, (new, dtype) in zip(df.columns, schema.items())
        ]
    )


def load_genes(gene_file_name: str, separator: str = "\t") -> pl.DataFrame:
    """
    Load a gene set from a BED6 file using Polars.

    Returns:
        Polars DataFrame with Chromosome, Start (0-based), End, name, score, Strand
    """
    df = _read_columns(
        gene_file_name,
        separator,
        {
            "Chromosome": pl.Utf8,
            "Start": pl.Int64,
            "End": pl.Int64,
            "name": pl.Utf8,
            "score": pl.Utf8,
            "Strand": pl.Utf8,
        },
    )
    logger.info(f"Loaded {df.height} genes from {gene_file_name}")
    return df


def load_intervals(gene_file_name: str, separator: str = "\t") -> list[GenomicInterval]:
    """Load a BED6 gene set as GenomicInterval objects in file order."""
    return intervals_from_frame(load_genes(gene_file_name, separator=separator))


def load_bedgraph(
    bedgraph_file_name: str,
    chrom_sizes: Mapping[str, int] | None = None,
    separator: str = "\t",
) -> dict[str, np.ndarray]:
    """
    Load a bedGraph file into a dense per-basepair coverage track.

    Args:
        bedgraph_file_name: bedGraph path (0-based half-open intervals)
        chrom_sizes: Optional chromosome lengths; by default each array ends
            at the last covered base
        separator: Column separator

    Returns:
        Dict of chromosome -> float64 array, uncovered bases are 0
    """
    df = _read_columns(
        bedgraph_file_name,
        separator,
        {
            "Chromosome": pl.Utf8,
            "Start": pl.Int64,
            "End": pl.Int64,
            "value": pl.Float64,
        },
    )

    track: dict[str, np.ndarray] = {}
    for chrom_df in df.partition_by("Chromosome", maintain_order=True):
        chrom = chrom_df["Chromosome"][0]
        starts = chrom_df["Start"].to_numpy()
        ends = chrom_df["End"].to_numpy()
        values = chrom_df["value"].to_numpy()
        size = chrom_sizes[chrom] if chrom_sizes and chrom in chrom_sizes else int(ends.max())
        cov = np.zeros(size, dtype=np.float64)
        for s, e, v in zip(starts, ends, values):
            cov[s:e] = v
        track[chrom] = cov

    if chrom_sizes:
        for chrom, size in chrom_sizes.items():
            track.setdefault(chrom, np.zeros(size, dtype=np.float64))

    logger.info(f"Loaded coverage for {len(track)} chromosomes from {bedgraph_file_name}")
    return track


def write_profiles(matrix: ProfileMatrix, output_file: str, separator: str = "\t") -> None:
    matrix.to_polars().write_csv(ensure_parent_dir(output_file), separator=separator)


def write_summary(summary: pl.DataFrame, output_file: str, separator: str = "\t") -> None:
    summary.write_csv(ensure_parent_dir(output_file), separator=separator)


def write_indices(
    groups: Mapping[str, PausingIndices], output_file: str, separator: str = "\t"
) -> None:
    """Write pausing indices of several groups into one table with a group column."""
    frames = [
        indices.to_polars().insert_column(1, pl.Series("group", [label] * len(indices), dtype=pl.Utf8))
        for label, indices in groups.items()
    ]
    pl.concat(frames).write_csv(ensure_parent_dir(output_file), separator=separator)
