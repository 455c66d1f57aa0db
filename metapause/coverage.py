#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright © 2023 Ye Chang yech1990@gmail.com
# Distributed under terms of the GNU license.
#
# Coverage Module - Genomic intervals, per-gene coverage extraction and replicates

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import numpy as np
import polars as pl

from .config import RPM_SCALE, STRANDS
from .errors import IntervalOutOfBounds, MissingChromosome, ShapeMismatch

# chromosome name -> per-basepair depth, index 0 is basepair 1
CoverageTrack = Mapping[str, np.ndarray]


@dataclass(frozen=True)
class GenomicInterval:
    """
    A named, stranded feature with 1-based inclusive coordinates.

    Two intervals are equal when their names are equal.
    """

    name: str
    chromosome: str = field(compare=False)
    start: int = field(compare=False)
    end: int = field(compare=False)
    strand: str = field(compare=False, default="+")

    def __post_init__(self):
        if self.start < 1:
            raise ValueError(f"{self.name}: start must be >= 1 (got {self.start})")
        if self.end < self.start:
            raise ValueError(
                f"{self.name}: end ({self.end}) is before start ({self.start})"
            )
        if self.strand not in STRANDS:
            raise ValueError(f"{self.name}: unknown strand '{self.strand}'")

    @property
    def length(self) -> int:
        return self.end - self.start + 1


def intervals_from_frame(
    df: pl.DataFrame, name_col: str = "name", zero_based: bool = True
) -> list[GenomicInterval]:
    """
    Convert a gene table into GenomicInterval objects, keeping row order.

    Args:
        df: Polars DataFrame with Chromosome, Start, End, Strand and a name column
        name_col: Column holding the gene name
        zero_based: Whether Start is 0-based (BED convention)

    Returns:
        List of GenomicInterval
    """
    for col in ["Chromosome", "Start", "End", "Strand", name_col]:
        if col not in df.columns:
            raise ValueError(f"Gene table must have '{col}' column")

    offset = 1 if zero_based else 0
    return [
        GenomicInterval(
            name=str(row[name_col]),
            chromosome=str(row["Chromosome"]),
            start=int(row["Start"]) + offset,
            end=int(row["End"]),
            strand=row["Strand"],
        )
        for row in df.iter_rows(named=True)
    ]


def extract_coverage(track: CoverageTrack, interval: GenomicInterval) -> np.ndarray:
    """
    Slice the per-basepair coverage of one interval, in forward orientation.

    Raises:
        MissingChromosome: the chromosome is not in the track
        IntervalOutOfBounds: the interval ends past the chromosome array
    """
    if interval.chromosome not in track:
        raise MissingChromosome(interval.chromosome, list(track.keys()))
    chrom_cov = track[interval.chromosome]
    if interval.end > len(chrom_cov):
        raise IntervalOutOfBounds(
            f"{interval.name}: end {interval.end} exceeds {interval.chromosome} "
            f"length {len(chrom_cov)}"
        )
    return np.asarray(chrom_cov[interval.start - 1 : interval.end])


def orient_strand(values, strand: str) -> np.ndarray:
    """
    Put coverage in 5'->3' order.

    Minus strand arrays come back as a reversed view; the input is never modified.
    """
    arr = np.asarray(values)
    if strand == "+":
        return arr
    if strand == "-":
        return arr[::-1]
    raise ValueError(f"Unknown strand '{strand}', expected '+' or '-'")


def combine_replicates(*arrays) -> np.ndarray:
    """
    Merge replicate coverage of the same interval.

    Args:
        *arrays: Two or more equal-length coverage arrays

    Returns:
        Elementwise mean, rounded up to the nearest integer

    Raises:
        ShapeMismatch: replicate arrays differ in length
    """
    if not arrays:
        raise ValueError("At least one coverage array is required")
    lengths = {len(a) for a in arrays}
    if len(lengths) > 1:
        raise ShapeMismatch(
            f"Replicate coverage lengths differ: {[len(a) for a in arrays]}"
        )
    stacked = np.vstack([np.asarray(a, dtype=np.float64) for a in arrays])
    return np.ceil(stacked.mean(axis=0))


def oriented_replicates(
    interval: GenomicInterval, tracks: Sequence[CoverageTrack]
) -> list[np.ndarray]:
    """Extract and strand-orient the interval's coverage from every replicate track."""
    if not tracks:
        raise ValueError("At least one coverage track is required")
    return [orient_strand(extract_coverage(t, interval), interval.strand) for t in tracks]


def normalize_rpm(track: CoverageTrack, total_reads: float) -> dict[str, np.ndarray]:
    """
    Scale a coverage track to reads per million.

    Args:
        track: Raw coverage track
        total_reads: Total mapped reads of this track's library

    Returns:
        New track; the input is left untouched
    """
    if total_reads <= 0:
        raise ValueError(f"total_reads must be positive (got {total_reads})")
    factor = RPM_SCALE / total_reads
    return {chrom: np.asarray(cov, dtype=np.float64) * factor for chrom, cov in track.items()}
