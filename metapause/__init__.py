#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright © 2023 Ye Chang yech1990@gmail.com
# Distributed under terms of the GNU license.
#
# Metagene profiles and pausing indices from replicate coverage tracks

from .coverage import (
    GenomicInterval,
    combine_replicates,
    extract_coverage,
    intervals_from_frame,
    normalize_rpm,
    orient_strand,
)
from .errors import (
    CoverageError,
    IntervalOutOfBounds,
    MissingChromosome,
    ShapeMismatch,
    WindowOutOfRange,
)
from .io import load_bedgraph, load_genes, load_intervals
from .metagene import ProfileMatrix, build_matrix, build_profile, summarize
from .pausing import (
    PausingIndices,
    boundary_marks,
    compare_groups,
    compute_all,
    compute_index,
    filter_finite,
)
from .plotting import plot_metagene, plot_pausing_indices
from .resample import resample_profile


__all__ = [
    # Coverage handling
    "GenomicInterval",
    "extract_coverage",
    "orient_strand",
    "combine_replicates",
    "normalize_rpm",
    "intervals_from_frame",
    "resample_profile",
    # Metagene profiles
    "ProfileMatrix",
    "build_profile",
    "build_matrix",
    "summarize",
    # Pausing index
    "PausingIndices",
    "boundary_marks",
    "compute_index",
    "compute_all",
    "filter_finite",
    "compare_groups",
    # Data I/O
    "load_genes",
    "load_intervals",
    "load_bedgraph",
    # Plotting
    "plot_metagene",
    "plot_pausing_indices",
    # Errors
    "CoverageError",
    "ShapeMismatch",
    "MissingChromosome",
    "WindowOutOfRange",
    "IntervalOutOfBounds",
]
