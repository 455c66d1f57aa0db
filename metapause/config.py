#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright © 2023 Ye Chang yech1990@gmail.com
# Distributed under terms of the GNU license.
#
# Configuration data for metapause

from typing import TypedDict


class AnalysisSettings(TypedDict, total=False):
    genes_a: str
    genes_b: str
    label_a: str
    label_b: str
    tracks: list[str]
    total_reads: list[float]
    bins: int
    promoter_width: int
    body_fraction: float
    threads: int
    skip_failures: bool
    output_profile: str | None
    output_index: str | None
    output_figure: str | None
    output_violin: str | None


# Length every coverage profile is resampled to
DEFAULT_BINS = 1500

# Pausing index windows: promoter is the first DEFAULT_PROMOTER_WIDTH bp,
# the gene body window follows it and spans DEFAULT_BODY_FRACTION of the gene
DEFAULT_PROMOTER_WIDTH = 500
DEFAULT_BODY_FRACTION = 0.25

# Reads-per-million scaling
RPM_SCALE = 1e6

DEFAULT_GROUP_LABELS = ("bound", "unbound")

STRANDS = ("+", "-")
