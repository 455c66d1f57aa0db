#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Shared fixtures: small synthetic genomes with two replicate tracks."""

import numpy as np
import pytest

from metapause.coverage import GenomicInterval


@pytest.fixture
def pausing_tracks():
    """
    chr1 holds one 1000 bp gene at 1..1000: promoter (first 500 bp) at 10,
    gene body (next 250 bp) at 5, the rest at 1. chr2 holds the same gene
    written on the minus strand (reversed) at 1..1000.
    """
    forward = np.concatenate(
        [np.full(500, 10.0), np.full(250, 5.0), np.full(250, 1.0)]
    )
    track = {"chr1": forward, "chr2": forward[::-1].copy()}
    return track, {chrom: cov.copy() for chrom, cov in track.items()}


@pytest.fixture
def gene_set():
    return [
        GenomicInterval("geneA", "chr1", 1, 1000, "+"),
        GenomicInterval("geneB", "chr2", 1, 1000, "-"),
        GenomicInterval("geneC", "chr1", 101, 2100, "+"),
    ]


@pytest.fixture
def ramp_tracks():
    """Two replicates over a 5 kb chromosome whose depth rises with position."""
    rep1 = {"chr1": np.arange(5000, dtype=np.float64), "chr2": np.ones(5000)}
    rep2 = {"chr1": np.arange(5000, dtype=np.float64) + 2, "chr2": np.ones(5000) * 3}
    return rep1, rep2
