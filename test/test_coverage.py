#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Test cases for intervals, coverage extraction, strand orientation and replicates
"""

import numpy as np
import polars as pl
import pytest

from metapause.coverage import (
    GenomicInterval,
    combine_replicates,
    extract_coverage,
    intervals_from_frame,
    normalize_rpm,
    orient_strand,
    oriented_replicates,
)
from metapause.errors import (
    CoverageError,
    IntervalOutOfBounds,
    MissingChromosome,
    ShapeMismatch,
)


class TestGenomicInterval:
    """Test suite for GenomicInterval"""

    def test_length_is_inclusive(self):
        assert GenomicInterval("g", "chr1", 1, 1000, "+").length == 1000
        assert GenomicInterval("g", "chr1", 5, 5, "-").length == 1

    def test_identity_is_name(self):
        """Intervals with the same name are equal regardless of coordinates"""
        a = GenomicInterval("g", "chr1", 1, 10, "+")
        b = GenomicInterval("g", "chr2", 5, 50, "-")
        assert a == b
        assert len({a, b}) == 1
        assert a != GenomicInterval("h", "chr1", 1, 10, "+")

    def test_immutable(self):
        interval = GenomicInterval("g", "chr1", 1, 10, "+")
        with pytest.raises(AttributeError):
            interval.start = 3

    @pytest.mark.parametrize(
        "start,end,strand", [(0, 10, "+"), (10, 9, "+"), (1, 10, "."), (1, 10, "−")]
    )
    def test_invalid(self, start, end, strand):
        with pytest.raises(ValueError):
            GenomicInterval("g", "chr1", start, end, strand)

    def test_from_frame_converts_bed_start(self):
        """BED starts are 0-based and become 1-based; row order is kept"""
        df = pl.DataFrame(
            {
                "Chromosome": ["chr1", "chr2"],
                "Start": [0, 99],
                "End": [1000, 600],
                "name": ["geneB", "geneA"],
                "Strand": ["+", "-"],
            }
        )
        intervals = intervals_from_frame(df)
        assert [i.name for i in intervals] == ["geneB", "geneA"]
        assert (intervals[0].start, intervals[0].end) == (1, 1000)
        assert (intervals[1].start, intervals[1].end, intervals[1].strand) == (100, 600, "-")
        assert intervals[1].length == 501

    def test_from_frame_missing_column(self):
        df = pl.DataFrame({"Chromosome": ["chr1"], "Start": [0], "End": [10]})
        with pytest.raises(ValueError, match="Strand"):
            intervals_from_frame(df)


class TestExtractCoverage:
    """Test suite for extract_coverage"""

    def test_slice_is_one_based_inclusive(self):
        track = {"chr1": np.arange(10)}
        interval = GenomicInterval("g", "chr1", 3, 6, "-")
        np.testing.assert_array_equal(extract_coverage(track, interval), [2, 3, 4, 5])

    def test_missing_chromosome(self):
        track = {"chr1": np.arange(10)}
        interval = GenomicInterval("g", "chrX", 1, 5, "+")
        with pytest.raises(MissingChromosome) as excinfo:
            extract_coverage(track, interval)
        assert isinstance(excinfo.value, CoverageError)
        assert isinstance(excinfo.value, KeyError)
        assert "chrX" in str(excinfo.value)

    def test_past_chromosome_end(self):
        track = {"chr1": np.arange(10)}
        with pytest.raises(IntervalOutOfBounds):
            extract_coverage(track, GenomicInterval("g", "chr1", 5, 11, "+"))


class TestOrientStrand:
    """Test suite for orient_strand"""

    def test_plus_unchanged(self):
        values = np.array([1, 2, 3])
        np.testing.assert_array_equal(orient_strand(values, "+"), [1, 2, 3])

    def test_minus_reversed(self):
        np.testing.assert_array_equal(orient_strand([1, 2, 3], "-"), [3, 2, 1])

    def test_minus_twice_is_identity(self):
        values = np.array([5, 0, 7, 1])
        twice = orient_strand(orient_strand(values, "-"), "-")
        np.testing.assert_array_equal(twice, values)

    def test_input_not_mutated(self):
        """Reusing the raw array after orienting sees the original order"""
        values = np.array([1.0, 2.0, 3.0])
        oriented = orient_strand(values, "-")
        assert oriented[0] == 3.0
        np.testing.assert_array_equal(values, [1.0, 2.0, 3.0])

    def test_unknown_strand(self):
        with pytest.raises(ValueError):
            orient_strand([1, 2], "*")

    def test_oriented_replicates(self):
        tracks = [{"chr1": np.arange(6)}, {"chr1": np.arange(6) * 10}]
        interval = GenomicInterval("g", "chr1", 2, 4, "-")
        reps = oriented_replicates(interval, tracks)
        np.testing.assert_array_equal(reps[0], [3, 2, 1])
        np.testing.assert_array_equal(reps[1], [30, 20, 10])


class TestCombineReplicates:
    """Test suite for combine_replicates"""

    def test_mean_rounded_up(self):
        np.testing.assert_array_equal(
            combine_replicates([2, 4, 6], [0, 0, 0]), [1, 2, 3]
        )

    def test_half_rounds_up(self):
        np.testing.assert_array_equal(combine_replicates([1, 2], [2, 3]), [2, 3])

    def test_fractional_rpm_rounds_up(self):
        np.testing.assert_array_equal(
            combine_replicates([0.2, 1.0], [0.1, 1.0]), [1.0, 1.0]
        )

    def test_three_replicates(self):
        np.testing.assert_array_equal(
            combine_replicates([1, 1], [2, 2], [4, 3]), [3, 2]
        )

    def test_shape_mismatch(self):
        with pytest.raises(ShapeMismatch):
            combine_replicates([1, 2, 3], [1, 2])

    def test_no_arrays(self):
        with pytest.raises(ValueError):
            combine_replicates()


class TestNormalizeRpm:
    """Test suite for normalize_rpm"""

    def test_scaling(self):
        track = {"chr1": np.array([1.0, 2.0]), "chr2": np.array([4.0])}
        rpm = normalize_rpm(track, 2_000_000)
        np.testing.assert_array_equal(rpm["chr1"], [0.5, 1.0])
        np.testing.assert_array_equal(rpm["chr2"], [2.0])
        # source track untouched
        np.testing.assert_array_equal(track["chr1"], [1.0, 2.0])

    def test_each_track_uses_its_own_total(self):
        a = normalize_rpm({"chr1": np.array([10.0])}, 1_000_000)
        b = normalize_rpm({"chr1": np.array([10.0])}, 5_000_000)
        assert a["chr1"][0] == 10.0
        assert b["chr1"][0] == 2.0

    @pytest.mark.parametrize("total", [0, -5])
    def test_invalid_total(self, total):
        with pytest.raises(ValueError):
            normalize_rpm({"chr1": np.ones(3)}, total)
