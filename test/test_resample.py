#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Test cases for fixed-length coverage resampling
"""

import numpy as np
import pytest

from metapause.resample import bin_edges, resample_profile


class TestBinEdges:
    """Test suite for block boundaries"""

    def test_edges_cover_whole_input(self):
        """Edges start at 0, end at the input length and never decrease"""
        edges = bin_edges(1234, 100)
        assert len(edges) == 101
        assert edges[0] == 0
        assert edges[-1] == 1234
        assert np.all(np.diff(edges) >= 0)

    def test_every_element_in_one_block(self):
        """Block widths add up to the input length, so nothing overlaps or is skipped"""
        for length in [1, 7, 1499, 1500, 1501, 4321]:
            edges = bin_edges(length, 1500)
            assert np.diff(edges).sum() == length

    def test_invalid_bins(self):
        with pytest.raises(ValueError):
            bin_edges(10, 0)


class TestResampleProfile:
    """Test suite for resample_profile"""

    @pytest.mark.parametrize("length", [10, 999, 1500, 1501, 3000, 7777])
    def test_output_length(self, length):
        """Output always has exactly the requested number of bins"""
        values = np.random.default_rng(0).poisson(5, size=length)
        assert len(resample_profile(values, 1500)) == 1500

    def test_empty_input(self):
        """An empty array resamples to all zeros"""
        result = resample_profile([], 20)
        np.testing.assert_array_equal(result, np.zeros(20))

    @pytest.mark.parametrize("length", [1500, 2000, 4501])
    def test_constant_input(self, length):
        """A constant array keeps its value in every block"""
        result = resample_profile(np.full(length, 3.0), 1500)
        np.testing.assert_array_equal(result, np.full(1500, 3.0))

    def test_block_means(self):
        """Each block is the mean of its own slice"""
        values = np.array([1, 3, 5, 7, 9, 11], dtype=float)
        np.testing.assert_array_equal(resample_profile(values, 3), [2.0, 6.0, 10.0])

    def test_uneven_blocks(self):
        """With L/N fractional, blocks follow floor(k * L / N)"""
        values = np.arange(5, dtype=float)
        # edges: 0, 1, 3, 5
        np.testing.assert_array_equal(resample_profile(values, 3), [0.0, 1.5, 3.5])

    def test_short_input_zero_fallback(self):
        """When L < N empty blocks are 0, non-empty ones keep their value"""
        result = resample_profile([4.0, 8.0], 4)
        # edges: 0, 0, 1, 1, 2
        np.testing.assert_array_equal(result, [0.0, 4.0, 0.0, 8.0])

    def test_undefined_values_skipped(self):
        """NaN values are left out of the block mean"""
        result = resample_profile([np.nan, 4.0, 2.0, 6.0], 2)
        np.testing.assert_array_equal(result, [4.0, 4.0])

    def test_all_undefined_block_is_zero(self):
        """A block made only of NaN falls back to 0"""
        result = resample_profile([np.nan, np.nan, 2.0, 6.0], 2)
        np.testing.assert_array_equal(result, [0.0, 4.0])

    def test_infinite_values_propagate(self):
        """An infinite depth makes its block infinite; other blocks are untouched"""
        result = resample_profile([1.0, np.inf, 3.0, 5.0, -np.inf, 1.0], 3)
        np.testing.assert_array_equal(result, [np.inf, 4.0, -np.inf])

    def test_mixed_sign_infinities_are_undefined(self):
        result = resample_profile([np.inf, -np.inf, 2.0, np.nan], 2)
        assert np.isnan(result[0])
        assert result[1] == 2.0

    def test_input_not_modified(self):
        values = np.array([1.0, np.nan, 3.0])
        resample_profile(values, 2)
        assert np.isnan(values[1])
        assert values[0] == 1.0
