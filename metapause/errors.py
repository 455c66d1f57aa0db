#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright © 2023 Ye Chang yech1990@gmail.com
# Distributed under terms of the GNU license.
#
# Per-gene failures raised while extracting and summarizing coverage


class CoverageError(Exception):
    """Base class for failures that are local to a single gene."""


class ShapeMismatch(CoverageError, ValueError):
    """Replicate coverage arrays differ in length."""


class MissingChromosome(CoverageError, KeyError):
    """The requested chromosome is absent from a coverage track."""

    def __init__(self, chromosome: str, available: list[str] | None = None):
        self.chromosome = chromosome
        self.available = available or []
        super().__init__(chromosome)

    def __str__(self):
        return f"Chromosome '{self.chromosome}' not found in coverage track"


class WindowOutOfRange(CoverageError, ValueError):
    """A gene is too short for the configured promoter/body windows."""


class IntervalOutOfBounds(CoverageError, IndexError):
    """An interval extends past the end of the chromosome coverage array."""
