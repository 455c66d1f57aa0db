#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright © 2023 Ye Chang yech1990@gmail.com
# Distributed under terms of the GNU license.
#
# Batch Module - Apply a per-gene computation over a gene set

from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from .coverage import GenomicInterval
from .errors import CoverageError
from .utils import setup_logger

logger = setup_logger(__name__)

T = TypeVar("T")


class _Failure:
    __slots__ = ("error",)

    def __init__(self, error: CoverageError):
        self.error = error


def map_intervals(
    func: Callable[[GenomicInterval], T],
    intervals: Iterable[GenomicInterval],
    workers: int | None = None,
    skip_failures: bool = False,
) -> tuple[list[tuple[str, T]], list[tuple[str, CoverageError]]]:
    """
    Run `func` on every interval and keep results in input order.

    Args:
        func: Per-gene computation; must only read shared coverage tracks
        intervals: Gene set; any iterable, consumed once
        workers: Thread count; None or 1 runs sequentially
        skip_failures: Collect per-gene CoverageError instead of raising

    Returns:
        Tuple of ([(name, result), ...], [(name, error), ...])
    """
    intervals = list(intervals)
    failures: list[tuple[str, CoverageError]] = []

    def run(interval: GenomicInterval):
        if not skip_failures:
            return func(interval)
        try:
            return func(interval)
        except CoverageError as e:
            return _Failure(e)

    if workers is None or workers <= 1:
        outputs = [run(interval) for interval in intervals]
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # executor.map yields in submission order and re-raises the first error
            outputs = list(executor.map(run, intervals))

    results: list[tuple[str, T]] = []
    for interval, output in zip(intervals, outputs):
        if isinstance(output, _Failure):
            logger.warning(f"Skipped {interval.name}: {output.error}")
            failures.append((interval.name, output.error))
        else:
            results.append((interval.name, output))

    if failures:
        logger.warning(f"{len(failures)} of {len(intervals)} genes failed and were skipped")
    return results, failures
