#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright © 2023 Ye Chang yech1990@gmail.com
# Distributed under terms of the GNU license.
#
# Common utilities for metapause

import logging
from pathlib import Path
from rich.console import Console
from rich.logging import RichHandler


class NewlineRichHandler(RichHandler):
    """Rich logging handler that adds a newline before each log message."""

    def __init__(
        self,
        console=None,
        rich_tracebacks=True,
        markup=True,
        show_time=True,
        show_path=False,
        show_level=True,
        enable_link_path=False,
        **kwargs,
    ):
        if console is None:
            console = Console(stderr=True)
        super().__init__(
            console=console,
            rich_tracebacks=rich_tracebacks,
            markup=markup,
            show_time=show_time,
            show_path=show_path,
            show_level=show_level,
            enable_link_path=enable_link_path,
            **kwargs,
        )

    def emit(self, record):
        try:
            message = self.format(record)
            self.console.print("\n" + message)
        except Exception:
            self.handleError(record)


def setup_rich_logger(
    name: str = "metapause", level: int = logging.INFO, console: Console | None = None
) -> logging.Logger:
    """
    Set up and configure a rich logger for the application.

    Args:
        name: Name of the logger (default: "metapause")
        level: Logging level (default: INFO)
        console: Rich console instance to use (optional)

    Returns:
        Configured logger instance with rich formatting
    """
    logger = logging.getLogger(name)
    logger.handlers = []  # Remove any existing handlers
    logger.addHandler(NewlineRichHandler(console=console))
    logger.setLevel(level)
    logger.propagate = False
    return logger


def setup_logger(name: str = "metapause", level: int = logging.INFO) -> logging.Logger:
    """
    Set up a plain logger for library modules.

    Handlers are only attached once, so repeated imports do not duplicate output.

    Args:
        name: Name of the logger (default: "metapause")
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(level)
        console_handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
    logger.propagate = False  # Prevent double logging
    return logger


logger = setup_logger()


def ensure_dir(path: str | Path) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        Path object for the directory
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def ensure_parent_dir(file_path: str | Path) -> Path:
    """Create the parent directory of an output file and return the file path."""
    file_path = Path(file_path)
    ensure_dir(file_path.parent)
    return file_path


def print_analysis_summary(params: dict) -> None:
    """Print a summary of analysis parameters.

    Args:
        params: Dictionary containing analysis parameters
    """
    logger.info("Analysis Summary:")
    logger.info("------------------")
    logger.info(f"Gene set A ({params['label_a']}): {params['genes_a']}")
    logger.info(f"Gene set B ({params['label_b']}): {params['genes_b']}")
    logger.info(f"Coverage tracks: {', '.join(params['tracks'])}")
    if params.get("total_reads"):
        logger.info(f"Total reads: {params['total_reads']}")
    logger.info(f"Number of bins: {params.get('bins', 'N/A')}")
    logger.info(f"Promoter width: {params.get('promoter_width', 'N/A')}")
    logger.info(f"Body fraction: {params.get('body_fraction', 'N/A')}")
    logger.info(f"Threads: {params.get('threads', 'N/A')}")
    logger.info(f"Skip failures: {params.get('skip_failures', 'N/A')}")
    for key in ("output_profile", "output_index", "output_figure", "output_violin"):
        if params.get(key):
            logger.info(f"{key.replace('_', ' ').capitalize()}: {params[key]}")
    logger.info("------------------")
