#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright © 2023 Ye Chang yech1990@gmail.com
# Distributed under terms of the GNU license.
#
# Command-line interface for metagene profile and pausing index analysis

import sys

import click
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from .config import (
    DEFAULT_BINS,
    DEFAULT_BODY_FRACTION,
    DEFAULT_GROUP_LABELS,
    DEFAULT_PROMOTER_WIDTH,
    AnalysisSettings,
)
from .coverage import normalize_rpm
from .io import load_bedgraph, load_intervals, write_indices, write_summary
from .metagene import build_matrix, summarize
from .pausing import boundary_marks, compare_groups, compute_all
from .plotting import plot_metagene, plot_pausing_indices
from .utils import print_analysis_summary, setup_rich_logger

# Set up rich console
console = Console()

logger = setup_rich_logger("metapause")


def parse_comma_separated_ints(ctx, param, value):
    """Parse comma-separated integers."""
    if not value:
        return []
    try:
        return [int(x.strip()) for x in value.split(",")]
    except ValueError:
        raise click.BadParameter("Must be comma-separated integers")


def update_progress_description(progress, task, description: str) -> None:
    """Update progress bar description."""
    progress.update(task, description=f"[cyan]{description}...")


@click.command(
    help="Compute metagene profiles and pausing indices for two gene sets.",
    context_settings=dict(help_option_names=["-h", "--help"]),
)
@click.version_option(package_name="metapause")
@click.option(
    "--genes-a",
    "-a",
    type=click.Path(exists=True),
    required=True,
    help="BED6 file of the first gene set",
)
@click.option(
    "--genes-b",
    "-b",
    type=click.Path(exists=True),
    required=True,
    help="BED6 file of the second gene set",
)
@click.option(
    "--label-a",
    type=str,
    default=DEFAULT_GROUP_LABELS[0],
    help=f"Name of the first gene set (default: {DEFAULT_GROUP_LABELS[0]})",
)
@click.option(
    "--label-b",
    type=str,
    default=DEFAULT_GROUP_LABELS[1],
    help=f"Name of the second gene set (default: {DEFAULT_GROUP_LABELS[1]})",
)
@click.option(
    "--track",
    "-t",
    "tracks",
    type=click.Path(exists=True),
    multiple=True,
    required=True,
    help="bedGraph coverage of one replicate; repeat for each replicate",
)
@click.option(
    "--total-reads",
    type=float,
    multiple=True,
    help="Total mapped reads of each track, in --track order, for RPM normalization",
)
@click.option(
    "--bins",
    "-n",
    type=click.IntRange(min=1),
    default=DEFAULT_BINS,
    help=f"Length of the resampled profiles (default: {DEFAULT_BINS})",
)
@click.option(
    "--promoter-width",
    type=click.IntRange(min=1),
    default=DEFAULT_PROMOTER_WIDTH,
    help=f"Promoter window in bp (default: {DEFAULT_PROMOTER_WIDTH})",
)
@click.option(
    "--body-fraction",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_BODY_FRACTION,
    help=f"Gene body window as a fraction of gene length (default: {DEFAULT_BODY_FRACTION})",
)
@click.option(
    "--threads",
    "-j",
    type=click.IntRange(min=1),
    default=1,
    help="Worker threads for per-gene computations (default: 1)",
)
@click.option(
    "--skip-failures",
    is_flag=True,
    help="Skip genes that fail instead of aborting",
)
@click.option(
    "--marks",
    type=str,
    default="",
    callback=parse_comma_separated_ints,
    help="Comma-separated profile positions to mark with reference lines "
    "(default: promoter and body ends of a median-length gene)",
)
@click.option(
    "--output-profile",
    "-o",
    type=click.Path(),
    help="Output file for the metagene summary (TSV)",
)
@click.option(
    "--output-index",
    "-s",
    type=click.Path(),
    help="Output file for pausing indices (TSV)",
)
@click.option(
    "--output-figure",
    "-p",
    type=click.Path(),
    help="Output file for the metagene plot",
)
@click.option(
    "--output-violin",
    "-v",
    type=click.Path(),
    help="Output file for the pausing index plot",
)
def cli(
    genes_a: str,
    genes_b: str,
    label_a: str,
    label_b: str,
    tracks: tuple[str, ...],
    total_reads: tuple[float, ...],
    bins: int,
    promoter_width: int,
    body_fraction: float,
    threads: int,
    skip_failures: bool,
    marks: list[int],
    output_profile: str | None,
    output_index: str | None,
    output_figure: str | None,
    output_violin: str | None,
) -> None:
    """Compute metagene profiles and pausing indices for two gene sets."""
    if total_reads and len(total_reads) != len(tracks):
        console.print(
            f"[red]✗[/red] Got {len(total_reads)} --total-reads values for {len(tracks)} tracks"
        )
        sys.exit(1)
    if not any([output_profile, output_index, output_figure, output_violin]):
        console.print("[red]✗[/red] Nothing to do: specify at least one output")
        sys.exit(1)

    settings: AnalysisSettings = {
        "genes_a": genes_a,
        "genes_b": genes_b,
        "label_a": label_a,
        "label_b": label_b,
        "tracks": list(tracks),
        "total_reads": list(total_reads),
        "bins": bins,
        "promoter_width": promoter_width,
        "body_fraction": body_fraction,
        "threads": threads,
        "skip_failures": skip_failures,
        "output_profile": output_profile,
        "output_index": output_index,
        "output_figure": output_figure,
        "output_violin": output_violin,
    }
    labels = (label_a, label_b)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description:<40}"),
            BarColumn(bar_width=40),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=console,
            transient=False,
        ) as progress:
            task = progress.add_task("[cyan]Running analysis...", total=100)

            # Step 1: Load coverage tracks
            update_progress_description(progress, task, "Loading coverage tracks")
            coverage = []
            for i, track_file in enumerate(tracks):
                track = load_bedgraph(track_file)
                if total_reads:
                    track = normalize_rpm(track, total_reads[i])
                coverage.append(track)
            progress.console.log(f"[green]✓[/green] Loaded {len(coverage)} coverage tracks")
            progress.update(task, completed=20)

            # Step 2: Load gene sets
            update_progress_description(progress, task, "Loading gene sets")
            intervals_a = load_intervals(genes_a)
            intervals_b = load_intervals(genes_b)
            progress.console.log(
                f"[green]✓[/green] Loaded {len(intervals_a)} {label_a} and "
                f"{len(intervals_b)} {label_b} genes"
            )
            progress.update(task, completed=30)

            # Step 3: Metagene profiles
            if output_profile or output_figure:
                update_progress_description(progress, task, "Building metagene profiles")
                matrix_a = build_matrix(
                    intervals_a, *coverage, bins=bins, workers=threads, skip_failures=skip_failures
                )
                matrix_b = build_matrix(
                    intervals_b, *coverage, bins=bins, workers=threads, skip_failures=skip_failures
                )
                summary = summarize(matrix_a, matrix_b, labels=labels)
                progress.console.log(
                    f"[green]✓[/green] Profiled {len(matrix_a)} + {len(matrix_b)} genes"
                )
                if output_profile:
                    write_summary(summary, output_profile)
                    progress.console.log(
                        f"[green]✓[/green] Saved metagene summary to: {output_profile}"
                    )
                if output_figure:
                    if not marks:
                        marks = boundary_marks(
                            intervals_a + intervals_b, bins, promoter_width, body_fraction
                        )
                    plot_metagene(summary, marks=marks, output_plot_path=output_figure)
                    progress.console.log(f"[green]✓[/green] Saved plot to: {output_figure}")
            progress.update(task, completed=60)

            # Step 4: Pausing indices
            if output_index or output_violin:
                update_progress_description(progress, task, "Computing pausing indices")
                index_kwargs = dict(
                    promoter_width=promoter_width,
                    body_fraction=body_fraction,
                    workers=threads,
                    skip_failures=skip_failures,
                )
                indices_a = compute_all(intervals_a, *coverage, **index_kwargs)
                indices_b = compute_all(intervals_b, *coverage, **index_kwargs)
                if output_index:
                    write_indices({label_a: indices_a, label_b: indices_b}, output_index)
                    progress.console.log(
                        f"[green]✓[/green] Saved pausing indices to: {output_index}"
                    )

                pvalue = None
                try:
                    comparison = compare_groups(
                        indices_a.values, indices_b.values, labels=labels
                    )
                except ValueError as e:
                    logger.warning(f"Skipped group comparison: {e}")
                else:
                    pvalue = comparison.pvalue
                    progress.console.log(
                        f"[green]✓[/green] Mann-Whitney U = {comparison.statistic:.1f}, "
                        f"p = {comparison.pvalue:.3g} "
                        f"(dropped {comparison.dropped_a} {label_a}, "
                        f"{comparison.dropped_b} {label_b})"
                    )
                if output_violin:
                    plot_pausing_indices(
                        {label_a: indices_a.values, label_b: indices_b.values},
                        pvalue=pvalue,
                        output_plot_path=output_violin,
                    )
                    progress.console.log(f"[green]✓[/green] Saved plot to: {output_violin}")

            update_progress_description(progress, task, "Analysis complete")
            progress.update(task, completed=100)

        print_analysis_summary(settings)

    except Exception as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
