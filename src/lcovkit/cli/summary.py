"""lcovkit summary command - print coverage and enforce thresholds."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lcovkit.cli.utils import load_cli_config, load_model
from lcovkit.coverage import (
    CoverageModel,
    CoverageSummary,
    build_summary,
    coverage_level,
    format_percentage,
)

_LEVEL_STYLES = {"high": "green", "medium": "yellow", "low": "red"}


def _threshold_failures(summary: CoverageSummary, thresholds: dict[str, float]) -> list[str]:
    """Messages for every non-zero threshold the summary does not meet."""
    checks = {
        "line": (summary.meets_line_threshold, summary.line_percentage),
        "function": (summary.meets_function_threshold, summary.function_percentage),
        "branch": (summary.meets_branch_threshold, summary.branch_percentage),
        "overall": (summary.meets_overall_threshold, summary.overall_percentage),
    }
    failures = []
    for metric, threshold in thresholds.items():
        meets, percentage = checks[metric]
        if threshold > 0 and not meets(threshold):
            failures.append(
                f"{metric.capitalize()} coverage {format_percentage(percentage)} "
                f"is below threshold {format_percentage(threshold)}"
            )
    return failures


def _print_report(
    console: Console, model: CoverageModel, *, sort_by_coverage: bool, max_files: int | None
) -> None:
    summary = model.summary
    if model.title:
        console.print(f"[bold]{escape(model.title)}[/bold]")
    console.print(f"Found {model.file_count} source files")
    console.print(f"Overall coverage: {format_percentage(summary.overall_percentage)}")
    console.print(
        f"  Lines: {summary.lines_fraction} ({format_percentage(summary.line_percentage)})"
    )
    console.print(
        f"  Functions: {summary.functions_fraction} "
        f"({format_percentage(summary.function_percentage)})"
    )
    console.print(
        f"  Branches: {summary.branches_fraction} "
        f"({format_percentage(summary.branch_percentage)})"
    )

    files = model.sorted_by_coverage() if sort_by_coverage else list(model.files)
    if max_files is not None:
        files = files[:max_files]
    if not files:
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("File", overflow="fold")
    table.add_column("Lines", justify="right")
    table.add_column("Functions", justify="right")
    table.add_column("Branches", justify="right")
    table.add_column("Overall", justify="right")
    for snapshot in files:
        style = _LEVEL_STYLES[coverage_level(snapshot.overall_percentage).value]
        table.add_row(
            escape(snapshot.path),
            format_percentage(snapshot.line_percentage),
            format_percentage(snapshot.function_percentage),
            format_percentage(snapshot.branch_percentage),
            f"[{style}]{format_percentage(snapshot.overall_percentage)}[/{style}]",
        )
    console.print(table)


@click.command()
@click.argument("trace", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-t", "--title", default=None, help="Title for the coverage report.")
@click.option("--line-threshold", type=float, default=None, help="Line coverage threshold (0-100).")
@click.option(
    "--function-threshold", type=float, default=None, help="Function coverage threshold (0-100)."
)
@click.option(
    "--branch-threshold", type=float, default=None, help="Branch coverage threshold (0-100)."
)
@click.option(
    "--overall-threshold", type=float, default=None, help="Overall coverage threshold (0-100)."
)
@click.option("--max-files", type=int, default=None, help="List at most N files.")
@click.option("--no-sort", is_flag=True, help="Keep source order instead of sorting by coverage.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-q", "--quiet", is_flag=True, help="Suppress all output except errors.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: .lcovkit.yaml in the current directory).",
)
@click.pass_context
def summary_command(
    ctx: click.Context,
    trace: Path,
    title: str | None,
    line_threshold: float | None,
    function_threshold: float | None,
    branch_threshold: float | None,
    overall_threshold: float | None,
    max_files: int | None,
    no_sort: bool,
    as_json: bool,
    quiet: bool,
    config_path: Path | None,
) -> None:
    """Summarize coverage of an LCOV trace file.

    Exits with status 1 when a configured threshold is not met.
    """
    config = load_cli_config(
        ctx,
        config_path,
        thresholds={
            "line": line_threshold,
            "function": function_threshold,
            "branch": branch_threshold,
            "overall": overall_threshold,
        },
        report={
            "title": title,
            "sort_by_coverage": False if no_sort else None,
            "max_files": max_files,
        },
    )

    model = load_model(trace, title=config.report.title)

    if as_json:
        payload = build_summary(
            model,
            sort_by_coverage=config.report.sort_by_coverage,
            max_files=config.report.max_files,
            max_missed_lines=config.report.max_missed_lines,
        )
        click.echo(json.dumps(payload, indent=2))
    elif not quiet:
        _print_report(
            Console(),
            model,
            sort_by_coverage=config.report.sort_by_coverage,
            max_files=config.report.max_files,
        )

    failures = _threshold_failures(model.summary, config.thresholds.model_dump())
    for message in failures:
        click.echo(message, err=True)
    if failures:
        ctx.exit(1)
