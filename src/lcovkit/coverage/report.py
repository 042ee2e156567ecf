"""Structured coverage summaries.

Transforms a CoverageModel into JSON-ready dicts and one-line text. HTML
rendering is a separate concern and lives outside this package.

Output schema for build_summary:
{
    "title": str | null,
    "generated_at": str,  # ISO 8601
    "summary": {
        "total_files": int,
        "total_lines": int,
        "covered_lines": int,
        "line_coverage_percent": float,
        "total_functions": int,
        "covered_functions": int,
        "function_coverage_percent": float,
        "total_branches": int,
        "covered_branches": int,
        "branch_coverage_percent": float,
        "overall_coverage_percent": float
    },
    "files": [
        {
            "path": str,
            "total_lines": int,
            "covered_lines": int,
            "coverage_percent": float,    # overall percentage of the file
            "line_coverage_percent": float,
            "missed_lines": [int, ...],   # Line numbers with 0 hits
            "missed_lines_truncated": bool (only when truncated),
            "level": "low" | "medium" | "high"
        },
        ...
    ]
}
"""

from typing import Any

from lcovkit.coverage.models import CoverageModel, FileSnapshot
from lcovkit.coverage.stats import coverage_level, format_percentage


def compute_file_stats(snapshot: FileSnapshot, *, max_missed_lines: int = 20) -> dict[str, Any]:
    """Per-file statistics for one snapshot."""
    missed = snapshot.uncovered_lines
    stats: dict[str, Any] = {
        "path": snapshot.path,
        "total_lines": snapshot.total_lines,
        "covered_lines": snapshot.hit_lines,
        "coverage_percent": round(snapshot.overall_percentage, 2),
        "line_coverage_percent": round(snapshot.line_percentage, 2),
        "missed_lines": missed[:max_missed_lines],
        "level": coverage_level(snapshot.overall_percentage).value,
    }
    if len(missed) > max_missed_lines:
        stats["missed_lines_truncated"] = True

    # Only include function/branch info if the file has any
    if snapshot.total_functions > 0:
        stats["function_coverage_percent"] = round(snapshot.function_percentage, 2)
    if snapshot.total_branches > 0:
        stats["branch_coverage_percent"] = round(snapshot.branch_percentage, 2)

    return stats


def build_summary(
    model: CoverageModel,
    *,
    include_files: bool = True,
    sort_by_coverage: bool = True,
    max_files: int | None = None,
    max_missed_lines: int = 20,
) -> dict[str, Any]:
    """Build a structured coverage summary from a model.

    Args:
        model: The coverage model to summarize.
        include_files: Whether to include per-file details.
        sort_by_coverage: List files lowest coverage first instead of in
            source order.
        max_files: Limit number of files. None = all.
        max_missed_lines: Max missed lines to list per file.

    Returns:
        Structured dict suitable for JSON serialization.
    """
    summary = model.summary
    result: dict[str, Any] = {
        "title": model.title,
        "generated_at": model.generated_at.isoformat(),
        "summary": {
            "total_files": model.file_count,
            "total_lines": summary.total_lines,
            "covered_lines": summary.hit_lines,
            "line_coverage_percent": round(summary.line_percentage, 2),
            "total_functions": summary.total_functions,
            "covered_functions": summary.hit_functions,
            "function_coverage_percent": round(summary.function_percentage, 2),
            "total_branches": summary.total_branches,
            "covered_branches": summary.hit_branches,
            "branch_coverage_percent": round(summary.branch_percentage, 2),
            "overall_coverage_percent": round(summary.overall_percentage, 2),
        },
    }

    if include_files:
        files = model.sorted_by_coverage() if sort_by_coverage else list(model.files)
        if max_files is not None:
            files = files[:max_files]
        result["files"] = [
            compute_file_stats(f, max_missed_lines=max_missed_lines) for f in files
        ]

    return result


def build_text_summary(model: CoverageModel) -> str:
    """Build a concise one-line summary for display contexts."""
    if model.file_count == 0:
        return "No coverage data"

    summary = model.summary
    return (
        f"Coverage: {format_percentage(summary.overall_percentage)} overall "
        f"({summary.lines_fraction} lines, {summary.functions_fraction} functions, "
        f"{summary.branches_fraction} branches in {model.file_count} "
        f"{'file' if model.file_count == 1 else 'files'})"
    )
