"""LCOV trace parsing and the coverage model.

This package provides:
- A single-pass LCOV parser with declared-total cross-checks
- An immutable, file-centric coverage model with derived percentages
- Calculator helpers and structured summaries

Usage:
    from lcovkit.coverage import parse_file, build_summary

    model = parse_file(Path("coverage/lcov.info"), title="My Project")
    print(model.summary.line_percentage)
    for snapshot in model.below_threshold(80.0):
        print(snapshot.path, snapshot.uncovered_lines)

    summary = build_summary(model)
"""

from lcovkit.coverage.accumulator import FileAccumulator
from lcovkit.coverage.models import (
    CoverageModel,
    CoverageSummary,
    FileSnapshot,
    IssueKind,
    ValidationIssue,
)
from lcovkit.coverage.parser import (
    LcovParser,
    ParserState,
    check_structure,
    parse,
    parse_file,
)
from lcovkit.coverage.records import (
    BranchRecord,
    FunctionDefinition,
    FunctionHit,
    FunctionRecord,
    LineRecord,
    parse_count,
)
from lcovkit.coverage.report import (
    build_summary,
    build_text_summary,
    compute_file_stats,
)
from lcovkit.coverage.stats import (
    CoverageLevel,
    CoverageStatistics,
    clamp_percentage,
    coverage_delta,
    coverage_level,
    format_delta,
    format_fraction,
    format_percentage,
    hits_needed_for_target,
    is_valid_percentage,
    weighted_coverage,
)

__all__ = [
    # Records
    "BranchRecord",
    "FunctionDefinition",
    "FunctionHit",
    "FunctionRecord",
    "LineRecord",
    "parse_count",
    # Models
    "CoverageModel",
    "CoverageSummary",
    "FileSnapshot",
    "IssueKind",
    "ValidationIssue",
    # Parsing
    "FileAccumulator",
    "LcovParser",
    "ParserState",
    "check_structure",
    "parse",
    "parse_file",
    # Report
    "build_summary",
    "build_text_summary",
    "compute_file_stats",
    # Stats
    "CoverageLevel",
    "CoverageStatistics",
    "clamp_percentage",
    "coverage_delta",
    "coverage_level",
    "format_delta",
    "format_fraction",
    "format_percentage",
    "hits_needed_for_target",
    "is_valid_percentage",
    "weighted_coverage",
]
