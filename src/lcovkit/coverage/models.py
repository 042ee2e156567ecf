"""Coverage data model.

File-centric and immutable: a CoverageModel holds FileSnapshots in the order
their blocks appeared in the trace, plus a CoverageSummary folded from them.
Percentages are derived on demand and never stored.

Percentage conventions:
- A metric with no records of its kind counts as 100% covered, so files
  without branches (or functions) are not penalised.
- Overall coverage is the mean of the line, function and branch percentages
  that have a non-zero denominator (100.0 when none has).
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum

from lcovkit.coverage.records import BranchRecord, FunctionRecord, LineRecord


def _percentage(hit: int, total: int) -> float:
    if total == 0:
        return 100.0
    return hit / total * 100.0


class _CoverageTotals:
    """Percentage math shared by per-file snapshots and project summaries."""

    __slots__ = ()

    total_lines: int
    hit_lines: int
    total_functions: int
    hit_functions: int
    total_branches: int
    hit_branches: int

    @property
    def line_percentage(self) -> float:
        """Line coverage percentage (0.0 to 100.0)."""
        return _percentage(self.hit_lines, self.total_lines)

    @property
    def function_percentage(self) -> float:
        """Function coverage percentage (0.0 to 100.0)."""
        return _percentage(self.hit_functions, self.total_functions)

    @property
    def branch_percentage(self) -> float:
        """Branch coverage percentage (0.0 to 100.0)."""
        return _percentage(self.hit_branches, self.total_branches)

    @property
    def overall_percentage(self) -> float:
        """Mean of the metric percentages that have data."""
        measured = [
            pct
            for total, pct in (
                (self.total_lines, self.line_percentage),
                (self.total_functions, self.function_percentage),
                (self.total_branches, self.branch_percentage),
            )
            if total > 0
        ]
        if not measured:
            return 100.0
        return sum(measured) / len(measured)


@dataclass(frozen=True, slots=True)
class FileSnapshot(_CoverageTotals):
    """Coverage data for a single source file.

    Records are sorted by line number. Duplicate DA lines for the same line
    number are kept as separate records and count twice.
    """

    path: str
    lines: tuple[LineRecord, ...] = ()
    functions: tuple[FunctionRecord, ...] = ()
    branches: tuple[BranchRecord, ...] = ()

    @property
    def total_lines(self) -> int:  # type: ignore[override]
        return len(self.lines)

    @property
    def hit_lines(self) -> int:  # type: ignore[override]
        return sum(1 for r in self.lines if r.is_covered)

    @property
    def total_functions(self) -> int:  # type: ignore[override]
        return len(self.functions)

    @property
    def hit_functions(self) -> int:  # type: ignore[override]
        return sum(1 for r in self.functions if r.is_covered)

    @property
    def total_branches(self) -> int:  # type: ignore[override]
        return len(self.branches)

    @property
    def hit_branches(self) -> int:  # type: ignore[override]
        return sum(1 for r in self.branches if r.is_covered)

    @property
    def uncovered_lines(self) -> list[int]:
        """Sorted line numbers with zero hits."""
        return sorted(r.line_number for r in self.lines if not r.is_covered)

    def get_line(self, line_number: int) -> LineRecord | None:
        return next((r for r in self.lines if r.line_number == line_number), None)

    def get_function(self, name: str) -> FunctionRecord | None:
        return next((r for r in self.functions if r.name == name), None)

    def branches_for_line(self, line_number: int) -> list[BranchRecord]:
        return [r for r in self.branches if r.line_number == line_number]


@dataclass(frozen=True, slots=True)
class CoverageSummary(_CoverageTotals):
    """Aggregate totals across all files of a model."""

    total_lines: int = 0
    hit_lines: int = 0
    total_functions: int = 0
    hit_functions: int = 0
    total_branches: int = 0
    hit_branches: int = 0

    @classmethod
    def from_files(cls, files: Iterable[FileSnapshot]) -> CoverageSummary:
        totals = dict.fromkeys((f.name for f in fields(cls)), 0)
        for snapshot in files:
            for name in totals:
                totals[name] += getattr(snapshot, name)
        return cls(**totals)

    def meets_line_threshold(self, threshold: float) -> bool:
        return self.line_percentage >= threshold

    def meets_function_threshold(self, threshold: float) -> bool:
        return self.function_percentage >= threshold

    def meets_branch_threshold(self, threshold: float) -> bool:
        return self.branch_percentage >= threshold

    def meets_overall_threshold(self, threshold: float) -> bool:
        return self.overall_percentage >= threshold

    @property
    def lines_fraction(self) -> str:
        """Line coverage as ``"hit/total"``."""
        return f"{self.hit_lines}/{self.total_lines}"

    @property
    def functions_fraction(self) -> str:
        return f"{self.hit_functions}/{self.total_functions}"

    @property
    def branches_fraction(self) -> str:
        return f"{self.hit_branches}/{self.total_branches}"

    def __str__(self) -> str:
        return (
            f"lines: {self.lines_fraction} ({self.line_percentage:.1f}%), "
            f"functions: {self.functions_fraction} ({self.function_percentage:.1f}%), "
            f"branches: {self.branches_fraction} ({self.branch_percentage:.1f}%)"
        )


class IssueKind(Enum):
    DUPLICATE_FILE_PATH = "duplicate_file_path"
    SUMMARY_MISMATCH = "summary_mismatch"


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """A structural problem reported by CoverageModel.validate()."""

    kind: IssueKind
    message: str
    path: str | None = None


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class CoverageModel:
    """Whole-project coverage.

    Build with build_from_files() so the summary matches the files. Methods
    that change the file set return a new model with a rebuilt summary.
    """

    files: tuple[FileSnapshot, ...]
    summary: CoverageSummary
    title: str | None = None
    generated_at: datetime = field(default_factory=_now)

    @classmethod
    def build_from_files(
        cls,
        files: Iterable[FileSnapshot],
        *,
        title: str | None = None,
        generated_at: datetime | None = None,
    ) -> CoverageModel:
        files = tuple(files)
        return cls(
            files=files,
            summary=CoverageSummary.from_files(files),
            title=title,
            generated_at=generated_at or _now(),
        )

    @property
    def file_count(self) -> int:
        return len(self.files)

    def get_file(self, path: str) -> FileSnapshot | None:
        """First snapshot with this exact path."""
        return next((f for f in self.files if f.path == path), None)

    def files_matching(self, pattern: str | re.Pattern[str]) -> list[FileSnapshot]:
        """Snapshots whose path contains a match for the regex *pattern*."""
        regex = re.compile(pattern)
        return [f for f in self.files if regex.search(f.path)]

    def sorted_by_coverage(self) -> list[FileSnapshot]:
        """Snapshots ordered by overall percentage, lowest first."""
        return sorted(self.files, key=lambda f: f.overall_percentage)

    def below_threshold(self, threshold: float) -> list[FileSnapshot]:
        return [f for f in self.files if f.overall_percentage < threshold]

    def with_perfect_coverage(self) -> list[FileSnapshot]:
        return [f for f in self.files if f.overall_percentage >= 100.0]

    def with_no_coverage(self) -> list[FileSnapshot]:
        return [f for f in self.files if f.overall_percentage == 0.0]

    def _rebuild(self, files: Iterable[FileSnapshot]) -> CoverageModel:
        return CoverageModel.build_from_files(
            files, title=self.title, generated_at=self.generated_at
        )

    def with_file(self, snapshot: FileSnapshot) -> CoverageModel:
        return self._rebuild((*self.files, snapshot))

    def without_file(self, path: str) -> CoverageModel:
        return self._rebuild(f for f in self.files if f.path != path)

    def replace_file(self, snapshot: FileSnapshot) -> CoverageModel:
        """Swap every snapshot sharing *snapshot*'s path for *snapshot*."""
        return self._rebuild(snapshot if f.path == snapshot.path else f for f in self.files)

    def filter_files(self, predicate: Callable[[FileSnapshot], bool]) -> CoverageModel:
        return self._rebuild(f for f in self.files if predicate(f))

    def validate(self) -> list[ValidationIssue]:
        """Report structural problems without raising.

        Checks for duplicate file paths and for a stored summary that no
        longer matches the one computed from the files.
        """
        issues: list[ValidationIssue] = []

        counts = Counter(f.path for f in self.files)
        for path, count in counts.items():
            if count > 1:
                issues.append(
                    ValidationIssue(
                        kind=IssueKind.DUPLICATE_FILE_PATH,
                        message=f"Duplicate source file path: {path} ({count} blocks)",
                        path=path,
                    )
                )

        expected = CoverageSummary.from_files(self.files)
        if self.summary != expected:
            differing = [
                f.name
                for f in fields(CoverageSummary)
                if getattr(self.summary, f.name) != getattr(expected, f.name)
            ]
            issues.append(
                ValidationIssue(
                    kind=IssueKind.SUMMARY_MISMATCH,
                    message="Summary does not match values computed from files: "
                    + ", ".join(differing),
                )
            )

        return issues
