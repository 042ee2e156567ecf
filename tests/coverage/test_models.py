"""Tests for coverage/models.py module."""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone

import pytest

from lcovkit.coverage.models import (
    CoverageModel,
    CoverageSummary,
    FileSnapshot,
    IssueKind,
)
from lcovkit.coverage.records import BranchRecord, FunctionRecord, LineRecord


def _snapshot(path: str, *hits: int) -> FileSnapshot:
    return FileSnapshot(
        path=path,
        lines=tuple(LineRecord(line_number=i, hit_count=h) for i, h in enumerate(hits, start=1)),
    )


class TestFileSnapshot:
    """Tests for per-file derived values."""

    def test_empty_metrics_are_fully_covered(self) -> None:
        snapshot = FileSnapshot(path="empty.dart")
        assert snapshot.line_percentage == 100.0
        assert snapshot.function_percentage == 100.0
        assert snapshot.branch_percentage == 100.0
        assert snapshot.overall_percentage == 100.0

    def test_totals(self) -> None:
        snapshot = FileSnapshot(
            path="a.dart",
            lines=(LineRecord(1, 1), LineRecord(2, 0), LineRecord(3, 5)),
            functions=(FunctionRecord(1, "f", 0),),
            branches=(BranchRecord(1, 0, 0, 1), BranchRecord(1, 0, 1, 0)),
        )
        assert (snapshot.total_lines, snapshot.hit_lines) == (3, 2)
        assert (snapshot.total_functions, snapshot.hit_functions) == (1, 0)
        assert (snapshot.total_branches, snapshot.hit_branches) == (2, 1)

    def test_overall_ignores_metrics_without_data(self) -> None:
        # Lines only: overall equals line percentage, not diluted by 100%s
        snapshot = _snapshot("a.dart", 1, 0, 0, 0)
        assert snapshot.line_percentage == 25.0
        assert snapshot.overall_percentage == 25.0

    def test_overall_is_mean_of_measured_metrics(self) -> None:
        snapshot = FileSnapshot(
            path="a.dart",
            lines=(LineRecord(1, 1), LineRecord(2, 0)),
            functions=(FunctionRecord(1, "f", 1),),
        )
        assert snapshot.overall_percentage == pytest.approx(75.0)

    def test_overall_of_functions_only_file(self) -> None:
        # No lines: the uncalled function alone sets overall
        snapshot = FileSnapshot(path="a.dart", functions=(FunctionRecord(1, "f", 0),))
        assert snapshot.line_percentage == 100.0
        assert snapshot.function_percentage == 0.0
        assert snapshot.overall_percentage == 0.0

    def test_overall_of_branches_only_file(self) -> None:
        snapshot = FileSnapshot(
            path="a.dart", branches=(BranchRecord(1, 0, 0, 3), BranchRecord(1, 0, 1, 0))
        )
        assert snapshot.overall_percentage == pytest.approx(50.0)

    def test_uncovered_lines(self) -> None:
        snapshot = FileSnapshot(
            path="a.dart", lines=(LineRecord(2, 0), LineRecord(5, 1), LineRecord(9, 0))
        )
        assert snapshot.uncovered_lines == [2, 9]

    def test_lookups(self) -> None:
        snapshot = FileSnapshot(
            path="a.dart",
            lines=(LineRecord(3, 2),),
            functions=(FunctionRecord(3, "main", 1),),
            branches=(BranchRecord(3, 0, 0, 1), BranchRecord(3, 0, 1, 0), BranchRecord(7, 0, 0, 1)),
        )
        assert snapshot.get_line(3) == LineRecord(3, 2)
        assert snapshot.get_line(4) is None
        assert snapshot.get_function("main") == FunctionRecord(3, "main", 1)
        assert snapshot.get_function("other") is None
        assert len(snapshot.branches_for_line(3)) == 2
        assert snapshot.branches_for_line(5) == []

    def test_is_immutable(self) -> None:
        snapshot = FileSnapshot(path="a.dart")
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.path = "b.dart"  # type: ignore[misc]


class TestCoverageSummary:
    """Tests for aggregate totals."""

    def test_from_files_sums_fields(self) -> None:
        files = [
            FileSnapshot(
                path="a.dart",
                lines=(LineRecord(1, 1), LineRecord(2, 0)),
                functions=(FunctionRecord(1, "f", 1),),
            ),
            FileSnapshot(
                path="b.dart",
                lines=(LineRecord(1, 0),),
                branches=(BranchRecord(1, 0, 0, 2), BranchRecord(1, 0, 1, 0)),
            ),
        ]

        summary = CoverageSummary.from_files(files)

        assert summary == CoverageSummary(
            total_lines=3,
            hit_lines=1,
            total_functions=1,
            hit_functions=1,
            total_branches=2,
            hit_branches=1,
        )

    def test_empty_summary(self) -> None:
        summary = CoverageSummary.from_files([])
        assert summary == CoverageSummary()
        assert summary.overall_percentage == 100.0

    def test_thresholds_are_inclusive(self) -> None:
        summary = CoverageSummary(total_lines=4, hit_lines=3)
        assert summary.meets_line_threshold(75.0)
        assert not summary.meets_line_threshold(75.1)
        assert summary.meets_function_threshold(100.0)
        assert summary.meets_branch_threshold(100.0)
        assert summary.meets_overall_threshold(75.0)

    def test_fractions_and_str(self) -> None:
        summary = CoverageSummary(
            total_lines=4, hit_lines=2, total_functions=2, hit_functions=2
        )
        assert summary.lines_fraction == "2/4"
        assert summary.functions_fraction == "2/2"
        assert summary.branches_fraction == "0/0"
        assert str(summary) == (
            "lines: 2/4 (50.0%), functions: 2/2 (100.0%), branches: 0/0 (100.0%)"
        )


class TestCoverageModel:
    """Tests for whole-project queries and rebuilds."""

    @pytest.fixture
    def model(self) -> CoverageModel:
        return CoverageModel.build_from_files(
            [
                _snapshot("lib/a.dart", 1, 1),
                _snapshot("lib/b.dart", 0, 0),
                _snapshot("test/c.dart", 1, 0),
            ],
            title="Project",
            generated_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )

    def test_build_keeps_order_and_sums(self, model: CoverageModel) -> None:
        assert [f.path for f in model.files] == ["lib/a.dart", "lib/b.dart", "test/c.dart"]
        assert model.file_count == 3
        assert model.summary.total_lines == 6
        assert model.summary.hit_lines == 3

    def test_get_file(self, model: CoverageModel) -> None:
        assert model.get_file("lib/b.dart") is model.files[1]
        assert model.get_file("nope.dart") is None

    def test_files_matching(self, model: CoverageModel) -> None:
        assert [f.path for f in model.files_matching(r"^lib/")] == ["lib/a.dart", "lib/b.dart"]
        assert model.files_matching("c\\.dart$")[0].path == "test/c.dart"

    def test_sorted_by_coverage(self, model: CoverageModel) -> None:
        assert [f.path for f in model.sorted_by_coverage()] == [
            "lib/b.dart",
            "test/c.dart",
            "lib/a.dart",
        ]

    def test_classification(self, model: CoverageModel) -> None:
        assert [f.path for f in model.below_threshold(50.0)] == ["lib/b.dart"]
        assert [f.path for f in model.with_perfect_coverage()] == ["lib/a.dart"]
        assert [f.path for f in model.with_no_coverage()] == ["lib/b.dart"]

    def test_with_file_rebuilds_summary(self, model: CoverageModel) -> None:
        updated = model.with_file(_snapshot("lib/d.dart", 1))

        assert updated.file_count == 4
        assert updated.summary.total_lines == 7
        assert updated.title == model.title
        assert updated.generated_at == model.generated_at
        # Source model untouched
        assert model.file_count == 3

    def test_without_file(self, model: CoverageModel) -> None:
        updated = model.without_file("lib/b.dart")
        assert [f.path for f in updated.files] == ["lib/a.dart", "test/c.dart"]
        assert updated.summary.total_lines == 4
        assert updated.summary.hit_lines == 3

    def test_replace_file(self, model: CoverageModel) -> None:
        updated = model.replace_file(_snapshot("lib/b.dart", 1, 1))
        assert [f.path for f in updated.files] == ["lib/a.dart", "lib/b.dart", "test/c.dart"]
        assert updated.summary.hit_lines == 5

    def test_filter_files(self, model: CoverageModel) -> None:
        updated = model.filter_files(lambda f: f.path.startswith("lib/"))
        assert updated.file_count == 2
        assert updated.summary == CoverageSummary.from_files(updated.files)

    def test_validate_clean_model(self, model: CoverageModel) -> None:
        assert model.validate() == []

    def test_validate_duplicate_paths(self) -> None:
        model = CoverageModel.build_from_files(
            [_snapshot("a.dart", 1), _snapshot("b.dart", 1), _snapshot("a.dart", 0)]
        )

        issues = model.validate()

        assert len(issues) == 1
        assert issues[0].kind is IssueKind.DUPLICATE_FILE_PATH
        assert issues[0].path == "a.dart"
        assert "2 blocks" in issues[0].message

    def test_validate_stale_summary(self) -> None:
        files = (_snapshot("a.dart", 1, 0),)
        model = CoverageModel(files=files, summary=CoverageSummary(total_lines=2, hit_lines=2))

        issues = model.validate()

        assert [i.kind for i in issues] == [IssueKind.SUMMARY_MISMATCH]
        assert "hit_lines" in issues[0].message
        assert "total_lines" not in issues[0].message


class TestRepeatedQueries:
    """Derived values and queries give the same answer on every call."""

    @pytest.fixture
    def snapshot(self) -> FileSnapshot:
        return FileSnapshot(
            path="lib/mixed.dart",
            lines=(LineRecord(1, 1), LineRecord(2, 0), LineRecord(3, 4)),
            functions=(FunctionRecord(1, "f", 0), FunctionRecord(3, "g", 2)),
            branches=(BranchRecord(2, 0, 0, 1), BranchRecord(2, 0, 1, 0)),
        )

    @staticmethod
    def _snapshot_answers(snapshot: FileSnapshot) -> tuple[object, ...]:
        return (
            snapshot.line_percentage,
            snapshot.function_percentage,
            snapshot.branch_percentage,
            snapshot.overall_percentage,
            snapshot.uncovered_lines,
            snapshot.branches_for_line(2),
        )

    @staticmethod
    def _model_answers(model: CoverageModel) -> tuple[object, ...]:
        summary = model.summary
        return (
            summary.line_percentage,
            summary.overall_percentage,
            summary.meets_line_threshold(60.0),
            summary.meets_function_threshold(60.0),
            summary.meets_branch_threshold(50.0),
            summary.meets_overall_threshold(60.0),
            [f.path for f in model.sorted_by_coverage()],
            [f.path for f in model.below_threshold(60.0)],
            [f.path for f in model.with_perfect_coverage()],
            [f.path for f in model.with_no_coverage()],
        )

    def test_snapshot_values_are_stable(self, snapshot: FileSnapshot) -> None:
        first = self._snapshot_answers(snapshot)
        second = self._snapshot_answers(snapshot)

        assert first == second
        assert snapshot == dataclasses.replace(snapshot)

    def test_model_queries_are_stable(self, snapshot: FileSnapshot) -> None:
        model = CoverageModel.build_from_files(
            [snapshot, _snapshot("lib/full.dart", 1, 1), _snapshot("lib/none.dart", 0)]
        )
        files_before = model.files
        summary_before = model.summary

        first = self._model_answers(model)
        second = self._model_answers(model)

        assert first == second
        assert first[6] == ["lib/none.dart", "lib/mixed.dart", "lib/full.dart"]
        assert model.files == files_before
        assert model.summary == summary_before
