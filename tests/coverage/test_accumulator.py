"""Tests for coverage/accumulator.py module."""

from __future__ import annotations

import pytest

from lcovkit.core.errors import CoverageCountMismatchError, MalformedRecordError
from lcovkit.coverage.accumulator import FileAccumulator
from lcovkit.coverage.records import BranchRecord, FunctionRecord, LineRecord


def _accumulator(*lines: str) -> FileAccumulator:
    acc = FileAccumulator("src/app.dart")
    for line in lines:
        tag = line.split(":", 1)[0]
        {
            "DA": acc.add_line,
            "BRDA": acc.add_branch,
            "FN": acc.add_function_definition,
            "FNDA": acc.add_function_hit,
        }[tag](line)
    return acc


class TestFinalize:
    """Tests for snapshot construction."""

    def test_empty_block(self) -> None:
        snapshot = FileAccumulator("empty.dart").finalize()
        assert snapshot.path == "empty.dart"
        assert snapshot.lines == ()
        assert snapshot.functions == ()
        assert snapshot.branches == ()

    def test_sorts_records_by_line(self) -> None:
        snapshot = _accumulator("DA:9,1", "DA:2,0", "DA:5,3").finalize()
        assert [r.line_number for r in snapshot.lines] == [2, 5, 9]

    def test_sort_is_stable_for_shared_lines(self) -> None:
        snapshot = _accumulator("BRDA:7,0,1,2", "BRDA:3,0,0,1", "BRDA:7,0,0,-").finalize()
        assert snapshot.branches == (
            BranchRecord(3, 0, 0, 1),
            BranchRecord(7, 0, 1, 2),
            BranchRecord(7, 0, 0, 0),
        )

    def test_duplicate_line_records_are_kept(self) -> None:
        # Current behavior: duplicates are neither merged nor rejected,
        # so the line counts twice in the totals.
        snapshot = _accumulator("DA:4,1", "DA:4,0").finalize()
        assert snapshot.lines == (LineRecord(4, 1), LineRecord(4, 0))
        assert snapshot.total_lines == 2
        assert snapshot.hit_lines == 1

    def test_joins_functions_by_name(self) -> None:
        snapshot = _accumulator("FNDA:5,b", "FN:20,b", "FN:10,a", "FNDA:2,a").finalize()
        assert snapshot.functions == (
            FunctionRecord(10, "a", 2),
            FunctionRecord(20, "b", 5),
        )

    def test_definition_without_hit_has_zero_hits(self) -> None:
        snapshot = _accumulator("FN:10,never_called").finalize()
        assert snapshot.functions == (FunctionRecord(10, "never_called", 0),)

    def test_hit_without_definition_is_dropped(self) -> None:
        snapshot = _accumulator("FN:10,a", "FNDA:1,a", "FNDA:3,ghost").finalize()
        assert [f.name for f in snapshot.functions] == ["a"]

    def test_later_definition_on_same_line_wins(self) -> None:
        snapshot = _accumulator("FN:10,old", "FN:10,new").finalize()
        assert [f.name for f in snapshot.functions] == ["new"]

    def test_last_hit_for_name_wins(self) -> None:
        snapshot = _accumulator("FN:1,f", "FNDA:1,f", "FNDA:6,f").finalize()
        assert snapshot.functions[0].hit_count == 6

    def test_malformed_record_propagates(self) -> None:
        acc = FileAccumulator("a.dart")
        with pytest.raises(MalformedRecordError):
            acc.add_line("DA:one,1")


class TestDeclaredTotals:
    """Tests for cross-checking declared totals."""

    def test_matching_totals_pass(self) -> None:
        acc = _accumulator("DA:1,1", "DA:2,0", "FN:1,f", "FNDA:1,f", "BRDA:1,0,0,1")
        acc.set_lines_found(2)
        acc.set_lines_hit(1)
        acc.set_functions_found(1)
        acc.set_functions_hit(1)
        acc.set_branches_found(1)
        acc.set_branches_hit(1)
        assert acc.finalize().total_lines == 2

    @pytest.mark.parametrize(
        ("setter", "declared", "metric", "observed"),
        [
            ("set_lines_found", 3, "lines found", 2),
            ("set_lines_hit", 2, "lines hit", 1),
            ("set_functions_found", 0, "functions found", 1),
            ("set_functions_hit", 0, "functions hit", 1),
            ("set_branches_found", 4, "branches found", 1),
            ("set_branches_hit", 0, "branches hit", 1),
        ],
    )
    def test_mismatch_names_metric(
        self, setter: str, declared: int, metric: str, observed: int
    ) -> None:
        acc = _accumulator("DA:1,1", "DA:2,0", "FN:1,f", "FNDA:1,f", "BRDA:1,0,0,1")
        getattr(acc, setter)(declared)

        with pytest.raises(CoverageCountMismatchError) as exc_info:
            acc.finalize()

        err = exc_info.value
        assert err.path == "src/app.dart"
        assert err.metric == metric
        assert err.expected == declared
        assert err.observed == observed

    def test_last_declared_value_wins(self) -> None:
        acc = _accumulator("DA:1,1")
        acc.set_lines_found(5)
        acc.set_lines_found(1)
        acc.finalize()

    def test_declared_branches_without_detail_are_accepted(self) -> None:
        acc = _accumulator("DA:1,1")
        acc.set_branches_found(8)
        acc.set_branches_hit(3)
        snapshot = acc.finalize()
        assert snapshot.total_branches == 0
        assert snapshot.branch_percentage == 100.0
