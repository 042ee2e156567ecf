"""Per-file builder used while a trace file block is open.

A FileAccumulator collects the detail records between ``SF:`` and
``end_of_record`` and turns them into an immutable FileSnapshot. FN and
FNDA records arrive independently; they are staged separately and joined
by function name in finalize().
"""

from __future__ import annotations

import structlog

from lcovkit.core.errors import CoverageCountMismatchError
from lcovkit.coverage.models import FileSnapshot
from lcovkit.coverage.records import (
    BranchRecord,
    FunctionDefinition,
    FunctionHit,
    FunctionRecord,
    LineRecord,
)

log = structlog.get_logger(__name__)


class FileAccumulator:
    """Mutable builder for one file block."""

    def __init__(self, path: str) -> None:
        self._path = path
        self._lines: list[LineRecord] = []
        self._branches: list[BranchRecord] = []
        self._definitions: dict[int, str] = {}  # line -> name
        self._hits: dict[str, int] = {}  # name -> hits

        # Declared totals, cross-checked in finalize()
        self._lines_found: int | None = None
        self._lines_hit: int | None = None
        self._functions_found: int | None = None
        self._functions_hit: int | None = None
        self._branches_found: int | None = None
        self._branches_hit: int | None = None

    @property
    def path(self) -> str:
        return self._path

    def add_line(self, text: str) -> None:
        self._lines.append(LineRecord.from_lcov(text))

    def add_branch(self, text: str) -> None:
        self._branches.append(BranchRecord.from_lcov(text))

    def add_function_definition(self, text: str) -> None:
        definition = FunctionDefinition.from_lcov(text)
        self._definitions[definition.line_number] = definition.name

    def add_function_hit(self, text: str) -> None:
        hit = FunctionHit.from_lcov(text)
        self._hits[hit.name] = hit.hit_count

    def set_lines_found(self, count: int) -> None:
        self._lines_found = count

    def set_lines_hit(self, count: int) -> None:
        self._lines_hit = count

    def set_functions_found(self, count: int) -> None:
        self._functions_found = count

    def set_functions_hit(self, count: int) -> None:
        self._functions_hit = count

    def set_branches_found(self, count: int) -> None:
        self._branches_found = count

    def set_branches_hit(self, count: int) -> None:
        self._branches_hit = count

    def finalize(self) -> FileSnapshot:
        """Build the snapshot and check it against the declared totals.

        Raises:
            CoverageCountMismatchError: If a declared total differs from the
                value computed from the detail records.
        """
        functions = [
            FunctionRecord.join(
                FunctionDefinition(line_number=line, name=name), self._hits.get(name, 0)
            )
            for line, name in self._definitions.items()
        ]

        orphans = self._hits.keys() - set(self._definitions.values())
        if orphans:
            log.debug("trace.function_hits_dropped", path=self._path, names=sorted(orphans))

        # sorted() is stable: records sharing a line keep their input order
        snapshot = FileSnapshot(
            path=self._path,
            lines=tuple(sorted(self._lines, key=lambda r: r.line_number)),
            functions=tuple(sorted(functions, key=lambda r: r.line_number)),
            branches=tuple(sorted(self._branches, key=lambda r: r.line_number)),
        )
        self._check_declared_totals(snapshot)
        return snapshot

    def _check_declared_totals(self, snapshot: FileSnapshot) -> None:
        checks: list[tuple[str, int | None, int]] = [
            ("lines found", self._lines_found, snapshot.total_lines),
            ("lines hit", self._lines_hit, snapshot.hit_lines),
            ("functions found", self._functions_found, snapshot.total_functions),
            ("functions hit", self._functions_hit, snapshot.hit_functions),
        ]
        # Some producers emit BRF/BRH without BRDA detail; accept those unverified
        if self._branches:
            checks += [
                ("branches found", self._branches_found, snapshot.total_branches),
                ("branches hit", self._branches_hit, snapshot.hit_branches),
            ]

        for metric, declared, observed in checks:
            if declared is not None and declared != observed:
                raise CoverageCountMismatchError.for_metric(
                    self._path, metric, expected=declared, observed=observed
                )
