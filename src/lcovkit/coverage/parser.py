"""LCOV trace parser.

LCOV is a plain text format with one record per line:
- TN:<test name>
- SF:<source file path>
- FN:<line>,<name>
- FNDA:<hit count>,<name>
- FNF:<functions found>
- FNH:<functions hit>
- DA:<line>,<hit count>
- LF:<lines found>
- LH:<lines hit>
- BRDA:<line>,<block>,<branch>,<taken or ->
- BRF:<branches found>
- BRH:<branches hit>
- end_of_record

Parsing is a single pass over the physical lines. Each SF: line opens a file
block handled by a FileAccumulator; end_of_record (or the next SF:, or the
end of input) closes it. Unknown tags are skipped so newer producers keep
working. The first malformed, out-of-order or inconsistent record aborts the
parse with an error that names the physical line.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from enum import Enum
from pathlib import Path

import structlog

from lcovkit.core.errors import (
    LcovKitError,
    MalformedRecordError,
    RecordOutOfOrderError,
    StructuralFormatError,
    TraceReadError,
)
from lcovkit.coverage.accumulator import FileAccumulator
from lcovkit.coverage.models import CoverageModel, FileSnapshot
from lcovkit.coverage.records import parse_count

log = structlog.get_logger(__name__)

TEST_NAME_TAG = "TN"
SOURCE_FILE_TAG = "SF"
END_OF_RECORD = "end_of_record"

_END_OF_INPUT = "<end of input>"

# Detail tag -> accumulator call. Counter tags decode their count first.
_DETAIL_HANDLERS: dict[str, Callable[[FileAccumulator, str], None]] = {
    "DA": FileAccumulator.add_line,
    "BRDA": FileAccumulator.add_branch,
    "FN": FileAccumulator.add_function_definition,
    "FNDA": FileAccumulator.add_function_hit,
    "LF": lambda acc, text: acc.set_lines_found(parse_count("LF:", text)),
    "LH": lambda acc, text: acc.set_lines_hit(parse_count("LH:", text)),
    "FNF": lambda acc, text: acc.set_functions_found(parse_count("FNF:", text)),
    "FNH": lambda acc, text: acc.set_functions_hit(parse_count("FNH:", text)),
    "BRF": lambda acc, text: acc.set_branches_found(parse_count("BRF:", text)),
    "BRH": lambda acc, text: acc.set_branches_hit(parse_count("BRH:", text)),
}


class ParserState(Enum):
    IDLE = "idle"
    IN_FILE = "in_file"


def _tag_of(line: str) -> str:
    """Record tag of a stripped line: the text before ':' or the whole line."""
    tag, sep, _ = line.partition(":")
    return tag if sep else line


def check_structure(content: str) -> None:
    """Reject input that is obviously not an LCOV trace.

    Runs before the line-by-line pass so non-trace input fails with one clear
    error rather than a cascade of out-of-order records.

    Raises:
        StructuralFormatError: If the content is empty, or has no SF: line,
            or has no end_of_record line.
    """
    if not content.strip():
        raise StructuralFormatError.invalid("LCOV content is empty")

    has_source_file = False
    has_end_record = False
    for raw in content.split("\n"):
        line = raw.strip()
        if line.startswith(f"{SOURCE_FILE_TAG}:"):
            has_source_file = True
        elif line == END_OF_RECORD:
            has_end_record = True
        if has_source_file and has_end_record:
            return

    if not has_source_file:
        raise StructuralFormatError.invalid("LCOV file must contain at least one SF: record")
    raise StructuralFormatError.invalid("LCOV file must contain an end_of_record line")


class LcovParser:
    """Single-pass interpreter over the lines of one trace.

    One instance parses one trace; create a new parser per call.
    """

    def __init__(self) -> None:
        self._state = ParserState.IDLE
        self._current: FileAccumulator | None = None
        self._files: list[FileSnapshot] = []
        self._skipped = 0

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def skipped_records(self) -> int:
        """Lines with an unknown tag that were skipped so far."""
        return self._skipped

    def feed(self, line_number: int, raw: str) -> None:
        """Process one physical line (1-based *line_number*)."""
        line = raw.strip()
        if not line:
            return
        try:
            self._dispatch(line_number, line)
        except LcovKitError as e:
            if e.line_number is not None:
                raise
            raise e.with_location(line_number, line) from e

    def finish(self, last_line_number: int) -> list[FileSnapshot]:
        """Close a block left open at end of input and return all snapshots."""
        if self._current is not None:
            try:
                self._close_file(self._current)
            except LcovKitError as e:
                raise e.with_location(last_line_number, _END_OF_INPUT) from e
        return self._files

    def _dispatch(self, line_number: int, line: str) -> None:
        tag = _tag_of(line)

        if tag == TEST_NAME_TAG:
            return

        if tag == SOURCE_FILE_TAG:
            if self._current is not None:
                # Missing end_of_record: keep the previous block
                self._close_file(self._current)
            self._open_file(line)
            return

        if line == END_OF_RECORD:
            if self._current is not None:
                self._close_file(self._current)
            return

        handler = _DETAIL_HANDLERS.get(tag)
        if handler is None:
            self._skipped += 1
            log.debug("trace.unknown_record", line_number=line_number, tag=tag)
            return

        if self._current is None:
            raise RecordOutOfOrderError.before_file(tag, line_number, line)
        handler(self._current, line)

    def _open_file(self, line: str) -> None:
        path = line[len(SOURCE_FILE_TAG) + 1 :].strip()
        if not path:
            raise MalformedRecordError.for_record(line, "SF:<path>")
        self._current = FileAccumulator(path)
        self._state = ParserState.IN_FILE

    def _close_file(self, accumulator: FileAccumulator) -> None:
        self._current = None
        self._state = ParserState.IDLE
        snapshot = accumulator.finalize()
        self._files.append(snapshot)
        log.debug(
            "trace.file_finalized",
            path=snapshot.path,
            lines=snapshot.total_lines,
            functions=snapshot.total_functions,
            branches=snapshot.total_branches,
        )


def parse(
    content: str,
    *,
    title: str | None = None,
    generated_at: datetime | None = None,
) -> CoverageModel:
    """Parse LCOV trace text into a CoverageModel.

    Args:
        content: Full trace text.
        title: Optional report title carried on the model.
        generated_at: Timestamp for the model. Defaults to now (UTC).

    Returns:
        CoverageModel with files in the order their blocks appear.

    Raises:
        StructuralFormatError: If the text is not an LCOV trace at all.
        MalformedRecordError: If a record's fields have the wrong shape.
        RecordOutOfOrderError: If a detail record precedes every SF: line.
        CoverageCountMismatchError: If a declared total disagrees with the
            detail records of its file.
    """
    check_structure(content)

    lines = content.split("\n")
    log.info("trace.parse_started", physical_lines=len(lines))

    parser = LcovParser()
    for line_number, raw in enumerate(lines, start=1):
        parser.feed(line_number, raw)
    files = parser.finish(len(lines))

    model = CoverageModel.build_from_files(files, title=title, generated_at=generated_at)
    log.info(
        "trace.parse_completed",
        files=model.file_count,
        skipped_records=parser.skipped_records,
        line_percentage=round(model.summary.line_percentage, 2),
    )
    return model


def parse_file(path: Path | str, *, title: str | None = None) -> CoverageModel:
    """Read an LCOV trace file and parse it.

    The file is read fully and closed before parsing starts.

    Raises:
        TraceReadError: If the file is missing or cannot be decoded.
        LcovKitError: Any error raised by parse().
    """
    path = Path(path)
    if not path.is_file():
        raise TraceReadError.unreadable(str(path), "file not found")
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TraceReadError.unreadable(str(path), str(e)) from e

    log.debug("trace.file_read", path=str(path), size=len(content))
    return parse(content, title=title)
