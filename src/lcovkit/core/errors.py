"""lcovkit error types with typed error codes.

Error code ranges:
- 1xxx: Trace parsing
- 2xxx: Config
"""

import dataclasses
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Trace (1xxx)
    TRACE_MALFORMED_RECORD = 1001
    TRACE_RECORD_OUT_OF_ORDER = 1002
    TRACE_COUNT_MISMATCH = 1003
    TRACE_STRUCTURE_INVALID = 1004
    TRACE_READ_FAILED = 1005

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2003


@dataclass(frozen=True, slots=True)
class LcovKitError(Exception):
    """Base error with structured context.

    ``line_number`` and ``line_text`` point at the physical trace line that
    triggered the error, when there is one.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    line_number: int | None = None
    line_text: str | None = None

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'TRACE_COUNT_MISMATCH')."""
        return self.code.name

    def with_location(self, line_number: int, line_text: str) -> "LcovKitError":
        """Return a copy of this error anchored at a physical trace line."""
        return dataclasses.replace(self, line_number=line_number, line_text=line_text)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
            "line_number": self.line_number,
            "line_text": self.line_text,
        }

    def __str__(self) -> str:
        text = f"[{self.code.value}] {self.error_name}: {self.message}"
        if self.line_number is not None:
            text += f' (line {self.line_number}: "{self.line_text}")'
        return text


class MalformedRecordError(LcovKitError):
    """A single trace line does not have the shape its tag requires."""

    @classmethod
    def for_record(cls, text: str, expected: str) -> "MalformedRecordError":
        return cls(
            code=ErrorCode.TRACE_MALFORMED_RECORD,
            message=f"Malformed record {text!r}: expected {expected}",
            details={"record": text, "expected": expected},
        )


class RecordOutOfOrderError(LcovKitError):
    """A detail record appeared before any file block began."""

    @classmethod
    def before_file(cls, tag: str, line_number: int, line_text: str) -> "RecordOutOfOrderError":
        return cls(
            code=ErrorCode.TRACE_RECORD_OUT_OF_ORDER,
            message=f"{tag} record found before SF record at line {line_number}",
            details={"tag": tag},
            line_number=line_number,
            line_text=line_text,
        )


class CoverageCountMismatchError(LcovKitError):
    """A declared total disagrees with the detail records of a file."""

    @classmethod
    def for_metric(
        cls, path: str, metric: str, expected: int, observed: int
    ) -> "CoverageCountMismatchError":
        return cls(
            code=ErrorCode.TRACE_COUNT_MISMATCH,
            message=f"{metric.capitalize()} mismatch for {path}: "
            f"expected {expected}, got {observed}",
            details={"path": path, "metric": metric, "expected": expected, "observed": observed},
        )

    @property
    def path(self) -> str:
        return str(self.details["path"])

    @property
    def metric(self) -> str:
        return str(self.details["metric"])

    @property
    def expected(self) -> int:
        return int(self.details["expected"])

    @property
    def observed(self) -> int:
        return int(self.details["observed"])


class StructuralFormatError(LcovKitError):
    """The input as a whole is not an LCOV trace."""

    @classmethod
    def invalid(cls, reason: str) -> "StructuralFormatError":
        return cls(
            code=ErrorCode.TRACE_STRUCTURE_INVALID,
            message=f"Invalid LCOV format: {reason}",
            details={"reason": reason},
        )


class TraceReadError(LcovKitError):
    """The trace file could not be read."""

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "TraceReadError":
        return cls(
            code=ErrorCode.TRACE_READ_FAILED,
            message=f"Failed to read LCOV file {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class ConfigError(LcovKitError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )

