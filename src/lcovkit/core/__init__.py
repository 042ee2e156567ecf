"""Core module exports."""

from lcovkit.core.errors import (
    ConfigError,
    CoverageCountMismatchError,
    ErrorCode,
    LcovKitError,
    MalformedRecordError,
    RecordOutOfOrderError,
    StructuralFormatError,
    TraceReadError,
)
from lcovkit.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "CoverageCountMismatchError",
    "ErrorCode",
    "LcovKitError",
    "MalformedRecordError",
    "RecordOutOfOrderError",
    "StructuralFormatError",
    "TraceReadError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
