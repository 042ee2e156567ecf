"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (LCOVKIT__SECTION__KEY)
3. Project YAML (.lcovkit.yaml)
4. Global YAML (~/.config/lcovkit/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    LCOVKIT__<SECTION>__<KEY>=<VALUE>

Examples:
    LCOVKIT__LOGGING__LEVEL=DEBUG
    LCOVKIT__THRESHOLDS__LINE=80
    LCOVKIT__REPORT__TITLE="My Project"
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from lcovkit.config.constants import (
    DEFAULT_REPORT_TITLE,
    MAX_FILES_LIMIT,
    MAX_MISSED_LINES_LIMIT,
    PERCENT_MAX,
    PERCENT_MIN,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        LCOVKIT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO adds one line per parse; DEBUG one per file block.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ThresholdsConfig(BaseModel):
    """Minimum coverage percentages. Zero disables a check.

    Env vars:
        LCOVKIT__THRESHOLDS__LINE: Line coverage threshold
        LCOVKIT__THRESHOLDS__FUNCTION: Function coverage threshold
        LCOVKIT__THRESHOLDS__BRANCH: Branch coverage threshold
        LCOVKIT__THRESHOLDS__OVERALL: Overall coverage threshold
    """

    line: float = Field(default=0.0, description="Line coverage threshold (0-100).")
    function: float = Field(default=0.0, description="Function coverage threshold (0-100).")
    branch: float = Field(default=0.0, description="Branch coverage threshold (0-100).")
    overall: float = Field(
        default=0.0,
        description="Overall coverage threshold (0-100). Overall is the mean of the "
        "line, function and branch percentages that have data (100 when none has).",
    )

    @field_validator("line", "function", "branch", "overall")
    @classmethod
    def validate_percentage(cls, v: float) -> float:
        if not (PERCENT_MIN <= v <= PERCENT_MAX):
            raise ValueError(f"Coverage threshold must be between 0.0 and 100.0, got {v}")
        return v


class ReportConfig(BaseModel):
    """Report presentation configuration.

    Env vars:
        LCOVKIT__REPORT__TITLE: Report title
        LCOVKIT__REPORT__SORT_BY_COVERAGE: List files lowest coverage first
        LCOVKIT__REPORT__MAX_FILES: Max files listed in summaries
        LCOVKIT__REPORT__MAX_MISSED_LINES: Max missed lines listed per file
    """

    title: str = Field(default=DEFAULT_REPORT_TITLE, description="Title for the coverage report.")
    sort_by_coverage: bool = Field(
        default=True,
        description="List files lowest coverage first. When false, source order is kept.",
    )
    max_files: int | None = Field(
        default=None,
        description="Max files listed in summaries. None lists every file.",
    )
    max_missed_lines: int = Field(
        default=20,
        description="Max uncovered line numbers listed per file in JSON summaries.",
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if "<" in v or ">" in v:
            raise ValueError("Report title contains unsafe characters")
        return v

    @field_validator("max_files")
    @classmethod
    def validate_max_files(cls, v: int | None) -> int | None:
        if v is not None and not (1 <= v <= MAX_FILES_LIMIT):
            raise ValueError(f"max_files must be 1-{MAX_FILES_LIMIT}, got {v}")
        return v

    @field_validator("max_missed_lines")
    @classmethod
    def validate_max_missed_lines(cls, v: int) -> int:
        if not (0 <= v <= MAX_MISSED_LINES_LIMIT):
            raise ValueError(f"max_missed_lines must be 0-{MAX_MISSED_LINES_LIMIT}, got {v}")
        return v


class LcovKitConfig(BaseModel):
    """Root configuration for lcovkit.

    All settings can be configured via:
    1. Environment variables: LCOVKIT__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
