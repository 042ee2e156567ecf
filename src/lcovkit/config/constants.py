"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are format constraints and hard limits of the report surface.

For configurable values, see models.py (ThresholdsConfig, ReportConfig, etc.).
"""

# =============================================================================
# Percentages
# =============================================================================

PERCENT_MIN = 0.0
PERCENT_MAX = 100.0
"""Valid range for every coverage percentage and threshold."""

HIGH_COVERAGE_PERCENT = 90.0
"""Lower bound (inclusive) of the HIGH coverage level."""

MEDIUM_COVERAGE_PERCENT = 60.0
"""Lower bound (inclusive) of the MEDIUM coverage level."""

# =============================================================================
# Report Limits
# =============================================================================

MAX_FILES_LIMIT = 10_000
"""Maximum files listed in a structured summary."""

MAX_MISSED_LINES_LIMIT = 1_000
"""Maximum missed line numbers listed per file in a structured summary."""

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_REPORT_TITLE = "LCOV - Code Coverage Report"
"""Report title used when none is configured."""

PROJECT_CONFIG_FILENAME = ".lcovkit.yaml"
"""Per-project config file, looked up in the project root."""
