"""Coverage calculator helpers.

Formatting, level classification, targets, and the distribution of
per-file coverage across a model.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from lcovkit.config.constants import (
    HIGH_COVERAGE_PERCENT,
    MEDIUM_COVERAGE_PERCENT,
    PERCENT_MAX,
    PERCENT_MIN,
)
from lcovkit.coverage.models import FileSnapshot


class CoverageLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def coverage_level(percentage: float) -> CoverageLevel:
    if percentage >= HIGH_COVERAGE_PERCENT:
        return CoverageLevel.HIGH
    if percentage >= MEDIUM_COVERAGE_PERCENT:
        return CoverageLevel.MEDIUM
    return CoverageLevel.LOW


def format_percentage(percentage: float, decimal_places: int = 1) -> str:
    return f"{percentage:.{decimal_places}f}%"


def format_fraction(hit: int, total: int) -> str:
    return f"{hit}/{total}"


def coverage_delta(current: float, previous: float) -> float:
    return current - previous


def format_delta(delta: float, decimal_places: int = 1) -> str:
    """Signed percentage, e.g. ``+2.5%`` or ``-0.3%``."""
    sign = "+" if delta >= 0 else ""
    return f"{sign}{delta:.{decimal_places}f}%"


def weighted_coverage(
    line: float,
    function: float,
    branch: float,
    *,
    line_weight: float = 1.0,
    function_weight: float = 1.0,
    branch_weight: float = 1.0,
) -> float:
    total_weight = line_weight + function_weight + branch_weight
    if total_weight == 0:
        return 0.0
    return (line * line_weight + function * function_weight + branch * branch_weight) / total_weight


def hits_needed_for_target(current_hits: int, total: int, target_percentage: float) -> int:
    """Additional covered items needed to reach *target_percentage*."""
    if total == 0:
        return 0
    target_hits = math.ceil(total * target_percentage / 100.0)
    return max(target_hits - current_hits, 0)


def is_valid_percentage(percentage: float) -> bool:
    return PERCENT_MIN <= percentage <= PERCENT_MAX


def clamp_percentage(percentage: float) -> float:
    return min(max(percentage, PERCENT_MIN), PERCENT_MAX)


@dataclass(frozen=True, slots=True)
class CoverageStatistics:
    """Distribution of overall coverage across files.

    Standard deviation is the population deviation. Every field is zero for
    an empty file set.
    """

    mean: float = 0.0
    median: float = 0.0
    min: float = 0.0
    max: float = 0.0
    standard_deviation: float = 0.0
    file_count: int = 0

    @classmethod
    def from_files(cls, files: Sequence[FileSnapshot]) -> CoverageStatistics:
        if not files:
            return cls()
        percentages = sorted(f.overall_percentage for f in files)
        return cls(
            mean=statistics.fmean(percentages),
            median=statistics.median(percentages),
            min=percentages[0],
            max=percentages[-1],
            standard_deviation=statistics.pstdev(percentages),
            file_count=len(percentages),
        )

    def __str__(self) -> str:
        return (
            f"mean: {self.mean:.1f}%, median: {self.median:.1f}%, "
            f"range: {self.min:.1f}%-{self.max:.1f}%, "
            f"stdev: {self.standard_deviation:.1f}%, files: {self.file_count}"
        )
