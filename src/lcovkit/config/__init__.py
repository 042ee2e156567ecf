"""Config module exports."""

from lcovkit.config.loader import load_config
from lcovkit.config.models import (
    LcovKitConfig,
    LoggingConfig,
    LogOutputConfig,
    ReportConfig,
    ThresholdsConfig,
)

__all__ = [
    "load_config",
    "LcovKitConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ReportConfig",
    "ThresholdsConfig",
]
