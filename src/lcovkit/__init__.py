"""lcovkit - LCOV trace parsing and coverage statistics."""

__version__ = "0.1.0"
