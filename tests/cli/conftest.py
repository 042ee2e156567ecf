"""Shared fixtures for CLI tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Run each command from an empty directory with no global config."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    with patch("lcovkit.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"):
        yield workdir

    # Commands attach handlers to streams the runner closes afterwards
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
