"""CLI utilities."""

from pathlib import Path
from typing import Any

import click

from lcovkit.config import LcovKitConfig, load_config
from lcovkit.core.errors import LcovKitError
from lcovkit.core.logging import configure_logging
from lcovkit.coverage import CoverageModel, parse_file


def load_cli_config(
    ctx: click.Context,
    config_path: Path | None,
    **overrides: Any,
) -> LcovKitConfig:
    """Load config for a command and apply its logging section.

    ``--verbose`` on the group keeps DEBUG logging regardless of config.

    Raises:
        click.ClickException: If the config cannot be loaded or is invalid
    """
    # Unset CLI options must not mask yaml/env values
    sections = {
        section: {k: v for k, v in values.items() if v is not None}
        for section, values in overrides.items()
    }
    sections = {section: values for section, values in sections.items() if values}

    try:
        config = load_config(config_path=config_path, **sections)
    except LcovKitError as e:
        raise click.ClickException(str(e)) from e

    if not (ctx.obj or {}).get("verbose"):
        configure_logging(config=config.logging)
    return config


def load_model(trace: Path, *, title: str | None) -> CoverageModel:
    """Parse a trace file for a command.

    Raises:
        click.ClickException: If the file cannot be read or parsed
    """
    try:
        return parse_file(trace, title=title)
    except LcovKitError as e:
        raise click.ClickException(f"Error parsing LCOV file: {e}") from e
