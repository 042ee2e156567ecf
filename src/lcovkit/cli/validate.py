"""lcovkit validate command - report structural problems in a trace."""

import json
from pathlib import Path

import click

from lcovkit.cli.utils import load_cli_config, load_model


@click.command()
@click.argument("trace", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: .lcovkit.yaml in the current directory).",
)
@click.pass_context
def validate_command(
    ctx: click.Context, trace: Path, as_json: bool, config_path: Path | None
) -> None:
    """Check an LCOV trace for duplicate files and inconsistent totals.

    Parse errors are reported as failures; structural issues found in a
    parsed trace exit with status 1.
    """
    config = load_cli_config(ctx, config_path)
    model = load_model(trace, title=config.report.title)
    issues = model.validate()

    if as_json:
        click.echo(
            json.dumps(
                {
                    "valid": not issues,
                    "files": model.file_count,
                    "issues": [
                        {"kind": issue.kind.value, "message": issue.message, "path": issue.path}
                        for issue in issues
                    ],
                }
            )
        )
    elif issues:
        for issue in issues:
            click.echo(f"{issue.kind.value}: {issue.message}", err=True)
    else:
        click.echo(f"OK: {model.file_count} source files, no issues found")

    if issues:
        ctx.exit(1)
