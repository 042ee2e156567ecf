"""lcovkit CLI - lcovkit command."""

import click

from lcovkit import __version__
from lcovkit.cli.summary import summary_command
from lcovkit.cli.validate import validate_command
from lcovkit.core.logging import configure_logging, set_run_id


@click.group()
@click.version_option(version=__version__, prog_name="lcovkit")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """lcovkit - Parse LCOV trace files and report coverage."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    set_run_id()
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(summary_command, name="summary")
cli.add_command(validate_command, name="validate")


if __name__ == "__main__":
    cli()
