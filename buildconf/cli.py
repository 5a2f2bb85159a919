"""buildconf command-line interface."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from buildconf import __version__
from buildconf.commands import show, types_cmd, validate
from buildconf.config import BuildConfConfig
from buildconf.exceptions import ConfigurationError
from buildconf.logging import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="buildconf")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: .buildconf/config.yaml)",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"]),
    default=None,
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str | None) -> None:
    """buildconf - typed CI build configuration entities.

    Validate and inspect build steps, build features and project features
    stored as entity documents.
    """
    ctx.ensure_object(dict)

    try:
        config = BuildConfConfig.load(config_path)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1) from e

    setup_logging(
        level=log_level or config.logging.level,
        log_dir=config.logging.directory,
        json_output=config.logging.structured_output,
        max_bytes=config.logging.max_log_size_mb * 1024 * 1024,
    )
    ctx.obj["config"] = config


cli.add_command(show)
cli.add_command(types_cmd, name="types")
cli.add_command(validate)


if __name__ == "__main__":
    cli()
