"""Shared helpers for buildconf CLI commands."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from buildconf.config import BuildConfConfig
from buildconf.entity import Entity
from buildconf.exceptions import BuildConfError
from buildconf.loader import load_entities
from buildconf.logging import clear_log_context, set_log_context


def get_config(ctx: click.Context) -> BuildConfConfig:
    """Config loaded by the CLI group, or defaults when run standalone."""
    obj = ctx.find_root().obj or {}
    config = obj.get("config")
    return config if isinstance(config, BuildConfConfig) else BuildConfConfig()


def entity_label(entity: Entity) -> str:
    return entity.id or entity.type


def load_or_exit(path: Path, config: BuildConfConfig, console: Console) -> list[Entity]:
    """Load entities from ``path``, printing the error and exiting on failure."""
    set_log_context(document=path.name)
    try:
        return load_entities(path, strict=config.validation.fail_on_unknown_type)
    except BuildConfError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        for key, value in e.details.items():
            console.print(f"  [dim]{key}:[/dim] {escape(str(value))}")
        raise SystemExit(1) from e
    finally:
        clear_log_context()
