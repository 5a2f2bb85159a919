"""buildconf show command - print entity property bags."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from buildconf.commands._utils import get_config, load_or_exit
from buildconf.config import BuildConfConfig
from buildconf.entity import Entity
from buildconf.variants import UnknownVariant, active_selections

console = Console()


def render_entity(entity: Entity, config: BuildConfConfig, reveal_secrets: bool = False) -> Table:
    """Build a table of the entity's params in stored order.

    Args:
        entity: Entity to render
        config: Display settings
        reveal_secrets: Show secure values instead of the mask

    Returns:
        Rich table with one row per param
    """
    mask = config.display.mask_secrets and not reveal_secrets
    title = f"{entity.kind.value} {entity.type}"
    if entity.id:
        title += f" ({entity.id})"
    table = Table(title=escape(title))
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in entity.to_property_bag().items():
        shown = config.display.secret_mask if mask and config.is_secret(key) else value
        table.add_row(escape(key), escape(shown))
    return table


@click.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--reveal-secrets", is_flag=True, help="Print secure values instead of masking them")
@click.pass_context
def show(ctx: click.Context, document: Path, reveal_secrets: bool) -> None:
    """Show entity property bags.

    Params are printed in stored order. Values of secure keys are masked
    unless --reveal-secrets is given.

    Examples:

        buildconf show features.yaml

        buildconf show features.yaml --reveal-secrets
    """
    config = get_config(ctx)
    for entity in load_or_exit(document, config, console):
        console.print(render_entity(entity, config, reveal_secrets))
        for path, variant in active_selections(entity):
            marker = " [yellow](unknown)[/yellow]" if isinstance(variant, UnknownVariant) else ""
            console.print(f"  {escape(path)} = {escape(repr(variant.discriminator))}{marker}")
