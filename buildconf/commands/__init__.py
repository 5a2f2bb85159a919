"""buildconf CLI commands."""

from buildconf.commands.show import show
from buildconf.commands.types_cmd import types_cmd
from buildconf.commands.validate import validate

__all__ = [
    "show",
    "types_cmd",
    "validate",
]
