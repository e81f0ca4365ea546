"""opensdk subcommands.

Each module exposes one Click command or group attached to the root
command by :func:`opensdk.cli.registry.default_commands`.
"""

from opensdk.cli.commands.bar import bar
from opensdk.cli.commands.cfg import cfg
from opensdk.cli.commands.foo import foo
from opensdk.cli.commands.version import version

__all__ = [
    "bar",
    "cfg",
    "foo",
    "version",
]
