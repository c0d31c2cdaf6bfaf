"""Subcommand modules for pagetrail.

Provides register_commands() which uses deferred imports to keep
``pagetrail --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    3 groups (have subcommands) + 3 standalone commands.
    """
    # --- Groups ---
    from pagetrail.commands.history import history
    from pagetrail.commands.name import name
    from pagetrail.commands.page import page

    cli.add_command(page)
    cli.add_command(name)
    cli.add_command(history)

    # --- Standalone commands ---
    from pagetrail.commands.init_cmd import init_cmd
    from pagetrail.commands.resolve import resolve
    from pagetrail.commands.upgrade import upgrade

    cli.add_command(init_cmd)
    cli.add_command(resolve)
    cli.add_command(upgrade)
