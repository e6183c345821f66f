"""Subcommand modules for asini.

Provides register_commands() which uses deferred imports to keep
``asini --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``git`` and ``npm`` command groups on the root CLI group."""
    from asini.commands.git import git
    from asini.commands.npm import npm

    cli.add_command(git)
    cli.add_command(npm)
