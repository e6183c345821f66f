"""Command group: repository state queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from asini.commands._base import AsiniGroup
from asini.services.repository import RepositoryService

if TYPE_CHECKING:
    from asini.commands._context import AppContext

_GIT_EXAMPLES = """\
  asini git status
  asini git changed packages/foo
  asini git changed packages/foo --since foo@1.0.0"""


@click.group(cls=AsiniGroup, examples=_GIT_EXAMPLES)
@click.pass_obj
def git(app: AppContext) -> None:
    """Inspect the project's git repository."""


@git.command(
    examples="""\
  asini git status
  asini --json git status"""
)
@click.pass_obj
def status(app: AppContext) -> None:
    """Show branch, HEAD, and tag information."""
    app.emit(RepositoryService(app.settings).status())


@git.command(
    examples="""\
  asini git changed packages/foo
  asini git changed packages/foo --since v1.2.0"""
)
@click.argument("location")
@click.option(
    "--since",
    default=None,
    help="Ref to diff against (default: last tagged commit, else first commit).",
)
@click.pass_obj
def changed(app: AppContext, location: str, since: str | None) -> None:
    """List files under LOCATION changed since a ref."""
    app.emit(RepositoryService(app.settings).changed(since, location))
