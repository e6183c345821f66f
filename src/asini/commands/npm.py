"""Command group: npm installs, dist-tags, scripts, and publishing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from asini.commands._base import AsiniGroup
from asini.services.packages import PackageService

if TYPE_CHECKING:
    from asini.commands._context import AppContext

_NPM_EXAMPLES = """\
  asini npm install packages/foo lodash@^4.17.0 @babel/core
  asini npm dist-tag check foo-pkg next
  asini npm run build packages/foo -- --production
  asini npm publish next packages/foo
  asini npm satisfied packages foo-pkg ^1.0.0"""


@click.group(cls=AsiniGroup, examples=_NPM_EXAMPLES)
@click.pass_obj
def npm(app: AppContext) -> None:
    """Run npm against package directories."""


@npm.command(
    examples="""\
  asini npm install packages/foo lodash@^4.17.0
  asini npm install packages/foo @babel/core@7 left-pad"""
)
@click.argument("directory", type=click.Path(file_okay=False))
@click.argument("dependencies", nargs=-1)
@click.pass_obj
def install(app: AppContext, directory: str, dependencies: tuple[str, ...]) -> None:
    """Install only DEPENDENCIES into DIRECTORY.

    package.json is swapped for a temporary manifest during the install
    and restored afterwards.
    """
    app.emit(PackageService(app.settings).install(directory, dependencies))


@npm.group("dist-tag", cls=AsiniGroup)
@click.pass_obj
def dist_tag(app: AppContext) -> None:
    """Manage registry dist-tags."""


@dist_tag.command(
    "add",
    examples="""\
  asini npm dist-tag add foo-pkg 1.0.0 next""",
)
@click.argument("package")
@click.argument("version")
@click.argument("tag")
@click.pass_obj
def dist_tag_add(app: AppContext, package: str, version: str, tag: str) -> None:
    """Point TAG at PACKAGE@VERSION."""
    app.emit(PackageService(app.settings).add_dist_tag(package, version, tag))


@dist_tag.command(
    "rm",
    examples="""\
  asini npm dist-tag rm foo-pkg next""",
)
@click.argument("package")
@click.argument("tag")
@click.pass_obj
def dist_tag_rm(app: AppContext, package: str, tag: str) -> None:
    """Remove TAG from PACKAGE."""
    app.emit(PackageService(app.settings).remove_dist_tag(package, tag))


@dist_tag.command(
    "check",
    examples="""\
  asini npm dist-tag check foo-pkg next""",
)
@click.argument("package")
@click.argument("tag")
@click.pass_obj
def dist_tag_check(app: AppContext, package: str, tag: str) -> None:
    """Report whether PACKAGE has TAG."""
    app.emit(PackageService(app.settings).check_dist_tag(package, tag))


@npm.command(
    "run",
    context_settings={"ignore_unknown_options": True},
    examples="""\
  asini npm run build packages/foo
  asini npm run test packages/foo -- --grep 'foo bar'""",
)
@click.argument("script")
@click.argument("directory", type=click.Path(file_okay=False))
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def run_script(app: AppContext, script: str, directory: str, args: tuple[str, ...]) -> None:
    """Run npm SCRIPT in DIRECTORY with extra ARGS."""
    app.emit(PackageService(app.settings).run_script(script, args, directory))


@npm.command(
    examples="""\
  asini npm publish latest packages/foo
  asini npm publish next packages/foo"""
)
@click.argument("tag")
@click.argument("directory", type=click.Path(file_okay=False))
@click.pass_obj
def publish(app: AppContext, tag: str, directory: str) -> None:
    """Publish the package in DIRECTORY under dist-tag TAG."""
    app.emit(PackageService(app.settings).publish(tag, directory))


@npm.command(
    examples="""\
  asini npm satisfied packages foo-pkg ^1.0.0
  asini --json npm satisfied node_modules lodash '>=4'"""
)
@click.argument("packages_root", type=click.Path(file_okay=False))
@click.argument("package")
@click.argument("version_range")
@click.pass_obj
def satisfied(app: AppContext, packages_root: str, package: str, version_range: str) -> None:
    """Check PACKAGE under PACKAGES_ROOT against VERSION_RANGE."""
    app.emit(PackageService(app.settings).satisfied(packages_root, package, version_range))
