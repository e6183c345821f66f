"""npm command facade.

Covers installs, dist-tag management, script execution and publishing.

``install_in_dir`` temporarily replaces ``package.json`` with a synthetic
manifest listing only the requested dependencies, so ``npm install``
fetches exactly those packages. The original manifest is moved aside to
``package.json.<suffix>_backup`` and moved back on every exit path.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shlex
import weakref
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from pathlib import Path

from semantic_version import NpmSpec, Version

from asini.config.models import NpmConfig
from asini.domain.parsing import has_dist_tag
from asini.domain.specifiers import build_manifest, split_version
from asini.errors import ParseError
from asini.infrastructure.filesystem import FileStore
from asini.infrastructure.process import CAPTURE_STDIO, Command, ProcessRunner

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"


class NpmUtilities:
    """npm operations; installs into one directory are serialized."""

    def __init__(
        self,
        runner: ProcessRunner | None = None,
        files: FileStore | None = None,
        config: NpmConfig | None = None,
    ) -> None:
        self._runner = runner or ProcessRunner()
        self._files = files or FileStore()
        self._config = config or NpmConfig()
        # Entries disappear once no install holds or awaits the lock.
        self._install_locks: weakref.WeakValueDictionary[Path, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    split_version = staticmethod(split_version)

    def _command(self, *args: str, cwd: Path | None = None, env: dict[str, str] | None = None) -> Command:
        return Command(self._config.executable, tuple(args), cwd=cwd, env=env)

    def backup_path(self, directory: Path) -> Path:
        return Path(directory) / f"{MANIFEST_FILENAME}.{self._config.backup_suffix}_backup"

    # ------------------------------------------------------------------
    # Install with a temporary manifest
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _swapped_manifest(self, directory: Path) -> AsyncIterator[Path]:
        """Move the manifest aside for the duration of the block.

        The backup is restored however the block exits. If restoring fails
        while the block is already raising, the restore error is logged and
        the block's own exception propagates.
        """
        manifest = Path(directory) / MANIFEST_FILENAME
        backup = self.backup_path(directory)
        if self._files.exists(backup):
            msg = f"Stale manifest backup {backup} (interrupted install?); restore it before retrying"
            raise FileExistsError(msg)

        await self._files.rename(manifest, backup)
        try:
            yield manifest
        except BaseException:
            try:
                self._files.rename_sync(backup, manifest)
            except OSError:
                logger.warning("Failed to restore %s from %s", manifest, backup, exc_info=True)
            raise
        self._files.rename_sync(backup, manifest)

    async def install_in_dir(self, directory: Path, dependencies: Sequence[str] | None) -> None:
        """Install exactly *dependencies* into *directory*.

        A no-op (no filesystem or process activity) when *dependencies* is
        empty or None. Errors from writing the temporary manifest or from
        ``npm install`` propagate after the original manifest is restored.
        """
        if not dependencies:
            return

        directory = Path(directory)
        content = json.dumps(build_manifest(dependencies))
        lock = self._install_locks.setdefault(directory.resolve(), asyncio.Lock())
        async with lock:
            async with self._swapped_manifest(directory) as manifest:
                await self._files.write_file(manifest, content)
                await self._runner.spawn(self._command("install", cwd=directory), stdio=CAPTURE_STDIO)
        logger.debug("Installed %d dependencies in %s", len(dependencies), directory)

    # ------------------------------------------------------------------
    # dist-tags
    # ------------------------------------------------------------------

    def add_dist_tag(self, package: str, version: str, tag: str) -> None:
        self._runner.exec_sync(self._command("dist-tag", "add", f"{package}@{version}", tag))

    def remove_dist_tag(self, package: str, tag: str) -> None:
        self._runner.exec_sync(self._command("dist-tag", "rm", package, tag))

    def check_dist_tag(self, package: str, tag: str) -> bool:
        listing = self._runner.exec_sync(self._command("dist-tag", "ls", package))
        return has_dist_tag(listing, tag)

    # ------------------------------------------------------------------
    # Running npm in a package directory
    # ------------------------------------------------------------------

    async def exec_in_dir(
        self, subcommand: str | Sequence[str], args: Sequence[str], directory: Path
    ) -> str:
        """Run ``npm <subcommand> <args...>`` in *directory*.

        A string *subcommand* is split on whitespace (``"run build"``); pass a
        sequence to keep words intact. The caller's environment is passed
        through to npm.
        """
        words = subcommand.split() if isinstance(subcommand, str) else list(subcommand)
        command = self._command(
            *words,
            *args,
            cwd=Path(directory),
            env=dict(os.environ),
        )
        return await self._runner.exec(command)

    async def run_script_in_dir(self, script: str, args: Sequence[str], directory: Path) -> str:
        return await self.exec_in_dir(("run", script), args, directory)

    async def publish_tagged_in_dir(self, tag: str, directory: Path | str) -> str:
        # The directory change lives in the command text; no cwd is passed.
        command_text = (
            f"cd {shlex.quote(str(directory))} && "
            f"{shlex.quote(self._config.executable)} publish --tag {shlex.quote(tag)}"
        )
        return await self._runner.exec_shell(command_text)

    # ------------------------------------------------------------------
    # Installed versions
    # ------------------------------------------------------------------

    def get_installed_version(self, packages_root: Path, package: str) -> str:
        """Version recorded in ``<packages_root>/<package>/package.json``."""
        manifest_path = Path(packages_root) / package / MANIFEST_FILENAME
        manifest = self._files.read_json(manifest_path)
        version = manifest.get("version") if isinstance(manifest, dict) else None
        if not isinstance(version, str) or not version:
            msg = f"No version field in {manifest_path}"
            raise ParseError(msg)
        return version

    def dependency_is_satisfied(self, packages_root: Path, package: str, version_range: str) -> bool:
        """True if the installed *package* satisfies the npm *version_range*."""
        installed = self.get_installed_version(packages_root, package)
        try:
            # npm accepts a leading "=" or "v" on installed versions.
            return Version(installed.strip().lstrip("=v")) in NpmSpec(version_range)
        except ValueError as exc:
            msg = f"Cannot compare {package}@{installed} against {version_range!r}: {exc}"
            raise ParseError(msg) from exc
