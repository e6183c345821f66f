"""PackageService — npm installs, dist-tags, scripts, and publishing."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from asini.errors import AsiniError
from asini.infrastructure.npm import NpmUtilities
from asini.services.base import BaseService
from asini.services.result import ServiceResult

if TYPE_CHECKING:
    from asini.config.settings import AsiniSettings


class PackageService(BaseService):
    """npm workflows. Async facade calls are driven with ``asyncio.run``."""

    def __init__(self, settings: AsiniSettings, npm: NpmUtilities | None = None) -> None:
        super().__init__(settings)
        self._npm = npm or NpmUtilities(config=settings.npm)

    def _resolve(self, directory: str | Path) -> Path:
        path = Path(directory)
        return path if path.is_absolute() else self._settings.project_root / path

    def install(self, directory: str | Path, dependencies: Sequence[str]) -> ServiceResult:
        target = self._resolve(directory)
        try:
            asyncio.run(self._npm.install_in_dir(target, list(dependencies)))
        except (AsiniError, OSError) as exc:
            return self._failure("install", exc, directory=str(target))
        warnings = [] if dependencies else ["No dependencies given; nothing installed"]
        return ServiceResult(
            ok=True,
            op="install",
            data={"directory": str(target), "dependencies": list(dependencies)},
            warnings=warnings,
        )

    def add_dist_tag(self, package: str, version: str, tag: str) -> ServiceResult:
        try:
            self._npm.add_dist_tag(package, version, tag)
        except AsiniError as exc:
            return self._failure("add_dist_tag", exc)
        return ServiceResult(
            ok=True,
            op="add_dist_tag",
            data={"package": package, "version": version, "tag": tag},
        )

    def remove_dist_tag(self, package: str, tag: str) -> ServiceResult:
        try:
            self._npm.remove_dist_tag(package, tag)
        except AsiniError as exc:
            return self._failure("remove_dist_tag", exc)
        return ServiceResult(ok=True, op="remove_dist_tag", data={"package": package, "tag": tag})

    def check_dist_tag(self, package: str, tag: str) -> ServiceResult:
        try:
            found = self._npm.check_dist_tag(package, tag)
        except AsiniError as exc:
            return self._failure("check_dist_tag", exc)
        return ServiceResult(
            ok=True,
            op="check_dist_tag",
            data={"package": package, "tag": tag, "exists": found},
        )

    def run_script(self, script: str, args: Sequence[str], directory: str | Path) -> ServiceResult:
        target = self._resolve(directory)
        try:
            output = asyncio.run(self._npm.run_script_in_dir(script, list(args), target))
        except AsiniError as exc:
            return self._failure("run_script", exc, script=script)
        return ServiceResult(
            ok=True,
            op="run_script",
            data={"script": script, "directory": str(target), "output": output},
        )

    def publish(self, tag: str, directory: str | Path) -> ServiceResult:
        target = self._resolve(directory)
        try:
            output = asyncio.run(self._npm.publish_tagged_in_dir(tag, target))
        except AsiniError as exc:
            return self._failure("publish", exc, tag=tag)
        return ServiceResult(
            ok=True,
            op="publish",
            data={"tag": tag, "directory": str(target), "output": output},
        )

    def satisfied(self, packages_root: str | Path, package: str, version_range: str) -> ServiceResult:
        root = self._resolve(packages_root)
        try:
            installed = self._npm.get_installed_version(root, package)
            ok = self._npm.dependency_is_satisfied(root, package, version_range)
        except (AsiniError, OSError) as exc:
            return self._failure("satisfied", exc, package=package)
        return ServiceResult(
            ok=True,
            op="satisfied",
            data={
                "package": package,
                "installed": installed,
                "range": version_range,
                "satisfied": ok,
            },
        )
