"""RepositoryService — git state summaries for the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from asini.errors import AsiniError
from asini.infrastructure.git import GitUtilities
from asini.services.base import BaseService
from asini.services.result import ServiceResult

if TYPE_CHECKING:
    from asini.config.settings import AsiniSettings


class RepositoryService(BaseService):
    """Read-only git queries against the project root."""

    def __init__(self, settings: AsiniSettings, git: GitUtilities | None = None) -> None:
        super().__init__(settings)
        self._git = git or GitUtilities(config=settings.git, cwd=settings.project_root)

    def status(self) -> ServiceResult:
        """Summarize repository state.

        A directory that isn't a repository, or a repository without
        commits, is reported (``ok=True``) rather than treated as an error.
        """
        git = self._git
        data: dict[str, Any] = {"initialized": git.is_initialized()}
        if not data["initialized"]:
            return ServiceResult(ok=True, op="status", data=data)

        data["has_commit"] = git.has_commit()
        if not data["has_commit"]:
            return ServiceResult(
                ok=True,
                op="status",
                data=data,
                warnings=["Repository has no commits yet"],
            )

        try:
            data["detached"] = git.is_detached_head()
            data["branch"] = None if data["detached"] else git.get_current_branch()
            data["sha"] = git.get_current_sha()
            data["root"] = git.get_top_level_directory()
            data["has_tags"] = git.has_tags()
            if data["has_tags"]:
                last = git.get_last_tagged_commit()
                data["last_tagged_commit"] = last
                data["last_tag"] = git.describe_tag(last)
        except AsiniError as exc:
            return self._failure("status", exc)
        return ServiceResult(ok=True, op="status", data=data)

    def changed(self, since: str | None, location: str) -> ServiceResult:
        """Files under *location* changed since *since*.

        Without *since*, the last tagged commit is used, falling back to
        the repository's first commit when nothing is tagged.
        """
        try:
            if since is None:
                if self._git.has_tags():
                    since = self._git.get_last_tagged_commit()
                else:
                    since = self._git.get_first_commit()
            files = self._git.changed_files_since_in(since, location)
        except AsiniError as exc:
            return self._failure("changed", exc)
        return ServiceResult(
            ok=True,
            op="changed",
            data={"since": since, "location": location, "files": files, "count": len(files)},
        )
