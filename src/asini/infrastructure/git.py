"""Git command facade.

Builds git invocations for monorepo workflows (tagging, change
detection, pushing) and maps their output onto Python values.

Existence checks (:meth:`GitUtilities.is_initialized`,
:meth:`GitUtilities.has_commit`, :meth:`GitUtilities.is_detached_head`)
turn a failed command into a boolean. Every other operation lets
:class:`~asini.errors.CommandExecutionError` propagate unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from asini.config.models import GitConfig
from asini.domain.parsing import split_lines
from asini.errors import CommandExecutionError
from asini.infrastructure.process import Command, ProcessRunner

logger = logging.getLogger(__name__)


class GitUtilities:
    """Synchronous git operations run from *cwd* (default: process cwd)."""

    def __init__(
        self,
        runner: ProcessRunner | None = None,
        config: GitConfig | None = None,
        cwd: Path | None = None,
    ) -> None:
        self._runner = runner or ProcessRunner()
        self._config = config or GitConfig()
        self._cwd = cwd

    def _command(self, *args: str) -> Command:
        return Command(self._config.executable, tuple(args), cwd=self._cwd)

    def _exec(self, *args: str) -> str:
        return self._runner.exec_sync(self._command(*args))

    def _succeeds(self, *args: str) -> bool:
        try:
            self._exec(*args)
        except CommandExecutionError as exc:
            logger.debug("git %s failed: %s", " ".join(args), exc.diagnostic)
            return False
        return True

    # ------------------------------------------------------------------
    # Existence checks
    # ------------------------------------------------------------------

    def is_initialized(self) -> bool:
        return self._succeeds("rev-parse")

    def has_commit(self) -> bool:
        return self._succeeds("log")

    def is_detached_head(self) -> bool:
        return not self._succeeds("symbolic-ref", "--short", "HEAD")

    def has_tags(self) -> bool:
        return bool(self._exec("tag").strip())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def init(self) -> str:
        """Initialize a repository; returns git's output for the caller to log."""
        return self._exec("init")

    def add_file(self, path: str) -> None:
        self._exec("add", path)

    def commit(self, message: str) -> None:
        # argv element, not a shell string: newlines and quotes pass verbatim.
        self._exec("commit", "-m", message)

    def add_tag(self, tag: str) -> None:
        self._exec("tag", tag)

    def remove_tag(self, tag: str) -> None:
        self._exec("tag", "-d", tag)

    def checkout_changes(self, pattern: str) -> None:
        """Discard working-tree changes to paths matching *pattern*."""
        self._exec("checkout", "--", pattern)

    def push_with_tags(self, tags: Sequence[str]) -> None:
        """Push the current branch, then every tag in *tags* in one push."""
        remote = self._config.remote
        self._exec("push", remote, self.get_current_branch())
        self._exec("push", remote, *tags)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_last_tagged_commit(self) -> str:
        """SHA of the most recent tagged commit (by commit date, not tag date)."""
        return self._exec("rev-list", "--tags", "--max-count=1")

    def get_first_commit(self) -> str:
        return self._exec("rev-list", "--max-parents=0", "HEAD")

    def describe_tag(self, commit: str) -> str:
        return self._exec("describe", "--tags", commit)

    def diff_since_in(self, commit: str, location: str) -> str:
        """Raw ``--name-only`` diff of *location* since *commit*."""
        return self._exec("diff", "--name-only", commit, "--", location)

    def changed_files_since_in(self, commit: str, location: str) -> list[str]:
        return split_lines(self.diff_since_in(commit, location))

    def get_current_sha(self) -> str:
        return self._exec("rev-parse", "HEAD")

    def get_short_sha(self) -> str:
        return self._exec("rev-parse", "--short", "HEAD")

    def get_top_level_directory(self) -> str:
        return self._exec("rev-parse", "--show-toplevel")

    def get_current_branch(self) -> str:
        return self._exec("symbolic-ref", "--short", "HEAD")
