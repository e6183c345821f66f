"""Process runner — the single seam between asini and external binaries.

Synchronous calls block and return trimmed stdout. Asynchronous calls are
coroutines built on :mod:`asyncio` subprocesses. Every failure (non-zero
exit or a binary that cannot be started) surfaces as
:class:`~asini.errors.CommandExecutionError`.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from asini.errors import CommandExecutionError

logger = logging.getLogger(__name__)

StdioMode = Literal["ignore", "pipe", "inherit"]
Stdio = tuple[StdioMode, StdioMode, StdioMode]

# stdin closed, stdout/stderr captured.
CAPTURE_STDIO: Stdio = ("ignore", "pipe", "pipe")

_STDIO_TARGETS: dict[str, int | None] = {
    "ignore": subprocess.DEVNULL,
    "pipe": subprocess.PIPE,
    "inherit": None,
}


@dataclass(frozen=True)
class Command:
    """An executable plus its arguments and execution context."""

    executable: str
    args: tuple[str, ...] = ()
    cwd: Path | None = None
    env: Mapping[str, str] | None = None

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.args]

    def __str__(self) -> str:
        return shlex.join(self.argv)


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of a completed subprocess."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""


def _decode(data: bytes | None) -> str:
    if data is None:
        return ""
    return data.decode("utf-8", errors="replace")


def _diagnostic(stderr: str, stdout: str, returncode: int | None) -> str:
    text = stderr.strip() or stdout.strip()
    return text or f"exited with status {returncode}"


def _check(display: str, result: ProcessResult) -> ProcessResult:
    if result.returncode != 0:
        raise CommandExecutionError(
            _diagnostic(result.stderr, result.stdout, result.returncode),
            command=display,
            returncode=result.returncode,
        )
    return result


class ProcessRunner:
    """Run commands synchronously or on the running event loop."""

    def exec_sync(self, command: Command) -> str:
        """Run *command* to completion and return its trimmed stdout."""
        logger.debug("exec: %s", command)
        try:
            proc = subprocess.run(
                command.argv,
                cwd=command.cwd,
                env=dict(command.env) if command.env is not None else None,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise CommandExecutionError(str(exc), command=str(command)) from exc
        result = ProcessResult(
            argv=tuple(command.argv),
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
        return _check(str(command), result).stdout.strip()

    async def spawn(self, command: Command, *, stdio: Stdio = CAPTURE_STDIO) -> ProcessResult:
        """Start *command* with the given stdio wiring and wait for it.

        Streams configured as ``"pipe"`` are captured into the result;
        ``"ignore"`` maps to the null device and ``"inherit"`` shares the
        caller's stream.
        """
        logger.debug("spawn: %s (cwd=%s, stdio=%s)", command, command.cwd, ",".join(stdio))
        stdin, stdout, stderr = (_STDIO_TARGETS[mode] for mode in stdio)
        try:
            proc = await asyncio.create_subprocess_exec(
                *command.argv,
                stdin=stdin,
                stdout=stdout,
                stderr=stderr,
                cwd=command.cwd,
                env=dict(command.env) if command.env is not None else None,
            )
        except OSError as exc:
            raise CommandExecutionError(str(exc), command=str(command)) from exc
        out, err = await proc.communicate()
        result = ProcessResult(
            argv=tuple(command.argv),
            returncode=proc.returncode if proc.returncode is not None else -1,
            stdout=_decode(out),
            stderr=_decode(err),
        )
        return _check(str(command), result)

    async def exec(self, command: Command) -> str:
        """Async counterpart of :meth:`exec_sync`."""
        result = await self.spawn(command, stdio=CAPTURE_STDIO)
        return result.stdout.strip()

    async def exec_shell(self, command_text: str, *, env: Mapping[str, str] | None = None) -> str:
        """Run a composite command line through the system shell.

        Used where the command itself carries its context
        (``cd <dir> && ...``) instead of a cwd option.
        """
        logger.debug("exec (shell): %s", command_text)
        try:
            proc = await asyncio.create_subprocess_shell(
                command_text,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=dict(env) if env is not None else None,
            )
        except OSError as exc:
            raise CommandExecutionError(str(exc), command=command_text) from exc
        out, err = await proc.communicate()
        result = ProcessResult(
            argv=(command_text,),
            returncode=proc.returncode if proc.returncode is not None else -1,
            stdout=_decode(out),
            stderr=_decode(err),
        )
        return _check(command_text, result).stdout.strip()
