"""Exception hierarchy shared by every layer.

``CommandExecutionError`` means the external binary failed (non-zero
exit, or it could not be spawned at all). ``ParseError`` means the
command or file read succeeded but its content could not be interpreted.
"""

from __future__ import annotations


class AsiniError(Exception):
    """Base class for all asini errors."""


class CommandExecutionError(AsiniError):
    """A subprocess exited non-zero or could not be started.

    Attributes:
        command: Display form of the command that failed.
        returncode: Exit status, or None when the process never started.
        diagnostic: Captured stderr (falling back to stdout or the OS error).
    """

    def __init__(
        self,
        diagnostic: str,
        *,
        command: str = "",
        returncode: int | None = None,
    ) -> None:
        super().__init__(diagnostic)
        self.diagnostic = diagnostic
        self.command = command
        self.returncode = returncode


class ParseError(AsiniError):
    """Output or file content was not in the expected shape."""
