"""BaseService — shared error mapping for git/npm services.

Services receive the settings plus ready-built facades, run one facade
workflow per method, and convert :class:`~asini.errors.AsiniError`
into a failed :class:`ServiceResult` instead of raising.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from asini.errors import AsiniError, CommandExecutionError, ParseError
from asini.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from asini.config.settings import AsiniSettings

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for service-layer classes.

    Usage::

        class PackageService(BaseService):
            def check_dist_tag(self, package: str, tag: str) -> ServiceResult:
                try:
                    found = self._npm.check_dist_tag(package, tag)
                except AsiniError as exc:
                    return self._failure("check_dist_tag", exc)
                return ServiceResult(ok=True, op="check_dist_tag", data={...})
    """

    def __init__(self, settings: AsiniSettings) -> None:
        self._settings = settings

    @staticmethod
    def _failure(op: str, exc: AsiniError | OSError, **detail: Any) -> ServiceResult:
        """Build a failed result from a facade exception."""
        if isinstance(exc, CommandExecutionError):
            code = "COMMAND_FAILED"
            detail = {"command": exc.command, "returncode": exc.returncode, **detail}
        elif isinstance(exc, ParseError):
            code = "PARSE_ERROR"
        elif isinstance(exc, OSError):
            code = "FILESYSTEM_ERROR"
        else:
            code = "ERROR"
        logger.debug("%s failed (%s): %s", op, code, exc)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=str(exc), detail=detail),
        )
