"""
Exception handlers mapping domain errors to HTTP responses.

NotFoundError becomes 404, InvalidArgumentError (including field validation
errors) becomes 400, storage failures become 503. Anything else raised from
the package is a 500.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    PlaytimeGuardError,
    StorageError,
)
from ..core.logging import get_logger

logger = get_logger(__name__)


def _status_for(error: PlaytimeGuardError) -> int:
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, InvalidArgumentError):
        return 400
    if isinstance(error, StorageError):
        return 503
    return 500


async def playtime_guard_error_handler(
    request: Request, exc: PlaytimeGuardError
) -> JSONResponse:
    status_code = _status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Request rejected",
        status_code=status_code,
        error_code=exc.error_code,
        error=exc.message,
        path=request.url.path,
        method=request.method,
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.to_dict()},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain error handlers on ``app``."""
    app.add_exception_handler(PlaytimeGuardError, playtime_guard_error_handler)  # type: ignore[arg-type]
