"""
Playtime Guard HTTP application.

Mounts the time controls router with request logging and domain error handling.
"""

import time
from typing import Any, Dict

from fastapi import FastAPI

from .. import __version__
from .error_handling import register_exception_handlers
from .features import time_controls_router
from .logging_middleware import LoggingMiddleware


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(title="Playtime Guard API", version=__version__)

    app.add_middleware(LoggingMiddleware)
    register_exception_handlers(app)
    app.include_router(time_controls_router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"status": "healthy", "timestamp": time.time()}

    return app


app = create_app()
