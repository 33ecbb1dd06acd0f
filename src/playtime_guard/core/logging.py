"""
Structured logging configuration with request correlation.

Provides centralized logging configuration with correlation IDs for tracking
usage reports and access checks across the service, API and CLI.
"""

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

import structlog
from structlog.stdlib import LoggerFactory

# Context variables for request correlation
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar("user_id", default=None)
kid_profile_id_var: ContextVar[Optional[str]] = ContextVar(
    "kid_profile_id", default=None
)


class StructuredLogger:
    """Structured logger with request correlation support."""

    def __init__(self, name: str):
        self.name = name
        self.logger = structlog.get_logger(name)

    def _get_context(self) -> Dict[str, Any]:
        """Get current request context for logging."""
        context = {}

        if request_id := request_id_var.get():
            context["request_id"] = request_id
        if user_id := user_id_var.get():
            context["user_id"] = user_id
        if kid_profile_id := kid_profile_id_var.get():
            context["kid_profile_id"] = kid_profile_id

        return context

    def _merge(self, kwargs: Dict[str, Any]) -> Dict[str, Any]:
        # Explicit keyword arguments win over ambient context
        return {**self._get_context(), **kwargs}

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message with context."""
        self.logger.debug(message, **self._merge(kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message with context."""
        self.logger.info(message, **self._merge(kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message with context."""
        self.logger.warning(message, **self._merge(kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message with context."""
        self.logger.error(message, **self._merge(kwargs))

    def log_access_decision(
        self, kid_profile_id: str, allowed: bool, reason: str, **kwargs: Any
    ) -> None:
        """Log an access decision."""
        self.logger.info(
            f"Access decision: {reason}",
            **self._merge(
                {
                    "kid_profile_id": kid_profile_id,
                    "allowed": allowed,
                    "reason": reason,
                    **kwargs,
                }
            ),
        )

    def log_api_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
        **kwargs: Any,
    ) -> None:
        """Log API request with timing and status."""
        self.logger.info(
            f"API request: {method} {path}",
            **self._merge(
                {
                    "method": method,
                    "path": path,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                    **kwargs,
                }
            ),
        )


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name)


def set_request_context(
    request_id: Optional[str] = None,
    user_id: Optional[str] = None,
    kid_profile_id: Optional[str] = None,
) -> None:
    """Set request context for correlation."""
    if request_id:
        request_id_var.set(request_id)
    if user_id:
        user_id_var.set(user_id)
    if kid_profile_id:
        kid_profile_id_var.set(kid_profile_id)


def clear_request_context() -> None:
    """Clear request context."""
    request_id_var.set(None)
    user_id_var.set(None)
    kid_profile_id_var.set(None)


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Configure structured logging for the application."""

    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )


class ProcessingTimer:
    """Context manager for timing a unit of work."""

    def __init__(self, logger: StructuredLogger, step: str, **kwargs: Any):
        self.logger = logger
        self.step = step
        self.kwargs = kwargs
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self) -> "ProcessingTimer":
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.start_time:
            self.duration_ms = (time.time() - self.start_time) * 1000
            status = "success" if exc_type is None else "error"

            self.logger.debug(
                f"Processing step: {self.step}",
                step=self.step,
                duration_ms=self.duration_ms,
                status=status,
                **self.kwargs,
            )


# Initialize logging configuration
configure_logging()
