"""
Exception hierarchy for Playtime Guard.

Provides structured error handling with specific error types for the access
control engine, usage accounting and the storage layer.
"""

import sqlite3
from typing import Any, Callable, Dict, Optional, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


class PlaytimeGuardError(Exception):
    """Base exception for all Playtime Guard errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        component: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.component = component

    def __str__(self) -> str:
        """String representation of the error."""
        base_msg = f"[{self.component or 'PlaytimeGuard'}] {self.message}"
        if self.error_code:
            base_msg = f"[{self.error_code}] {base_msg}"
        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "component": self.component,
            "details": self.details,
        }


class ConfigurationError(PlaytimeGuardError):
    """Exception raised when configuration is invalid or missing."""

    pass


class StorageError(PlaytimeGuardError):
    """Exception raised when the durable store fails."""

    pass


class InvalidArgumentError(PlaytimeGuardError):
    """Exception raised when a caller passes a malformed argument."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "INVALID_ARGUMENT")
        super().__init__(message, **kwargs)


class NotFoundError(PlaytimeGuardError):
    """Exception raised when a referenced record does not exist."""

    def __init__(self, resource: str, identifier: str, **kwargs: Any) -> None:
        super().__init__(
            f"{resource} not found: {identifier}",
            error_code="NOT_FOUND",
            details={"resource": resource, "identifier": identifier},
            **kwargs,
        )


class KidProfileNotFoundError(NotFoundError):
    """Exception raised when a kid profile id is unknown."""

    def __init__(self, kid_profile_id: str, **kwargs: Any) -> None:
        super().__init__("Kid profile", kid_profile_id, **kwargs)


class ValidationError(InvalidArgumentError):
    """Exception raised when input validation fails."""

    def __init__(self, field: str, value: Any, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Validation failed for field '{field}': {reason}",
            error_code="VALIDATION_ERROR",
            details={
                "field": field,
                "value": str(value),
                "reason": reason,
            },
            **kwargs,
        )


# Error handling utilities


def handle_storage_error(func: F) -> F:
    """Decorator to wrap sqlite failures in StorageError."""

    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except sqlite3.Error as e:
            raise StorageError(
                message=f"Storage error in {func.__name__}: {str(e)}",
                error_code="STORAGE_ERROR",
                component=func.__name__,
            ) from e

    wrapper.__name__ = func.__name__
    wrapper.__doc__ = func.__doc__
    return wrapper  # type: ignore
