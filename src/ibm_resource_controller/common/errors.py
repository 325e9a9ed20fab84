"""Exceptions raised by the Resource Controller SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx


class ResourceControllerError(RuntimeError):
    """Base class for every error raised by this SDK."""


class ParameterValidationError(ResourceControllerError, ValueError):
    """Raised before any request is sent when required parameters are missing."""

    def __init__(self, operation: str, missing: Iterable[str]) -> None:
        self.operation = operation
        self.missing = tuple(missing)
        names = ", ".join(self.missing)
        super().__init__(f"Missing required parameters for {operation}: {names}")


class ResourceControllerAPIError(ResourceControllerError):
    """Raised when the service answers with a non-2xx status.

    ``status`` and ``message`` are taken verbatim from the response; ``code`` and
    ``transaction_id`` are filled in when the error envelope carries them.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int,
        code: str | None = None,
        transaction_id: str | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.transaction_id = transaction_id
        self.response = response

    def __str__(self) -> str:
        return f"{self.status}: {self.message}"


class AuthenticationError(ResourceControllerError):
    """Raised when a bearer token cannot be obtained from IAM."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
