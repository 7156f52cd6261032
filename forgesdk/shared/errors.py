"""
Error taxonomy for the Forge client.

Every failure raised by the client derives from ForgeError. Nothing is
retried or recovered internally; callers own retry policy.
"""

from typing import Any


class ForgeError(Exception):
    """Base error for the Forge SDK."""

    code: str = "FORGE_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs or JSON output."""
        result: dict[str, Any] = {"code": self.code, "message": str(self)}
        if self.details:
            result["details"] = self.details
        return result


class ForgeConnectionError(ForgeError):
    """The request could not complete (DNS, refused, timed out)."""

    code = "CONNECTION_ERROR"

    def __init__(self, cause: BaseException):
        super().__init__(f"connection error: {cause}")
        self.cause = cause


class ForgeServerError(ForgeError):
    """The server answered with a non-success status."""

    code = "SERVER_ERROR"

    def __init__(self, status: int, message: str):
        super().__init__(
            f"server error ({status}): {message}",
            details={"status": status},
        )
        self.status = status
        # Server-provided message, without the status prefix
        self.message = message


class ForgeValidationError(ForgeError):
    """Render options failed schema checks before anything was sent."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message, details={"errors": errors} if errors else None)
        self.errors = errors or []
