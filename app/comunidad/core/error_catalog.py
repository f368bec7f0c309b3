from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    INVALID_TOKEN = ErrorDefinition("INVALID_TOKEN", "Invalid token", status.HTTP_401_UNAUTHORIZED)
    PERMISSION_DENIED = ErrorDefinition(
        "PERMISSION_DENIED",
        "Permission denied",
        status.HTTP_403_FORBIDDEN,
    )
    ENTITY_NOT_FOUND = ErrorDefinition(
        "NOT_FOUND",
        "Resource not found",
        status.HTTP_404_NOT_FOUND,
    )
    UNKNOWN_ENTITY = ErrorDefinition(
        "UNKNOWN_ENTITY",
        "Unknown entity",
        status.HTTP_404_NOT_FOUND,
    )
    UNKNOWN_ACTION = ErrorDefinition(
        "UNKNOWN_ACTION",
        "Unknown action for this entity",
        status.HTTP_404_NOT_FOUND,
    )
    ALREADY_DELETED = ErrorDefinition(
        "ALREADY_DELETED",
        "Resource is already deleted",
        status.HTTP_409_CONFLICT,
    )
    NOT_DELETED = ErrorDefinition(
        "NOT_DELETED",
        "Resource is not deleted",
        status.HTTP_409_CONFLICT,
    )
    INVALID_STATE = ErrorDefinition(
        "INVALID_STATE",
        "Transition not allowed from the current state",
        status.HTTP_409_CONFLICT,
    )
    DB_UNAVAILABLE = ErrorDefinition(
        "DB_UNAVAILABLE",
        "Database unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    SERVICE_ERROR = ErrorDefinition(
        "SERVICE_ERROR",
        "Service operation failed",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None):
        self.error = error
        self.details = details
        super().__init__(error.message)


class AuthRedirect(Exception):
    """Raised by HTML page dependencies to send the browser elsewhere."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(reason)
