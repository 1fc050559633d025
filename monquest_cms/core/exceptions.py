"""Custom exception classes for the MonQuest CMS."""

from fastapi import status


class MonquestError(Exception):
    """Base exception for MonQuest CMS."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "An error occurred", **extra):
        self.message = message
        self.extra = extra
        super().__init__(self.message)


class AuthenticationError(MonquestError):
    """Raised when authentication fails."""
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(MonquestError):
    """Raised when user lacks permission."""
    status_code = status.HTTP_403_FORBIDDEN


class SystemRoleError(AuthorizationError):
    """Raised on a forbidden change to a system role or preset."""
    pass


class ResourceNotFoundError(MonquestError):
    """Raised when a requested resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND


class ResourceConflictError(MonquestError):
    """Raised when a resource already exists."""
    status_code = status.HTTP_409_CONFLICT


class ValidationError(MonquestError):
    """Raised when input validation fails."""
    pass
