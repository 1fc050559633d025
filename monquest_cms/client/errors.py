"""Client-side error types."""


class ClientError(Exception):
    """Base error for the admin client runtime."""


class NotAuthenticatedError(ClientError):
    """No session is available to identify the request."""


class ApiError(ClientError):
    """Non-2xx response from the admin API."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


class PermissionDeniedError(ApiError):
    """403 that survived one forced permission refresh."""

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(403, message)


class DebugDisabledError(ClientError):
    """Debug helpers are only available with DEBUG enabled."""
