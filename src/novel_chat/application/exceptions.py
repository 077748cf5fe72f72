from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class AuthorizationError(AppError):
    pass


class ValidationError(AppError):
    pass


class QuotaExceededError(AppError):
    """Daily direct-message limit reached."""

    def __init__(self, detail: str = "", *, limit: int, remaining: int = 0) -> None:
        self.limit = limit
        self.remaining = remaining
        super().__init__(detail)


class ServerConfigurationError(AppError):
    """Deployment is missing data the service cannot run without."""
