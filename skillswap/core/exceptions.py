"""
Application errors.

Services raise these and the handlers registered in ``main.py`` turn them
into JSON responses of the form ``{"error": detail}``.
"""

from fastapi import status


class SkillSwapError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str = "Internal server error"):
        self.detail = detail
        super().__init__(detail)


class ValidationError(SkillSwapError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidStatusError(ValidationError):
    """Raised when a swap status is not one of the known values."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid status: {value}")


class InvalidTransitionError(ValidationError):
    """Raised when a swap cannot move from its current status to the requested one."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change status from {current} to {target}")


class AuthenticationError(SkillSwapError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(SkillSwapError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(SkillSwapError):
    status_code = status.HTTP_404_NOT_FOUND


class ConfigurationError(SkillSwapError):
    """Raised at startup when the service is misconfigured."""

    pass
