from __future__ import annotations

from enum import Enum
from typing import Optional


class StoryError(Exception):
    """Base class for failures raised while building a story."""


class ConfigurationError(StoryError):
    """Missing or invalid configuration, detected before any network call."""


class ProviderError(StoryError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UserNotFoundError(ProviderError):
    def __init__(self, username: str, provider: str) -> None:
        super().__init__(
            f'User "{username}" not found on {provider}. Check the spelling and try again.',
            status_code=404,
        )
        self.username = username
        self.provider = provider


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    GENERIC = "generic"


def classify_error(error: BaseException) -> ErrorKind:
    """Map a failure surfaced by ``generate_story`` onto the four presentation kinds."""
    message = str(error).lower()
    if isinstance(error, UserNotFoundError) or "not found" in message:
        return ErrorKind.NOT_FOUND
    if "rate limit" in message:
        return ErrorKind.RATE_LIMIT
    if getattr(error, "status_code", None) == 401 or "token" in message or "401" in message:
        return ErrorKind.AUTH
    return ErrorKind.GENERIC
