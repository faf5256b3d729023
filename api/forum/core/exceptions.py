"""
Custom exceptions for the application.
"""
from typing import List, Optional


class ForumException(Exception):
    """Base exception for all forum application exceptions."""
    pass


class ValidationError(ForumException):
    """Raised when a record fails validation."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class NotFoundError(ForumException):
    """Raised when a requested resource is not found."""
    pass


class ConflictError(ForumException):
    """Raised when there's a conflict (e.g., duplicate entry)."""
    pass


class AuthenticationError(ForumException):
    """Raised when authentication fails."""
    pass


class AuthorizationError(ForumException):
    """Raised when authorization fails."""
    pass


class InvalidParameters(ForumException):
    """Raised when a request parameter is missing or refers to nothing."""

    def __init__(self, param: str, message: Optional[str] = None):
        self.param = param
        super().__init__(message or f"Invalid parameter: {param}")


class RateLimitExceeded(ForumException):
    """Raised when a user performs a limited action too often."""

    def __init__(self, key: str, available_in: int):
        self.key = key
        self.available_in = available_in
        super().__init__(f"Rate limit '{key}' exceeded, try again in {available_in} seconds")
