"""Error types raised while checking whether a user exists."""

from typing import Optional


class UserLookupError(Exception):
    """Base error that keeps the underlying provider exception around."""

    def __init__(self, message: str, *, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class DecodeError(UserLookupError):
    """The request payload could not be parsed."""


class ConfigError(UserLookupError):
    """The DynamoDB client could not be set up (region, credentials)."""


class StoreQueryError(UserLookupError):
    """The query against the user table failed."""
