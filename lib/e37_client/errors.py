"""Errors raised by the E37 client.

Everything derives from ``E37ClientError`` so a scrape loop or the CLI can
catch one type at its boundary.
"""
from __future__ import annotations


class E37ClientError(Exception):
    pass


class ConfigError(E37ClientError):
    """Bad URL or option value; raised before any network call."""


class NetworkError(E37ClientError):
    """The E37 server could not be reached or did not answer in time."""


class ApiError(E37ClientError):
    def __init__(
        self,
        status_code: int,
        message: str,
        details: str | None = None,
        *,
        endpoint: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.details = details
        self.endpoint = endpoint


class AuthError(ApiError):
    """Login was refused, or the server rejected the bearer token."""
