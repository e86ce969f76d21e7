"""
Typed errors raised by the grid store.
"""

from __future__ import annotations

from typing import Optional


class StoreError(Exception):
    """Base error for every failure surfaced by the grid store."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class NotConfigured(StoreError):
    """A required spreadsheet id or credential is missing."""


class NotFound(StoreError):
    """A table, sheet or row does not exist."""


class RangeNotFound(NotFound):
    """The service could not resolve an A1 range (usually a missing tab)."""


class InvalidArgument(StoreError):
    """An index or input was rejected before any remote call was made."""


class RemoteFailure(StoreError):
    """Transport or service error from the spreadsheet API."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message, cause)
        self.status = status
