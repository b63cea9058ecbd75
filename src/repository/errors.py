"""Exception types raised by the forge listing pipeline."""
from __future__ import annotations

from typing import Optional


class ForgeFetchError(Exception):
    """Base class for every error raised by forgefetch."""


class ConfigurationError(ForgeFetchError, ValueError):
    """Source configuration is missing required fields or is inconsistent."""


class MalformedResponse(ForgeFetchError, ValueError):
    """A listing payload could not be decoded or has the wrong shape."""


class TransportError(ForgeFetchError):
    """The upstream request failed before a payload could be normalized."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
