"""Custom exceptions for ATS adapters.

Catching AdapterError at the pipeline level isolates a failing source:
the run records the error on the source status and moves on.
"""

from typing import Optional


class AdapterError(Exception):
    """Base exception for all adapter errors."""


class AdapterHTTPError(AdapterError):
    """HTTP request failed (status_code 0 means no response at all)."""

    def __init__(self, message: str, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url

    @property
    def is_retryable(self) -> bool:
        return self.status_code == 0 or self.status_code >= 500


class AdapterTimeoutError(AdapterError):
    """HTTP request did not complete within the configured timeout."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url

    @property
    def is_retryable(self) -> bool:
        return True


class AdapterResponseError(AdapterError):
    """Response body could not be parsed or had an unexpected shape."""


class AdapterConfigurationError(AdapterError):
    """Adapter was given invalid configuration (unknown ATS type, bad timeout)."""
