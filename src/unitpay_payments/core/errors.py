"""
Exception hierarchy shared by the Unitpay helpers.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "ConfigError",
    "InvalidInputError",
    "TransportError",
    "UnitpayError",
]


class UnitpayError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(UnitpayError):
    """Raised when the supplied configuration is invalid."""


class InvalidInputError(UnitpayError, ValueError):
    """Raised when request data fails local validation."""


class TransportError(UnitpayError):
    """
    Raised when the HTTP exchange did not produce a JSON body.

    Remote API errors are *not* reported through this exception; they are
    returned to the caller inside :class:`unitpay_payments.core.models.ApiResponse`.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
