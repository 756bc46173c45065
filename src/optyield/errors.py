"""
Exceptions raised by optyield.
"""

from __future__ import annotations


class OptYieldError(Exception):
    """Base exception for all optyield errors."""
    pass


class InvalidInputError(OptYieldError, ValueError):
    """Raised when a contract or market parameter is outside its valid domain.

    Inputs are never clamped: a non-positive spot or strike, a negative time
    to expiry, or a non-positive volatility on a live contract fails here
    before any formula is evaluated.
    """

    def __init__(self, field: str, value, message: str | None = None):
        self.field = field
        self.value = value
        msg = message or f"{field} is invalid, got {value!r}"
        super().__init__(msg)
