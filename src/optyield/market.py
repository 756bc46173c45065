"""Helpers that turn raw quote data into engine inputs."""

from __future__ import annotations

from datetime import date, datetime

from .core import DAYS_PER_YEAR
from .black_scholes import intrinsic_value

__all__ = ["mid_price", "days_to_expiry", "year_fraction", "time_value"]


def mid_price(bid: float | None, ask: float | None) -> float:
    """Average of bid and ask; a missing side counts as zero."""
    return ((bid or 0.0) + (ask or 0.0)) / 2.0


def days_to_expiry(expiration: date | str, today: date | None = None) -> int:
    """Calendar days until ``expiration``, floored at 1.

    ``expiration`` may be a ``date``/``datetime`` or an ISO ``YYYY-MM-DD``
    string.  Same-day and past expirations report 1 day so that per-day and
    annualized figures stay finite.
    """
    if isinstance(expiration, str):
        expiration = date.fromisoformat(expiration)
    if isinstance(expiration, datetime):
        expiration = expiration.date()
    if today is None:
        today = date.today()
    elif isinstance(today, datetime):
        today = today.date()
    return max(1, (expiration - today).days)


def year_fraction(days: float) -> float:
    return days / DAYS_PER_YEAR


def time_value(premium: float, kind, S: float, K: float) -> float:
    """Extrinsic part of a quoted premium, never negative."""
    return max(0.0, premium - intrinsic_value(kind, S, K))
