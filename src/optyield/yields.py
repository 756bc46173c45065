"""Seller economics for a single short option.

A covered call is assumed to be written against 100 owned shares per
contract; a cash-secured put reserves ``K * 100`` of cash per contract.
All ratios are decimals (0.25 == 25 %).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields
from enum import Enum

from .core import OptionKind, CALL, CONTRACT_SIZE, DAYS_PER_YEAR
from .errors import InvalidInputError

logger = logging.getLogger(__name__)

__all__ = [
    "YieldQuality",
    "YieldMetrics",
    "analyze_yield",
    "classify_yield",
    "projected_premium",
    "total_notional",
]


class YieldQuality(Enum):
    NEGATIVE = "negative"
    LOW = "low"
    MODERATE = "moderate"
    GOOD = "good"
    EXCELLENT = "excellent"


def classify_yield(value: float) -> YieldQuality | None:
    """Bucket a yield ratio for display.  ``NaN`` has no bucket."""
    if math.isnan(value):
        return None
    if value < 0:
        return YieldQuality.NEGATIVE
    if value >= 0.30:
        return YieldQuality.EXCELLENT
    if value >= 0.15:
        return YieldQuality.GOOD
    if value >= 0.08:
        return YieldQuality.MODERATE
    return YieldQuality.LOW


_NAN = float("nan")

# ratio-type fields that carry a quality label
RATIO_FIELDS = (
    "period_yield",
    "annualized_yield",
    "monthly_yield",
    "assigned_return",
    "assigned_annualized_return",
)


@dataclass(frozen=True)
class YieldMetrics:
    period_yield: float
    annualized_yield: float
    monthly_yield: float
    premium_per_day: float
    capital_required: float
    assigned_return: float
    assigned_annualized_return: float
    effective_price: float

    @classmethod
    def undefined(cls) -> "YieldMetrics":
        """Metrics for a worthless or unknown premium: every field is NaN."""
        return cls(*(_NAN for _ in fields(cls)))

    @property
    def defined(self) -> bool:
        return not math.isnan(self.period_yield)

    def quality(self, field: str) -> YieldQuality | None:
        if field not in RATIO_FIELDS:
            raise KeyError(f"{field!r} is not a yield ratio")
        return classify_yield(getattr(self, field))

    def as_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def analyze_yield(
    S: float,
    K: float,
    days_to_expiry: float,
    premium: float,
    kind=CALL,
) -> YieldMetrics:
    """Yield and assignment outcome of selling one option at ``premium``.

    Parameters
    ----------
    S : float
        Underlying price.
    K : float
        Strike price.
    days_to_expiry : float
        Calendar days remaining, at least 1.  Use
        ``market.days_to_expiry`` to get a clamped count.
    premium : float
        Per-share premium received (typically the bid/ask mid).
    kind : OptionKind
        ``CALL`` for a covered call, ``PUT`` for a cash-secured put.

    Returns
    -------
    YieldMetrics
        ``YieldMetrics.undefined()`` when ``premium <= 0``.
    """
    kind = OptionKind.parse(kind)
    if not S > 0:
        raise InvalidInputError("S", S, f"S must be positive, got {S}")
    if not K > 0:
        raise InvalidInputError("K", K, f"K must be positive, got {K}")
    if not days_to_expiry >= 1:
        raise InvalidInputError(
            "days_to_expiry", days_to_expiry,
            f"days_to_expiry must be at least 1, got {days_to_expiry}",
        )
    if math.isnan(premium) or premium <= 0:
        logger.debug("premium %r gives no seller yield", premium)
        return YieldMetrics.undefined()

    annualize = DAYS_PER_YEAR / days_to_expiry
    period_yield = premium / S
    annualized_yield = period_yield * annualize

    if kind is CALL:
        # called away at K, premium kept
        capital = S * CONTRACT_SIZE
        assigned_return = (premium + (K - S)) / S
        effective_price = K + premium
    else:
        # put to us at K, premium lowers the basis
        capital = K * CONTRACT_SIZE
        assigned_return = premium / K
        effective_price = K - premium

    return YieldMetrics(
        period_yield=period_yield,
        annualized_yield=annualized_yield,
        monthly_yield=annualized_yield / 12.0,
        premium_per_day=premium / days_to_expiry,
        capital_required=capital,
        assigned_return=assigned_return,
        assigned_annualized_return=assigned_return * annualize,
        effective_price=effective_price,
    )


def projected_premium(premium: float, contracts: int = 1) -> float:
    """Total cash collected for ``contracts`` contracts."""
    return contracts * CONTRACT_SIZE * premium


def total_notional(K: float, contracts: int = 1) -> float:
    """Stock value exchanged at the strike if every contract is assigned."""
    return K * contracts * CONTRACT_SIZE
