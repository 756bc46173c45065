from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum

from .errors import InvalidInputError

CONTRACT_SIZE = 100     # shares per listed equity option
DAYS_PER_YEAR = 365.0


class OptionKind(Enum):
    CALL = "call"
    PUT = "put"

    @classmethod
    def parse(cls, value) -> "OptionKind":
        """Accept an ``OptionKind`` or ``"call"``/``"c"``/``"put"``/``"p"``."""
        if isinstance(value, cls):
            return value
        s = str(value).strip().lower()
        if s in {"call", "c"}:
            return cls.CALL
        if s in {"put", "p"}:
            return cls.PUT
        raise InvalidInputError("kind", value, f"kind must be 'call' or 'put', got {value!r}")


class Position(Enum):
    LONG = "long"
    SHORT = "short"

    @property
    def sign(self) -> int:
        return 1 if self is Position.LONG else -1

    @classmethod
    def parse(cls, value) -> "Position":
        if isinstance(value, cls):
            return value
        s = str(value).strip().lower()
        if s in {"long", "buy"}:
            return cls.LONG
        if s in {"short", "sell"}:
            return cls.SHORT
        raise InvalidInputError(
            "position", value, f"position must be 'long' or 'short', got {value!r}"
        )


CALL = OptionKind.CALL
PUT = OptionKind.PUT
LONG = Position.LONG
SHORT = Position.SHORT


def _check_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidInputError(name, value, f"{name} must be finite, got {value}")


@dataclass(frozen=True)
class ContractTerms:
    """Contract terms plus the market inputs needed to value them.

    Parameters
    ----------
    S : float
        Underlying price.
    K : float
        Strike price.
    T : float
        Time to expiry in years.  ``T == 0`` means the contract is at
        expiration and is valued at intrinsic value.
    r : float
        Continuously-compounded risk-free rate (decimal, may be negative).
    sigma : float
        Volatility (decimal).  Must be positive while ``T > 0``.
    q : float
        Continuous dividend yield (default 0).
    kind : OptionKind
        ``CALL`` (default) or ``PUT``; strings are accepted and parsed.
    """
    S: float
    K: float
    T: float          # years
    r: float          # continuous risk-free
    sigma: float
    q: float = 0.0    # continuous dividend yield
    kind: OptionKind = OptionKind.CALL

    def __post_init__(self):
        # frozen: coerce through object.__setattr__
        object.__setattr__(self, "kind", OptionKind.parse(self.kind))
        for name in ("S", "K", "T", "r", "sigma", "q"):
            value = float(getattr(self, name))
            _check_finite(name, value)
            object.__setattr__(self, name, value)

        if self.S <= 0:
            raise InvalidInputError("S", self.S, f"S must be positive, got {self.S}")
        if self.K <= 0:
            raise InvalidInputError("K", self.K, f"K must be positive, got {self.K}")
        if self.T < 0:
            raise InvalidInputError("T", self.T, f"T must be non-negative, got {self.T}")
        if self.T > 0 and self.sigma <= 0:
            raise InvalidInputError(
                "sigma", self.sigma,
                f"sigma must be positive before expiry, got {self.sigma}",
            )

    @property
    def expired(self) -> bool:
        return self.T == 0.0

    @property
    def is_call(self) -> bool:
        return self.kind is OptionKind.CALL

    def with_spot(self, S: float) -> "ContractTerms":
        """Same contract re-marked at a different underlying price."""
        return replace(self, S=S)

    @classmethod
    def from_days(cls, S: float, K: float, days: float, r: float, sigma: float,
                  q: float = 0.0, kind=OptionKind.CALL) -> "ContractTerms":
        """Build terms from a calendar-day count instead of a year fraction."""
        return cls(S=S, K=K, T=days / DAYS_PER_YEAR, r=r, sigma=sigma, q=q, kind=kind)
