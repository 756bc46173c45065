"""Closed-form Black-Scholes-Merton pricing and Greeks for European options.

Unit conventions for the Greeks follow what option-chain screens display:
theta is per calendar day, vega per 1 volatility point, rho per 1 rate point.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from math import log, sqrt, exp
from statistics import NormalDist

from .core import ContractTerms, OptionKind, CALL, DAYS_PER_YEAR

_nd = NormalDist()

__all__ = [
    "Greeks",
    "norm_cdf", "norm_pdf", "norm_cdf_as",
    "price", "delta", "gamma", "theta", "vega", "rho",
    "calculate_all", "intrinsic_value", "probability_itm", "breakeven",
]


# ---------------------------------------------------------------------------
# Normal distribution
# ---------------------------------------------------------------------------
def norm_cdf(x: float) -> float:
    return _nd.cdf(x)


def norm_pdf(x: float) -> float:
    return math.exp(-0.5 * x * x) / math.sqrt(2 * math.pi)


# Abramowitz & Stegun 7.1.26
_A1, _A2, _A3, _A4, _A5 = 0.254829592, -0.284496736, 1.421413741, -1.453152027, 1.061405429
_P = 0.3275911


def norm_cdf_as(x: float) -> float:
    """Rational-polynomial approximation to N(x), absolute error < 7.5e-8.

    Kept for comparison with quotes produced by browser-side calculators that
    use it; the engine itself prices with the erf-based ``norm_cdf``.
    """
    sign = -1.0 if x < 0 else 1.0
    z = abs(x) / math.sqrt(2.0)
    t = 1.0 / (1.0 + _P * z)
    y = 1.0 - ((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t * math.exp(-z * z)
    return 0.5 * (1.0 + sign * y)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Greeks:
    price: float
    delta: float
    gamma: float
    theta: float      # per calendar day
    vega: float       # per 1 vol point
    rho: float        # per 1 rate point

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


def _d1_d2(t: ContractTerms) -> tuple[float, float]:
    rt = t.sigma * sqrt(t.T)
    d1 = (log(t.S / t.K) + (t.r - t.q + 0.5 * t.sigma * t.sigma) * t.T) / rt
    d2 = d1 - rt
    return d1, d2


def intrinsic_value(kind, S: float, K: float) -> float:
    if OptionKind.parse(kind) is CALL:
        return max(0.0, S - K)
    return max(0.0, K - S)


def _expiry_delta(t: ContractTerms) -> float:
    if t.kind is CALL:
        return 1.0 if t.S > t.K else 0.0
    return -1.0 if t.S < t.K else 0.0


def _price(t: ContractTerms, d1: float, d2: float) -> float:
    disc_r = exp(-t.r * t.T)
    disc_q = exp(-t.q * t.T)
    if t.kind is CALL:
        return disc_q * t.S * _nd.cdf(d1) - disc_r * t.K * _nd.cdf(d2)
    return disc_r * t.K * _nd.cdf(-d2) - disc_q * t.S * _nd.cdf(-d1)


def _delta(t: ContractTerms, d1: float) -> float:
    disc_q = exp(-t.q * t.T)
    if t.kind is CALL:
        return disc_q * _nd.cdf(d1)
    return disc_q * (_nd.cdf(d1) - 1.0)


def _gamma(t: ContractTerms, d1: float) -> float:
    return exp(-t.q * t.T) * norm_pdf(d1) / (t.S * t.sigma * sqrt(t.T))


def _theta(t: ContractTerms, d1: float, d2: float) -> float:
    disc_r = exp(-t.r * t.T)
    disc_q = exp(-t.q * t.T)
    decay = -t.S * disc_q * norm_pdf(d1) * t.sigma / (2 * sqrt(t.T))
    if t.kind is CALL:
        annual = (decay
                  - t.r * t.K * disc_r * _nd.cdf(d2)
                  + t.q * t.S * disc_q * _nd.cdf(d1))
    else:
        annual = (decay
                  + t.r * t.K * disc_r * _nd.cdf(-d2)
                  - t.q * t.S * disc_q * _nd.cdf(-d1))
    return annual / DAYS_PER_YEAR


def _vega(t: ContractTerms, d1: float) -> float:
    return t.S * exp(-t.q * t.T) * norm_pdf(d1) * sqrt(t.T) / 100.0


def _rho(t: ContractTerms, d2: float) -> float:
    disc_r = exp(-t.r * t.T)
    if t.kind is CALL:
        return t.K * t.T * disc_r * _nd.cdf(d2) / 100.0
    return -t.K * t.T * disc_r * _nd.cdf(-d2) / 100.0


def price(terms: ContractTerms) -> float:
    if terms.expired:
        return intrinsic_value(terms.kind, terms.S, terms.K)
    d1, d2 = _d1_d2(terms)
    return _price(terms, d1, d2)


def delta(terms: ContractTerms) -> float:
    if terms.expired:
        return _expiry_delta(terms)
    d1, _ = _d1_d2(terms)
    return _delta(terms, d1)


def gamma(terms: ContractTerms) -> float:
    if terms.expired:
        return 0.0
    d1, _ = _d1_d2(terms)
    return _gamma(terms, d1)


def theta(terms: ContractTerms) -> float:
    """Time decay per calendar day (annual theta / 365)."""
    if terms.expired:
        return 0.0
    d1, d2 = _d1_d2(terms)
    return _theta(terms, d1, d2)


def vega(terms: ContractTerms) -> float:
    """Price change for a 1 percentage-point move in volatility."""
    if terms.expired:
        return 0.0
    d1, _ = _d1_d2(terms)
    return _vega(terms, d1)


def rho(terms: ContractTerms) -> float:
    """Price change for a 1 percentage-point move in the risk-free rate."""
    if terms.expired:
        return 0.0
    _, d2 = _d1_d2(terms)
    return _rho(terms, d2)


def calculate_all(terms: ContractTerms) -> Greeks:
    """Price and all five Greeks from a single d1/d2 evaluation."""
    if terms.expired:
        return Greeks(
            price=intrinsic_value(terms.kind, terms.S, terms.K),
            delta=_expiry_delta(terms),
            gamma=0.0, theta=0.0, vega=0.0, rho=0.0,
        )
    d1, d2 = _d1_d2(terms)
    return Greeks(
        price=_price(terms, d1, d2),
        delta=_delta(terms, d1),
        gamma=_gamma(terms, d1),
        theta=_theta(terms, d1, d2),
        vega=_vega(terms, d1),
        rho=_rho(terms, d2),
    )


def probability_itm(terms: ContractTerms) -> float:
    """Risk-neutral probability of expiring in the money: N(d2) / N(-d2)."""
    if terms.expired:
        if terms.kind is CALL:
            return 1.0 if terms.S > terms.K else 0.0
        return 1.0 if terms.S < terms.K else 0.0
    _, d2 = _d1_d2(terms)
    return _nd.cdf(d2) if terms.kind is CALL else _nd.cdf(-d2)


def breakeven(kind, K: float, premium: float) -> float:
    """Underlying price at expiry where intrinsic value equals the premium."""
    if OptionKind.parse(kind) is CALL:
        return K + premium
    return K - premium
