# black_scholes_vec.py
# Vectorised Black-Scholes pricing and Greeks.
# All public functions accept scalars *or* NumPy arrays and broadcast.
# Units match the scalar engine: theta per day, vega / rho per 1 point.

from __future__ import annotations
import numpy as np
from scipy.stats import norm

from .core import OptionKind, DAYS_PER_YEAR
from .errors import InvalidInputError

_N = norm.cdf   # vectorised standard-normal CDF
_n = norm.pdf   # vectorised standard-normal PDF


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------
def _broadcast(S, K, T, r, q, sigma):
    arrs = [np.asarray(x, dtype=float) for x in (S, K, T, r, q, sigma)]
    return np.broadcast_arrays(*arrs)


def _d1_d2(S, K, T, r, q, sigma):
    """Compute d1, d2 arrays.  Expired entries (T == 0) come back as 0."""
    live = T > 0
    T_safe = np.where(live, T, 1.0)
    sig_safe = np.where(live, sigma, 1.0)
    sig_sqrt_T = sig_safe * np.sqrt(T_safe)
    d1 = (np.log(S / K) + (r - q + 0.5 * sig_safe * sig_safe) * T_safe) / sig_sqrt_T
    d2 = d1 - sig_sqrt_T
    return np.where(live, d1, 0.0), np.where(live, d2, 0.0), live


def _validate(S, K, T, r, q, sigma):
    """Reject inputs the scalar engine would reject; nothing is clamped."""
    for name, arr in (("S", S), ("K", K), ("T", T), ("r", r), ("q", q), ("sigma", sigma)):
        if not np.all(np.isfinite(arr)):
            raise InvalidInputError(name, arr, f"{name} must be finite")
    if np.any(S <= 0):
        raise InvalidInputError("S", S, "spot price must be > 0")
    if np.any(K <= 0):
        raise InvalidInputError("K", K, "strike must be > 0")
    if np.any(T < 0):
        raise InvalidInputError("T", T, "time to expiry must be >= 0")
    if np.any((T > 0) & (sigma <= 0)):
        raise InvalidInputError("sigma", sigma, "volatility must be > 0 before expiry")


def _intrinsic(S, K, is_call):
    return np.where(is_call, np.maximum(S - K, 0.0), np.maximum(K - S, 0.0))


# ---------------------------------------------------------------------------
# Vectorised price
# ---------------------------------------------------------------------------
def bs_price_vec(S, K, T, r, q, sigma, kind) -> np.ndarray:
    """Vectorised Black-Scholes price.

    Parameters accept scalars or arrays; NumPy broadcasting rules apply.
    ``kind`` is a single ``OptionKind`` (or its string value).  Entries with
    ``T == 0`` are valued at intrinsic value.  Raises ``InvalidInputError``
    for non-positive spot or strike, negative ``T`` or non-positive ``sigma``
    on a live entry.

    Returns
    -------
    np.ndarray
        Option prices (same shape as broadcasted inputs).
    """
    S, K, T, r, q, sigma = _broadcast(S, K, T, r, q, sigma)
    _validate(S, K, T, r, q, sigma)
    is_call = OptionKind.parse(kind) is OptionKind.CALL
    d1, d2, live = _d1_d2(S, K, T, r, q, sigma)
    disc_r = np.exp(-r * T)
    disc_q = np.exp(-q * T)

    if is_call:
        px = disc_q * S * _N(d1) - disc_r * K * _N(d2)
    else:
        px = disc_r * K * _N(-d2) - disc_q * S * _N(-d1)

    return np.where(live, px, _intrinsic(S, K, is_call))


# ---------------------------------------------------------------------------
# Vectorised Greeks
# ---------------------------------------------------------------------------
def bs_greeks_vec(S, K, T, r, q, sigma, kind) -> dict[str, np.ndarray]:
    """Vectorised Black-Scholes price and Greeks.

    Returns dict with keys: price, delta, gamma, theta, vega, rho.
    """
    S, K, T, r, q, sigma = _broadcast(S, K, T, r, q, sigma)
    _validate(S, K, T, r, q, sigma)
    is_call = OptionKind.parse(kind) is OptionKind.CALL
    d1, d2, live = _d1_d2(S, K, T, r, q, sigma)
    disc_r = np.exp(-r * T)
    disc_q = np.exp(-q * T)
    sqrt_T = np.sqrt(np.where(live, T, 1.0))
    sig = np.where(live, sigma, 1.0)
    n_d1 = _n(d1)

    # Common
    gamma = disc_q * n_d1 / (S * sig * sqrt_T)
    vega  = S * disc_q * n_d1 * sqrt_T
    decay = -S * disc_q * n_d1 * sig / (2 * sqrt_T)

    if is_call:
        px    = disc_q * S * _N(d1) - disc_r * K * _N(d2)
        delta = disc_q * _N(d1)
        theta = decay - r * K * disc_r * _N(d2) + q * S * disc_q * _N(d1)
        rho   = K * T * disc_r * _N(d2)
        delta_exp = np.where(S > K, 1.0, 0.0)
    else:
        px    = disc_r * K * _N(-d2) - disc_q * S * _N(-d1)
        delta = disc_q * (_N(d1) - 1.0)
        theta = decay + r * K * disc_r * _N(-d2) - q * S * disc_q * _N(-d1)
        rho   = -K * T * disc_r * _N(-d2)
        delta_exp = np.where(S < K, -1.0, 0.0)

    return {
        "price": np.where(live, px, _intrinsic(S, K, is_call)),
        "delta": np.where(live, delta, delta_exp),
        "gamma": np.where(live, gamma, 0.0),
        "theta": np.where(live, theta / DAYS_PER_YEAR, 0.0),
        "vega":  np.where(live, vega / 100.0, 0.0),
        "rho":   np.where(live, rho / 100.0, 0.0),
    }
