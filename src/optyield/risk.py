"""Bump-and-reprice Greeks.

Central finite differences on any ``pricer(terms) -> float`` callable, reported
in the same units as ``black_scholes.calculate_all`` so the two can be compared
field by field.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from .core import ContractTerms, DAYS_PER_YEAR
from .black_scholes import Greeks, price as bs_price
from .errors import InvalidInputError

__all__ = ["numerical_greeks"]


def numerical_greeks(
    terms: ContractTerms,
    pricer: Callable[[ContractTerms], float] = bs_price,
    *,
    bump_pct: float = 0.01,
) -> Greeks:
    """Compute Greeks via central finite differences on an arbitrary pricer.

    Parameters
    ----------
    terms : ContractTerms
        Point at which to evaluate.  Must not be expired.
    pricer : callable
        ``pricer(terms) -> float``.  Defaults to the closed-form price.
    bump_pct : float
        Relative bump size for spot and vol; absolute for rate (default 0.01).

    Returns
    -------
    Greeks
        theta per calendar day, vega and rho per 1 percentage point.
    """
    if terms.expired:
        raise InvalidInputError("T", terms.T, "numerical Greeks need T > 0")

    P0 = pricer(terms)

    # --- Delta & Gamma (spot bump) ---
    eps_S = bump_pct * terms.S
    P_up = pricer(replace(terms, S=terms.S + eps_S))
    P_dn = pricer(replace(terms, S=terms.S - eps_S))
    delta = (P_up - P_dn) / (2.0 * eps_S)
    gamma = (P_up - 2.0 * P0 + P_dn) / (eps_S ** 2)

    # --- Vega (vol bump) ---
    eps_v = max(bump_pct * terms.sigma, 1e-4)
    P_vup = pricer(replace(terms, sigma=terms.sigma + eps_v))
    sig_dn = max(terms.sigma - eps_v, 1e-6)
    P_vdn = pricer(replace(terms, sigma=sig_dn))
    vega = (P_vup - P_vdn) / (terms.sigma + eps_v - sig_dn) / 100.0

    # --- Theta (time decay, 1-day bump) ---
    dt = 1.0 / DAYS_PER_YEAR
    if terms.T > dt:
        theta = pricer(replace(terms, T=terms.T - dt)) - P0
    else:
        theta = pricer(replace(terms, T=0.0)) - P0

    # --- Rho (rate bump) ---
    eps_r = bump_pct
    P_rup = pricer(replace(terms, r=terms.r + eps_r))
    P_rdn = pricer(replace(terms, r=terms.r - eps_r))
    rho = (P_rup - P_rdn) / (2.0 * eps_r) / 100.0

    return Greeks(
        price=float(P0),
        delta=float(delta),
        gamma=float(gamma),
        theta=float(theta),
        vega=float(vega),
        rho=float(rho),
    )
