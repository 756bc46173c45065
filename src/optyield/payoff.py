"""Profit / loss of a single option position across a range of spot prices.

Two curves are produced: the payoff at expiration, and the mark-to-model
P/L at the valuation date (Black-Scholes value at each sampled spot with the
contract's remaining time).  The second is omitted for expired contracts.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .core import ContractTerms, OptionKind, Position, CALL, LONG, CONTRACT_SIZE
from .black_scholes import breakeven as _breakeven, price as _price
from .errors import InvalidInputError
from .config import DEFAULT_CURVE_STEPS

logger = logging.getLogger(__name__)

__all__ = ["PayoffCurve", "generate_curve", "price_range"]

MIN_SPOT = 0.01


@dataclass(frozen=True)
class PayoffCurve:
    spots: np.ndarray
    expiry_pnl: np.ndarray
    valuation_pnl: Optional[np.ndarray]
    breakeven: float
    max_profit: float     # math.inf when unbounded
    max_loss: float       # positive number, math.inf when unbounded
    premium: float
    contracts: int
    position: Position
    kind: OptionKind
    spot: float
    strike: float

    @property
    def risk_reward(self) -> float:
        """Max profit per unit of max loss.

        ``inf`` when the upside is unbounded, ``0.0`` when the downside is
        unbounded, ``NaN`` when there is nothing at risk.
        """
        if math.isinf(self.max_profit):
            return math.inf
        if math.isinf(self.max_loss):
            return 0.0
        if self.max_loss > 0:
            return self.max_profit / self.max_loss
        return float("nan")


def price_range(S: float, steps: int = DEFAULT_CURVE_STEPS) -> np.ndarray:
    """``steps + 1`` evenly spaced spots from half to one-and-a-half times ``S``."""
    lo = max(MIN_SPOT, 0.5 * S)
    hi = 1.5 * S
    return np.linspace(lo, hi, steps + 1)


def generate_curve(
    terms: ContractTerms,
    premium: float,
    contracts: int = 1,
    position=LONG,
    *,
    steps: int = DEFAULT_CURVE_STEPS,
) -> PayoffCurve:
    """Sample the P/L of ``contracts`` options bought or sold at ``premium``.

    Parameters
    ----------
    terms : ContractTerms
        Contract and market inputs; ``terms.S`` centres the sampled range.
    premium : float
        Per-share premium paid (long) or received (short).
    contracts : int
        Number of contracts, each covering ``CONTRACT_SIZE`` shares.
    position : Position
        ``LONG`` or ``SHORT`` (strings accepted).
    steps : int
        Number of intervals in the sampled spot grid.

    Returns
    -------
    PayoffCurve
    """
    position = Position.parse(position)
    kind = terms.kind
    if not premium >= 0 or math.isinf(premium):
        raise InvalidInputError("premium", premium, f"premium must be non-negative, got {premium}")
    if int(contracts) != contracts or contracts < 1:
        raise InvalidInputError("contracts", contracts,
                                f"contracts must be a positive integer, got {contracts}")
    if int(steps) != steps or steps < 1:
        raise InvalidInputError("steps", steps, f"steps must be a positive integer, got {steps}")
    contracts = int(contracts)

    scale = position.sign * CONTRACT_SIZE * contracts
    spots = price_range(terms.S, int(steps))

    if kind is CALL:
        intrinsic = np.maximum(spots - terms.K, 0.0)
    else:
        intrinsic = np.maximum(terms.K - spots, 0.0)
    expiry_pnl = (intrinsic - premium) * scale

    valuation_pnl = None
    if not terms.expired:
        values = np.array([_price(terms.with_spot(s)) for s in spots])
        valuation_pnl = (values - premium) * scale

    premium_total = premium * CONTRACT_SIZE * contracts
    if kind is CALL:
        if position is LONG:
            max_profit, max_loss = math.inf, premium_total
        else:
            max_profit, max_loss = premium_total, math.inf
    else:
        # put: the underlying going to zero is the extreme
        strike_total = (terms.K - premium) * CONTRACT_SIZE * contracts
        if position is LONG:
            max_profit, max_loss = strike_total, premium_total
        else:
            max_profit, max_loss = premium_total, strike_total

    logger.debug("sampled %d spots in [%.4f, %.4f] for %s %s",
                 spots.size, spots[0], spots[-1], position.value, kind.value)

    return PayoffCurve(
        spots=spots,
        expiry_pnl=expiry_pnl,
        valuation_pnl=valuation_pnl,
        breakeven=_breakeven(kind, terms.K, premium),
        max_profit=max_profit,
        max_loss=max_loss,
        premium=premium,
        contracts=contracts,
        position=position,
        kind=kind,
        spot=terms.S,
        strike=terms.K,
    )
