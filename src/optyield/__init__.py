# optyield — Black-Scholes pricing and option-seller yield analytics
# Public API

# Data model
from .core import (
    ContractTerms, OptionKind, Position,
    CALL, PUT, LONG, SHORT, CONTRACT_SIZE, DAYS_PER_YEAR,
)
from .errors import OptYieldError, InvalidInputError

# Pricing engine
from .black_scholes import (
    Greeks,
    price, delta, gamma, theta, vega, rho, calculate_all,
    intrinsic_value, probability_itm, breakeven,
    norm_cdf, norm_pdf, norm_cdf_as,
)

# Vectorised pricers
from .black_scholes_vec import bs_price_vec, bs_greeks_vec

# Seller yield
from .yields import (
    YieldMetrics, YieldQuality, analyze_yield, classify_yield,
    projected_premium, total_notional,
)

# Payoff curves
from .payoff import PayoffCurve, generate_curve

# Risk
from .risk import numerical_greeks

# Quote helpers
from .market import mid_price, days_to_expiry, year_fraction, time_value

__all__ = [
    # Data model
    "ContractTerms", "OptionKind", "Position",
    "CALL", "PUT", "LONG", "SHORT", "CONTRACT_SIZE", "DAYS_PER_YEAR",
    "OptYieldError", "InvalidInputError",
    # Pricing engine
    "Greeks",
    "price", "delta", "gamma", "theta", "vega", "rho", "calculate_all",
    "intrinsic_value", "probability_itm", "breakeven",
    "norm_cdf", "norm_pdf", "norm_cdf_as",
    # Vectorised
    "bs_price_vec", "bs_greeks_vec",
    # Yield
    "YieldMetrics", "YieldQuality", "analyze_yield", "classify_yield",
    "projected_premium", "total_notional",
    # Payoff
    "PayoffCurve", "generate_curve",
    # Risk
    "numerical_greeks",
    # Quote helpers
    "mid_price", "days_to_expiry", "year_fraction", "time_value",
]

__version__ = "0.1.0"
