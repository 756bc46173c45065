"""Defaults and environment overrides.

The library functions take every parameter explicitly; these values are only
what the command line fills in when a flag is omitted.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import InvalidInputError

DEFAULT_RISK_FREE_RATE = 0.0525
DEFAULT_VOLATILITY = 0.25       # used when a quote carries no implied vol
DEFAULT_CURVE_STEPS = 200
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

ENV_PREFIX = "OPTYIELD_"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise InvalidInputError(ENV_PREFIX + name, raw,
                                f"{ENV_PREFIX + name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidInputError(ENV_PREFIX + name, raw,
                                f"{ENV_PREFIX + name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE
    volatility: float = DEFAULT_VOLATILITY
    curve_steps: int = DEFAULT_CURVE_STEPS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Settings":
        """Read ``OPTYIELD_*`` variables from the process environment.

        Call ``dotenv.load_dotenv()`` first to pick up a ``.env`` file.
        """
        steps = _env_int("CURVE_STEPS", DEFAULT_CURVE_STEPS)
        if steps < 1:
            raise InvalidInputError(ENV_PREFIX + "CURVE_STEPS", steps,
                                    f"{ENV_PREFIX}CURVE_STEPS must be >= 1, got {steps}")
        level = (os.getenv(ENV_PREFIX + "LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
        if level not in LOG_LEVELS:
            raise InvalidInputError(ENV_PREFIX + "LOG_LEVEL", level,
                                    f"{ENV_PREFIX}LOG_LEVEL must be one of {LOG_LEVELS}, got {level!r}")
        return cls(
            risk_free_rate=_env_float("RISK_FREE_RATE", DEFAULT_RISK_FREE_RATE),
            volatility=_env_float("VOLATILITY", DEFAULT_VOLATILITY),
            curve_steps=steps,
            log_level=level,
        )
