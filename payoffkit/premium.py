"""Simplified premium estimate used to seed and re-price legs.

This is deliberately not Black-Scholes. The estimate is intrinsic value
plus a time value that scales with volatility and the square root of time,
damped exponentially as the strike moves away from spot. A floor keeps
every leg at a minimum tradable premium.
"""

from __future__ import annotations

import math

from .errors import InvalidInputError
from .models import OptionType

MIN_PREMIUM = 5.0
TIME_VALUE_FACTOR = 0.4
DISTANCE_DECAY = 10.0


def _check(name: str, value: float, *, positive: bool) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    if positive and number <= 0:
        raise InvalidInputError(f"{name} must be positive, got {number}")
    if not positive and number < 0:
        raise InvalidInputError(f"{name} must be non-negative, got {number}")
    return number


def estimate_premium(
    spot_price: float,
    strike: float,
    option_type: OptionType | str,
    iv: float,
    days_to_expiry: float,
) -> float:
    """Return the estimated premium per unit for one option.

    ``iv`` is annualised volatility in percent. The result depends only on
    the arguments.
    """

    spot = _check("spot_price", spot_price, positive=True)
    k = _check("strike", strike, positive=True)
    vol = _check("iv", iv, positive=False)
    dte = _check("days_to_expiry", days_to_expiry, positive=False)
    right = OptionType.parse(option_type)

    moneyness = spot - k if right is OptionType.CALL else k - spot
    intrinsic = max(0.0, moneyness)
    time_value = spot * (vol / 100) * math.sqrt(dte / 365) * TIME_VALUE_FACTOR
    distance_factor = math.exp(-abs(spot - k) / spot * DISTANCE_DECAY)
    return max(MIN_PREMIUM, intrinsic + time_value * distance_factor)


def round_premium(value: float) -> float:
    """Round a premium to the two decimals stored on a leg, halves up."""
    return math.floor(value * 100 + 0.5) / 100


__all__ = ["estimate_premium", "round_premium", "MIN_PREMIUM"]
