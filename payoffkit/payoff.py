"""Expiry payoff of a set of option legs."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence

from .config import get as cfg_get
from .errors import InvalidInputError
from .models import OptionLeg, PayoffPoint


def calculate_payoff_at_price(
    legs: Iterable[OptionLeg], price: float, lot_size: float
) -> float:
    """Return total expiry P&L of ``legs`` if the underlying settles at ``price``."""

    total = 0.0
    for leg in legs:
        leg_pnl = (leg.intrinsic(price) - leg.premium) * leg.direction * leg.lots * lot_size
        total += leg_pnl
    return total


def sample_prices(
    spot_price: float, range_fraction: float, samples: int
) -> List[float]:
    """Return ``samples`` evenly spaced prices covering ``spot ± range``.

    The first and last price are exactly ``spot*(1-range)`` and
    ``spot*(1+range)``.
    """

    if not math.isfinite(spot_price) or spot_price <= 0:
        raise InvalidInputError(f"spot_price must be positive, got {spot_price!r}")
    if not math.isfinite(range_fraction) or not 0 < range_fraction < 1:
        raise InvalidInputError(f"range_fraction must be in (0, 1), got {range_fraction!r}")
    if isinstance(samples, bool) or not isinstance(samples, int) or samples < 2:
        raise InvalidInputError(f"samples must be an integer >= 2, got {samples!r}")

    low = spot_price * (1 - range_fraction)
    high = spot_price * (1 + range_fraction)
    step = (high - low) / (samples - 1)
    prices = [low + i * step for i in range(samples - 1)]
    prices.append(high)
    return prices


def generate_payoff_curve(
    legs: Sequence[OptionLeg],
    spot_price: float,
    lot_size: float,
    range_fraction: float | None = None,
    samples: int | None = None,
) -> List[PayoffPoint]:
    """Return the expiry payoff curve of ``legs`` in ascending price order.

    An empty ``legs`` sequence yields a flat zero curve.
    """

    if range_fraction is None:
        range_fraction = float(cfg_get("PAYOFF_RANGE", 0.20))
    if samples is None:
        samples = int(cfg_get("PAYOFF_SAMPLES", 101))
    if not math.isfinite(lot_size) or lot_size <= 0:
        raise InvalidInputError(f"lot_size must be positive, got {lot_size!r}")

    legs = list(legs)
    return [
        PayoffPoint(price=price, pnl=calculate_payoff_at_price(legs, price, lot_size))
        for price in sample_prices(spot_price, range_fraction, samples)
    ]


__all__ = ["calculate_payoff_at_price", "sample_prices", "generate_payoff_curve"]
