"""Entry points of the payoff engine.

All functions here are pure: they read their arguments (and configuration
defaults for omitted keyword arguments), never mutate them and keep no state
between calls, so they are safe to call concurrently.
"""

from __future__ import annotations

from typing import Sequence

from .config import get as cfg_get
from .metrics import calculate_metrics
from .models import OptionLeg, PayoffAnalysis, UnderlyingSnapshot
from .payoff import generate_payoff_curve
from .premium import estimate_premium
from .strategies.instantiate import instantiate_template
from .strike_ladder import StrikeLadder, generate_strike_ladder


def compute_payoff_and_metrics(
    legs: Sequence[OptionLeg],
    snapshot: UnderlyingSnapshot,
    *,
    range_fraction: float | None = None,
    samples: int | None = None,
    margin_rate: float | None = None,
) -> PayoffAnalysis:
    """Return the expiry payoff curve of ``legs`` and the metrics derived from it."""

    if range_fraction is None:
        range_fraction = float(cfg_get("PAYOFF_RANGE", 0.20))
    legs = list(legs)
    curve = generate_payoff_curve(
        legs,
        snapshot.spot_price,
        snapshot.lot_size,
        range_fraction=range_fraction,
        samples=samples,
    )
    metrics = calculate_metrics(legs, curve, snapshot, margin_rate=margin_rate)
    return PayoffAnalysis(curve=tuple(curve), metrics=metrics, spot_price=snapshot.spot_price)


__all__ = [
    "StrikeLadder",
    "generate_strike_ladder",
    "estimate_premium",
    "instantiate_template",
    "compute_payoff_and_metrics",
]
