"""Risk summary of a leg set derived from its sampled payoff curve.

Max profit, max loss and breakevens are read off the curve produced by
:func:`payoffkit.payoff.generate_payoff_curve` so they always agree with what
is plotted, together with the P&L at any strike lying outside the sampled
window.  Because the curve only covers a finite window around spot, the
tails beyond it are checked structurally: net long or short call exposure
makes the upside unlimited, net put exposure does the same for the downside.

Probability of profit, margin and the Greeks are illustrative heuristics for
teaching purposes.  They are not calibrated against a pricing model and must
not be used for hedging or risk limits.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Sequence, Tuple

from .config import get as cfg_get
from .logutils import logger
from .models import (
    UNBOUNDED,
    Bound,
    Bounded,
    OptionLeg,
    PayoffPoint,
    StrategyMetrics,
    UnderlyingSnapshot,
    is_unbounded,
)
from .payoff import calculate_payoff_at_price

POP_FLOOR = 10.0
POP_CEILING = 90.0

# Greek approximation constants
DELTA_SLOPE = 2.0
GAMMA_PEAK = 0.01
GAMMA_DECAY = 20.0
THETA_FACTOR = 0.7
VEGA_FACTOR = 0.1


def calculate_net_premium(legs: Iterable[OptionLeg], lot_size: float) -> float:
    """Return premium received minus premium paid, in currency."""
    net = 0.0
    for leg in legs:
        net += leg.premium * -leg.direction * leg.lots * lot_size
    return net


def split_net_premium(net_premium: float) -> Tuple[float, float]:
    """Return ``(net_credit, net_debit)``; at most one of them is non-zero."""
    return max(0.0, net_premium), max(0.0, -net_premium)


def tail_slopes(legs: Iterable[OptionLeg]) -> Tuple[int, int]:
    """Return the P&L slope in lots beyond the lowest and highest strikes.

    The first value is the exposure as price falls (net long puts gain), the
    second as price rises (net long calls gain).
    """

    downside = 0
    upside = 0
    for leg in legs:
        if leg.is_call:
            upside += leg.direction * leg.lots
        else:
            downside += leg.direction * leg.lots
    return downside, upside


def calculate_max_profit_loss(
    curve: Sequence[PayoffPoint],
    legs: Sequence[OptionLeg],
    lot_size: float | None = None,
) -> Tuple[Bound, Bound]:
    """Return ``(max_profit, max_loss)`` from ``curve`` and the leg structure.

    Finite values are the sampled extremes; ``max_loss`` is the lowest P&L and
    is therefore negative for a losing position.  With ``lot_size`` given, the
    P&L at every strike outside the sampled window is included too, since the
    payoff only bends at strikes.
    """

    if not curve:
        return Bounded(0.0), Bounded(0.0)

    pnls = [p.pnl for p in curve]
    if lot_size is not None:
        low, high = curve[0].price, curve[-1].price
        for strike in sorted({leg.strike for leg in legs}):
            if low <= strike <= high:
                continue
            pnl = calculate_payoff_at_price(legs, strike, lot_size)
            logger.debug(f"[metrics] strike {strike} outside sampled window, P&L {pnl}")
            pnls.append(pnl)
    max_profit: Bound = Bounded(max(pnls))
    max_loss: Bound = Bounded(min(pnls))

    downside, upside = tail_slopes(legs)
    for side, slope in (("downside", downside), ("upside", upside)):
        if slope > 0:
            max_profit = UNBOUNDED
        elif slope < 0:
            max_loss = UNBOUNDED
        else:
            continue
        logger.debug(f"[metrics] {side} tail slope {slope:+d} lots is unbounded")
    return max_profit, max_loss


def find_breakevens(curve: Sequence[PayoffPoint]) -> List[float]:
    """Return interpolated zero crossings of ``curve`` in ascending order.

    A crossing is a pair of neighbouring points where P&L goes from below
    zero to zero or above, or the other way round.  Exactly one breakeven is
    reported per crossing.
    """

    breakevens: List[float] = []
    for prev, curr in zip(curve, curve[1:]):
        if (prev.pnl < 0) == (curr.pnl < 0):
            continue
        ratio = abs(prev.pnl) / (abs(prev.pnl) + abs(curr.pnl))
        breakevens.append(prev.price + (curr.price - prev.price) * ratio)
    return breakevens


def calculate_pop(breakevens: Sequence[float], expected_move: float) -> float:
    """Heuristic probability of profit in percent, clamped to 10-90.

    The width of the zone between the outer breakevens is compared with the
    one standard deviation move.  With fewer than two breakevens the zone is
    taken as two expected moves, which maps to 50%.  This is a display aid,
    not a statistical probability.
    """

    if expected_move <= 0:
        logger.debug("[metrics] zero expected move, probability of profit set to 50%")
        return 50.0
    if len(breakevens) >= 2:
        width = breakevens[-1] - breakevens[0]
    else:
        width = 2 * expected_move
    pop = 50 + (width / expected_move - 2) * 15
    return min(POP_CEILING, max(POP_FLOOR, pop))


def calculate_risk_reward(max_profit: Bound, max_loss: Bound):
    """Return ``|max_profit / max_loss|``.

    ``None`` means undefined: a zero max loss, or both sides unlimited.
    ``UNBOUNDED`` means unlimited profit against a finite loss.
    """

    if is_unbounded(max_loss):
        return None if is_unbounded(max_profit) else 0.0
    loss = max_loss.value
    if loss == 0:
        return None
    if is_unbounded(max_profit):
        return UNBOUNDED
    return abs(max_profit.value / loss)


def calculate_margin(
    legs: Sequence[OptionLeg],
    spot_price: float,
    lot_size: float,
    net_premium: float,
    margin_rate: float | None = None,
) -> float:
    """Approximate margin blocked by the position.

    Any written leg is margined at ``margin_rate`` of the notional for the
    largest leg size.  A position of bought options only needs the debit.
    """

    if margin_rate is None:
        margin_rate = float(cfg_get("MARGIN_RATE", 0.15))
    if any(leg.direction < 0 for leg in legs):
        largest = max(leg.lots for leg in legs)
        return spot_price * lot_size * margin_rate * largest
    return max(0.0, -net_premium)


def calculate_greeks(
    legs: Iterable[OptionLeg],
    spot_price: float,
    lot_size: float,
    days_to_expiry: float,
) -> Dict[str, float]:
    """Return position Greeks summed over ``legs``.

    Delta moves linearly with moneyness and is clamped to [-1, 1], gamma
    peaks at the money, theta spreads the premium over the remaining days
    and vega is a fixed share of premium.  Each leg is signed by direction
    and scaled by lots times lot size.
    """

    totals = {"delta": 0.0, "gamma": 0.0, "theta": 0.0, "vega": 0.0}
    for leg in legs:
        moneyness = (spot_price - leg.strike) / spot_price
        base = 0.5 if leg.is_call else -0.5
        delta = max(-1.0, min(1.0, base + moneyness * DELTA_SLOPE))
        gamma = GAMMA_PEAK * math.exp(-abs(moneyness) * GAMMA_DECAY)
        theta = -leg.premium / days_to_expiry * THETA_FACTOR if days_to_expiry > 0 else 0.0
        vega = leg.premium * VEGA_FACTOR

        scale = leg.direction * leg.lots * lot_size
        totals["delta"] += delta * scale
        totals["gamma"] += gamma * scale
        totals["theta"] += theta * scale
        totals["vega"] += vega * scale
    return totals


def calculate_metrics(
    legs: Sequence[OptionLeg],
    curve: Sequence[PayoffPoint],
    snapshot: UnderlyingSnapshot,
    *,
    margin_rate: float | None = None,
) -> StrategyMetrics:
    """Return the full risk summary for ``legs`` given their payoff ``curve``."""

    legs = list(legs)
    expected_move = snapshot.expected_move
    if not legs:
        logger.debug("[metrics] empty leg set, reporting flat metrics")
        return StrategyMetrics(
            net_credit=0.0,
            net_debit=0.0,
            max_profit=Bounded(0.0),
            max_loss=Bounded(0.0),
            breakevens=(),
            probability_of_profit=0.0,
            risk_reward_ratio=None,
            required_margin=0.0,
            delta=0.0,
            gamma=0.0,
            theta=0.0,
            vega=0.0,
            expected_move=expected_move,
        )

    net_premium = calculate_net_premium(legs, snapshot.lot_size)
    net_credit, net_debit = split_net_premium(net_premium)
    max_profit, max_loss = calculate_max_profit_loss(curve, legs, snapshot.lot_size)
    breakevens = find_breakevens(curve)
    greeks = calculate_greeks(
        legs, snapshot.spot_price, snapshot.lot_size, snapshot.days_to_expiry
    )

    return StrategyMetrics(
        net_credit=net_credit,
        net_debit=net_debit,
        max_profit=max_profit,
        max_loss=max_loss,
        breakevens=tuple(breakevens),
        probability_of_profit=calculate_pop(breakevens, expected_move),
        risk_reward_ratio=calculate_risk_reward(max_profit, max_loss),
        required_margin=calculate_margin(
            legs, snapshot.spot_price, snapshot.lot_size, net_premium, margin_rate
        ),
        delta=greeks["delta"],
        gamma=greeks["gamma"],
        theta=greeks["theta"],
        vega=greeks["vega"],
        expected_move=expected_move,
    )


__all__ = [
    "calculate_net_premium",
    "split_net_premium",
    "tail_slopes",
    "calculate_max_profit_loss",
    "find_breakevens",
    "calculate_pop",
    "calculate_risk_reward",
    "calculate_margin",
    "calculate_greeks",
    "calculate_metrics",
]
