"""Strike ladder construction around the at-the-money strike."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from .config import get as cfg_get
from .errors import InvalidInputError


@dataclass(frozen=True)
class StrikeLadder:
    """ATM strike plus the tradable strikes around it, ascending."""

    atm_strike: float
    strike_gap: float
    strikes: tuple[float, ...]

    def __contains__(self, strike: object) -> bool:
        try:
            value = float(strike)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False
        return any(math.isclose(value, s, rel_tol=0.0, abs_tol=1e-9 * max(1.0, s)) for s in self.strikes)

    def offset(self, ticks: int) -> float:
        """Return the strike ``ticks`` gaps away from ATM."""
        return self.atm_strike + ticks * self.strike_gap


def _validate(spot_price: float, strike_gap: float) -> None:
    for name, value in (("spot_price", spot_price), ("strike_gap", strike_gap)):
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            raise InvalidInputError(f"{name} must be a finite number, got {value!r}")
        if value <= 0:
            raise InvalidInputError(f"{name} must be positive, got {value}")


def get_atm_strike(spot_price: float, strike_gap: float) -> float:
    """Return the ladder strike nearest to ``spot_price``.

    Ties round up to the higher strike.
    The lowest positive strike is used when spot is below half a gap.
    """
    _validate(spot_price, strike_gap)
    return float(max(strike_gap, math.floor(spot_price / strike_gap + 0.5) * strike_gap))


def _ladder(atm: float, strike_gap: float, count: int) -> Iterable[float]:
    for k in range(-count, count + 1):
        strike = atm + k * strike_gap
        if strike > 0:
            yield strike


def generate_strike_ladder(
    spot_price: float,
    strike_gap: float | None = None,
    count: int | None = None,
) -> StrikeLadder:
    """Return the ATM strike and ``count`` strikes on either side of it.

    Strikes that would fall to zero or below (possible for a wide gap on a
    low priced underlying) are left out of the ladder.
    """

    if strike_gap is None:
        strike_gap = float(cfg_get("STRIKE_GAP", 50.0))
    if count is None:
        count = int(cfg_get("STRIKE_COUNT", 15))
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise InvalidInputError(f"count must be a non-negative integer, got {count!r}")

    atm = get_atm_strike(spot_price, strike_gap)
    strikes = tuple(_ladder(atm, strike_gap, count))
    return StrikeLadder(atm_strike=atm, strike_gap=float(strike_gap), strikes=strikes)


__all__ = ["StrikeLadder", "get_atm_strike", "generate_strike_ladder"]
