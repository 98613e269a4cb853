"""Expand a strategy template into concrete option legs."""

from __future__ import annotations

import math
from typing import Any, List, Sequence

from ..errors import InvalidInputError, TemplateError
from ..logutils import logger
from ..models import Action, OptionLeg, OptionType, UnderlyingSnapshot
from ..premium import estimate_premium, round_premium


def _validated_offsets(legs: Sequence[Any]) -> List[tuple[int, OptionType, Action, int]]:
    """Return normalized leg tuples or raise before any leg is built."""

    result: List[tuple[int, OptionType, Action, int]] = []
    for idx, leg in enumerate(legs):
        offset = getattr(leg, "strike_offset", None)
        if isinstance(offset, bool) or not isinstance(offset, (int, float)):
            raise TemplateError(f"leg {idx}: strike_offset must be numeric, got {offset!r}")
        if not math.isfinite(offset) or float(offset) != int(offset):
            raise TemplateError(f"leg {idx}: strike_offset must be a whole number of gaps, got {offset!r}")
        try:
            right = OptionType.parse(getattr(leg, "option_type", None))
            action = Action.parse(getattr(leg, "action", None))
        except InvalidInputError as exc:
            raise TemplateError(f"leg {idx}: {exc}") from exc
        lots = getattr(leg, "lots", 1)
        if isinstance(lots, bool) or not isinstance(lots, int) or lots < 1:
            raise TemplateError(f"leg {idx}: lots must be a positive integer, got {lots!r}")
        result.append((int(offset), right, action, lots))
    return result


def instantiate_template(
    template: Any,
    atm_strike: float,
    strike_gap: float,
    snapshot: UnderlyingSnapshot,
) -> List[OptionLeg]:
    """Return new legs for ``template`` priced against ``snapshot``.

    ``template`` is any object with a ``legs`` sequence whose items expose
    ``strike_offset``, ``option_type``, ``action`` and ``lots``.  The whole
    template is validated first, so a malformed template yields no legs at
    all.  Legs come back in template order.
    """

    if not isinstance(strike_gap, (int, float)) or not math.isfinite(strike_gap) or strike_gap <= 0:
        raise InvalidInputError(f"strike_gap must be positive, got {strike_gap!r}")
    if not isinstance(atm_strike, (int, float)) or not math.isfinite(atm_strike) or atm_strike <= 0:
        raise InvalidInputError(f"atm_strike must be positive, got {atm_strike!r}")

    raw_legs = getattr(template, "legs", None)
    if not raw_legs:
        raise TemplateError(f"template {getattr(template, 'id', template)!r} has no legs")
    specs = _validated_offsets(raw_legs)

    legs: List[OptionLeg] = []
    for offset, right, action, lots in specs:
        strike = atm_strike + offset * strike_gap
        if strike <= 0:
            raise TemplateError(
                f"offset {offset} from ATM {atm_strike} gives non-positive strike {strike}"
            )
        premium = estimate_premium(
            snapshot.spot_price, strike, right, snapshot.iv, snapshot.days_to_expiry
        )
        legs.append(
            OptionLeg(
                strike=strike,
                option_type=right,
                action=action,
                lots=lots,
                premium=round_premium(premium),
                iv=snapshot.iv,
            )
        )

    logger.debug(
        f"Instantiated template {getattr(template, 'id', '?')} at ATM {atm_strike}: "
        f"{len(legs)} legs"
    )
    return legs


__all__ = ["instantiate_template"]
