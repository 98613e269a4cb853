"""Ordered, editable collection of option legs."""

from __future__ import annotations

import dataclasses
from typing import Any, Iterator, List, Mapping

from .config import get as cfg_get
from .errors import InvalidInputError
from .logutils import logger
from .models import Action, OptionLeg, OptionType, UnderlyingSnapshot
from .premium import estimate_premium, round_premium
from .strike_ladder import StrikeLadder, generate_strike_ladder
from .strategies.instantiate import instantiate_template

_EDITABLE_FIELDS = {"strike", "option_type", "action", "lots", "premium", "iv"}
_PRICING_FIELDS = {"strike", "option_type"}


class LegStore:
    """Hold the legs of the strategy being built against one snapshot.

    Premium is a derived field: whenever a leg's strike or option type
    changes it is re-estimated from the snapshot, overriding any premium the
    caller passed along.  Edits to action or lots leave it alone.
    """

    def __init__(
        self,
        snapshot: UnderlyingSnapshot,
        *,
        strike_gap: float | None = None,
        strike_count: int | None = None,
    ) -> None:
        gap = strike_gap if strike_gap is not None else snapshot.strike_gap
        if gap is None:
            gap = float(cfg_get("STRIKE_GAP", 50.0))
        self.snapshot = snapshot
        self.ladder: StrikeLadder = generate_strike_ladder(
            snapshot.spot_price, gap, strike_count
        )
        self._legs: List[OptionLeg] = []
        self.active_template: str | None = None

    # -- read access -----------------------------------------------------
    @property
    def legs(self) -> List[OptionLeg]:
        """Return a copy of the legs in insertion order."""
        return [dataclasses.replace(leg) for leg in self._legs]

    def __len__(self) -> int:
        return len(self._legs)

    def __iter__(self) -> Iterator[OptionLeg]:
        return iter(self.legs)

    def get(self, leg_id: str) -> OptionLeg:
        return dataclasses.replace(self._legs[self._index(leg_id)])

    # -- helpers ---------------------------------------------------------
    def _index(self, leg_id: str) -> int:
        for idx, leg in enumerate(self._legs):
            if leg.id == leg_id:
                return idx
        raise InvalidInputError(f"Unknown leg id: {leg_id}")

    def _check_strike(self, strike: float) -> None:
        if strike not in self.ladder:
            raise InvalidInputError(
                f"Strike {strike} is not on the ladder around ATM {self.ladder.atm_strike}"
            )

    def _price(self, strike: float, option_type: OptionType) -> float:
        snap = self.snapshot
        return round_premium(
            estimate_premium(snap.spot_price, strike, option_type, snap.iv, snap.days_to_expiry)
        )

    # -- edits -----------------------------------------------------------
    def add(self, leg: OptionLeg) -> OptionLeg:
        """Append ``leg`` and return the stored copy."""
        self._check_strike(leg.strike)
        if any(existing.id == leg.id for existing in self._legs):
            raise InvalidInputError(f"Duplicate leg id: {leg.id}")
        stored = dataclasses.replace(leg)
        self._legs.append(stored)
        self.active_template = None
        return dataclasses.replace(stored)

    def add_default(self) -> OptionLeg:
        """Add a one lot long call at the ATM strike."""
        atm = self.ladder.atm_strike
        leg = OptionLeg(
            strike=atm,
            option_type=OptionType.CALL,
            action=Action.BUY,
            lots=1,
            premium=self._price(atm, OptionType.CALL),
            iv=self.snapshot.iv,
        )
        return self.add(leg)

    def update(self, leg_id: str, changes: Mapping[str, Any]) -> OptionLeg:
        """Apply ``changes`` to the leg with ``leg_id``."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise InvalidInputError(f"Cannot update fields: {sorted(unknown)}")
        if "premium" in changes and not _PRICING_FIELDS & set(changes):
            raise InvalidInputError("premium is derived from strike and option type")

        reprice = bool(_PRICING_FIELDS & set(changes))
        fields = dict(changes)
        if reprice:
            fields.pop("premium", None)

        idx = self._index(leg_id)
        current = self._legs[idx]
        updated = dataclasses.replace(current, **fields)
        if "strike" in changes:
            self._check_strike(updated.strike)

        if reprice:
            premium = self._price(updated.strike, updated.option_type)
            logger.debug(
                f"Re-priced {leg_id} {updated.option_type.value} {updated.strike}: "
                f"{current.premium} -> {premium}"
            )
            updated.premium = premium

        self._legs[idx] = updated
        self.active_template = None
        return dataclasses.replace(updated)

    def remove(self, leg_id: str) -> None:
        del self._legs[self._index(leg_id)]
        self.active_template = None

    def reset(self) -> None:
        """Remove every leg."""
        self._legs.clear()
        self.active_template = None

    def apply_template(self, template: Any) -> List[OptionLeg]:
        """Replace the legs with an instantiation of ``template``."""
        legs = instantiate_template(
            template, self.ladder.atm_strike, self.ladder.strike_gap, self.snapshot
        )
        for leg in legs:
            self._check_strike(leg.strike)
        self._legs = legs
        self.active_template = getattr(template, "id", None)
        return self.legs


__all__ = ["LegStore"]
