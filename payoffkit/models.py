"""Data model shared by the payoff engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union
from uuid import uuid4

from .errors import InvalidInputError


class OptionType(str, Enum):
    """Option right, spelled the way exchange option chains label it."""

    CALL = "CE"
    PUT = "PE"

    @classmethod
    def parse(cls, value: Any) -> "OptionType":
        if isinstance(value, OptionType):
            return value
        key = str(value).strip().upper()
        if key in {"CE", "C", "CALL"}:
            return cls.CALL
        if key in {"PE", "P", "PUT"}:
            return cls.PUT
        raise InvalidInputError(f"Unknown option type: {value!r}")

    def __str__(self) -> str:  # pragma: no cover - trivial
        return str(self.value)


class Action(str, Enum):
    """Whether a leg is bought or written."""

    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def parse(cls, value: Any) -> "Action":
        if isinstance(value, Action):
            return value
        key = str(value).strip().upper()
        if key in {"BUY", "LONG"}:
            return cls.BUY
        if key in {"SELL", "SHORT"}:
            return cls.SELL
        raise InvalidInputError(f"Unknown action: {value!r}")

    @property
    def direction(self) -> int:
        """Return +1 for long legs and -1 for short legs."""
        return 1 if self is Action.BUY else -1

    def __str__(self) -> str:  # pragma: no cover - trivial
        return str(self.value)


def _require_finite(name: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return number


def _require_lots(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidInputError(f"lots must be a positive integer, got {value!r}")
    number = _require_finite("lots", value)
    if not number.is_integer() or number < 1:
        raise InvalidInputError(f"lots must be a positive integer, got {value!r}")
    return int(number)


def new_leg_id() -> str:
    """Return a fresh opaque leg identifier."""
    return f"leg-{uuid4().hex[:12]}"


@dataclass
class OptionLeg:
    """One option position of a strategy."""

    strike: float
    option_type: OptionType
    action: Action
    lots: int = 1
    premium: float = 0.0
    iv: float = 0.0
    id: str = field(default_factory=new_leg_id)

    def __post_init__(self) -> None:
        self.strike = _require_finite("strike", self.strike)
        if self.strike <= 0:
            raise InvalidInputError(f"strike must be positive, got {self.strike}")
        self.option_type = OptionType.parse(self.option_type)
        self.action = Action.parse(self.action)
        self.lots = _require_lots(self.lots)
        self.premium = _require_finite("premium", self.premium)
        if self.premium < 0:
            raise InvalidInputError(f"premium must be non-negative, got {self.premium}")
        self.iv = _require_finite("iv", self.iv)
        if self.iv < 0:
            raise InvalidInputError(f"iv must be non-negative, got {self.iv}")

    @property
    def direction(self) -> int:
        return self.action.direction

    @property
    def is_call(self) -> bool:
        return self.option_type is OptionType.CALL

    def intrinsic(self, price: float) -> float:
        """Return the expiry value per unit at ``price``."""
        if self.is_call:
            return max(0.0, price - self.strike)
        return max(0.0, self.strike - price)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "strike": self.strike,
            "option_type": self.option_type.value,
            "action": self.action.value,
            "lots": self.lots,
            "premium": self.premium,
            "iv": self.iv,
        }


@dataclass(frozen=True)
class UnderlyingSnapshot:
    """Market parameters of the underlying at the time of analysis.

    ``iv`` is the annualised implied volatility in percent (12.5 means
    12.5%). ``strike_gap`` is optional and only used where a caller does not
    pass one explicitly.
    """

    spot_price: float
    lot_size: float
    iv: float
    days_to_expiry: float
    symbol: str = ""
    strike_gap: float | None = None

    def __post_init__(self) -> None:
        spot = _require_finite("spot_price", self.spot_price)
        lot_size = _require_finite("lot_size", self.lot_size)
        iv = _require_finite("iv", self.iv)
        dte = _require_finite("days_to_expiry", self.days_to_expiry)
        if spot <= 0:
            raise InvalidInputError(f"spot_price must be positive, got {spot}")
        if lot_size <= 0:
            raise InvalidInputError(f"lot_size must be positive, got {lot_size}")
        if iv < 0:
            raise InvalidInputError(f"iv must be non-negative, got {iv}")
        if dte < 0:
            raise InvalidInputError(f"days_to_expiry must be non-negative, got {dte}")
        if self.strike_gap is not None:
            gap = _require_finite("strike_gap", self.strike_gap)
            if gap <= 0:
                raise InvalidInputError(f"strike_gap must be positive, got {gap}")
            object.__setattr__(self, "strike_gap", gap)
        object.__setattr__(self, "spot_price", spot)
        object.__setattr__(self, "lot_size", lot_size)
        object.__setattr__(self, "iv", iv)
        object.__setattr__(self, "days_to_expiry", dte)

    @property
    def expected_move(self) -> float:
        """One standard deviation move of the underlying until expiry."""
        return self.spot_price * (self.iv / 100) * math.sqrt(self.days_to_expiry / 365)


class _Unbounded:
    """Marker for a profit or loss with no finite bound."""

    _instance: "_Unbounded | None" = None

    def __new__(cls) -> "_Unbounded":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    is_unbounded = True

    def __repr__(self) -> str:
        return "UNBOUNDED"

    def __str__(self) -> str:
        return "unbounded"

    def __float__(self) -> float:
        raise TypeError("UNBOUNDED has no numeric value")

    def __reduce__(self) -> str:
        return "UNBOUNDED"


UNBOUNDED = _Unbounded()


@dataclass(frozen=True, slots=True)
class Bounded:
    """Finite profit or loss value."""

    value: float

    is_unbounded = False

    def __float__(self) -> float:
        return float(self.value)


Bound = Union[Bounded, _Unbounded]


def is_unbounded(value: Any) -> bool:
    return value is UNBOUNDED


@dataclass(frozen=True, slots=True)
class PayoffPoint:
    """Expiry P&L of the full leg set at ``price``."""

    price: float
    pnl: float


@dataclass(frozen=True)
class StrategyMetrics:
    """Risk summary derived from a payoff curve and its legs."""

    net_credit: float
    net_debit: float
    max_profit: Bound
    max_loss: Bound
    breakevens: tuple[float, ...]
    probability_of_profit: float
    risk_reward_ratio: float | _Unbounded | None
    required_margin: float
    delta: float
    gamma: float
    theta: float
    vega: float
    expected_move: float = 0.0

    @property
    def net_premium(self) -> float:
        """Signed premium: positive for a credit, negative for a debit."""
        return self.net_credit - self.net_debit

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON friendly representation of the metrics."""

        def _bound(value: Bound) -> float | str:
            return "unbounded" if is_unbounded(value) else float(value)

        ratio = self.risk_reward_ratio
        return {
            "net_credit": self.net_credit,
            "net_debit": self.net_debit,
            "max_profit": _bound(self.max_profit),
            "max_loss": _bound(self.max_loss),
            "breakevens": list(self.breakevens),
            "probability_of_profit": self.probability_of_profit,
            "risk_reward_ratio": "unbounded" if is_unbounded(ratio) else ratio,
            "required_margin": self.required_margin,
            "delta": self.delta,
            "gamma": self.gamma,
            "theta": self.theta,
            "vega": self.vega,
            "expected_move": self.expected_move,
        }


@dataclass(frozen=True)
class PayoffAnalysis:
    """Payoff curve and metrics computed from the same leg set."""

    curve: tuple[PayoffPoint, ...]
    metrics: StrategyMetrics
    spot_price: float

    @property
    def one_sigma_range(self) -> tuple[float, float]:
        move = self.metrics.expected_move
        return self.spot_price - move, self.spot_price + move

    def to_dict(self) -> dict[str, Any]:
        low, high = self.one_sigma_range
        return {
            "curve": [{"price": p.price, "pnl": p.pnl} for p in self.curve],
            "metrics": self.metrics.to_dict(),
            "one_sigma_range": [low, high],
        }


__all__ = [
    "OptionType",
    "Action",
    "OptionLeg",
    "UnderlyingSnapshot",
    "Bounded",
    "UNBOUNDED",
    "Bound",
    "is_unbounded",
    "PayoffPoint",
    "StrategyMetrics",
    "PayoffAnalysis",
    "new_leg_id",
]
