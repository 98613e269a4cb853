"""Options strategy payoff and risk metrics engine.

The four entry points used by front ends are re-exported here:
:func:`generate_strike_ladder`, :func:`estimate_premium`,
:func:`instantiate_template` and :func:`compute_payoff_and_metrics`.
"""

from .engine import (
    compute_payoff_and_metrics,
    estimate_premium,
    generate_strike_ladder,
    instantiate_template,
)
from .errors import InvalidInputError, TemplateError
from .models import (
    UNBOUNDED,
    Action,
    Bounded,
    OptionLeg,
    OptionType,
    PayoffAnalysis,
    PayoffPoint,
    StrategyMetrics,
    UnderlyingSnapshot,
    is_unbounded,
)

__all__ = [
    "compute_payoff_and_metrics",
    "estimate_premium",
    "generate_strike_ladder",
    "instantiate_template",
    "InvalidInputError",
    "TemplateError",
    "UNBOUNDED",
    "Action",
    "Bounded",
    "OptionLeg",
    "OptionType",
    "PayoffAnalysis",
    "PayoffPoint",
    "StrategyMetrics",
    "UnderlyingSnapshot",
    "is_unbounded",
]
