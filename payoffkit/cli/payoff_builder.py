"""Build a strategy from a template and print its payoff metrics."""

from __future__ import annotations

import argparse
import json
from typing import Any, List, Sequence

from tabulate import tabulate

from payoffkit.config import get as cfg_get
from payoffkit.engine import compute_payoff_and_metrics
from payoffkit.errors import InvalidInputError
from payoffkit.leg_store import LegStore
from payoffkit.logutils import logger, setup_logging
from payoffkit.models import OptionLeg, PayoffAnalysis, UnderlyingSnapshot, is_unbounded
from payoffkit.strategies import StrategyTemplate, get_template, load_templates


def _fmt_money(value: float) -> str:
    return f"{value:,.2f}"


def _fmt_bound(value: Any, *, loss: bool = False) -> str:
    if is_unbounded(value):
        return "Unlimited"
    number = float(value)
    return _fmt_money(abs(number) if loss else number)


def _fmt_ratio(value: Any) -> str:
    if value is None:
        return "n/a"
    if is_unbounded(value):
        return "∞"
    return f"{value:.2f}"


def print_templates(templates: Sequence[StrategyTemplate]) -> None:
    rows = [
        [t.id, t.name, t.category.value, t.risk_level.value, len(t.legs)]
        for t in templates
    ]
    print(tabulate(rows, headers=["ID", "Name", "Category", "Risk", "Legs"], tablefmt="github"))


def print_legs(legs: Sequence[OptionLeg]) -> None:
    rows = [
        [leg.action.value, leg.lots, f"{leg.strike:g}", leg.option_type.value, f"{leg.premium:.2f}"]
        for leg in legs
    ]
    print(tabulate(rows, headers=["Action", "Lots", "Strike", "Type", "Premium"], tablefmt="github"))


def print_metrics(analysis: PayoffAnalysis) -> None:
    m = analysis.metrics
    low, high = analysis.one_sigma_range
    breakevens = ", ".join(f"{b:,.0f}" for b in m.breakevens) or "None"
    premium_label = "Net credit" if m.net_credit > 0 else "Net debit"
    premium_value = m.net_credit if m.net_credit > 0 else m.net_debit
    rows = [
        [premium_label, _fmt_money(premium_value)],
        ["Max profit", _fmt_bound(m.max_profit)],
        ["Max loss", _fmt_bound(m.max_loss, loss=True)],
        ["Risk/Reward", _fmt_ratio(m.risk_reward_ratio)],
        ["Breakevens", breakevens],
        ["Probability of profit", f"{m.probability_of_profit:.0f}%"],
        ["Margin (approx)", _fmt_money(m.required_margin)],
        ["1σ range", f"{low:,.0f} - {high:,.0f}"],
    ]
    print(tabulate(rows, tablefmt="github"))
    greeks = [[f"{m.delta:.2f}", f"{m.gamma:.4f}", f"{m.theta:.2f}", f"{m.vega:.2f}"]]
    print()
    print(tabulate(greeks, headers=["Delta", "Gamma", "Theta", "Vega"], tablefmt="github"))


def _snapshot_from_args(args: argparse.Namespace) -> UnderlyingSnapshot:
    return UnderlyingSnapshot(
        spot_price=args.spot,
        lot_size=args.lot_size,
        iv=args.iv,
        days_to_expiry=args.dte,
        symbol=args.symbol,
        strike_gap=args.strike_gap,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Options strategy payoff builder")
    parser.add_argument("template", nargs="?", help="Template id, e.g. iron_condor")
    parser.add_argument("--list", action="store_true", help="List available templates")
    parser.add_argument("--symbol", default=cfg_get("DEFAULT_SYMBOL", "NIFTY"))
    parser.add_argument("--spot", type=float, default=cfg_get("DEFAULT_SPOT", 24500.0))
    parser.add_argument("--lot-size", type=float, default=cfg_get("DEFAULT_LOT_SIZE", 75))
    parser.add_argument("--iv", type=float, default=cfg_get("DEFAULT_IV", 12.5), help="Implied volatility in percent")
    parser.add_argument("--dte", type=float, default=cfg_get("DEFAULT_DTE", 14), help="Days to expiry")
    parser.add_argument("--strike-gap", type=float, default=cfg_get("STRIKE_GAP", 50.0))
    parser.add_argument("--range", dest="range_fraction", type=float, default=None, help="Price range as a fraction of spot")
    parser.add_argument("--json", action="store_true", help="Print the analysis as JSON")
    return parser


def main(argv: List[str] | None = None) -> int:
    """CLI entry point for the payoff builder."""
    setup_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list or not args.template:
        print_templates(list(load_templates().values()))
        return 0

    try:
        template = get_template(args.template)
        snapshot = _snapshot_from_args(args)
        store = LegStore(snapshot, strike_gap=args.strike_gap)
        legs = store.apply_template(template)
        analysis = compute_payoff_and_metrics(
            legs, snapshot, range_fraction=args.range_fraction
        )
    except InvalidInputError as exc:
        logger.debug(f"payoff builder rejected input: {exc}")
        print(f"❌ {exc}")
        return 1

    if args.json:
        payload = {
            "template": template.id,
            "atm_strike": store.ladder.atm_strike,
            "legs": [leg.as_dict() for leg in legs],
            **analysis.to_dict(),
        }
        print(json.dumps(payload, indent=2))
        return 0

    print(f"\n{template.name} on {snapshot.symbol or 'underlying'} @ {snapshot.spot_price:,.2f}")
    print(f"ATM strike: {store.ladder.atm_strike:g}\n")
    print_legs(legs)
    print()
    print_metrics(analysis)
    return 0


if __name__ == "__main__":
    import sys

    sys.exit(main(sys.argv[1:]))
