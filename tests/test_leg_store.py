import pytest

from payoffkit.errors import InvalidInputError
from payoffkit.leg_store import LegStore
from payoffkit.models import Action, OptionLeg, OptionType
from payoffkit.premium import estimate_premium, round_premium
from payoffkit.strategies import get_template


@pytest.fixture
def store(snapshot):
    return LegStore(snapshot)


def test_ladder_follows_snapshot(store):
    assert store.ladder.atm_strike == 24500
    assert store.ladder.strike_gap == 50
    assert len(store.ladder.strikes) == 31
    assert len(store) == 0


def test_add_default_is_atm_long_call(store):
    leg = store.add_default()
    assert leg.strike == 24500
    assert leg.option_type is OptionType.CALL
    assert leg.action is Action.BUY
    assert leg.lots == 1
    assert leg.premium == round_premium(estimate_premium(24500, 24500, "CE", 12.5, 14))
    assert [l.id for l in store] == [leg.id]


def test_add_rejects_off_ladder_strike(store, make_leg):
    with pytest.raises(InvalidInputError, match="not on the ladder"):
        store.add(make_leg(24525))
    with pytest.raises(InvalidInputError):
        store.add(make_leg(30000))
    assert len(store) == 0


def test_add_rejects_duplicate_id(store, make_leg):
    leg = make_leg(24500)
    store.add(leg)
    with pytest.raises(InvalidInputError, match="Duplicate"):
        store.add(leg)


def test_returned_legs_are_copies(store):
    leg = store.add_default()
    leg.lots = 9
    store.legs[0].lots = 7
    assert store.get(leg.id).lots == 1


def test_strike_change_reprices(store):
    leg = store.add_default()
    updated = store.update(leg.id, {"strike": 24700, "premium": 1.0})
    assert updated.strike == 24700
    assert updated.premium == round_premium(estimate_premium(24500, 24700, "CE", 12.5, 14))
    assert updated.id == leg.id


def test_option_type_change_reprices(store):
    leg = store.add_default()
    updated = store.update(leg.id, {"option_type": "PE", "strike": 24600})
    assert updated.option_type is OptionType.PUT
    assert updated.premium == round_premium(estimate_premium(24500, 24600, "PE", 12.5, 14))


def test_action_and_lots_keep_premium(store):
    leg = store.add_default()
    updated = store.update(leg.id, {"action": "SELL", "lots": 3})
    assert updated.action is Action.SELL
    assert updated.lots == 3
    assert updated.premium == leg.premium


@pytest.mark.parametrize(
    "changes",
    [
        {"premium": 10.0},
        {"id": "other"},
        {"strike": 24510},
        {"lots": 0},
        {"action": "HOLD"},
    ],
)
def test_rejected_updates_leave_leg_unchanged(store, changes):
    leg = store.add_default()
    with pytest.raises(InvalidInputError):
        store.update(leg.id, changes)
    assert store.get(leg.id) == leg


def test_unknown_leg_id(store):
    with pytest.raises(InvalidInputError, match="Unknown leg id"):
        store.update("leg-missing", {"lots": 2})
    with pytest.raises(InvalidInputError):
        store.remove("leg-missing")


def test_remove_and_reset(store):
    first = store.add_default()
    second = store.add(
        OptionLeg(strike=24600, option_type=OptionType.CALL, action=Action.SELL, premium=190.0)
    )
    store.remove(first.id)
    assert [l.id for l in store.legs] == [second.id]
    store.reset()
    assert store.legs == []


def test_apply_template_replaces_legs(store):
    store.add_default()
    legs = store.apply_template(get_template("iron_condor"))
    assert store.active_template == "iron_condor"
    assert [l.strike for l in store.legs] == [24300, 24400, 24600, 24700]
    assert [l.id for l in legs] == [l.id for l in store.legs]


def test_edit_clears_active_template(store):
    legs = store.apply_template(get_template("bull_call_spread"))
    store.update(legs[0].id, {"lots": 2})
    assert store.active_template is None


def test_failed_template_keeps_previous_legs(snapshot):
    narrow = LegStore(snapshot, strike_count=2)
    narrow.apply_template(get_template("long_straddle"))
    before = narrow.legs
    with pytest.raises(InvalidInputError):
        narrow.apply_template(get_template("iron_condor"))
    assert narrow.legs == before
    assert narrow.active_template == "long_straddle"


def test_supplied_premium_is_ignored_when_repricing(store):
    leg = store.add_default()
    updated = store.update(leg.id, {"strike": 24600, "premium": -1})
    assert updated.premium == round_premium(estimate_premium(24500, 24600, "CE", 12.5, 14))
    assert store.get(leg.id).premium == updated.premium
