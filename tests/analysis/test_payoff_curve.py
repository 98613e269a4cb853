import pytest

from payoffkit.errors import InvalidInputError
from payoffkit.payoff import calculate_payoff_at_price, generate_payoff_curve, sample_prices


def test_curve_spans_exact_window_and_increases(make_leg):
    legs = [make_leg(24500, "CE", premium=200)]
    curve = generate_payoff_curve(legs, 24500, 75, range_fraction=0.15, samples=101)
    assert len(curve) == 101
    assert curve[0].price == 24500 * (1 - 0.15)
    assert curve[-1].price == 24500 * (1 + 0.15)
    assert all(b.price > a.price for a, b in zip(curve, curve[1:]))


def test_curve_uses_configured_range_by_default(make_leg):
    curve = generate_payoff_curve([make_leg(24500)], 24500, 75)
    assert curve[0].price == pytest.approx(19600)
    assert curve[-1].price == pytest.approx(29400)
    assert len(curve) == 101


def test_empty_leg_set_gives_flat_curve():
    curve = generate_payoff_curve([], 24500, 75, range_fraction=0.2)
    assert curve
    assert all(point.pnl == 0 for point in curve)


def test_offsetting_legs_are_flat(make_leg):
    legs = [
        make_leg(24500, "CE", "BUY", premium=240),
        make_leg(24500, "CE", "SELL", premium=240),
    ]
    curve = generate_payoff_curve(legs, 24500, 75)
    assert all(point.pnl == 0 for point in curve)


def test_payoff_at_price_long_call(make_leg):
    legs = [make_leg(24500, "CE", premium=200, lots=2)]
    assert calculate_payoff_at_price(legs, 24000, 75) == -200 * 2 * 75
    assert calculate_payoff_at_price(legs, 25000, 75) == (500 - 200) * 2 * 75


def test_payoff_at_price_short_put(make_leg):
    legs = [make_leg(24500, "PE", "SELL", premium=150)]
    assert calculate_payoff_at_price(legs, 25000, 50) == 150 * 50
    assert calculate_payoff_at_price(legs, 24000, 50) == (150 - 500) * 50


@pytest.mark.parametrize(
    "spot,rng,samples",
    [(0, 0.2, 101), (24500, 0, 101), (24500, 1.0, 101), (24500, 0.2, 1), (24500, 0.2, 10.5)],
)
def test_sample_prices_rejects_invalid_input(spot, rng, samples):
    with pytest.raises(InvalidInputError):
        sample_prices(spot, rng, samples)


def test_curve_rejects_non_positive_lot_size(make_leg):
    with pytest.raises(InvalidInputError):
        generate_payoff_curve([make_leg(24500)], 24500, 0)
