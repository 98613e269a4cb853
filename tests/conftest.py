import sys

import pytest

from payoffkit.logutils import logger
from payoffkit.models import Action, OptionLeg, OptionType, UnderlyingSnapshot


@pytest.fixture
def snapshot():
    """NIFTY-like underlying used throughout the tests."""
    return UnderlyingSnapshot(
        spot_price=24500,
        lot_size=75,
        iv=12.5,
        days_to_expiry=14,
        symbol="NIFTY",
        strike_gap=50,
    )


@pytest.fixture
def make_leg():
    def _make(strike, option_type="CE", action="BUY", lots=1, premium=100.0, iv=12.5):
        return OptionLeg(
            strike=strike,
            option_type=OptionType.parse(option_type),
            action=Action.parse(action),
            lots=lots,
            premium=premium,
            iv=iv,
        )

    return _make


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch):
    """Keep tests independent of a developer's local configuration."""
    monkeypatch.delenv("PAYOFFKIT_CONFIG", raising=False)
    monkeypatch.delenv("PAYOFFKIT_DEBUG", raising=False)
    monkeypatch.delenv("PAYOFFKIT_LOG_LEVEL", raising=False)
    yield


@pytest.fixture
def reset_logging():
    yield
    logger.remove()
    logger.add(sys.stderr)
