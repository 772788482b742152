"""
Tests for ATR stop-loss / take-profit sizing.
"""

import pytest

from leverage_calculator.config import Direction
from leverage_calculator.risk_sizer import (
    RiskSizer,
    default_take_profit_multiple,
    format_risk_reward,
    risk_reward_ratio,
)


@pytest.fixture
def sizer(eurusd_config):
    return RiskSizer(eurusd_config)


# =============================================================================
# LEVELS
# =============================================================================

class TestLevels:

    def test_long_with_take_profit(self, sizer):
        r = sizer.calculate(entry=1.1000, direction='long', atr=0.0050, sl_multiple=1.5, tp_multiple=3)

        assert r.stop_distance == pytest.approx(0.0075)
        assert r.stop_price == pytest.approx(1.0925)
        assert r.tp_distance == pytest.approx(0.0150)
        assert r.tp_price == pytest.approx(1.1150)
        assert r.risk_reward == pytest.approx(2)
        assert r.risk_reward_label == "1 : 2"

    def test_short_levels_mirror(self, sizer):
        r = sizer.calculate(entry=1.1000, direction=Direction.SHORT, atr=0.0050, sl_multiple=1.5, tp_multiple=3)

        assert r.stop_price == pytest.approx(1.1075)
        assert r.tp_price == pytest.approx(1.0850)

    def test_dollar_exposure(self, sizer):
        r = sizer.calculate(entry=1.1000, direction='long', atr=0.0050, sl_multiple=1.5, tp_multiple=3)

        # 10% of 10k at 10x on 100k lots -> 0.09 lots
        assert r.lots == pytest.approx(0.09)
        assert r.units == pytest.approx(9000)
        assert r.stop_loss == pytest.approx(67.5)
        assert r.stop_loss_pct == pytest.approx(0.675)
        assert r.take_profit == pytest.approx(135)
        assert r.take_profit_pct == pytest.approx(1.35)

    def test_distance_percent_of_entry(self, sizer):
        r = sizer.calculate(entry=2.0, direction='long', atr=0.01, sl_multiple=2, tp_multiple=4)

        assert r.stop_distance_pct == pytest.approx(1.0)
        assert r.tp_distance_pct == pytest.approx(2.0)

    @pytest.mark.parametrize("tp", [None, 0, -1, float('nan')])
    def test_take_profit_disabled(self, sizer, tp):
        r = sizer.calculate(entry=1.1, direction='long', atr=0.005, sl_multiple=1.5, tp_multiple=tp)

        assert r is not None
        assert not r.has_take_profit
        assert r.tp_price is None
        assert r.take_profit is None
        assert r.risk_reward is None
        assert r.risk_reward_label is None


# =============================================================================
# DEGENERATE INPUTS
# =============================================================================

class TestDegenerateInputs:

    @pytest.mark.parametrize("entry,atr,sl", [
        (0, 0.005, 1.5),
        (-1.1, 0.005, 1.5),
        (1.1, 0, 1.5),
        (1.1, -0.005, 1.5),
        (1.1, 0.005, 0),
        (1.1, float('nan'), 1.5),
        (float('nan'), 0.005, 1.5),
        (1.1, 0.005, None),
    ])
    def test_no_result(self, sizer, entry, atr, sl):
        assert sizer.calculate(entry=entry, direction='long', atr=atr, sl_multiple=sl, tp_multiple=3) is None


# =============================================================================
# RATIO HELPERS
# =============================================================================

class TestRatioHelpers:

    def test_ratio(self):
        assert risk_reward_ratio(1.5, 3) == pytest.approx(2)
        assert risk_reward_ratio(2, 3) == pytest.approx(1.5)
        assert risk_reward_ratio(0, 3) is None
        assert risk_reward_ratio(1.5, None) is None

    @pytest.mark.parametrize("ratio,label", [
        (2.0, "1 : 2"),
        (1.5, "1 : 1.50"),
        (1 / 3, "1 : 0.33"),
        (None, None),
    ])
    def test_format(self, ratio, label):
        assert format_risk_reward(ratio) == label

    def test_default_take_profit_fills_twice_stop(self):
        assert default_take_profit_multiple(1.5) == pytest.approx(3)
        assert default_take_profit_multiple(1.5, 0) == pytest.approx(3)

    def test_default_take_profit_keeps_existing(self):
        assert default_take_profit_multiple(1.5, 4) == 4

    def test_default_take_profit_needs_stop(self):
        assert default_take_profit_multiple(0, None) is None
        assert default_take_profit_multiple(None, 2) == 2
