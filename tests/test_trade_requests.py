"""
Tests for trade request resolution and row gathering.
"""

import numpy as np
import pytest

from leverage_calculator.config import Direction
from leverage_calculator.trade_requests import (
    ResolvedTrade,
    TradeMode,
    TradeRequest,
    gather_trades,
    load_trades_csv,
    percent_to_exit,
)


# =============================================================================
# RESOLUTION
# =============================================================================

class TestResolve:

    def test_price_request(self):
        res = TradeRequest.at_price(1.1, 1.105).resolve(Direction.LONG)
        assert res == ResolvedTrade(1.1, 1.105, Direction.LONG)

    def test_direction_override(self):
        res = TradeRequest.at_price(1.1, 1.09, 'short').resolve(Direction.LONG)
        assert res.direction is Direction.SHORT

    def test_default_direction_applies(self):
        res = TradeRequest.at_price(1.1, 1.09).resolve(Direction.SHORT)
        assert res.direction is Direction.SHORT

    def test_percent_long(self):
        res = TradeRequest.by_percent(100, 5).resolve(Direction.LONG)
        assert res.exit_price == pytest.approx(105)

    def test_percent_short(self):
        res = TradeRequest.by_percent(100, 2, Direction.SHORT).resolve(Direction.LONG)
        assert res.exit_price == pytest.approx(98)

    def test_negative_percent_is_a_loss(self):
        res = TradeRequest.by_percent(100, -3).resolve(Direction.LONG)
        assert res.exit_price == pytest.approx(97)

    def test_percent_matches_explicit_exit(self):
        exit_price = percent_to_exit(1.1, 0.5, Direction.LONG)
        by_pct = TradeRequest.by_percent(1.1, 0.5).resolve(Direction.LONG)
        by_price = TradeRequest.at_price(1.1, exit_price).resolve(Direction.LONG)

        assert by_pct == by_price

    @pytest.mark.parametrize("request_", [
        TradeRequest.at_price(0, 1.1),
        TradeRequest.at_price(-1.1, 1.1),
        TradeRequest.at_price(1.1, 0),
        TradeRequest.at_price(1.1, float('nan')),
        TradeRequest.at_price(float('nan'), 1.1),
        TradeRequest(mode=TradeMode.PRICE, entry=1.1),
        TradeRequest.by_percent(0, 5),
        TradeRequest.by_percent(1.1, float('nan')),
        TradeRequest(mode=TradeMode.PERCENT, entry=1.1),
    ])
    def test_invalid_requests_resolve_to_none(self, request_):
        assert request_.resolve(Direction.LONG) is None

    def test_zero_percent_is_valid(self):
        res = TradeRequest.by_percent(1.1, 0).resolve(Direction.LONG)
        assert res.exit_price == pytest.approx(1.1)

    @pytest.mark.parametrize("entry,exit_price", [
        (np.int64(100), np.int64(110)),
        (np.float32(1.1), np.float32(1.105)),
        (np.float64(1.1), np.float64(1.105)),
    ])
    def test_numpy_scalars_resolve(self, entry, exit_price):
        res = TradeRequest.at_price(entry, exit_price).resolve(Direction.LONG)

        assert res is not None
        assert type(res.entry) is float
        assert type(res.exit_price) is float
        assert res.entry == pytest.approx(float(entry))

    def test_numpy_nan_rejected(self):
        assert TradeRequest.at_price(np.float64('nan'), 1.1).resolve(Direction.LONG) is None

    def test_bool_is_not_a_price(self):
        assert TradeRequest.at_price(True, 1.1).resolve(Direction.LONG) is None


class TestDirectionNormalisation:

    def test_request_direction_text(self):
        req = TradeRequest(mode=TradeMode.PRICE, entry=1.1, exit_price=1.105, direction="long")
        assert req.direction is Direction.LONG
        assert req.resolve(Direction.SHORT).direction is Direction.LONG

    def test_resolved_trade_direction_text(self):
        assert ResolvedTrade(1.1, 1.09, "SHORT").direction is Direction.SHORT

    def test_default_direction_text(self):
        assert TradeRequest.at_price(1.1, 1.09).resolve("short").direction is Direction.SHORT

    def test_unknown_direction_rejected(self):
        with pytest.raises(ValueError):
            TradeRequest(mode=TradeMode.PRICE, entry=1.1, exit_price=1.2, direction="flat")

    def test_percent_to_exit_accepts_text(self):
        assert percent_to_exit(100, 2, "short") == pytest.approx(98)


# =============================================================================
# ROW GATHERING
# =============================================================================

class TestGatherTrades:

    def test_price_rows(self):
        rows = [
            {'entry': '1.1', 'exit': '1.105'},
            {'entry': '', 'exit': '1.2'},
            {'entry': '1.2', 'exit': 'abc'},
            {'entry': '1.1', 'exit': '1.09', 'direction': 'short'},
            {'entry': '-5', 'exit': '1.0'},
        ]
        trades = gather_trades(rows, TradeMode.PRICE)

        assert len(trades) == 2
        assert trades[0].entry == pytest.approx(1.1)
        assert trades[0].exit_price == pytest.approx(1.105)
        assert trades[0].direction is Direction.LONG
        assert trades[1].direction is Direction.SHORT

    def test_percent_rows(self):
        rows = [
            {'entry': '100', 'pct': '-5'},
            {'entry': '100', 'pct': ''},
            {'entry': 100.0, 'pct': 2.5, 'direction': 'SHORT'},
        ]
        trades = gather_trades(rows, 'pct')

        assert len(trades) == 2
        assert trades[0].move_pct == pytest.approx(-5)
        assert trades[1].direction is Direction.SHORT

    def test_invalid_direction_row_dropped(self):
        rows = [{'entry': '1.1', 'exit': '1.2', 'direction': 'sideways'}]
        assert gather_trades(rows) == []

    def test_default_direction_used_for_blank(self):
        rows = [{'entry': '1.1', 'exit': '1.2', 'direction': ''}]
        trades = gather_trades(rows, default_direction=Direction.SHORT)
        assert trades[0].direction is Direction.SHORT

    def test_load_csv(self, tmp_path):
        path = tmp_path / "trades.csv"
        path.write_text(
            "Entry,Exit,Direction\n"
            "1.1000,1.1050,long\n"
            "0,1.1050,long\n"
            "1.1000,1.0900,short\n"
        )
        trades = load_trades_csv(path)

        assert len(trades) == 2
        assert trades[1].direction is Direction.SHORT

    def test_load_csv_requires_entry_column(self, tmp_path):
        path = tmp_path / "trades.csv"
        path.write_text("price,exit\n1.1,1.2\n")

        with pytest.raises(ValueError, match="entry"):
            load_trades_csv(path)
