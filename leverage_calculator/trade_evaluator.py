"""
Leverage Calculator - Trade Evaluator
Sizing, margin, P&L and liquidation distance for a single trade.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Union

from .config import AccountConfig, Direction
from .position_sizer import PositionSizer


logger = logging.getLogger(__name__)


@dataclass
class TradeResult:
    """Outcome of one executed trade. Values are kept at full precision."""
    direction: Direction
    balance_before: float
    trade_capital: float
    raw_lots: float
    lots: float
    units: float
    margin: float
    contract_value: float
    effective_leverage: float
    entry: float
    exit: float
    profit: float
    profit_pct: float
    free_margin: float
    max_dd_price: float        # Adverse move that exhausts free margin
    max_dd_pct: float
    liquidation_price: float
    balance_after: float

    @property
    def won(self) -> bool:
        return self.profit > 0

    def to_dict(self) -> Dict[str, Any]:
        row = asdict(self)
        row['direction'] = self.direction.value
        return row


class TradeEvaluator:
    """
    Evaluates one trade against the current account balance.

    Steps:
    1. Commit balance × margin ratio as trade capital
    2. Size lots from trade capital and leverage
    3. Derive margin, notional and effective leverage
    4. Sign the price move by direction for P&L
    5. Free margin / units gives the tolerable adverse move
    6. Liquidation price sits that far against the position

    Balances are not clamped: losses may drive the balance and free
    margin negative.
    """

    def __init__(self, config: AccountConfig):
        self.config = config
        self.position_sizer = PositionSizer()

    def evaluate(
        self,
        balance: float,
        entry: float,
        exit_price: float,
        direction: Union[str, Direction],
        sizing_balance: Optional[float] = None,
    ) -> TradeResult:
        """
        Evaluate a trade.

        Args:
            balance: Account balance before the trade
            entry: Entry price
            exit_price: Exit price
            direction: Trade direction
            sizing_balance: Balance the capital allocation is sized
                against (defaults to ``balance``)

        Returns:
            TradeResult with the full trade outcome
        """
        cfg = self.config
        direction = Direction.parse(direction)
        if sizing_balance is None:
            sizing_balance = balance

        trade_capital = sizing_balance * cfg.margin_ratio

        size = self.position_sizer.calculate(
            risk_capital=trade_capital,
            leverage=cfg.leverage,
            contract_size=cfg.contract_size,
            entry_price=entry,
            lot_step=cfg.lot_step,
        )
        units = size.units

        margin = units * entry / cfg.leverage
        contract_value = units * entry
        effective_leverage = contract_value / balance if balance != 0 else 0.0

        if direction is Direction.LONG:
            price_diff = exit_price - entry
        else:
            price_diff = entry - exit_price

        profit = units * price_diff
        profit_pct = profit / balance * 100 if balance != 0 else 0.0

        free_margin = balance - margin
        max_dd_price = free_margin / units if units > 0 else 0.0
        max_dd_pct = max_dd_price / entry * 100

        if direction is Direction.LONG:
            liquidation_price = entry - max_dd_price
        else:
            liquidation_price = entry + max_dd_price

        result = TradeResult(
            direction=direction,
            balance_before=balance,
            trade_capital=trade_capital,
            raw_lots=size.raw_lots,
            lots=size.lots,
            units=units,
            margin=margin,
            contract_value=contract_value,
            effective_leverage=effective_leverage,
            entry=entry,
            exit=exit_price,
            profit=profit,
            profit_pct=profit_pct,
            free_margin=free_margin,
            max_dd_price=max_dd_price,
            max_dd_pct=max_dd_pct,
            liquidation_price=liquidation_price,
            balance_after=balance + profit,
        )

        logger.debug(
            f"{direction.value.upper()} {size.lots:g} lots @ {entry} -> {exit_price} | "
            f"P&L: {profit:.2f} | Liq: {liquidation_price:.5f}"
        )

        return result
