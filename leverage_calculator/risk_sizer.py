"""
Leverage Calculator - Risk Sizer
ATR-based stop-loss / take-profit levels and dollar exposure.

Uses the same lot sizing as the portfolio runner, applied to the
account principal.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

from .config import AccountConfig, Direction
from .position_sizer import PositionSizer


logger = logging.getLogger(__name__)


@dataclass
class RiskResult:
    """Stop-loss / take-profit sizing result."""
    direction: Direction
    entry: float
    atr: float
    lots: float
    units: float

    # Stop loss
    sl_multiple: float
    stop_distance: float
    stop_distance_pct: float   # Distance as % of entry
    stop_price: float
    stop_loss: float           # Dollar loss at stop
    stop_loss_pct: float       # Loss as % of principal

    # Take profit (None when disabled)
    tp_multiple: Optional[float] = None
    tp_distance: Optional[float] = None
    tp_distance_pct: Optional[float] = None
    tp_price: Optional[float] = None
    take_profit: Optional[float] = None
    take_profit_pct: Optional[float] = None

    risk_reward: Optional[float] = None

    @property
    def has_take_profit(self) -> bool:
        return self.tp_multiple is not None

    @property
    def risk_reward_label(self) -> Optional[str]:
        return format_risk_reward(self.risk_reward)


def _valid(value) -> bool:
    return value is not None and not math.isnan(value) and value > 0


def risk_reward_ratio(sl_multiple: Optional[float], tp_multiple: Optional[float]) -> Optional[float]:
    """Reward per unit of risk, or None unless both multiples are positive."""
    if _valid(sl_multiple) and _valid(tp_multiple):
        return tp_multiple / sl_multiple
    return None


def format_risk_reward(ratio: Optional[float]) -> Optional[str]:
    """Render as '1 : r'; whole ratios print bare, others with two decimals."""
    if ratio is None:
        return None
    if float(ratio).is_integer():
        return f"1 : {int(ratio)}"
    return f"1 : {ratio:.2f}"


def default_take_profit_multiple(
    sl_multiple: Optional[float],
    current_tp: Optional[float] = None,
) -> Optional[float]:
    """Suggest 2× the stop multiple when no take-profit multiple is set."""
    if _valid(sl_multiple) and not _valid(current_tp):
        return sl_multiple * 2
    return current_tp


class RiskSizer:
    """
    ATR stop/target sizing.

    Formula:
        Stop Distance = ATR × SL Multiple
        Target Distance = ATR × TP Multiple
        Stop Loss ($) = Units × Stop Distance

    Lots are sized from principal × margin ratio, not the running balance.
    """

    def __init__(self, config: AccountConfig):
        self.config = config
        self.position_sizer = PositionSizer()

    def calculate(
        self,
        entry: float,
        direction: Union[str, Direction],
        atr: float,
        sl_multiple: float,
        tp_multiple: Optional[float] = None,
    ) -> Optional[RiskResult]:
        """
        Calculate stop-loss and take-profit levels.

        Args:
            entry: Entry price
            direction: Trade direction
            atr: Average True Range
            sl_multiple: Stop distance in ATRs
            tp_multiple: Target distance in ATRs (None/0 disables)

        Returns:
            RiskResult, or None for degenerate inputs
        """
        if not (_valid(entry) and _valid(atr) and _valid(sl_multiple)):
            return None

        direction = Direction.parse(direction)
        cfg = self.config
        principal = cfg.principal
        sign = direction.sign

        stop_distance = atr * sl_multiple
        stop_price = entry - sign * stop_distance

        size = self.position_sizer.calculate(
            risk_capital=principal * cfg.margin_ratio,
            leverage=cfg.leverage,
            contract_size=cfg.contract_size,
            entry_price=entry,
            lot_step=cfg.lot_step,
        )
        units = size.units

        stop_loss = units * stop_distance
        stop_loss_pct = stop_loss / principal * 100 if principal > 0 else 0.0

        result = RiskResult(
            direction=direction,
            entry=entry,
            atr=atr,
            lots=size.lots,
            units=units,
            sl_multiple=sl_multiple,
            stop_distance=stop_distance,
            stop_distance_pct=stop_distance / entry * 100,
            stop_price=stop_price,
            stop_loss=stop_loss,
            stop_loss_pct=stop_loss_pct,
        )

        if _valid(tp_multiple):
            tp_distance = atr * tp_multiple
            take_profit = units * tp_distance

            result.tp_multiple = tp_multiple
            result.tp_distance = tp_distance
            result.tp_distance_pct = tp_distance / entry * 100
            result.tp_price = entry + sign * tp_distance
            result.take_profit = take_profit
            result.take_profit_pct = take_profit / principal * 100 if principal > 0 else 0.0
            result.risk_reward = risk_reward_ratio(sl_multiple, tp_multiple)

        logger.debug(
            f"Risk | {direction.value.upper()} {size.lots:g} lots @ {entry} | "
            f"SL {stop_price:.5f} (-${stop_loss:.2f})"
            + (f" | TP {result.tp_price:.5f} (+${result.take_profit:.2f})" if result.has_take_profit else "")
        )

        return result
