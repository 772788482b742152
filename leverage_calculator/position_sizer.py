"""
Leverage Calculator - Position Sizer
Converts risk capital into a lot count quantized to the lot step.
"""

import math
from dataclasses import dataclass

import numpy as np


# Step counts within this distance of the next integer round up
# (0.29 / 0.01 evaluates to 28.999...).
STEP_TOLERANCE = 1e-9


@dataclass
class LotSize:
    """Position sizing result."""
    raw_lots: float
    lots: float
    steps: int
    units: float

    def __repr__(self):
        return (
            f"LotSize(lots={self.lots:g}, "
            f"raw={self.raw_lots:.4f}, "
            f"units={self.units:g})"
        )


class PositionSizer:
    """
    Leverage-based position sizing.

    Formula:
        Raw Lots = (Capital × Leverage) / (Contract Size × Entry Price)
        Lots     = max(Step, floor(Raw Lots / Step) × Step)

    Constraints:
        - Minimum one lot step, never zero
        - Rounded down otherwise, so exposure only shrinks below target
    """

    def calculate(
        self,
        risk_capital: float,
        leverage: float,
        contract_size: float,
        entry_price: float,
        lot_step: float,
    ) -> LotSize:
        """
        Calculate lot count for a trade.

        Args:
            risk_capital: Capital committed to the trade
            leverage: Leverage multiple
            contract_size: Units per lot
            entry_price: Entry price
            lot_step: Lot increment

        Returns:
            LotSize with raw and quantized lot counts
        """
        if not lot_step > 0:
            raise ValueError(f"Invalid lot step: {lot_step}")
        if not leverage > 0:
            raise ValueError(f"Invalid leverage: {leverage}")
        if not contract_size > 0:
            raise ValueError(f"Invalid contract size: {contract_size}")
        if not entry_price > 0:
            raise ValueError(f"Invalid entry price: {entry_price}")

        raw_lots = (risk_capital * leverage) / (contract_size * entry_price)

        # Round down to whole steps, minimum one step
        steps = int(np.floor(raw_lots / lot_step + STEP_TOLERANCE))
        steps = max(1, steps)

        lots = steps * lot_step

        return LotSize(
            raw_lots=raw_lots,
            lots=lots,
            steps=steps,
            units=lots * contract_size,
        )


def calculate_lots(
    risk_capital: float,
    leverage: float,
    contract_size: float,
    entry_price: float,
    lot_step: float,
) -> float:
    """Convenience function to get just the lot count."""
    sizer = PositionSizer()
    size = sizer.calculate(risk_capital, leverage, contract_size, entry_price, lot_step)
    return size.lots


def lot_decimals(lot_step: float) -> int:
    """Decimal places needed to display a lot count (at least 2)."""
    if not lot_step > 0:
        raise ValueError(f"Invalid lot step: {lot_step}")
    return max(2, -math.floor(math.log10(lot_step)))
