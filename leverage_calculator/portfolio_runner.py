"""
Leverage Calculator - Portfolio Runner
Runs an ordered trade sequence against one account and builds the balance curve.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Union

import numpy as np
import pandas as pd

from .config import AccountConfig
from .trade_evaluator import TradeEvaluator, TradeResult
from .trade_requests import ResolvedTrade, TradeRequest


logger = logging.getLogger(__name__)


class EmptyTradeListError(ValueError):
    """No valid trades to simulate."""
    pass


@dataclass
class PortfolioResult:
    """Simulation result for one run."""
    principal: float
    results: List[TradeResult]
    balance_curve: List[float]     # principal followed by each balance_after
    final_balance: float
    total_profit: float
    total_return: float            # Percent of principal
    skipped: int = 0               # Requests dropped as invalid

    @property
    def trade_count(self) -> int:
        return len(self.results)

    @property
    def winning_trades(self) -> int:
        return sum(1 for r in self.results if r.won)

    @property
    def avg_effective_leverage(self) -> float:
        return float(np.mean([r.effective_leverage for r in self.results]))

    @property
    def min_max_dd_pct(self) -> float:
        """Smallest tolerable adverse move across trades (the most dangerous trade)."""
        return min(r.max_dd_pct for r in self.results)

    @property
    def max_drawdown(self) -> float:
        """Largest peak-to-trough decline of the balance curve, as a fraction of the peak."""
        curve = np.asarray(self.balance_curve, dtype=float)
        peaks = np.maximum.accumulate(curve)
        with np.errstate(divide='ignore', invalid='ignore'):
            drawdowns = np.where(peaks > 0, (peaks - curve) / peaks, 0.0)
        return float(drawdowns.max())

    def get_trades_df(self) -> pd.DataFrame:
        """Trade results as a DataFrame, one row per trade."""
        df = pd.DataFrame([r.to_dict() for r in self.results])
        df.index = pd.RangeIndex(1, len(df) + 1, name='Trade')
        return df

    def get_balance_df(self) -> pd.DataFrame:
        """Balance curve with running peak and drawdown."""
        df = pd.DataFrame({'Balance': self.balance_curve})
        df.index = pd.RangeIndex(0, len(df), name='Step')
        df['Peak'] = df['Balance'].cummax()
        df['Drawdown'] = np.where(df['Peak'] > 0, (df['Peak'] - df['Balance']) / df['Peak'], 0.0)
        return df


class PortfolioRunner:
    """
    Sequential trade simulation.

    Balance update policy:
    - Compounding: each trade sizes against the running balance.
    - Static: each trade sizes against the original principal; realized
      profit still accumulates into the balance curve.

    Order of operations per trade:
    1. Resolve direction (request override or config default)
    2. Evaluate against the current balance
    3. Record result and append the new balance to the curve
    """

    def __init__(self, config: AccountConfig):
        self.config = config.require_valid()
        self.evaluator = TradeEvaluator(self.config)

    def resolve(
        self,
        trades: Sequence[Union[TradeRequest, ResolvedTrade]],
    ) -> List[ResolvedTrade]:
        """Resolve requests up front, dropping invalid ones."""
        resolved = []
        for i, trade in enumerate(trades):
            if isinstance(trade, ResolvedTrade):
                candidate = TradeRequest.at_price(trade.entry, trade.exit_price, trade.direction)
            else:
                candidate = trade

            res = candidate.resolve(self.config.direction)
            if res is None:
                logger.debug(f"Trade {i + 1} skipped: invalid request {trade}")
                continue
            resolved.append(res)

        return resolved

    def run(self, trades: Sequence[Union[TradeRequest, ResolvedTrade]]) -> PortfolioResult:
        """
        Run the trade sequence.

        Args:
            trades: Ordered trade requests

        Returns:
            PortfolioResult with per-trade results and balance curve

        Raises:
            EmptyTradeListError: if no valid trade remains
        """
        resolved = self.resolve(trades)
        skipped = len(trades) - len(resolved)

        if len(resolved) == 0:
            raise EmptyTradeListError("No trades to simulate")

        principal = self.config.principal
        balance = principal
        results: List[TradeResult] = []
        balance_curve = [balance]

        for trade in resolved:
            sizing_balance = balance if self.config.compounding else principal

            result = self.evaluator.evaluate(
                balance=balance,
                entry=trade.entry,
                exit_price=trade.exit_price,
                direction=trade.direction,
                sizing_balance=sizing_balance,
            )
            results.append(result)

            balance = result.balance_after
            balance_curve.append(balance)

        final_balance = balance
        total_profit = final_balance - principal
        total_return = total_profit / principal * 100

        logger.info(
            f"Run complete | Trades: {len(results)} (skipped {skipped}) | "
            f"Final: ${final_balance:,.2f} | Return: {total_return:+.2f}%"
        )

        return PortfolioResult(
            principal=principal,
            results=results,
            balance_curve=balance_curve,
            final_balance=final_balance,
            total_profit=total_profit,
            total_return=total_return,
            skipped=skipped,
        )


def run_portfolio(
    config: AccountConfig,
    trades: Sequence[Union[TradeRequest, ResolvedTrade]],
) -> PortfolioResult:
    """Convenience function to run a trade sequence."""
    return PortfolioRunner(config).run(trades)
