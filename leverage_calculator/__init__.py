"""
Leverage Calculator

Simulates a sequence of leveraged trades against one account:
- Lot sizing quantized to the lot step
- Margin, P&L, free margin and liquidation price per trade
- Balance curve across the sequence
- ATR-based stop-loss / take-profit sizing
"""

__version__ = "1.0.0"

from .config import (
    AccountConfig,
    ConfigurationError,
    Direction,
    ExecutionConfig,
    EXECUTION_CONFIG,
)
from .position_sizer import LotSize, PositionSizer, calculate_lots, lot_decimals
from .trade_evaluator import TradeEvaluator, TradeResult
from .trade_requests import (
    ResolvedTrade,
    TradeMode,
    TradeRequest,
    gather_trades,
    load_trades_csv,
    percent_to_exit,
)
from .portfolio_runner import (
    EmptyTradeListError,
    PortfolioResult,
    PortfolioRunner,
    run_portfolio,
)
from .risk_sizer import (
    RiskResult,
    RiskSizer,
    default_take_profit_multiple,
    format_risk_reward,
    risk_reward_ratio,
)
from .indicators import calculate_atr, latest_atr, true_range

__all__ = [
    # Config
    'AccountConfig',
    'ConfigurationError',
    'Direction',
    'ExecutionConfig',
    'EXECUTION_CONFIG',

    # Sizing
    'LotSize',
    'PositionSizer',
    'calculate_lots',
    'lot_decimals',

    # Trades
    'TradeEvaluator',
    'TradeResult',
    'ResolvedTrade',
    'TradeMode',
    'TradeRequest',
    'gather_trades',
    'load_trades_csv',
    'percent_to_exit',

    # Portfolio
    'EmptyTradeListError',
    'PortfolioResult',
    'PortfolioRunner',
    'run_portfolio',

    # Risk
    'RiskResult',
    'RiskSizer',
    'default_take_profit_multiple',
    'format_risk_reward',
    'risk_reward_ratio',

    # Indicators
    'calculate_atr',
    'true_range',
    'latest_atr',
]
