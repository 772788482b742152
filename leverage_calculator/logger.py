"""
Leverage Calculator - Logger
Audit trail for simulation runs and risk calculations.
"""

import logging
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union
import sys

from .config import EXECUTION_CONFIG


class TradingLogger:
    """
    Structured logging for the calculator.

    Provides:
    - Console output
    - File logging for audit trail (when a log directory is given)
    - JSON event logging for analysis
    """

    def __init__(
        self,
        name: str = "leverage_calculator",
        log_dir: Optional[Union[str, Path]] = None,
        level: str = None,
        log_format: str = None,
    ):
        """
        Initialize logger. Without ``log_dir`` only the console is used.

        The default name is the package root, so module loggers under
        ``leverage_calculator.*`` propagate into these handlers.
        """
        if level is None:
            level = EXECUTION_CONFIG.LOG_LEVEL
        if log_format is None:
            log_format = EXECUTION_CONFIG.LOG_FORMAT

        self.log_dir = Path(log_dir) if log_dir is not None else None

        # Create logger
        self.logger = logging.getLogger(name)
        numeric_level = logging.getLevelName(str(level).upper())
        if not isinstance(numeric_level, int):
            raise ValueError(f"Invalid log level: {level!r}")
        self.logger.setLevel(numeric_level)
        self.logger.propagate = False

        # Clear existing handlers
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers = []

        # Console handler
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(logging.INFO)
        console.setFormatter(logging.Formatter(log_format))
        self.logger.addHandler(console)

        self._events_file: Optional[Path] = None

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)

            # File handler
            log_file = self.log_dir / f"calculator_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(log_format))
            self.logger.addHandler(file_handler)

            # Event log (JSON)
            self._events_file = self.log_dir / f"events_{datetime.now().strftime('%Y%m%d')}.jsonl"

    @property
    def events_file(self) -> Optional[Path]:
        return self._events_file

    def info(self, msg: str, **kwargs):
        """Log info message."""
        self.logger.info(msg)
        if kwargs:
            self._log_event('INFO', msg, kwargs)

    def warning(self, msg: str, **kwargs):
        """Log warning message."""
        self.logger.warning(msg)
        self._log_event('WARNING', msg, kwargs)

    def error(self, msg: str, **kwargs):
        """Log error message."""
        self.logger.error(msg)
        self._log_event('ERROR', msg, kwargs)

    def debug(self, msg: str, **kwargs):
        """Log debug message."""
        self.logger.debug(msg)

    def _log_event(self, level: str, msg: str, data: Dict[str, Any]):
        """Log structured event to JSON file."""
        if self._events_file is None:
            return

        event = {
            'timestamp': datetime.now().isoformat(),
            'level': level,
            'message': msg,
            'data': data,
        }

        with open(self._events_file, 'a') as f:
            f.write(json.dumps(event, default=str) + '\n')

    # Calculator-specific logging methods

    def log_trade(self, index: int, result, **kwargs):
        """Log one evaluated trade."""
        msg = (
            f"TRADE #{index} | {result.direction.value.upper()} {result.lots:g} lots | "
            f"{result.entry} -> {result.exit} | P&L: ${result.profit:,.2f} | "
            f"Balance: ${result.balance_after:,.2f}"
        )

        self.debug(msg)
        self._log_event('TRADE', msg, {**result.to_dict(), 'index': index, **kwargs})

    def log_run_summary(self, portfolio, **kwargs):
        """Log run totals."""
        msg = (
            f"RUN | Trades: {portfolio.trade_count} | Skipped: {portfolio.skipped} | "
            f"Final: ${portfolio.final_balance:,.2f} | "
            f"Return: {portfolio.total_return:+.2f}%"
        )

        self.info(msg)
        self._log_event('RUN', msg, {
            'principal': portfolio.principal,
            'trades': portfolio.trade_count,
            'skipped': portfolio.skipped,
            'final_balance': portfolio.final_balance,
            'total_profit': portfolio.total_profit,
            'total_return': portfolio.total_return,
            **kwargs
        })

    def log_risk(self, risk, **kwargs):
        """Log a stop-loss / take-profit calculation."""
        msg = (
            f"RISK | {risk.direction.value.upper()} {risk.lots:g} lots @ {risk.entry} | "
            f"SL: {risk.stop_price:.5f} (-${risk.stop_loss:,.2f})"
        )
        if risk.has_take_profit:
            msg += f" | TP: {risk.tp_price:.5f} (+${risk.take_profit:,.2f})"

        self.info(msg)
        self._log_event('RISK', msg, {
            'direction': risk.direction.value,
            'entry': risk.entry,
            'atr': risk.atr,
            'lots': risk.lots,
            'stop_price': risk.stop_price,
            'stop_loss': risk.stop_loss,
            'tp_price': risk.tp_price,
            'take_profit': risk.take_profit,
            'risk_reward': risk.risk_reward,
            **kwargs
        })

    def log_error(self, error: Exception, context: str = ""):
        """Log error with context."""
        msg = f"ERROR | {context} | {type(error).__name__}: {str(error)}"
        self.error(msg, **{
            'error_type': type(error).__name__,
            'error_message': str(error),
            'context': context,
        })


# Global logger instance
_logger: Optional[TradingLogger] = None


def get_logger() -> TradingLogger:
    """Get or create global logger instance."""
    global _logger
    if _logger is None:
        _logger = TradingLogger()
    return _logger


def setup_logger(
    name: str = "leverage_calculator",
    log_dir: Optional[Union[str, Path]] = None,
    level: str = None,
    log_format: str = None,
) -> TradingLogger:
    """Setup and return logger."""
    global _logger
    _logger = TradingLogger(name, log_dir, level, log_format)
    return _logger
