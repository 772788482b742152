"""
Leverage Calculator - Trade Requests
Price-pair and percent-move requests, resolved to (entry, exit, direction).
"""

import logging
import math
import numbers
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

import pandas as pd

from .config import Direction


logger = logging.getLogger(__name__)


class TradeMode(Enum):
    """How a trade's exit is expressed."""
    PRICE = "price"
    PERCENT = "pct"


@dataclass(frozen=True)
class ResolvedTrade:
    """Canonical trade handed to the evaluator."""
    entry: float
    exit_price: float
    direction: Direction

    def __post_init__(self):
        object.__setattr__(self, 'direction', Direction.parse(self.direction))


@dataclass(frozen=True)
class TradeRequest:
    """
    One requested trade.

    PRICE mode carries ``exit_price``; PERCENT mode carries ``move_pct``,
    the percentage move in the trade's favour (negative for a loss).
    """
    mode: TradeMode
    entry: float
    exit_price: Optional[float] = None
    move_pct: Optional[float] = None
    direction: Optional[Direction] = None

    def __post_init__(self):
        if self.direction is not None:
            object.__setattr__(self, 'direction', Direction.parse(self.direction))

    @classmethod
    def at_price(
        cls,
        entry: float,
        exit_price: float,
        direction: Optional[Union[str, Direction]] = None,
    ) -> 'TradeRequest':
        return cls(
            mode=TradeMode.PRICE,
            entry=entry,
            exit_price=exit_price,
            direction=direction or None,
        )

    @classmethod
    def by_percent(
        cls,
        entry: float,
        move_pct: float,
        direction: Optional[Union[str, Direction]] = None,
    ) -> 'TradeRequest':
        return cls(
            mode=TradeMode.PERCENT,
            entry=entry,
            move_pct=move_pct,
            direction=direction or None,
        )

    def resolve(self, default_direction: Direction) -> Optional[ResolvedTrade]:
        """
        Resolve to an explicit (entry, exit, direction) triple.

        Returns None when the request is incomplete or out of domain.
        """
        direction = self.direction or Direction.parse(default_direction)

        if not _is_positive(self.entry):
            return None

        if self.mode is TradeMode.PRICE:
            if not _is_positive(self.exit_price):
                return None
            exit_price = self.exit_price
        else:
            if not _is_number(self.move_pct):
                return None
            exit_price = percent_to_exit(self.entry, self.move_pct, direction)

        return ResolvedTrade(entry=float(self.entry), exit_price=float(exit_price), direction=direction)


def percent_to_exit(entry: float, move_pct: float, direction: Direction) -> float:
    """Exit price for a favourable move of ``move_pct`` percent."""
    if Direction.parse(direction) is Direction.LONG:
        return entry * (1 + move_pct / 100)
    return entry * (1 - move_pct / 100)


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def _is_positive(value: Any) -> bool:
    return _is_number(value) and value > 0


def _parse_float(value: Any) -> float:
    """Parse a form/CSV cell, returning NaN when it is blank or not a number."""
    if value is None:
        return float('nan')
    try:
        return float(str(value).strip())
    except ValueError:
        return float('nan')


def gather_trades(
    rows: Iterable[Mapping[str, Any]],
    mode: Union[str, TradeMode] = TradeMode.PRICE,
    default_direction: Direction = Direction.LONG,
    drop_invalid: bool = True,
) -> List[TradeRequest]:
    """
    Build trade requests from raw rows.

    Each row may hold ``entry``, ``exit``, ``pct`` and ``direction`` as
    strings or numbers. Rows that cannot produce a valid trade are dropped
    unless ``drop_invalid`` is False, in which case they are kept for the
    runner to skip and count. Rows with an unknown direction are always dropped.

    Args:
        rows: Raw trade rows
        mode: Whether rows carry exit prices or percent moves
        default_direction: Direction for rows without one
        drop_invalid: Drop rows that do not resolve to a trade

    Returns:
        List of TradeRequest in row order
    """
    mode = TradeMode(mode) if not isinstance(mode, TradeMode) else mode
    trades = []

    for i, row in enumerate(rows):
        entry = _parse_float(row.get('entry'))

        raw_dir = row.get('direction')
        if raw_dir is None or (isinstance(raw_dir, float) and math.isnan(raw_dir)) or str(raw_dir).strip() == '':
            direction = default_direction
        else:
            try:
                direction = Direction.parse(raw_dir)
            except ValueError:
                logger.debug(f"Row {i + 1}: invalid direction {raw_dir!r}, skipped")
                continue

        if mode is TradeMode.PRICE:
            request = TradeRequest.at_price(entry, _parse_float(row.get('exit')), direction)
        else:
            request = TradeRequest.by_percent(entry, _parse_float(row.get('pct')), direction)

        if drop_invalid and request.resolve(default_direction) is None:
            logger.debug(f"Row {i + 1}: incomplete trade, skipped")
            continue

        trades.append(request)

    return trades


def load_trades_csv(
    path: Union[str, Path],
    mode: Union[str, TradeMode] = TradeMode.PRICE,
    default_direction: Direction = Direction.LONG,
    drop_invalid: bool = True,
) -> List[TradeRequest]:
    """
    Load trade requests from a CSV file.

    Expected columns: ``entry``, ``exit`` (price mode) or ``pct``
    (percent mode), and optionally ``direction``.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.strip().lower() for c in df.columns]

    if 'entry' not in df.columns:
        raise ValueError(f"Trades file {path} has no 'entry' column")

    return gather_trades(df.to_dict('records'), mode, default_direction, drop_invalid)
