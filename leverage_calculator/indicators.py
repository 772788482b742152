"""
Leverage Calculator - Indicators
Average True Range from OHLC bars, feeding the risk sizer.
"""

import pandas as pd


DEFAULT_ATR_PERIOD = 14

# Smoothing factor per method, as a function of the period
ATR_SMOOTHING = {
    'ema': lambda period: 2.0 / (period + 1),
    'wilder': lambda period: 1.0 / period,
}


def true_range(high: pd.Series, low: pd.Series, close: pd.Series) -> pd.Series:
    """Bar range widened by any gap from the previous close."""
    prev_close = close.shift(1)
    ranges = pd.DataFrame({
        'bar': high - low,
        'gap_up': (high - prev_close).abs(),
        'gap_down': (low - prev_close).abs(),
    })
    return ranges.max(axis=1)


def calculate_atr(
    high: pd.Series,
    low: pd.Series,
    close: pd.Series,
    period: int = DEFAULT_ATR_PERIOD,
    method: str = 'ema',
) -> pd.Series:
    """
    Average True Range, smoothed recursively over ``period`` bars.

    ``method='ema'`` uses alpha = 2 / (period + 1); ``method='wilder'``
    uses Wilder's alpha = 1 / period. The first bar has no previous
    close, so its true range is the plain high-low range.
    """
    if period < 1:
        raise ValueError(f"Invalid ATR period: {period}")
    if method not in ATR_SMOOTHING:
        raise ValueError(f"Unknown ATR method: {method!r} (expected {', '.join(ATR_SMOOTHING)})")

    alpha = ATR_SMOOTHING[method](period)
    return true_range(high, low, close).ewm(alpha=alpha, adjust=False).mean()


def latest_atr(
    df: pd.DataFrame,
    period: int = DEFAULT_ATR_PERIOD,
    method: str = 'ema',
) -> float:
    """
    Most recent ATR value of an OHLC frame.

    Column names are matched case-insensitively (High, Low, Close).
    """
    if len(df) == 0:
        raise ValueError("No bars to calculate ATR")

    columns = {c.strip().lower(): c for c in df.columns}
    missing = [c for c in ('high', 'low', 'close') if c not in columns]
    if missing:
        raise ValueError(f"OHLC data missing columns: {', '.join(missing)}")

    high = df[columns['high']].astype(float)
    low = df[columns['low']].astype(float)
    close = df[columns['close']].astype(float)

    atr = calculate_atr(high, low, close, period, method)
    return float(atr.iloc[-1])


def load_ohlc_csv(path) -> pd.DataFrame:
    """Load OHLC bars from CSV."""
    return pd.read_csv(path)
