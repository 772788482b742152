"""
Leverage Calculator - Reporting
Console reports and CSV export. Rounding happens here only.
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, Union

from .config import AccountConfig
from .portfolio_runner import PortfolioResult
from .position_sizer import lot_decimals
from .risk_sizer import RiskResult


def format_num(n: float, decimals: int = 2) -> str:
    """Compact number: B/M suffixes for large values, thousands separators above 1e4."""
    if abs(n) >= 1e9:
        return f"{n / 1e9:.2f}B"
    if abs(n) >= 1e6:
        return f"{n / 1e6:.2f}M"
    if abs(n) >= 1e4:
        return f"{n:,.{decimals}f}"
    return f"{n:.{decimals}f}"


def format_usd(n: float) -> str:
    if n < 0:
        return "-$" + format_num(-n)
    return "$" + format_num(n)


def print_results(portfolio: PortfolioResult, config: AccountConfig):
    """Print summary and per-trade table."""
    decimals = lot_decimals(config.lot_step)

    print("\n" + "=" * 60)
    print("SIMULATION RESULTS")
    print("=" * 60)

    print("\n--- SUMMARY ---")
    print(f"Final Balance:     {format_usd(portfolio.final_balance):>14}")
    print(f"Total P&L:         {format_usd(portfolio.total_profit):>14}")
    print(f"Total Return:      {portfolio.total_return:>13.2f}%")
    print(f"Trades:            {portfolio.trade_count:>14}")
    if portfolio.skipped:
        print(f"Skipped Rows:      {portfolio.skipped:>14}")
    print(f"Avg Eff. Leverage: {portfolio.avg_effective_leverage:>13.1f}x")
    print(f"Min DD Room:       {portfolio.min_max_dd_pct:>13.2f}%")
    print(f"Max Drawdown:      {portfolio.max_drawdown:>14.1%}")

    print("\n--- TRADES ---")
    header = (
        f"{'#':>3} {'Dir':<5} {'Entry':>10} {'Exit':>10} {'Lots':>8} "
        f"{'Margin':>12} {'Lev':>6} {'P&L':>12} {'P&L%':>8} {'DD%':>7} "
        f"{'Liq':>10} {'Balance':>14}"
    )
    print(header)
    print("-" * len(header))

    for i, r in enumerate(portfolio.results, start=1):
        print(
            f"{i:>3} {r.direction.value:<5} {r.entry:>10.5g} {r.exit:>10.5g} "
            f"{r.lots:>8.{decimals}f} {format_usd(r.margin):>12} "
            f"{r.effective_leverage:>5.2f}x {format_usd(r.profit):>12} "
            f"{r.profit_pct:>7.2f}% {r.max_dd_pct:>6.2f}% "
            f"{r.liquidation_price:>10.5g} {format_usd(r.balance_after):>14}"
        )

    print("=" * 60)


def print_risk(risk: RiskResult, config: AccountConfig):
    """Print stop-loss / take-profit panel."""
    decimals = lot_decimals(config.lot_step)

    print("\n" + "=" * 60)
    print("RISK ASSESSMENT (ATR)")
    print("=" * 60)
    print(f"Direction:         {risk.direction.value}")
    print(f"Lots:              {risk.lots:.{decimals}f}")
    print(f"ATR:               {risk.atr:.5g}")

    print(f"\n--- STOP LOSS (ATR x {risk.sl_multiple:g}) ---")
    print(f"Distance:          {risk.stop_distance:.4f} ({risk.stop_distance_pct:.2f}%)")
    print(f"Price:             {risk.stop_price:.5g}")
    print(f"Loss:              -{format_usd(risk.stop_loss)} ({risk.stop_loss_pct:.2f}%)")

    if risk.has_take_profit:
        print(f"\n--- TAKE PROFIT (ATR x {risk.tp_multiple:g}) ---")
        print(f"Distance:          {risk.tp_distance:.4f} ({risk.tp_distance_pct:.2f}%)")
        print(f"Price:             {risk.tp_price:.5g}")
        print(f"Gain:              +{format_usd(risk.take_profit)} ({risk.take_profit_pct:.2f}%)")
        print(f"\nRisk/Reward:       {risk.risk_reward_label}")

    print("=" * 60)


def export_results(
    portfolio: PortfolioResult,
    output_dir: Union[str, Path],
) -> Dict[str, Path]:
    """
    Write trade history and balance curve CSVs.

    Returns:
        Mapping of 'trades' / 'balance' to written paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    trades_path = output_dir / f"trades_{stamp}.csv"
    balance_path = output_dir / f"balance_{stamp}.csv"

    portfolio.get_trades_df().to_csv(trades_path)
    portfolio.get_balance_df().to_csv(balance_path)

    return {'trades': trades_path, 'balance': balance_path}
