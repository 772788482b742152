"""
Leverage Calculator - Command Line Interface

Usage:
    leverage-calc run --config account.yaml --trades trades.csv
    leverage-calc run --principal 10000 --leverage 10 --contract-size 100000 --trades trades.csv --mode pct
    leverage-calc risk --config account.yaml --entry 1.1 --atr 0.005 --sl-mult 1.5 --tp-mult 3
    leverage-calc risk --config account.yaml --entry 1.1 --ohlc bars.csv --sl-mult 1.5
    leverage-calc init-config account.yaml
"""

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .config import (
    AccountConfig,
    ConfigurationError,
    Direction,
    ExecutionConfig,
    DEFAULT_CONFIG_YAML,
    EXECUTION_CONFIG,
)
from .indicators import ATR_SMOOTHING, DEFAULT_ATR_PERIOD, latest_atr, load_ohlc_csv
from .logger import TradingLogger, setup_logger
from .portfolio_runner import EmptyTradeListError, PortfolioRunner
from .reporting import export_results, print_results, print_risk
from .risk_sizer import RiskSizer, default_take_profit_multiple
from .trade_requests import TradeMode, load_trades_csv


def _add_account_arguments(parser: argparse.ArgumentParser):
    parser.add_argument('--config', type=str, help='Account YAML file')
    parser.add_argument('--principal', type=float, help='Initial capital')
    parser.add_argument('--leverage', type=float, help='Leverage multiple')
    parser.add_argument('--contract-size', type=float, help='Units per lot')
    parser.add_argument('--lot-step', type=float, help='Lot increment')
    parser.add_argument('--margin-pct', type=float, help='Margin ratio, percent of balance (1-100)')
    parser.add_argument('--log-dir', type=str, help='Write log and JSONL events here')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='leverage-calc',
        description='Leveraged trade sequence and ATR risk calculator'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Run command
    run_parser = subparsers.add_parser('run', help='Simulate a trade sequence')
    _add_account_arguments(run_parser)
    run_parser.add_argument('--trades', type=str, required=True, help='Trades CSV')
    run_parser.add_argument('--mode', choices=[m.value for m in TradeMode], default='price',
                            help='Trades carry exit prices or percent moves')
    run_parser.add_argument('--direction', choices=[d.value for d in Direction],
                            help='Default trade direction')
    run_parser.add_argument('--static', action='store_true',
                            help='Size every trade against the principal')
    run_parser.add_argument('--output-dir', type=str, help='Export trade and balance CSVs')

    # Risk command
    risk_parser = subparsers.add_parser('risk', help='ATR stop-loss / take-profit sizing')
    _add_account_arguments(risk_parser)
    risk_parser.add_argument('--entry', type=float, required=True, help='Entry price')
    risk_parser.add_argument('--direction', choices=[d.value for d in Direction], default='long')
    atr_group = risk_parser.add_mutually_exclusive_group(required=True)
    atr_group.add_argument('--atr', type=float, help='ATR value')
    atr_group.add_argument('--ohlc', type=str, help='OHLC CSV to derive ATR from')
    risk_parser.add_argument('--atr-period', type=int, default=DEFAULT_ATR_PERIOD, help='ATR period')
    risk_parser.add_argument('--atr-method', choices=list(ATR_SMOOTHING), default='ema',
                             help='ATR smoothing for --ohlc')
    risk_parser.add_argument('--sl-mult', type=float, required=True, help='Stop distance in ATRs')
    risk_parser.add_argument('--tp-mult', type=float, help='Target distance in ATRs (default 2x stop, 0 disables)')

    # Init config command
    init_parser = subparsers.add_parser('init-config', help='Write a default config file')
    init_parser.add_argument('path', type=str, help='Destination YAML file')
    init_parser.add_argument('--force', action='store_true', help='Overwrite existing file')

    return parser


def load_account(args: argparse.Namespace) -> AccountConfig:
    """Account config from --config, with command line overrides applied."""
    if args.config:
        config = AccountConfig.from_yaml(args.config)
    elif args.principal is None:
        raise ConfigurationError(["principal is required (--principal or --config)"])
    else:
        config = AccountConfig(principal=args.principal)

    overrides = {}
    if args.principal is not None:
        overrides['principal'] = args.principal
    if args.leverage is not None:
        overrides['leverage'] = args.leverage
    if args.contract_size is not None:
        overrides['contract_size'] = args.contract_size
    if args.lot_step is not None:
        overrides['lot_step'] = args.lot_step
    if args.margin_pct is not None:
        overrides['margin_ratio'] = args.margin_pct / 100
    if getattr(args, 'direction', None) and args.command == 'run':
        overrides['direction'] = Direction.parse(args.direction)
    if getattr(args, 'static', False):
        overrides['compounding'] = False

    return dataclasses.replace(config, **overrides).require_valid()


def _setup_logger(args: argparse.Namespace) -> TradingLogger:
    execution = ExecutionConfig.from_yaml(args.config) if getattr(args, 'config', None) else EXECUTION_CONFIG
    log_dir = getattr(args, 'log_dir', None)
    return setup_logger(log_dir=log_dir, level=execution.LOG_LEVEL, log_format=execution.LOG_FORMAT)


def cmd_run(args: argparse.Namespace, log: TradingLogger) -> int:
    config = load_account(args)
    log.debug(config.get_summary())

    trades = load_trades_csv(args.trades, TradeMode(args.mode), config.direction, drop_invalid=False)
    portfolio = PortfolioRunner(config).run(trades)

    for i, result in enumerate(portfolio.results, start=1):
        log.log_trade(i, result)
    log.log_run_summary(portfolio, trades_file=args.trades)

    print_results(portfolio, config)

    if args.output_dir:
        paths = export_results(portfolio, args.output_dir)
        log.info(f"Results written to {paths['trades']} and {paths['balance']}")

    return 0


def cmd_risk(args: argparse.Namespace, log: TradingLogger) -> int:
    config = load_account(args)

    atr = args.atr
    if args.ohlc:
        atr = latest_atr(load_ohlc_csv(args.ohlc), args.atr_period, args.atr_method)
        log.info(f"ATR({args.atr_period}, {args.atr_method}) from {args.ohlc}: {atr:.6g}")

    # An explicit --tp-mult 0 disables the target
    tp_mult = args.tp_mult
    if tp_mult is None:
        tp_mult = default_take_profit_multiple(args.sl_mult)

    risk = RiskSizer(config).calculate(
        entry=args.entry,
        direction=args.direction,
        atr=atr,
        sl_multiple=args.sl_mult,
        tp_multiple=tp_mult,
    )

    if risk is None:
        log.warning("Entry, ATR and stop multiple must all be positive")
        return 1

    log.log_risk(risk)
    print_risk(risk, config)
    return 0


def cmd_init_config(args: argparse.Namespace, log: TradingLogger) -> int:
    path = Path(args.path)
    if path.exists() and not args.force:
        log.error(f"{path} already exists (use --force to overwrite)")
        return 1

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG_YAML.lstrip())
    log.info(f"Default config written to {path}")
    return 0


COMMANDS = {
    'run': cmd_run,
    'risk': cmd_risk,
    'init-config': cmd_init_config,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        log = _setup_logger(args)
    except (ConfigurationError, OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        return COMMANDS[args.command](args, log)
    except (ConfigurationError, EmptyTradeListError, OSError, ValueError, yaml.YAMLError) as e:
        log.log_error(e, context=args.command)
        return 1


if __name__ == '__main__':
    sys.exit(main())
