"""
Leverage Calculator - Configuration
Account parameters for a simulation run, plus logging and output settings.

An AccountConfig is built once per run and never mutated.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml


class ConfigurationError(Exception):
    """Account configuration is out of domain."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class Direction(Enum):
    """Trade direction."""
    LONG = "long"
    SHORT = "short"

    @classmethod
    def parse(cls, value: Union[str, "Direction"]) -> "Direction":
        """Parse 'long' / 'short' (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Invalid direction: {value!r} (expected 'long' or 'short')")

    @property
    def sign(self) -> int:
        return 1 if self is Direction.LONG else -1


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _load_section(path: Union[str, Path], section: str) -> Dict[str, Any]:
    """Read one top-level mapping from a YAML config file (empty when absent)."""
    with open(path, 'r') as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ConfigurationError([f"{path}: top level must be a mapping"])

    value = config.get(section) or {}
    if not isinstance(value, dict):
        raise ConfigurationError([f"{path}: '{section}' section must be a mapping"])
    return value


# ==========================================================================
# DEFAULTS (form fallbacks)
# ==========================================================================
DEFAULT_LEVERAGE: float = 1.0
DEFAULT_CONTRACT_SIZE: float = 1.0
DEFAULT_LOT_STEP: float = 0.01
DEFAULT_MARGIN_RATIO_PCT: float = 10.0


@dataclass(frozen=True)
class AccountConfig:
    """Immutable account configuration for one run."""

    principal: float
    leverage: float = DEFAULT_LEVERAGE
    contract_size: float = DEFAULT_CONTRACT_SIZE   # Units per lot
    lot_step: float = DEFAULT_LOT_STEP             # Minimum lot increment
    margin_ratio: float = DEFAULT_MARGIN_RATIO_PCT / 100  # Fraction of balance per trade
    direction: Direction = Direction.LONG          # Default trade direction
    compounding: bool = True

    @classmethod
    def from_percent(
        cls,
        principal: float,
        leverage: float = DEFAULT_LEVERAGE,
        contract_size: float = DEFAULT_CONTRACT_SIZE,
        lot_step: float = DEFAULT_LOT_STEP,
        margin_ratio_pct: float = DEFAULT_MARGIN_RATIO_PCT,
        direction: Union[str, Direction] = Direction.LONG,
        compounding: bool = True,
    ) -> 'AccountConfig':
        """Build config from a 1-100 margin ratio percentage."""
        return cls(
            principal=float(principal),
            leverage=float(leverage),
            contract_size=float(contract_size),
            lot_step=float(lot_step),
            margin_ratio=float(margin_ratio_pct) / 100,
            direction=Direction.parse(direction),
            compounding=bool(compounding),
        )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'AccountConfig':
        """Build config from an ``account`` mapping (YAML layout)."""
        if 'principal' not in config:
            raise ConfigurationError(["principal is required"])

        return cls.from_percent(
            principal=config['principal'],
            leverage=config.get('leverage', DEFAULT_LEVERAGE),
            contract_size=config.get('contract_size', DEFAULT_CONTRACT_SIZE),
            lot_step=config.get('lot_step', DEFAULT_LOT_STEP),
            margin_ratio_pct=config.get('margin_ratio_pct', DEFAULT_MARGIN_RATIO_PCT),
            direction=config.get('direction', 'long'),
            compounding=config.get('compounding', True),
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'AccountConfig':
        """Load account config from YAML file."""
        return cls.from_dict(_load_section(path, 'account'))

    @property
    def margin_ratio_pct(self) -> float:
        return self.margin_ratio * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            'principal': self.principal,
            'leverage': self.leverage,
            'contract_size': self.contract_size,
            'lot_step': self.lot_step,
            'margin_ratio_pct': self.margin_ratio_pct,
            'direction': self.direction.value,
            'compounding': self.compounding,
        }

    def to_yaml(self, path: Union[str, Path]):
        """Save account config to YAML file."""
        with open(path, 'w') as f:
            yaml.dump({'account': self.to_dict()}, f, default_flow_style=False)

    def validate(self) -> Tuple[bool, List[str]]:
        """Validate account configuration."""
        errors = []

        if not self.principal > 0:
            errors.append("principal must be positive")

        if not self.leverage >= 1:
            errors.append("leverage must be at least 1")

        if not self.contract_size > 0:
            errors.append("contract_size must be positive")

        if not self.lot_step > 0:
            errors.append("lot_step must be positive")

        if not 0 < self.margin_ratio <= 1:
            errors.append("margin_ratio must be between 0 and 100%")

        return len(errors) == 0, errors

    def require_valid(self) -> 'AccountConfig':
        """Raise ConfigurationError unless the config is in domain."""
        ok, errors = self.validate()
        if not ok:
            raise ConfigurationError(errors)
        return self

    def get_summary(self) -> str:
        """Get config summary string."""
        return f"""
Leverage Calculator Account
===========================
Principal:      ${self.principal:,.2f}
Leverage:       {self.leverage:g}x
Contract Size:  {self.contract_size:g} units/lot
Lot Step:       {self.lot_step:g}
Margin Ratio:   {self.margin_ratio:.1%}
Direction:      {self.direction.value}
Compounding:    {'on' if self.compounding else 'off'}
"""


@dataclass(frozen=True)
class ExecutionConfig:
    """Logging and output configuration."""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s | %(levelname)s | %(message)s"

    # Paths
    LOGS_DIR: str = "logs"
    RESULTS_DIR: str = "results"

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'ExecutionConfig':
        """Load the optional ``logging`` section of a YAML file."""
        section = _load_section(path, 'logging')
        defaults = asdict(cls())

        level = str(section.get('level', defaults['LOG_LEVEL'])).upper()
        if level not in LOG_LEVELS:
            raise ConfigurationError([f"logging.level must be one of {', '.join(LOG_LEVELS)}"])

        return cls(
            LOG_LEVEL=level,
            LOG_FORMAT=section.get('format', defaults['LOG_FORMAT']),
            LOGS_DIR=section.get('log_dir', defaults['LOGS_DIR']),
            RESULTS_DIR=section.get('results_dir', defaults['RESULTS_DIR']),
        )


# Global singleton instance
EXECUTION_CONFIG = ExecutionConfig()


# Default configuration template
DEFAULT_CONFIG_YAML = """
# Leverage Calculator Configuration

account:
  principal: 10000
  leverage: 10
  contract_size: 100000   # EURUSD standard lot
  lot_step: 0.01
  margin_ratio_pct: 10    # % of balance committed per trade
  direction: long
  compounding: true

logging:
  level: INFO
  log_dir: logs
  results_dir: results
"""


def print_config(config: AccountConfig):
    """Print account configuration for audit trail."""
    print("=" * 60)
    print("LEVERAGE CALCULATOR - CONFIGURATION")
    print("=" * 60)
    print(config.get_summary())
    print("=" * 60)
