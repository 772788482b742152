"""
Shared fixtures for the Leverage Calculator tests.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from leverage_calculator.config import AccountConfig, Direction


@pytest.fixture
def eurusd_config():
    """EURUSD standard lots, 10x leverage, 10% of balance per trade."""
    return AccountConfig.from_percent(
        principal=10000,
        leverage=10,
        contract_size=100000,
        lot_step=0.01,
        margin_ratio_pct=10,
        direction=Direction.LONG,
        compounding=True,
    )


@pytest.fixture
def unit_config():
    """One unit per lot, whole balance committed, no leverage."""
    return AccountConfig.from_percent(
        principal=1000,
        leverage=1,
        contract_size=1,
        lot_step=0.01,
        margin_ratio_pct=100,
    )
