"""
Unit tests for module imports and the backtest event model.
"""

import importlib
from datetime import date

import pytest

from strategy_backtester.core.enums import BacktestStatus
from strategy_backtester.core.models.backtest import BacktestEvent

MODULES = [
    "strategy_backtester.core.models.backtest",
    "strategy_backtester.backtesting.engine",
    "strategy_backtester.backtesting.comparison",
    "strategy_backtester.backtesting.metrics",
    "strategy_backtester.backtesting.time_series",
    "strategy_backtester.infrastructure.storage.json_result_store",
    "strategy_backtester.infrastructure.data.market_data_providers",
    "strategy_backtester.schemas.requests",
    "strategy_backtester.schemas.oracle",
    "strategy_backtester.strategies.factory",
]


class TestPackageImports:
    """Tests that every public module loads on a plain import."""

    @pytest.mark.parametrize("module_name", MODULES)
    def test_should_import_module(self, module_name: str) -> None:
        """Test the module imports without raising."""
        module = importlib.import_module(module_name)

        assert module.__name__ == module_name


class TestBacktestEvent:
    """Tests for BacktestEvent defaults."""

    def test_should_default_optional_fields_to_none(self) -> None:
        """Test lifecycle events carry no date, equity or progress."""
        event = BacktestEvent(BacktestStatus.CREATED, "run")

        assert event.date is None
        assert event.equity is None
        assert event.progress is None
        assert event.message is None

    def test_should_carry_progress_details(self) -> None:
        """Test progress events keep the simulated date."""
        event = BacktestEvent(
            BacktestStatus.SIMULATING, "run", date=date(2024, 1, 2), equity=100.0, progress=0.5
        )

        assert event.date == date(2024, 1, 2)
        assert event.progress == 0.5
