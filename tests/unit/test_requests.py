"""
Unit tests for backtest request schemas.
"""

from datetime import date

import pytest

from strategy_backtester.core.enums import StrategyKind, Timeframe
from strategy_backtester.core.exceptions.backtest import ConfigurationError
from strategy_backtester.core.models.strategy_config import (
    LLMAssistedParameters,
    MomentumParameters,
    TrendFollowingParameters,
)
from strategy_backtester.schemas import BacktestRequest, load_backtest_config


@pytest.fixture
def form_payload() -> dict:
    """Payload in the dashboard form shape."""
    return {
        "name": "Momentum on tech",
        "description": "RSI test",
        "strategy": "momentum",
        "parameters": {"lookbackPeriod": 10, "overboughtThreshold": 75, "oversoldThreshold": 25},
        "symbols": ["aapl", " msft "],
        "startDate": "2024-01-01",
        "endDate": "2024-03-31",
    }


class TestBacktestRequest:
    """Tests for parsing and converting requests."""

    def test_should_convert_form_payload_to_config(self, form_payload: dict) -> None:
        """Test the camelCase form shape."""
        # Act
        config = load_backtest_config(form_payload)

        # Assert
        assert config.name == "Momentum on tech"
        assert config.symbols == ("AAPL", "MSFT")
        assert config.start_date == date(2024, 1, 1)
        assert config.end_date == date(2024, 3, 31)
        assert config.timeframe == Timeframe.D1
        assert config.initial_capital == 100000.0
        assert config.strategy.kind == StrategyKind.MOMENTUM
        assert config.strategy.parameters == MomentumParameters(
            lookback_period=10, overbought_threshold=75.0, oversold_threshold=25.0
        )

    def test_should_accept_nested_strategy_object(self) -> None:
        """Test a full strategy object with snake_case fields."""
        payload = {
            "name": "Crossover",
            "strategy": {"id": "trend_following", "parameters": {"short_period": 5}},
            "symbols": ["SPY"],
            "start_date": "2024-01-01",
            "end_date": "2024-02-01",
            "timeframe": "1D",
            "initial_capital": 5000,
            "user_id": "user-1",
        }

        config = load_backtest_config(payload)

        assert config.strategy.parameters == TrendFollowingParameters(short_period=5)
        assert config.timeframe == Timeframe.D1
        assert config.initial_capital == 5000.0
        assert config.user_id == "user-1"

    def test_should_default_llm_parameters(self, form_payload: dict) -> None:
        """Test defaults for the LLM-assisted strategy."""
        form_payload["strategy"] = "llmAssisted"
        form_payload["parameters"] = {"maxPositions": 3}

        config = load_backtest_config(form_payload)

        assert config.strategy.parameters == LLMAssistedParameters(model="gpt-4", max_positions=3)

    @pytest.mark.parametrize(
        "changes",
        [
            {"strategy": "arbitrage"},
            {"symbols": []},
            {"startDate": "not a date"},
            {"initialCapital": -5},
            {"timeframe": "2d"},
        ],
    )
    def test_should_raise_configuration_error_for_bad_payload(
        self, form_payload: dict, changes: dict
    ) -> None:
        """Test malformed payloads."""
        form_payload.update(changes)

        with pytest.raises(ConfigurationError, match="Invalid backtest request"):
            BacktestRequest.from_payload(form_payload)

    def test_should_raise_configuration_error_for_bad_parameters(self, form_payload: dict) -> None:
        """Test parameter values rejected by the parameter schema."""
        form_payload["parameters"] = {"lookbackPeriod": 0}

        with pytest.raises(ConfigurationError, match="Invalid strategy parameters"):
            load_backtest_config(form_payload)

    def test_should_apply_config_validation(self, form_payload: dict) -> None:
        """Test range checks performed by BacktestConfig."""
        form_payload["endDate"] = "2023-12-01"

        with pytest.raises(ConfigurationError, match="Start date must be before end date"):
            load_backtest_config(form_payload)
