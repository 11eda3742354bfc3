"""
Unit tests for the Portfolio ledger facade.
"""

from datetime import date
from unittest.mock import Mock, patch

import pytest

from strategy_backtester.core.exceptions.backtest import PositionNotFoundError, ValidationError
from strategy_backtester.core.models.portfolio import Portfolio
from strategy_backtester.core.models.portfolio_core import PortfolioState
from strategy_backtester.core.models.position import Position

D1 = date(2024, 1, 2)


class TestPortfolioCreation:
    """Tests for creating ledgers."""

    def test_should_start_with_cash_only(self) -> None:
        """Test with_capital factory."""
        portfolio = Portfolio.with_capital(100000.0)

        assert portfolio.cash == 100000.0
        assert portfolio.initial_capital == 100000.0
        assert portfolio.positions == {}

    def test_should_reject_non_positive_capital(self) -> None:
        """Test initial capital validation."""
        with pytest.raises(ValidationError, match="Initial capital must be positive"):
            Portfolio.with_capital(0.0)


class TestPortfolioOrders:
    """Tests for validated and logged orders."""

    def test_should_validate_order_inputs(self) -> None:
        """Test that non-positive quantities and prices are rejected."""
        portfolio = Portfolio.with_capital(1000.0)

        with pytest.raises(ValidationError, match="quantity must be positive"):
            portfolio.buy("AAPL", 0.0, 10.0, D1)
        with pytest.raises(ValidationError, match="price must be positive"):
            portfolio.buy("AAPL", 1.0, -10.0, D1)
        assert portfolio.cash == 1000.0

    @patch("strategy_backtester.core.utils.decorators.logger")
    def test_should_log_successful_orders(self, mock_logger: Mock) -> None:
        """Test that orders go through the trade logger."""
        portfolio = Portfolio.with_capital(1000.0)

        portfolio.buy("AAPL", 1.0, 10.0, D1)

        mock_logger.bind.return_value.success.assert_called_once()

    def test_should_report_position_quantity(self) -> None:
        """Test get_position_quantity with and without a position."""
        portfolio = Portfolio.with_capital(1000.0)
        portfolio.buy("AAPL", 2.0, 10.0, D1)

        assert portfolio.get_position_quantity("AAPL") == 2.0
        assert portfolio.get_position_quantity("MSFT") == 0.0

    def test_should_raise_position_not_found_on_sell(self) -> None:
        """Test selling without a position."""
        portfolio = Portfolio.with_capital(1000.0)

        with pytest.raises(PositionNotFoundError):
            portfolio.sell("AAPL", 1.0, 10.0, D1)


class TestPortfolioValuation:
    """Tests for mark-to-market valuation."""

    def test_should_fall_back_to_entry_price_for_missing_prices(self) -> None:
        """Test mark_to_market with partial prices."""
        # Arrange
        state = PortfolioState(
            initial_capital=10000.0,
            cash=5000.0,
            positions={
                "AAPL": Position("AAPL", 10.0, 150.0),
                "MSFT": Position("MSFT", 5.0, 300.0),
            },
        )
        portfolio = Portfolio(state)

        # Act
        equity = portfolio.mark_to_market({"AAPL": 160.0})

        # Assert - 5000 + 10 * 160 + 5 * 300
        assert equity == 8100.0

    def test_should_not_mutate_on_mark_to_market(self) -> None:
        """Test valuation is read-only."""
        portfolio = Portfolio.with_capital(1000.0)
        portfolio.buy("AAPL", 1.0, 100.0, D1)

        portfolio.mark_to_market({"AAPL": 500.0})

        assert portfolio.cash == 900.0
        assert portfolio.positions["AAPL"].entry_price == 100.0

    def test_should_snapshot_independent_state(self) -> None:
        """Test that snapshots do not follow later orders."""
        portfolio = Portfolio.with_capital(1000.0)
        portfolio.buy("AAPL", 1.0, 100.0, D1)

        snapshot = portfolio.snapshot()
        portfolio.buy("AAPL", 1.0, 100.0, D1)

        assert snapshot.positions["AAPL"].quantity == 1.0
        assert snapshot.cash == 900.0
        assert portfolio.cash == 800.0
