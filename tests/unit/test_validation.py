"""
Unit tests for validation utilities.
"""

import math

import pytest

from strategy_backtester.core.exceptions.backtest import ValidationError
from strategy_backtester.core.utils.validation import (
    validate_period,
    validate_positive,
    validate_symbol,
)


class TestValidateSymbol:
    """Tests for validate_symbol."""

    def test_should_return_stripped_symbol(self) -> None:
        """Test that surrounding whitespace is removed."""
        assert validate_symbol("  AAPL ") == "AAPL"

    def test_should_raise_type_error_for_non_string(self) -> None:
        """Test that non-string symbols are rejected."""
        with pytest.raises(TypeError, match="symbol must be str"):
            validate_symbol(123)

    def test_should_raise_validation_error_for_blank_symbol(self) -> None:
        """Test that blank symbols are rejected."""
        with pytest.raises(ValidationError, match="ticker must not be empty"):
            validate_symbol("   ", "ticker")


class TestValidatePositive:
    """Tests for validate_positive."""

    def test_should_accept_positive_numbers(self) -> None:
        """Test valid values pass through."""
        assert validate_positive(1.5, "price") == 1.5
        assert validate_positive(10, "quantity") == 10

    @pytest.mark.parametrize("value", [0, -1.0, math.inf, math.nan])
    def test_should_reject_non_positive_or_non_finite(self, value: float) -> None:
        """Test invalid numeric values."""
        with pytest.raises(ValidationError, match="price must be positive"):
            validate_positive(value, "price")

    @pytest.mark.parametrize("value", [True, "10", None])
    def test_should_reject_non_numeric(self, value: object) -> None:
        """Test non-numeric values, including booleans."""
        with pytest.raises(ValidationError, match="quantity must be numeric"):
            validate_positive(value, "quantity")  # type: ignore[arg-type]


class TestValidatePeriod:
    """Tests for validate_period."""

    def test_should_accept_positive_integer(self) -> None:
        """Test valid period."""
        assert validate_period(14) == 14

    @pytest.mark.parametrize("period", [0, -3, 2.5, True])
    def test_should_reject_invalid_period(self, period: object) -> None:
        """Test invalid periods."""
        with pytest.raises(ValidationError, match="period must be a positive integer"):
            validate_period(period)  # type: ignore[arg-type]
