"""
Validation utilities for core domain models.

Provides consistent validation across the application.
"""

import math
from typing import Any

from strategy_backtester.core.exceptions.backtest import ValidationError


def validate_symbol(symbol: Any, param_name: str = "symbol") -> str:
    """Validate that a value is a non-empty ticker symbol.

    Args:
        symbol: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated symbol, stripped of surrounding whitespace

    Raises:
        TypeError: If symbol is not a string
        ValidationError: If symbol is blank
    """
    if not isinstance(symbol, str):
        raise TypeError(f"{param_name} must be str, got {type(symbol).__name__}")
    stripped = symbol.strip()
    if not stripped:
        raise ValidationError(f"{param_name} must not be empty")
    return stripped


def validate_positive(value: float, param_name: str) -> float:
    """Validate that a numeric value is positive and finite.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        ValidationError: If value is not positive
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationError(f"{param_name} must be numeric, got {type(value).__name__}")
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return value


def validate_period(period: int, param_name: str = "period") -> int:
    """Validate an indicator lookback period.

    Args:
        period: Number of samples in the trailing window
        param_name: Parameter name for error messages

    Returns:
        The validated period

    Raises:
        ValidationError: If period is not a positive integer
    """
    if isinstance(period, bool) or not isinstance(period, int) or period < 1:
        raise ValidationError(f"{param_name} must be a positive integer, got {period!r}")
    return period
