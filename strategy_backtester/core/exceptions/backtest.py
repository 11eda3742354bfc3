"""
Custom exception hierarchy for the backtesting engine.

This module defines domain-specific exceptions for better error handling.
"""


class BacktestException(Exception):
    """Base exception for all backtesting-related errors."""

    pass


class ValidationError(BacktestException):
    """Raised when input validation fails."""

    pass


class EmptyInputError(ValidationError):
    """Raised when an operation requires at least one input item."""

    def __init__(self, operation: str = "operation"):
        self.operation = operation
        super().__init__(f"No inputs provided for {operation}")


class ConfigurationError(BacktestException):
    """Raised when configuration is invalid."""

    pass


class DataError(BacktestException):
    """Raised when data access or processing fails."""

    pass


class DataFetchError(DataError):
    """Raised when historical market data cannot be obtained."""

    pass


class StrategyError(BacktestException):
    """Raised when strategy execution fails."""

    pass


class PersistenceError(BacktestException):
    """Raised when a backtest result cannot be stored."""

    pass


class LedgerError(BacktestException):
    """Raised when portfolio ledger operations fail."""

    pass


class InsufficientFundsError(LedgerError):
    """Raised when there are insufficient funds for an operation."""

    def __init__(self, required: float, available: float, operation: str = "operation"):
        self.required = required
        self.available = available
        self.operation = operation
        super().__init__(
            f"Insufficient funds for {operation}: required={required:.2f}, available={available:.2f}"
        )


class PositionNotFoundError(LedgerError):
    """Raised when trying to operate on a non-existent position."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Position not found for symbol: {symbol}")


class InsufficientSharesError(LedgerError):
    """Raised when selling more than the open position holds."""

    def __init__(self, symbol: str, requested: float, held: float):
        self.symbol = symbol
        self.requested = requested
        self.held = held
        super().__init__(
            f"Insufficient shares to sell {requested} of {symbol}: holding {held}"
        )
