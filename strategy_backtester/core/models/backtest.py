"""
Backtest configuration and results models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Any

from strategy_backtester.core.constants import DEFAULT_INITIAL_CAPITAL
from strategy_backtester.core.enums import BacktestStatus, DecisionAction, Timeframe
from strategy_backtester.core.exceptions.backtest import ConfigurationError
from strategy_backtester.core.utils.dates import ensure_utc

from .portfolio_core import PortfolioState
from .strategy_config import StrategyConfig
from .trade import Trade


def _as_datetime(value: date) -> datetime:
    """Normalize a date or datetime to an aware UTC datetime."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    return datetime(value.year, value.month, value.day, tzinfo=UTC)


@dataclass(frozen=True)
class BacktestConfig:
    """Configuration for a backtest execution."""

    name: str
    strategy: StrategyConfig
    symbols: tuple[str, ...]
    start_date: date
    end_date: date
    timeframe: Timeframe
    initial_capital: float = DEFAULT_INITIAL_CAPITAL
    description: str = ""
    user_id: str | None = None
    model_id: str | None = None

    def __post_init__(self) -> None:
        """Freeze the symbol list."""
        if self.symbols is not None and not isinstance(self.symbols, tuple):
            object.__setattr__(self, "symbols", tuple(self.symbols))

    def is_valid_date_range(self) -> bool:
        """Validate that end_date is after start_date."""
        return _as_datetime(self.end_date) > _as_datetime(self.start_date)

    def duration_days(self) -> int:
        """Calculate duration of backtest in days."""
        return (_as_datetime(self.end_date) - _as_datetime(self.start_date)).days

    def is_valid_capital(self) -> bool:
        """Validate initial capital is positive."""
        return self.initial_capital > 0

    def validate(self) -> None:
        """Validate the configuration before any I/O.

        Raises:
            ConfigurationError: Naming the first invalid field
        """
        if self.strategy is None:
            raise ConfigurationError("Strategy is required")
        if not isinstance(self.strategy, StrategyConfig):
            raise ConfigurationError(
                f"Strategy must be a StrategyConfig, got {type(self.strategy).__name__}"
            )
        self.strategy.validate()

        if not self.symbols:
            raise ConfigurationError("Symbols array is required")
        if any(not isinstance(symbol, str) or not symbol.strip() for symbol in self.symbols):
            raise ConfigurationError(f"Symbols must be non-empty strings, got {self.symbols}")
        if len(set(self.symbols)) != len(self.symbols):
            raise ConfigurationError(f"Symbols must be unique, got {self.symbols}")

        if not isinstance(self.start_date, date):
            raise ConfigurationError("Start date is required")
        if not isinstance(self.end_date, date):
            raise ConfigurationError("End date is required")
        if not self.is_valid_date_range():
            raise ConfigurationError("Start date must be before end date")

        if not isinstance(self.timeframe, Timeframe):
            raise ConfigurationError("Timeframe is required")
        if not self.is_valid_capital():
            raise ConfigurationError(
                f"Initial capital must be positive, got {self.initial_capital}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "strategy": self.strategy.to_dict(),
            "symbols": list(self.symbols),
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "timeframe": self.timeframe.value,
            "initial_capital": self.initial_capital,
            "user_id": self.user_id,
            "model_id": self.model_id,
        }


@dataclass(frozen=True)
class DailyEquitySample:
    """Mark-to-market equity at the close of one simulated date."""

    date: date
    equity: float

    def to_dict(self) -> dict[str, Any]:
        """Convert sample to dictionary."""
        return {"date": self.date.isoformat(), "equity": self.equity}


@dataclass(frozen=True)
class PerformanceMetrics:
    """Standardized performance metrics of a completed run."""

    total_return: float = 0.0
    annualized_return: float = 0.0
    max_drawdown: float = 0.0
    sharpe_ratio: float = 0.0
    win_rate: float = 0.0
    trade_count: int = 0

    @classmethod
    def zero(cls, trade_count: int = 0) -> "PerformanceMetrics":
        """All-zero metrics for degenerate runs."""
        return cls(trade_count=trade_count)

    def to_dict(self) -> dict[str, float]:
        """Convert metrics to dictionary."""
        return {
            "total_return": self.total_return,
            "annualized_return": self.annualized_return,
            "max_drawdown": self.max_drawdown,
            "sharpe_ratio": self.sharpe_ratio,
            "win_rate": self.win_rate,
            "trade_count": self.trade_count,
        }


@dataclass(frozen=True)
class ExecutionFailure:
    """A decision the ledger rejected. Recorded, never fatal."""

    date: date
    symbol: str
    action: DecisionAction
    quantity: float | None
    error_type: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert failure to dictionary."""
        return {
            "date": self.date.isoformat(),
            "symbol": self.symbol,
            "action": self.action.value,
            "quantity": self.quantity,
            "error_type": self.error_type,
            "message": self.message,
        }


@dataclass(frozen=True)
class StoredBacktest:
    """Receipt returned by a persistence sink."""

    id: str
    created_at: datetime


@dataclass(frozen=True)
class BacktestEvent:
    """Lifecycle or progress notification emitted by the engine.

    Progress events (status SIMULATING) carry the simulated date, its
    equity and the fraction of dates processed so far.
    """

    status: BacktestStatus
    name: str
    date: date | None = None
    equity: float | None = None
    progress: float | None = None
    message: str | None = None


@dataclass
class BacktestResult:
    """Results from a backtest execution."""

    config: BacktestConfig
    trades: list[Trade]
    daily_equity: list[DailyEquitySample]
    metrics: PerformanceMetrics
    final_portfolio: PortfolioState
    failed_executions: list[ExecutionFailure] = field(default_factory=list)
    status: BacktestStatus = BacktestStatus.METRICS_COMPUTED
    storage: StoredBacktest | None = None
    persistence_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert results to dictionary."""
        return {
            "config": self.config.to_dict(),
            "status": self.status.value,
            "metrics": self.metrics.to_dict(),
            "trades": [trade.to_dict() for trade in self.trades],
            "daily_equity": [sample.to_dict() for sample in self.daily_equity],
            "final_portfolio": self.final_portfolio.to_dict(),
            "failed_executions": [failure.to_dict() for failure in self.failed_executions],
            "storage": (
                {"id": self.storage.id, "created_at": self.storage.created_at.isoformat()}
                if self.storage
                else None
            ),
            "persistence_error": self.persistence_error,
        }
