from .comparison import BacktestComparison, ComparisonEntry, compare_backtests
from .engine import BacktestEngine, ExecutionResult
from .metrics import calculate_metrics
from .time_series import TimeSeriesWalker, extract_dates, slice_for_date

__all__ = [
    "BacktestComparison",
    "BacktestEngine",
    "ComparisonEntry",
    "ExecutionResult",
    "TimeSeriesWalker",
    "calculate_metrics",
    "compare_backtests",
    "extract_dates",
    "slice_for_date",
]
