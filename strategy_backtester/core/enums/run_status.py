"""
Backtest run status enumerations.

This module defines the lifecycle states of a single backtest run.
"""

from enum import StrEnum


class BacktestStatus(StrEnum):
    """
    Backtest lifecycle states.

    Runs move forward through these states in declaration order;
    FAILED is reachable from any state.
    """

    CREATED = "created"
    VALIDATED = "validated"
    DATA_FETCHED = "data_fetched"
    SIMULATING = "simulating"
    METRICS_COMPUTED = "metrics_computed"
    PERSISTED = "persisted"
    COMPLETED = "completed"
    FAILED = "failed"
