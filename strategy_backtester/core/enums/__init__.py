"""
Core enumerations for the backtesting engine.

This module provides centralized enumerations for domain concepts
like trade sides, strategy decisions, strategy kinds, timeframes and
run lifecycle states.
"""

from .run_status import BacktestStatus
from .strategy_kinds import StrategyKind
from .timeframes import Timeframe
from .trade_actions import DecisionAction, TradeSide

__all__ = ["BacktestStatus", "DecisionAction", "StrategyKind", "Timeframe", "TradeSide"]
