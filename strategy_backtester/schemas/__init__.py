from .oracle import OracleDecision
from .requests import BacktestRequest, StrategyRequest, load_backtest_config

__all__ = ["BacktestRequest", "OracleDecision", "StrategyRequest", "load_backtest_config"]
