"""
Core constants and limits.

Defines system-wide constants used by the ledger, indicator library,
decision sources and metrics calculator.
"""

# Portfolio Defaults
DEFAULT_INITIAL_CAPITAL = 100000.0  # Starting cash when none is configured

# Order Sizing
DEFAULT_UNIT_QUANTITY = 1.0  # Fixed order size emitted by technical strategies

# Indicator Guards
RSI_LOSS_EPSILON = 0.001  # Substituted for an average loss of exactly zero
ZSCORE_STDEV_FLOOR = 1e-12  # Stdev at or below this fraction of the MA counts as flat

# Calendar
DAYS_PER_YEAR = 365  # Used for annualization of total return
TRADING_DAYS_PER_YEAR = 252  # Used for Sharpe ratio annualization

# Strategy Defaults
MOMENTUM_LOOKBACK_DEFAULT = 14
MOMENTUM_OVERBOUGHT_DEFAULT = 70.0
MOMENTUM_OVERSOLD_DEFAULT = 30.0
MEAN_REVERSION_LOOKBACK_DEFAULT = 20
MEAN_REVERSION_DEVIATION_DEFAULT = 2.0
TREND_SHORT_PERIOD_DEFAULT = 9
TREND_LONG_PERIOD_DEFAULT = 21
LLM_MODEL_DEFAULT = "gpt-4"
LLM_MAX_POSITIONS_DEFAULT = 5

# Ledger
POSITION_DUST_TOLERANCE = 1e-9  # Remaining quantity treated as fully closed

INSUFFICIENT_DATA_REASON = "Insufficient data for analysis"
