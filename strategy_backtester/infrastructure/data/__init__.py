"""
Market data infrastructure.

This module provides historical data providers, OHLCV validation and
the technical indicator library.
"""

from .market_data_providers import CSVMarketDataProvider, InMemoryMarketDataProvider
from .ohlcv_validator import OHLCVValidator

__all__ = ["CSVMarketDataProvider", "InMemoryMarketDataProvider", "OHLCVValidator"]
