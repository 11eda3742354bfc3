"""
Historical market data providers.

This module provides the CSV-backed and in-memory implementations of
the market-data collaborator consumed by the backtest engine.
"""

import asyncio
from collections.abc import Mapping, Sequence
from datetime import date
from pathlib import Path

import pandas as pd
from loguru import logger

from strategy_backtester.core.enums import Timeframe
from strategy_backtester.core.exceptions.backtest import DataFetchError, ValidationError
from strategy_backtester.core.interfaces.data import IDataValidator, IMarketDataProvider
from strategy_backtester.core.models.bar import Bar, BarsBySymbol

from .ohlcv_frames import (
    bars_to_frame,
    filter_by_calendar_range,
    frame_to_bars,
    normalize_timestamps,
)
from .ohlcv_validator import OHLCVValidator


class CSVMarketDataProvider(IMarketDataProvider):
    """
    CSV-based historical data provider.

    Expects one file per symbol and timeframe laid out as
    ``<data_directory>/<timeframe>/<SYMBOL>.csv`` with the columns
    timestamp, open, high, low, close, volume. Timestamps may be epoch
    milliseconds or ISO-8601 strings.
    """

    def __init__(
        self, data_directory: str | Path = "data", validator: IDataValidator | None = None
    ):
        """
        Initialize the CSV market data provider.

        Args:
            data_directory: Root directory containing market data
            validator: OHLCV frame validator (defaults to OHLCVValidator)
        """
        self.data_dir = Path(data_directory)
        self.validator = validator or OHLCVValidator()
        if not self.data_dir.exists():
            raise DataFetchError(f"Data directory not found: {self.data_dir}")

    def file_path(self, symbol: str, timeframe: Timeframe) -> Path:
        """Path of the CSV file holding a symbol's bars."""
        return self.data_dir / timeframe.value / f"{symbol}.csv"

    async def get_historical_bars(
        self, symbols: Sequence[str], timeframe: Timeframe, start: date, end: date
    ) -> BarsBySymbol:
        """
        Load bars for every symbol within ``[start, end]``.

        Raises:
            DataFetchError: If a file is missing, unreadable or invalid
        """
        result: BarsBySymbol = {}
        for symbol in symbols:
            frame = await self._load_symbol_frame(symbol, timeframe)
            frame = filter_by_calendar_range(frame, start, end)
            result[symbol] = frame_to_bars(frame)
            logger.debug(f"Loaded {len(result[symbol])} {timeframe.value} bars for {symbol}")

        logger.info(
            f"Loaded historical data for {len(symbols)} symbols "
            f"({sum(len(bars) for bars in result.values())} bars)"
        )
        return result

    async def _load_symbol_frame(self, symbol: str, timeframe: Timeframe) -> pd.DataFrame:
        """Read, normalize and validate one symbol's CSV file."""
        path = self.file_path(symbol, timeframe)
        if not path.exists():
            raise DataFetchError(f"Data file not found for {symbol}: {path}")

        try:
            raw = await self._read_csv(path)
            frame = normalize_timestamps(raw)
            self.validator.validate_data(frame)
            return frame
        except pd.errors.EmptyDataError as e:
            raise DataFetchError(f"Data file is empty for {symbol}: {path.name}") from e
        except ValidationError as e:
            logger.error(f"Invalid OHLCV data in {path.name}: {e}")
            raise DataFetchError(f"Invalid OHLCV data for {symbol}: {e}") from e
        except (OSError, pd.errors.ParserError, ValueError, TypeError) as e:
            logger.error(f"Failed to read {path.name} ({type(e).__name__}): {e}")
            raise DataFetchError(f"Failed to load CSV file: {path.name}") from e

    async def _read_csv(self, path: Path) -> pd.DataFrame:
        """Read a CSV file without blocking the event loop."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, pd.read_csv, path)


class InMemoryMarketDataProvider(IMarketDataProvider):
    """
    Provider serving preloaded OHLCV frames or bar lists.

    Useful for notebooks and tests where data already lives in memory.
    """

    def __init__(
        self,
        data: Mapping[str, pd.DataFrame | Sequence[Bar]],
        validator: IDataValidator | None = None,
    ):
        self.validator = validator or OHLCVValidator()
        self._frames: dict[str, pd.DataFrame] = {}
        for symbol, source in data.items():
            if isinstance(source, pd.DataFrame):
                frame = normalize_timestamps(source)
            else:
                frame = bars_to_frame(list(source))
            self.validator.validate_data(frame)
            self._frames[symbol] = frame

    @property
    def symbols(self) -> list[str]:
        """Symbols with loaded data."""
        return sorted(self._frames)

    async def get_historical_bars(
        self, symbols: Sequence[str], timeframe: Timeframe, start: date, end: date
    ) -> BarsBySymbol:
        """Return bars for every symbol within ``[start, end]``."""
        missing = [symbol for symbol in symbols if symbol not in self._frames]
        if missing:
            raise DataFetchError(f"No data loaded for symbols: {missing}")

        logger.debug(f"Serving in-memory {timeframe.value} bars for {list(symbols)}")
        return {
            symbol: frame_to_bars(filter_by_calendar_range(self._frames[symbol], start, end))
            for symbol in symbols
        }
