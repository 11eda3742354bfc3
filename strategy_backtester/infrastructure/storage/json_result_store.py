"""
JSON file persistence for backtest results.

Writes one document per run, named ``<id>.json``, holding the run's
configuration, trade log, equity curve and metrics.
"""

import asyncio
import json
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from loguru import logger

from strategy_backtester.core.exceptions.backtest import PersistenceError
from strategy_backtester.core.interfaces.storage import IResultStore
from strategy_backtester.core.models.backtest import (
    BacktestConfig,
    BacktestResult,
    StoredBacktest,
)


class JSONResultStore(IResultStore):
    """Result store backed by a directory of JSON documents."""

    def __init__(self, directory: str | Path = "backtests"):
        self.directory = Path(directory)

    def file_path(self, backtest_id: str) -> Path:
        """Path of the document for ``backtest_id``."""
        return self.directory / f"{backtest_id}.json"

    async def store_backtest_result(
        self, config: BacktestConfig, result: BacktestResult
    ) -> StoredBacktest:
        """Persist a completed result and return its receipt."""
        stored = StoredBacktest(id=str(uuid.uuid4()), created_at=datetime.now(UTC))
        document = build_record(config, result, stored)

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._write, stored.id, document)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to store backtest results: {e}") from e

        logger.info(f"Stored backtest '{config.name}' at {self.file_path(stored.id)}")
        return stored

    def load(self, backtest_id: str) -> dict[str, Any]:
        """Read a stored document back.

        Raises:
            PersistenceError: If the document is missing or unreadable
        """
        path = self.file_path(backtest_id)
        try:
            with path.open(encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to load backtest {backtest_id}: {e}") from e

    def _write(self, backtest_id: str, document: dict[str, Any]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.file_path(backtest_id)
        tmp_path = path.with_suffix(".json.tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)
        tmp_path.replace(path)


def build_record(
    config: BacktestConfig, result: BacktestResult, stored: StoredBacktest
) -> dict[str, Any]:
    """Assemble the persisted record for one run."""
    return {
        "id": stored.id,
        "created_at": stored.created_at.isoformat(),
        "user_id": config.user_id,
        "name": config.name,
        "description": config.description,
        "strategy": config.strategy.to_dict(),
        "parameters": {
            "initial_capital": config.initial_capital,
            "timeframe": config.timeframe.value,
        },
        "symbols": list(config.symbols),
        "start_date": config.start_date.isoformat(),
        "end_date": config.end_date.isoformat(),
        "results": {
            "trades": [trade.to_dict() for trade in result.trades],
            "daily_equity": [sample.to_dict() for sample in result.daily_equity],
        },
        "metrics": result.metrics.to_dict(),
        "model_id": config.model_id,
    }
