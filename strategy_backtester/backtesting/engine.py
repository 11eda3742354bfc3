"""
Backtest engine - the simulation loop.

Replays historical bars day by day against a decision source, keeps the
portfolio ledger, and derives performance metrics once the walk ends.
Runs move through ``BacktestStatus`` states and report lifecycle and
per-date progress to an optional listener.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date

from loguru import logger

from strategy_backtester.core.enums import BacktestStatus, DecisionAction
from strategy_backtester.core.exceptions.backtest import (
    DataFetchError,
    LedgerError,
    PositionNotFoundError,
    StrategyError,
    ValidationError,
)
from strategy_backtester.core.interfaces.data import IMarketDataProvider
from strategy_backtester.core.interfaces.storage import IResultStore
from strategy_backtester.core.interfaces.strategy import (
    DecisionContext,
    IDecisionOracle,
    IDecisionSource,
)
from strategy_backtester.core.models.backtest import (
    BacktestConfig,
    BacktestEvent,
    BacktestResult,
    DailyEquitySample,
    ExecutionFailure,
)
from strategy_backtester.core.models.bar import Bar, BarsBySymbol
from strategy_backtester.core.models.decision import Decision
from strategy_backtester.core.models.portfolio import Portfolio
from strategy_backtester.core.models.trade import Trade
from strategy_backtester.core.utils.dates import DayTruncator, to_utc_date
from strategy_backtester.strategies.factory import create_decision_source

from .metrics import calculate_metrics
from .time_series import TimeSeriesWalker

EventListener = Callable[[BacktestEvent], None]


@dataclass
class ExecutionResult:
    """Outcome of executing one date's decisions."""

    trades: list[Trade] = field(default_factory=list)
    failures: list[ExecutionFailure] = field(default_factory=list)


class BacktestEngine:
    """
    Simulation loop over historical market data.

    Collaborators are injected: the market-data provider is required; the
    decision oracle is only needed for the LLM-assisted strategy; the
    result store and event listener are optional.
    """

    def __init__(
        self,
        market_data: IMarketDataProvider,
        oracle: IDecisionOracle | None = None,
        store: IResultStore | None = None,
        listener: EventListener | None = None,
        truncate: DayTruncator = to_utc_date,
    ):
        self.market_data = market_data
        self.oracle = oracle
        self.store = store
        self.listener = listener
        self.truncate = truncate

    async def run_backtest(self, config: BacktestConfig) -> BacktestResult:
        """
        Run one backtest to completion.

        Args:
            config: Backtest configuration

        Returns:
            Completed BacktestResult

        Raises:
            ConfigurationError: If the configuration is invalid (before any I/O)
            DataFetchError: If historical data cannot be obtained
            StrategyError: If the decision source fails
        """
        log = logger.bind(backtest=config.name)
        self._emit(BacktestEvent(BacktestStatus.CREATED, config.name, message="Backtest started"))

        try:
            config.validate()
            source = create_decision_source(config.strategy, self.oracle)
            log.info(
                f"Backtest validated: {config.strategy.display_name} on "
                f"{', '.join(config.symbols)} from {config.start_date} to {config.end_date} "
                f"({config.duration_days()} days)"
            )
            self._emit(
                BacktestEvent(
                    BacktestStatus.VALIDATED, config.name, message="Configuration validated"
                )
            )

            bars = await self._fetch_bars(config)
            log.info(
                f"Fetched {sum(len(b) for b in bars.values())} bars for {len(bars)} symbols"
            )
            self._emit(
                BacktestEvent(
                    BacktestStatus.DATA_FETCHED, config.name, message="Historical data fetched"
                )
            )

            result = await self._simulate(config, source, bars)
            result.status = BacktestStatus.METRICS_COMPUTED
            log.info(
                f"Backtest simulated: {len(result.trades)} trades, "
                f"{len(result.failed_executions)} failed executions, "
                f"total return {result.metrics.total_return:.4f}"
            )

            if self.store is not None:
                await self._persist(config, result)

            result.status = BacktestStatus.COMPLETED
        except Exception as e:
            log.error(f"Backtest failed: {type(e).__name__}: {e}")
            self._emit(BacktestEvent(BacktestStatus.FAILED, config.name, message=str(e)))
            raise

        self._emit(
            BacktestEvent(BacktestStatus.COMPLETED, config.name, message="Backtest completed")
        )
        return result

    async def _fetch_bars(self, config: BacktestConfig) -> BarsBySymbol:
        try:
            bars = await self.market_data.get_historical_bars(
                list(config.symbols), config.timeframe, config.start_date, config.end_date
            )
        except DataFetchError:
            raise
        except Exception as e:
            raise DataFetchError(f"Failed to fetch historical data: {e}") from e

        return bars

    async def _simulate(
        self, config: BacktestConfig, source: IDecisionSource, bars: BarsBySymbol
    ) -> BacktestResult:
        """Walk every date in order, carrying the ledger forward."""
        log = logger.bind(backtest=config.name)
        portfolio = Portfolio.with_capital(config.initial_capital)
        walker = TimeSeriesWalker(bars, self.truncate)
        total_dates = len(walker)

        trades: list[Trade] = []
        failures: list[ExecutionFailure] = []
        daily_equity: list[DailyEquitySample] = []

        for index, (day, day_slice, history) in enumerate(walker.walk()):
            if not day_slice:
                continue

            context = DecisionContext(
                date=day,
                symbols=config.symbols,
                market_data=day_slice,
                history=history,
                positions=portfolio.snapshot().positions,
            )
            decisions = await self._decide(source, context)

            execution = self.execute_decisions(portfolio, decisions, day_slice, day)
            trades.extend(execution.trades)
            failures.extend(execution.failures)

            equity = portfolio.mark_to_market(closing_prices(day_slice))
            daily_equity.append(DailyEquitySample(date=day, equity=equity))
            log.debug(f"{day}: {len(execution.trades)} trades, equity {equity:.2f}")

            self._emit(
                BacktestEvent(
                    BacktestStatus.SIMULATING,
                    config.name,
                    date=day,
                    equity=equity,
                    progress=index / total_dates,
                )
            )

        return BacktestResult(
            config=config,
            trades=trades,
            daily_equity=daily_equity,
            metrics=calculate_metrics(daily_equity, trades),
            final_portfolio=portfolio.snapshot(),
            failed_executions=failures,
        )

    @staticmethod
    async def _decide(source: IDecisionSource, context: DecisionContext) -> list[Decision]:
        try:
            return await source.decide(context)
        except StrategyError:
            raise
        except Exception as e:
            raise StrategyError(f"Decision source failed on {context.date}: {e}") from e

    def execute_decisions(
        self,
        portfolio: Portfolio,
        decisions: Sequence[Decision],
        day_slice: Mapping[str, Sequence[Bar]],
        day: date,
    ) -> ExecutionResult:
        """
        Execute one date's decisions against the ledger at the date's close.

        Rejected orders are recorded as failures and never stop the
        remaining decisions.
        """
        result = ExecutionResult()

        for decision in decisions:
            if decision.action == DecisionAction.HOLD:
                continue

            bars = day_slice.get(decision.symbol)
            if not bars:
                logger.warning(f"No market data for {decision.symbol} on {day}, skipping decision")
                continue
            price = bars[-1].close

            try:
                trade = self._execute(portfolio, decision, price, day)
            except (LedgerError, ValidationError) as e:
                logger.warning(
                    f"Failed to execute {decision.action.value} for {decision.symbol} "
                    f"on {day}: {e}"
                )
                result.failures.append(
                    ExecutionFailure(
                        date=day,
                        symbol=decision.symbol,
                        action=decision.action,
                        quantity=decision.quantity,
                        error_type=type(e).__name__,
                        message=str(e),
                    )
                )
                continue

            if trade is not None:
                result.trades.append(trade)

        return result

    @staticmethod
    def _execute(
        portfolio: Portfolio, decision: Decision, price: float, day: date
    ) -> Trade | None:
        if decision.action == DecisionAction.BUY:
            if not decision.quantity or decision.quantity <= 0:
                logger.debug(f"Buy for {decision.symbol} has no positive quantity, skipping")
                return None
            return portfolio.buy(decision.symbol, decision.quantity, price, day)

        # Omitted quantity sells the whole holding
        quantity = decision.quantity or portfolio.get_position_quantity(decision.symbol)
        if not quantity:
            raise PositionNotFoundError(decision.symbol)
        return portfolio.sell(decision.symbol, quantity, price, day)

    async def _persist(self, config: BacktestConfig, result: BacktestResult) -> None:
        log = logger.bind(backtest=config.name)
        try:
            result.storage = await self.store.store_backtest_result(config, result)
        except Exception as e:
            log.warning(f"Failed to store backtest result: {e}")
            result.persistence_error = str(e)
            return

        result.status = BacktestStatus.PERSISTED
        log.info(f"Backtest result stored with id {result.storage.id}")

    def _emit(self, event: BacktestEvent) -> None:
        if self.listener is None:
            return
        try:
            self.listener(event)
        except Exception as e:
            logger.warning(f"Backtest listener raised on {event.status.value} event: {e}")


def closing_prices(day_slice: Mapping[str, Sequence[Bar]]) -> dict[str, float]:
    """Last close per symbol in a date's slice."""
    return {symbol: bars[-1].close for symbol, bars in day_slice.items() if bars}
