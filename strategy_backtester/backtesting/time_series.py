"""
Time-series walker.

Derives the ordered simulation calendar from multi-symbol bar data and
slices the bars that fall on each calendar day. Calendar days are taken
with an injectable truncation function, UTC by default.
"""

from collections.abc import Iterator, Mapping, Sequence
from datetime import date
from itertools import islice

from strategy_backtester.core.models.bar import Bar, BarsBySymbol
from strategy_backtester.core.utils.dates import DayTruncator, to_utc_date


def extract_dates(
    bars_by_symbol: Mapping[str, Sequence[Bar]], truncate: DayTruncator = to_utc_date
) -> list[date]:
    """Return the sorted, duplicate-free calendar days covered by any bar."""
    return sorted({truncate(bar.timestamp) for bars in bars_by_symbol.values() for bar in bars})


def slice_for_date(
    bars_by_symbol: Mapping[str, Sequence[Bar]],
    day: date,
    truncate: DayTruncator = to_utc_date,
) -> BarsBySymbol:
    """Return each symbol's bars on ``day``; symbols without bars are omitted."""
    result: BarsBySymbol = {}
    for symbol, bars in bars_by_symbol.items():
        day_bars = [bar for bar in bars if truncate(bar.timestamp) == day]
        if day_bars:
            result[symbol] = day_bars
    return result


class HistoryView(Sequence[Bar]):
    """Read-only prefix of an append-only bar list.

    The walker only ever appends, so the first ``length`` bars never
    change and a view stays valid after the walk moves on.
    """

    __slots__ = ("_bars", "_length")

    def __init__(self, bars: list[Bar], length: int):
        self._bars = bars
        self._length = length

    def __len__(self) -> int:
        return self._length

    def __getitem__(self, index: int | slice) -> Bar | list[Bar]:
        if isinstance(index, slice):
            return [self._bars[i] for i in range(self._length)[index]]
        return self._bars[range(self._length)[index]]

    def __iter__(self) -> Iterator[Bar]:
        return islice(self._bars, self._length)

    def __repr__(self) -> str:
        return f"HistoryView({self._length} bars)"


class TimeSeriesWalker:
    """
    Single-pass walker over multi-symbol bar data.

    Groups every bar by calendar day once, then yields the slice for each
    day in ascending order together with the cumulative history of each
    symbol up to and including that day.
    """

    def __init__(
        self, bars_by_symbol: Mapping[str, Sequence[Bar]], truncate: DayTruncator = to_utc_date
    ):
        self._by_day: dict[date, BarsBySymbol] = {}
        for symbol, bars in bars_by_symbol.items():
            for bar in bars:
                day_slice = self._by_day.setdefault(truncate(bar.timestamp), {})
                day_slice.setdefault(symbol, []).append(bar)
        self._dates = sorted(self._by_day)

    @property
    def dates(self) -> list[date]:
        """Ordered simulation dates."""
        return list(self._dates)

    def __len__(self) -> int:
        return len(self._dates)

    def slice(self, day: date) -> BarsBySymbol:
        """Bars on ``day`` per symbol, empty when the day has no data."""
        return {symbol: list(bars) for symbol, bars in self._by_day.get(day, {}).items()}

    def walk(self) -> Iterator[tuple[date, BarsBySymbol, dict[str, HistoryView]]]:
        """Yield ``(day, day_slice, history)`` in ascending day order.

        ``history`` maps each symbol seen so far to a ``HistoryView`` of
        its bars up to and including ``day``. Building it costs one view
        per symbol, independent of how long the history is.
        """
        bars_seen: BarsBySymbol = {}
        for day in self._dates:
            day_slice = self.slice(day)
            for symbol, bars in day_slice.items():
                bars_seen.setdefault(symbol, []).extend(bars)
            yield day, day_slice, {
                symbol: HistoryView(bars, len(bars)) for symbol, bars in bars_seen.items()
            }
