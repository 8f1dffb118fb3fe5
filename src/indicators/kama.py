"""
Kaufman Adaptive Moving Average (KAMA), streaming implementation.

KAMA smooths a price series with an exponential filter whose smoothing
constant adapts to the efficiency of the recent move: the net change over
``period`` bars divided by the total bar-to-bar churn over the same bars.
Trending markets push the constant towards the fast (2-bar) EMA constant,
choppy markets towards the slow (30-bar) one.

Two classes are provided:
- AdaptiveSmoother: consumes one float per call and pushes each result to a
  callback. Holds no result storage.
- Kama: an AdaptiveSmoother that collects its results into ``data`` and
  consumes DOHLCV bars from a PriceStream.
"""

import logging
import numbers
from collections import deque
from typing import Callable, Deque, Iterable, Iterator, List, Optional, Tuple

from core.config import KamaParams
from core.data import DOHLCV, DataSelectionFunc, get_selector, use_close_price
from core.stream import PriceStream

from .base import BaseIndicator, FloatBounds

logger = logging.getLogger(__name__)

FAST_KAMA = 2
SLOW_KAMA = 30
DEFAULT_TIME_PERIOD = 25
MINIMUM_TIME_PERIOD = 2
MAXIMUM_LOOKBACK_PERIOD = 100000

SLOW_CONSTANT = 2.0 / (SLOW_KAMA + 1.0)
FAST_CONSTANT = 2.0 / (FAST_KAMA + 1.0)
CONSTANT_DIFF = FAST_CONSTANT - SLOW_CONSTANT

ZERO_EPSILON = 0.00000000000001

ValueAvailableAction = Callable[[float, int], None]


class InvalidParameterError(ValueError):
    """Raised when an indicator is constructed with an invalid parameter."""


# ============================================================================
# Recurrence Helpers
# ============================================================================

def is_zero(value: float) -> bool:
    return -ZERO_EPSILON < value < ZERO_EPSILON


def efficiency_ratio(period_roc: float, sum_roc: float) -> float:
    """
    Kaufman efficiency ratio.

    Args:
        period_roc: Net (signed) change over the lookback window
        sum_roc: Sum of absolute bar-to-bar changes over the same window

    Returns:
        Ratio in [0, 1]; 1.0 when the noise sum does not exceed the net
        change or is numerically zero
    """
    if sum_roc <= period_roc or is_zero(sum_roc):
        return 1.0
    return abs(period_roc / sum_roc)


def smoothing_constant(er: float) -> float:
    """
    Map an efficiency ratio onto the squared adaptive smoothing constant.

    The result lies between the slow and the fast EMA constants, squared.
    """
    sc = (er * CONSTANT_DIFF) + SLOW_CONSTANT
    return sc * sc


# ============================================================================
# Streaming Indicator
# ============================================================================

class AdaptiveSmoother(BaseIndicator, FloatBounds):
    """
    KAMA without result storage.

    Feed samples in arrival order with submit(); once the warm-up is over
    every call invokes ``value_available_action(value, index)`` exactly once
    from within submit(). Not safe for concurrent use: serialise calls or
    use one instance per stream.

    Args:
        time_period: Lookback window length, 2..MAXIMUM_LOOKBACK_PERIOD
        value_available_action: Callback receiving (value, stream_bar_index)

    Raises:
        InvalidParameterError: If the callback is missing or time_period is
            out of range
    """

    def __init__(
        self,
        time_period: int,
        value_available_action: Optional[ValueAvailableAction],
    ) -> None:
        # an indicator without storage has no other way to surface results
        if value_available_action is None:
            raise InvalidParameterError("value_available_action must not be None")

        if isinstance(time_period, bool) or not isinstance(time_period, numbers.Integral):
            raise InvalidParameterError(
                f"time_period must be an integer, got {type(time_period).__name__}"
            )
        time_period = int(time_period)

        if time_period < MINIMUM_TIME_PERIOD:
            raise InvalidParameterError(
                f"time_period is less than the minimum ({MINIMUM_TIME_PERIOD})"
            )

        if time_period > MAXIMUM_LOOKBACK_PERIOD:
            raise InvalidParameterError(
                f"time_period is greater than the maximum ({MAXIMUM_LOOKBACK_PERIOD})"
            )

        BaseIndicator.__init__(self, time_period)
        FloatBounds.__init__(self)

        self._time_period = time_period
        self._value_available_action = value_available_action

        self._period_counter = -(time_period + 1)
        self._period_history: Deque[float] = deque()
        self._sum_roc = 0.0
        self._period_roc = 0.0
        self._previous_close: Optional[float] = None
        self._previous_kama = 0.0

        logger.debug("Created KAMA smoother with time_period=%d", time_period)

    @property
    def time_period(self) -> int:
        return self._time_period

    def submit(self, sample: float, index: int) -> None:
        """
        Consume one sample.

        Args:
            sample: The input value (e.g. a close price)
            index: Stream bar index of the sample, non-decreasing across calls
        """
        self._period_counter += 1
        self._period_history.append(sample)

        if self._period_counter <= 0 and self._previous_close is not None:
            self._sum_roc += abs(sample - self._previous_close)

        if self._period_counter == 0:
            close_minus_n = self._period_history[0]
            # bootstrap: the first KAMA is seeded from the previous raw input
            self._previous_kama = self._previous_close
            self._period_roc = sample - close_minus_n

            self._emit(sample, index)

        elif self._period_counter > 0:
            close_minus_n = self._period_history[0]
            close_minus_n1 = self._period_history[1]
            self._period_roc = sample - close_minus_n1

            self._sum_roc -= abs(close_minus_n1 - close_minus_n)
            self._sum_roc += abs(sample - self._previous_close)

            self._emit(sample, index)

        self._previous_close = sample

        if len(self._period_history) > (self._time_period + 1):
            self._period_history.popleft()

    def _emit(self, sample: float, index: int) -> None:
        er = efficiency_ratio(self._period_roc, self._sum_roc)
        sc = smoothing_constant(er)
        self._previous_kama = ((sample - self._previous_kama) * sc) + self._previous_kama

        result = self._previous_kama

        self._data_length += 1

        if self._valid_from_bar == -1:
            self._valid_from_bar = index
            logger.debug("KAMA(%d) valid from bar %d", self._time_period, index)

        self._update_bounds(result)

        self._value_available_action(result, index)


class Kama(AdaptiveSmoother):
    """
    KAMA with result storage, for online and offline usage.

    Results are appended to ``data`` as they become available. Bars are
    received from a PriceStream through receive_dohlcv_tick(), which picks
    the input value with ``select_data``.
    """

    def __init__(
        self,
        time_period: int = DEFAULT_TIME_PERIOD,
        select_data: DataSelectionFunc = use_close_price,
    ) -> None:
        if select_data is None:
            raise InvalidParameterError("select_data must not be None")
        self.data: List[float] = []
        self.expected_length: Optional[int] = None
        self._select_data = select_data
        super().__init__(time_period, self._store)

    def _store(self, value: float, stream_bar_index: int) -> None:
        self.data.append(value)

    @classmethod
    def default(cls) -> "Kama":
        """KAMA over close prices with a time period of 25."""
        return cls(DEFAULT_TIME_PERIOD, use_close_price)

    @classmethod
    def from_params(cls, params: KamaParams) -> "Kama":
        try:
            select_data = get_selector(params.source)
        except ValueError as e:
            raise InvalidParameterError(str(e)) from e
        return cls(params.timePeriod, select_data)

    @classmethod
    def with_known_source_length(
        cls,
        source_length: int,
        time_period: int = DEFAULT_TIME_PERIOD,
        select_data: DataSelectionFunc = use_close_price,
    ) -> "Kama":
        """
        KAMA for offline usage over a source of known length.

        ``expected_length`` is set to the number of results the source
        will produce.
        """
        ind = cls(time_period, select_data)
        ind.expected_length = max(0, source_length - ind.lookback_period)
        return ind

    @classmethod
    def for_stream(
        cls,
        price_stream: PriceStream,
        time_period: int = DEFAULT_TIME_PERIOD,
        select_data: DataSelectionFunc = use_close_price,
    ) -> "Kama":
        """KAMA subscribed to ``price_stream``."""
        ind = cls(time_period, select_data)
        price_stream.add_tick_subscription(ind)
        return ind

    def receive_dohlcv_tick(self, tick: DOHLCV, stream_bar_index: int) -> None:
        self.submit(self._select_data(tick), stream_bar_index)


def iter_kama(
    values: Iterable[float],
    time_period: int = DEFAULT_TIME_PERIOD,
) -> Iterator[Tuple[int, float]]:
    """
    Pull-style KAMA over an iterable of values.

    Values are labelled 0, 1, 2, ... in iteration order.

    Yields:
        (index, value) for every emitted result
    """
    pending: List[Tuple[int, float]] = []
    smoother = AdaptiveSmoother(time_period, lambda value, index: pending.append((index, value)))
    for index, value in enumerate(values):
        smoother.submit(value, index)
        if pending:
            yield from pending
            pending.clear()
