"""
Shared indicator state.

Every streaming indicator tracks how many bars it needs before it produces
a value, how many values it has produced, from which stream bar those
values are valid, and the running bounds of everything it has emitted.
"""

import math


class BaseIndicator:
    """
    Lookback and result bookkeeping common to streaming indicators.

    Attributes are read through properties; only the owning indicator
    updates them while it processes ticks.
    """

    def __init__(self, lookback_period: int) -> None:
        self._lookback_period = lookback_period
        self._data_length = 0
        self._valid_from_bar = -1

    @property
    def lookback_period(self) -> int:
        """Number of bars consumed before the first valid result."""
        return self._lookback_period

    @property
    def data_length(self) -> int:
        """Number of results emitted so far."""
        return self._data_length

    @property
    def valid_from_bar(self) -> int:
        """Stream bar index of the first valid result, or -1 before it."""
        return self._valid_from_bar


class FloatBounds:
    """Running maximum and minimum of emitted float results."""

    def __init__(self) -> None:
        self._max_value = -math.inf
        self._min_value = math.inf

    @property
    def max_value(self) -> float:
        return self._max_value

    @property
    def min_value(self) -> float:
        return self._min_value

    def _update_bounds(self, value: float) -> None:
        if value > self._max_value:
            self._max_value = value
        if value < self._min_value:
            self._min_value = value
