"""
Push-style price stream.

A PriceStream hands each incoming bar to every subscribed indicator,
labelling it with a stream bar index that starts at 0 and increases by one
per bar. Delivery is synchronous and in subscription order.
"""

import logging
from typing import List, Protocol

import pandas as pd

from .data import DOHLCV, iter_ticks

logger = logging.getLogger(__name__)


class TickSubscriber(Protocol):
    def receive_dohlcv_tick(self, tick: DOHLCV, stream_bar_index: int) -> None:
        ...


class PriceStream:
    """Fan-out of DOHLCV bars to tick subscribers."""

    def __init__(self) -> None:
        self._subscribers: List[TickSubscriber] = []
        self._bar_index = -1

    @property
    def bar_index(self) -> int:
        """Index of the last bar delivered, or -1 before the first one."""
        return self._bar_index

    @property
    def subscribers(self) -> List[TickSubscriber]:
        return list(self._subscribers)

    def add_tick_subscription(self, subscriber: TickSubscriber) -> None:
        self._subscribers.append(subscriber)

    def remove_tick_subscription(self, subscriber: TickSubscriber) -> None:
        try:
            self._subscribers.remove(subscriber)
        except ValueError:
            logger.warning("Subscriber %r was not subscribed to this stream", subscriber)

    def receive_tick(self, tick: DOHLCV) -> int:
        """
        Deliver one bar to all subscribers.

        Args:
            tick: The incoming bar

        Returns:
            The stream bar index assigned to the bar
        """
        self._bar_index += 1
        # subscribers may unsubscribe while a bar is being delivered
        for subscriber in list(self._subscribers):
            subscriber.receive_dohlcv_tick(tick, self._bar_index)
        return self._bar_index

    def replay(self, df: pd.DataFrame) -> int:
        """
        Feed every row of an OHLCV DataFrame through the stream.

        Returns:
            Number of bars delivered
        """
        delivered = 0
        for tick in iter_ticks(df):
            self.receive_tick(tick)
            delivered += 1
        logger.debug("Replayed %d bars to %d subscribers", delivered, len(self._subscribers))
        return delivered
