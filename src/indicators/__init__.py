"""
Indicators package for streaming KAMA.

This package provides the Kaufman Adaptive Moving Average:
- AdaptiveSmoother: push-style streaming core, no storage
- Kama: streaming indicator that stores its results and consumes price bars
- iter_kama: pull-style generator over an iterable of values
- kama: offline helper over a pandas Series
"""

from .base import BaseIndicator, FloatBounds

from .kama import (
    AdaptiveSmoother,
    Kama,
    InvalidParameterError,
    iter_kama,
    efficiency_ratio,
    smoothing_constant,
    is_zero,
    DEFAULT_TIME_PERIOD,
    MAXIMUM_LOOKBACK_PERIOD,
)

from .ma import kama

__all__ = [
    "BaseIndicator",
    "FloatBounds",
    # Streaming KAMA
    "AdaptiveSmoother",
    "Kama",
    "InvalidParameterError",
    "iter_kama",
    "efficiency_ratio",
    "smoothing_constant",
    "is_zero",
    "DEFAULT_TIME_PERIOD",
    "MAXIMUM_LOOKBACK_PERIOD",
    # Offline
    "kama",
]
