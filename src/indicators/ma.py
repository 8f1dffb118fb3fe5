"""
Offline moving average helpers.

Runs the streaming KAMA over a complete pandas Series and returns a Series
aligned with the input. Values are bit-identical to the streaming
indicator fed with the same samples in the same order.
"""
import numpy as np
import pandas as pd

from .kama import AdaptiveSmoother


def kama(series: pd.Series, length: int) -> pd.Series:
    """
    Kaufman Adaptive Moving Average.

    Adapts to market volatility - fast in trending markets, slow in ranging markets.
    Uses Efficiency Ratio (ER) to adjust smoothing constant.

    Args:
        series: Input price series
        length: Period length (2..100000)

    Returns:
        KAMA values as pd.Series with the index of ``series``. The first
        ``length`` bars are NaN (warm-up).

    Raises:
        InvalidParameterError: If ``length`` is out of range

    Note:
        NaN inputs are fed to the recurrence like any other value and
        propagate into every later result.
    """
    kama_values = np.empty(len(series))
    kama_values[:] = np.nan

    def _store(value: float, index: int) -> None:
        kama_values[index] = value

    smoother = AdaptiveSmoother(length, _store)
    for i, price in enumerate(series.to_numpy(dtype=float)):
        smoother.submit(float(price), i)
    return pd.Series(kama_values, index=series.index, name=series.name)
