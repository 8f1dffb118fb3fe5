"""
OHLCV price data and value selection.

Loads OHLCV bars from CSV into a UTC-indexed DataFrame, turns rows into
DOHLCV records, and provides the selection functions that pick the scalar
an indicator consumes from each record.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import IO, Callable, Dict, Iterator, Optional, Union

import pandas as pd


CSVSource = Union[str, Path, IO[str], IO[bytes]]


@dataclass
class DOHLCV:
    """A single price bar: date, open, high, low, close, volume."""

    date: Optional[pd.Timestamp] = None
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    close: float = 0.0
    volume: float = 0.0


DataSelectionFunc = Callable[[DOHLCV], float]


def load_data(csv_source: CSVSource) -> pd.DataFrame:
    df = pd.read_csv(csv_source)
    if "time" not in df.columns:
        raise ValueError("CSV must include a 'time' column with timestamps in seconds")
    df["time"] = pd.to_datetime(df["time"], unit="s", utc=True, errors="coerce")
    if df["time"].isna().all():
        raise ValueError("Failed to parse timestamps from 'time' column")
    df = df.set_index("time").sort_index()
    available_cols = set(df.columns)
    price_cols = {"open", "high", "low", "close"}
    if not price_cols.issubset({col.lower() for col in available_cols}):
        raise ValueError("CSV must include open, high, low, close columns")
    volume_col = None
    for col in ("Volume", "volume", "VOL", "vol"):
        if col in df.columns:
            volume_col = col
            break
    if volume_col is None:
        raise ValueError("CSV must include a volume column")
    renamed = {
        "open": "Open",
        "high": "High",
        "low": "Low",
        "close": "Close",
        volume_col.lower(): "Volume",
    }
    normalized_cols = {col: renamed.get(col.lower(), col) for col in df.columns}
    df = df.rename(columns=normalized_cols)
    return df[["Open", "High", "Low", "Close", "Volume"]]


def iter_ticks(df: pd.DataFrame) -> Iterator[DOHLCV]:
    """
    Yield DOHLCV records from an OHLCV DataFrame.

    Args:
        df: DataFrame with columns [Open, High, Low, Close, Volume],
            as returned by load_data()

    Yields:
        One DOHLCV per row, in index order
    """
    for ts, open_, high, low, close, volume in df[
        ["Open", "High", "Low", "Close", "Volume"]
    ].itertuples(index=True, name=None):
        yield DOHLCV(
            date=ts if isinstance(ts, pd.Timestamp) else None,
            open=float(open_),
            high=float(high),
            low=float(low),
            close=float(close),
            volume=float(volume),
        )


# ============================================================================
# Data Selection
# ============================================================================

def use_open_price(tick: DOHLCV) -> float:
    return tick.open


def use_high_price(tick: DOHLCV) -> float:
    return tick.high


def use_low_price(tick: DOHLCV) -> float:
    return tick.low


def use_close_price(tick: DOHLCV) -> float:
    return tick.close


def use_volume(tick: DOHLCV) -> float:
    return tick.volume


def use_typical_price(tick: DOHLCV) -> float:
    return (tick.high + tick.low + tick.close) / 3


SELECTORS: Dict[str, DataSelectionFunc] = {
    "open": use_open_price,
    "high": use_high_price,
    "low": use_low_price,
    "close": use_close_price,
    "volume": use_volume,
    "typical": use_typical_price,
}


def get_selector(name: str) -> DataSelectionFunc:
    """
    Look up a data selection function by name.

    Args:
        name: Selector name (case-insensitive), one of SELECTORS

    Returns:
        Function mapping a DOHLCV record to a float

    Raises:
        ValueError: If the name is not a known selector
    """
    key = str(name).strip().lower()
    if key not in SELECTORS:
        raise ValueError(
            f"Unsupported data source: {name}. Available sources: {sorted(SELECTORS)}"
        )
    return SELECTORS[key]
