import sys
from io import StringIO
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def _make_ohlcv(n_bars: int, seed: int) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    close = 100 + np.cumsum(rng.normal(0.0, 2.0, n_bars))
    spread = np.abs(rng.normal(0.0, 1.0, n_bars))
    index = pd.date_range("2025-05-01", periods=n_bars, freq="15min", tz="UTC", name="time")
    return pd.DataFrame(
        {
            "Open": close - rng.normal(0.0, 0.5, n_bars),
            "High": close + spread,
            "Low": close - spread,
            "Close": close,
            "Volume": rng.integers(1000, 10000, n_bars).astype(float),
        },
        index=index,
    )


@pytest.fixture(scope="session")
def ohlcv_df() -> pd.DataFrame:
    """Synthetic random-walk OHLCV bars with a UTC datetime index."""
    return _make_ohlcv(500, seed=42)


@pytest.fixture(scope="session")
def close_series(ohlcv_df) -> pd.Series:
    return ohlcv_df["Close"]


@pytest.fixture
def ohlcv_csv_text(ohlcv_df) -> str:
    """The synthetic bars rendered as a raw CSV with epoch-second timestamps."""
    raw = ohlcv_df.head(60).copy()
    raw.index = (raw.index - pd.Timestamp("1970-01-01", tz="UTC")) // pd.Timedelta("1s")
    raw.index.name = "time"
    raw.columns = ["open", "high", "low", "close", "volume"]
    output = StringIO()
    raw.to_csv(output)
    return output.getvalue()
