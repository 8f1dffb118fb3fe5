"""Simple benchmark for the streaming and offline KAMA."""

import time

import numpy as np
import pandas as pd

# Add src to path
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.stream import PriceStream
from indicators.kama import AdaptiveSmoother, Kama
from indicators.ma import kama


def main() -> None:
    np.random.seed(42)
    n_bars = 10000
    index = pd.date_range("2025-05-01", periods=n_bars, freq="15min", tz="UTC")
    close = 100 + np.cumsum(np.random.randn(n_bars) * 2)
    df = pd.DataFrame(
        {
            "Open": close,
            "High": close + 1,
            "Low": close - 1,
            "Close": close,
            "Volume": np.random.randint(1000, 10000, n_bars),
        },
        index=index,
    )

    print("Benchmarking KAMA...")

    values = df["Close"].tolist()
    for period in (10, 50, 1000):
        start = time.time()
        for _ in range(10):
            smoother = AdaptiveSmoother(period, lambda value, index: None)
            for i, value in enumerate(values):
                smoother.submit(value, i)
        duration = time.time() - start
        print(f"submit    p={period:<5} - 10 runs in {duration:.3f}s ({duration * 100:.1f}ms per run)")

    start = time.time()
    for _ in range(10):
        _ = kama(df["Close"], 50)
    duration = time.time() - start
    print(f"offline   p=50    - 10 runs in {duration:.3f}s ({duration * 100:.1f}ms per run)")

    start = time.time()
    for _ in range(10):
        stream = PriceStream()
        Kama.for_stream(stream, 50)
        stream.replay(df)
    duration = time.time() - start
    print(f"stream    p=50    - 10 runs in {duration:.3f}s ({duration * 100:.1f}ms per run)")


if __name__ == "__main__":
    main()
