"""
Core plumbing around the KAMA indicator.

- data: OHLCV loading, DOHLCV records and data selection functions
- stream: push-style PriceStream feeding subscribed indicators
- config: KamaParams and JSON parameter files
- export: CSV/JSON output of results

Indicators import from this package; this package does not depend on them.
"""

__version__ = "1.0.0"

from .data import (
    CSVSource,
    DOHLCV,
    DataSelectionFunc,
    SELECTORS,
    get_selector,
    iter_ticks,
    load_data,
    use_close_price,
    use_high_price,
    use_low_price,
    use_open_price,
    use_typical_price,
    use_volume,
)

from .stream import PriceStream

from .config import KamaParams, load_params

from .export import export_kama_csv, export_kama_summary

__all__ = [
    # data
    "CSVSource",
    "DOHLCV",
    "DataSelectionFunc",
    "SELECTORS",
    "get_selector",
    "iter_ticks",
    "load_data",
    "use_close_price",
    "use_high_price",
    "use_low_price",
    "use_open_price",
    "use_typical_price",
    "use_volume",

    # stream
    "PriceStream",

    # config
    "KamaParams",
    "load_params",

    # export
    "export_kama_csv",
    "export_kama_summary",
]
