import argparse
import logging
import sys
from typing import List, Optional

from core.config import KamaParams, load_params
from core.data import load_data
from core.export import export_kama_csv, export_kama_summary
from core.stream import PriceStream
from indicators.kama import Kama

logger = logging.getLogger("run_kama")


def build_params(args: argparse.Namespace) -> KamaParams:
    params = load_params(args.config) if args.config else KamaParams()
    if args.period is not None:
        params.timePeriod = args.period
    if args.source is not None:
        params.source = args.source
    return params


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run Kaufman Adaptive Moving Average over an OHLCV CSV")
    parser.add_argument(
        "--csv",
        type=str,
        required=True,
        help="Path to the CSV file with OHLCV data",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON file with timePeriod/source parameters",
    )
    parser.add_argument(
        "--period",
        type=int,
        default=None,
        help="KAMA time period (overrides --config)",
    )
    parser.add_argument(
        "--source",
        type=str,
        default=None,
        help="Price field to smooth: open, high, low, close, volume, typical",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write KAMA values to this CSV file",
    )
    parser.add_argument(
        "--summary",
        type=str,
        default=None,
        help="Write a JSON run summary to this file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        params = build_params(args)
        indicator = Kama.from_params(params)
    except (TypeError, ValueError, OSError):
        logger.exception("Failed to construct KAMA parameters")
        return 2

    try:
        df = load_data(args.csv)
    except (ValueError, OSError):
        logger.exception("Failed to load CSV")
        return 1

    stream = PriceStream()
    stream.add_tick_subscription(indicator)
    bars = stream.replay(df)

    print(f"Bars: {bars}")
    print(f"Results: {indicator.data_length}")
    if indicator.data_length == 0:
        print(f"Not enough data: KAMA({params.timePeriod}) needs more than {indicator.lookback_period} bars")
    else:
        print(f"Valid From Bar: {indicator.valid_from_bar}")
        print(f"Min: {indicator.min_value:.6f}")
        print(f"Max: {indicator.max_value:.6f}")
        print(f"Last: {indicator.data[-1]:.6f}")

    if args.output:
        timestamps = list(df.index[indicator.valid_from_bar:]) if indicator.data_length else []
        export_kama_csv(timestamps, indicator.data, args.output)

    if args.summary:
        summary = {
            "params": params.to_dict(),
            "bars": bars,
            "results": indicator.data_length,
            "valid_from_bar": indicator.valid_from_bar,
            "min": indicator.min_value,
            "max": indicator.max_value,
        }
        export_kama_summary(summary, args.summary)

    return 0


if __name__ == "__main__":
    sys.exit(main())
