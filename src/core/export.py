"""
Export utilities for KAMA results.

The functions in this module do not perform any calculations; they only
format existing values into CSV or JSON text.
"""

from __future__ import annotations

import csv
import json
import logging
import math
from io import StringIO
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

__all__ = [
    "export_kama_csv",
    "export_kama_summary",
]


def _format_time(ts: Any) -> str:
    if ts is None:
        return ""
    if hasattr(ts, "isoformat"):
        return ts.isoformat()
    return str(ts)


def export_kama_csv(
    timestamps: Sequence[Any],
    values: Sequence[float],
    path: Optional[str] = None,
) -> str:
    """Export KAMA values to CSV with a ``time,kama`` header.

    Args:
        timestamps: One label per value (timestamps or bar indices)
        values: KAMA values, aligned with ``timestamps``
        path: Optional file path to write CSV (if None, just return string)

    Returns:
        CSV content as string

    Raises:
        ValueError: If ``timestamps`` and ``values`` differ in length
    """

    if len(timestamps) != len(values):
        raise ValueError(
            f"timestamps and values must have the same length "
            f"({len(timestamps)} != {len(values)})"
        )

    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["time", "kama"])

    for ts, value in zip(timestamps, values):
        writer.writerow([_format_time(ts), repr(float(value))])

    csv_content = output.getvalue()

    if path:
        Path(path).write_text(csv_content, encoding="utf-8")
        logger.info("Wrote %d KAMA rows to %s", len(values), path)

    return csv_content


def export_kama_summary(
    summary: Dict[str, Any],
    path: Optional[str] = None,
) -> str:
    """Export a run summary as pretty-printed JSON.

    Infinite bounds (no value emitted yet) are written as ``null``.
    """

    payload = {}
    for key, value in summary.items():
        if isinstance(value, float) and math.isinf(value):
            value = None
        payload[key] = value
    payload["generated_at"] = pd.Timestamp.now(tz="UTC").isoformat()

    content = json.dumps(payload, indent=2)

    if path:
        Path(path).write_text(content, encoding="utf-8")

    return content
