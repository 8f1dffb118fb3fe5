"""
Parameter configuration for the KAMA runner.

Parameters live in a dataclass that can be built from a plain dict (for
example a parsed JSON file) and serialised back, using camelCase keys.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

DEFAULT_TIME_PERIOD = 25
DEFAULT_SOURCE = "close"


@dataclass
class KamaParams:
    timePeriod: int = DEFAULT_TIME_PERIOD
    source: str = DEFAULT_SOURCE

    @staticmethod
    def _parse_int(name: str, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer, got {value!r}")
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"{name} must be an integer, got {value!r}")
            return int(value)
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"{name} must be an integer, got {value!r}") from e

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]]) -> "KamaParams":
        payload = payload or {}
        return cls(
            timePeriod=cls._parse_int("timePeriod", payload.get("timePeriod", cls.timePeriod)),
            source=str(payload.get("source", cls.source)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timePeriod": self.timePeriod,
            "source": self.source,
        }


def load_params(path: Union[str, Path]) -> KamaParams:
    """
    Load KamaParams from a JSON file.

    Args:
        path: Path to a JSON object with optional keys timePeriod, source

    Returns:
        KamaParams with defaults for any missing key

    Raises:
        ValueError: If the file is not valid JSON or not a JSON object
    """
    config_file = Path(path)
    try:
        with config_file.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {config_file}: {e}") from e
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object in {config_file}")
    return KamaParams.from_dict(payload)
