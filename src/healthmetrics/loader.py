"""Load named metric series from disk for offline analysis.

Two layouts are accepted:

  - a JSON object mapping metric name to a list of daily samples::

        {"sleep": [7, 6.5, 6], "steps": [3000, 4000, 2000]}

  - JSONL, one sample per line, appended to its metric in file order::

        {"metric": "sleep", "value": 7}
        {"metric": "sleep", "value": 6.5}

Samples are passed through untouched; coercion of missing values happens
in the analytics engine.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _load_mapping(data: Any, path: Path) -> dict[str, list[Any]]:
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object of metric -> samples")
    series: dict[str, list[Any]] = {}
    for name, values in data.items():
        if values is None:
            values = []
        if not isinstance(values, list):
            raise ValueError(f"{path}: samples for {name!r} must be a list")
        series[str(name)] = values
    return series


def _load_jsonl(path: Path) -> dict[str, list[Any]]:
    series: dict[str, list[Any]] = {}
    with open(path) as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue

            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("%s:%d: invalid JSON, skipping", path.name, line_num)
                continue

            if not isinstance(entry, dict) or "metric" not in entry:
                logger.warning("%s:%d: no 'metric' field, skipping", path.name, line_num)
                continue

            series.setdefault(str(entry["metric"]), []).append(entry.get("value"))
    return series


def load_series(path: str | Path) -> dict[str, list[Any]]:
    """Read a series file in either layout.

    Args:
        path: ``.json`` mapping file or ``.jsonl`` sample log.

    Returns:
        Metric name -> samples, in first-seen order.

    Raises:
        FileNotFoundError: if *path* doesn't exist.
        ValueError: if the file matches neither layout.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if path.suffix == ".jsonl":
        series = _load_jsonl(path)
    else:
        with open(path) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"{path}: invalid JSON ({e})") from e
        series = _load_mapping(data, path)

    logger.debug(
        "loaded %d metric(s) from %s: %s",
        len(series),
        path.name,
        {name: len(values) for name, values in series.items()},
    )
    return series
