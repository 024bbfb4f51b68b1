"""Shared fixtures and sample series for the healthmetrics test suite."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


# ---------------------------------------------------------------------------
# Sample week of data (one sample per day, oldest first)
# ---------------------------------------------------------------------------

SLEEP_WEEK = [7, 6.5, 6, 7.2, 6.8, 7, 7.1]
STRESS_WEEK = [2, 3, 4, 3.5, 4, 3, 2.8]
HYDRATION_WEEK = [2.0, 1.6, 1.2, 1.8, 2.1, 1.5, 1.7]
STEPS_WEEK = [3000, 4500, 2000, 3500, 3800, 2800, 3100]


def week_of_metrics() -> dict[str, list[float]]:
    """The four conventional metrics for one week."""
    return {
        "sleep": list(SLEEP_WEEK),
        "hydration": list(HYDRATION_WEEK),
        "stress": list(STRESS_WEEK),
        "steps": list(STEPS_WEEK),
    }


def spiky_series(n: int = 20, base: float = 60.0, spike_at: int = 15,
                 spike: float = 120.0) -> list[float]:
    """Gently oscillating series with a single large spike."""
    values = [base + (i % 3) for i in range(n)]
    values[spike_at] = spike
    return values


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data))
    return path


def write_jsonl(path: Path, entries: list) -> Path:
    with open(path, "w") as f:
        for entry in entries:
            if isinstance(entry, str):
                f.write(entry + "\n")
            else:
                f.write(json.dumps(entry) + "\n")
    return path


@pytest.fixture
def metrics() -> dict[str, list[float]]:
    return week_of_metrics()


@pytest.fixture
def series_file(tmp_path) -> Path:
    return write_json(tmp_path / "week.json", week_of_metrics())
