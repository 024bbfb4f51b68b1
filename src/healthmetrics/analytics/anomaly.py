"""Outlier detection on daily metric series.

Two independent strategies:
  - global z-score against the mean/std of the whole series
  - rolling z-score against the ``window`` samples preceding each point

Both use the population standard deviation and treat a zero std as
"no deviation" (z = 0), so constant series never produce anomalies.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Sequence

from numpy.lib.stride_tricks import sliding_window_view

from healthmetrics.analytics.series import (
    as_array,
    mean,
    population_std,
    round_fixed,
    z_score,
)
from healthmetrics.config import (
    DEFAULT_GLOBAL_THRESHOLD,
    DEFAULT_ROLLING_THRESHOLD,
    DEFAULT_ROLLING_WINDOW,
    AnalyticsConfig,
)

logger = logging.getLogger(__name__)


@dataclass
class ZScoreAnomaly:
    """A sample flagged against the whole-series baseline."""

    index: int  # position in the original series
    value: float
    z_score: float  # rounded to 3 dp
    is_anomaly: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class RollingAnomaly:
    """A sample flagged against the window of samples preceding it."""

    index: int
    value: float
    window_mean: float  # rounded to 2 dp
    z_score: float  # rounded to 2 dp
    severity: float  # |z|, unrounded

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class MetricAnomalyReport:
    """Both detectors' findings for a single metric."""

    z_anomalies: list[ZScoreAnomaly]
    rolling_anomalies: list[RollingAnomaly]

    @property
    def count(self) -> int:
        return len(self.z_anomalies) + len(self.rolling_anomalies)

    def to_dict(self) -> dict[str, Any]:
        return {
            "z_anomalies": [a.to_dict() for a in self.z_anomalies],
            "rolling_anomalies": [a.to_dict() for a in self.rolling_anomalies],
        }


def _check_threshold(threshold: float) -> None:
    if threshold < 0:
        raise ValueError(f"threshold must be >= 0, got {threshold}")


# ---------------------------------------------------------------------------
# Detectors
# ---------------------------------------------------------------------------


def detect_global(
    series: Sequence[Any],
    threshold: float = DEFAULT_GLOBAL_THRESHOLD,
) -> list[ZScoreAnomaly]:
    """Flag samples whose whole-series z-score exceeds *threshold*.

    Args:
        series: Daily samples, oldest first.
        threshold: Flag when ``|z| > threshold`` (strict).

    Returns:
        Flagged samples in original order; empty for an empty series.
    """
    _check_threshold(threshold)
    arr = as_array(series)
    if len(arr) == 0:
        return []

    mu = mean(arr)
    std = population_std(arr)

    anomalies: list[ZScoreAnomaly] = []
    for i, value in enumerate(arr):
        z = z_score(float(value), mu, std)
        if abs(z) > threshold:
            anomalies.append(
                ZScoreAnomaly(index=i, value=float(value), z_score=round_fixed(z, 3))
            )
    return anomalies


def detect_rolling(
    series: Sequence[Any],
    window: int = DEFAULT_ROLLING_WINDOW,
    threshold: float = DEFAULT_ROLLING_THRESHOLD,
) -> list[RollingAnomaly]:
    """Flag samples that deviate from the *window* samples before them.

    For each ``i`` in ``[window, n)`` the baseline is ``series[i-window:i]``;
    sample ``i`` itself is excluded.

    Returns:
        Flagged samples in original order; empty when the series has
        fewer than ``window + 1`` samples.
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    _check_threshold(threshold)

    arr = as_array(series)
    if len(arr) < window + 1:
        logger.debug("series of %d samples too short for window %d", len(arr), window)
        return []

    # windows[k] is the baseline for sample k + window
    windows = sliding_window_view(arr[:-1], window)
    means = windows.mean(axis=1)
    stds = windows.std(axis=1, ddof=0)

    anomalies: list[RollingAnomaly] = []
    for k in range(len(windows)):
        i = k + window
        value = float(arr[i])
        mu = float(means[k])
        z = z_score(value, mu, float(stds[k]))
        if abs(z) > threshold:
            anomalies.append(
                RollingAnomaly(
                    index=i,
                    value=value,
                    window_mean=round_fixed(mu, 2),
                    z_score=round_fixed(z, 2),
                    severity=abs(z),
                )
            )
    return anomalies


def detect_all(
    series_by_metric: Mapping[str, Sequence[Any]],
    config: AnalyticsConfig | None = None,
) -> dict[str, MetricAnomalyReport]:
    """Run both detectors over every named series.

    Args:
        series_by_metric: Metric name -> daily samples.
        config: Optional parameter overrides; detector defaults otherwise.

    Returns:
        Metric name -> :class:`MetricAnomalyReport`, in input order.
    """
    cfg = config or AnalyticsConfig()
    report: dict[str, MetricAnomalyReport] = {}
    for name, series in series_by_metric.items():
        values = [] if series is None else series
        report[name] = MetricAnomalyReport(
            z_anomalies=detect_global(values, cfg.global_threshold),
            rolling_anomalies=detect_rolling(
                values, cfg.rolling_window, cfg.rolling_threshold
            ),
        )
    return report
