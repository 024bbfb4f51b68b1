"""Short-term trend forecasting.

The forecast is the element-wise average of a moving average and an
exponential smoothing of the series.  The two curves have different
lengths (the moving average is ``window - 1`` samples shorter); they are
combined position by position and truncated to the shorter one, not
re-aligned by original index.

Forecast confidence is a fixed constant per metric type, not something
estimated from the data.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from numpy.lib.stride_tricks import sliding_window_view

from healthmetrics.analytics.series import as_array
from healthmetrics.config import DEFAULT_ALPHA, DEFAULT_MA_WINDOW

# last/first ratio bands for trend direction
UP_RATIO = 1.05
DOWN_RATIO = 0.95

# Per-metric forecast confidence
METRIC_CONFIDENCE = {
    "sleep": 0.85,
    "hydration": 0.78,
    "stress": 0.72,
}


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass
class ForecastResult:
    """Smoothed forecast curve, coarse direction and caller-supplied confidence."""

    forecast: list[float]
    trend_direction: TrendDirection
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "forecast": list(self.forecast),
            "trend_direction": self.trend_direction.value,
            "confidence": self.confidence,
        }

    def __repr__(self) -> str:
        return (
            f"ForecastResult({self.trend_direction.value}, "
            f"{len(self.forecast)} pts, confidence={self.confidence:.2f})"
        )


# ---------------------------------------------------------------------------
# Smoothing
# ---------------------------------------------------------------------------


def moving_average(series: Sequence[Any], window: int = DEFAULT_MA_WINDOW) -> list[float]:
    """Sliding arithmetic mean; ``max(0, n - window + 1)`` points."""
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    arr = as_array(series)
    if len(arr) < window:
        return []
    return [float(v) for v in sliding_window_view(arr, window).mean(axis=1)]


def exponential_smoothing(series: Sequence[Any], alpha: float = DEFAULT_ALPHA) -> list[float]:
    """``s[0] = x[0]``, ``s[i] = alpha*x[i] + (1-alpha)*s[i-1]``."""
    if not (0.0 <= alpha <= 1.0):
        raise ValueError(f"alpha must be within [0, 1], got {alpha}")
    arr = as_array(series)
    if len(arr) == 0:
        return []

    smoothed = [float(arr[0])]
    for x in arr[1:]:
        smoothed.append(alpha * float(x) + (1 - alpha) * smoothed[-1])
    return smoothed


def blend(
    series: Sequence[Any],
    window: int = DEFAULT_MA_WINDOW,
    alpha: float = DEFAULT_ALPHA,
) -> list[float]:
    """Average of moving average and exponential smoothing, truncated."""
    ma = moving_average(series, window)
    es = exponential_smoothing(series, alpha)
    return [(m + e) / 2 for m, e in zip(ma, es)]


def trend_direction(series: Sequence[Any]) -> TrendDirection:
    """Compare last sample to first: >5% up, <-5% down, otherwise stable."""
    arr = as_array(series)
    if len(arr) < 2:
        return TrendDirection.STABLE
    first = float(arr[0])
    last = float(arr[-1])
    if last > first * UP_RATIO:
        return TrendDirection.UP
    if last < first * DOWN_RATIO:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


# ---------------------------------------------------------------------------
# Prediction
# ---------------------------------------------------------------------------


def predict(
    series: Sequence[Any],
    confidence: float,
    window: int = DEFAULT_MA_WINDOW,
    alpha: float = DEFAULT_ALPHA,
) -> ForecastResult:
    """Blend forecast plus trend direction, tagged with *confidence*."""
    return ForecastResult(
        forecast=blend(series, window, alpha),
        trend_direction=trend_direction(series),
        confidence=confidence,
    )


def predict_metric(
    metric: str,
    series: Sequence[Any],
    window: int = DEFAULT_MA_WINDOW,
    alpha: float = DEFAULT_ALPHA,
) -> ForecastResult:
    """Forecast a known metric type using its configured confidence.

    Raises:
        ValueError: if *metric* has no entry in ``METRIC_CONFIDENCE``.
    """
    try:
        confidence = METRIC_CONFIDENCE[metric]
    except KeyError:
        raise ValueError(
            f"No forecast confidence for metric {metric!r}; "
            f"known metrics: {sorted(METRIC_CONFIDENCE)}"
        ) from None
    return predict(series, confidence, window, alpha)


def predict_sleep_trend(series: Sequence[Any]) -> ForecastResult:
    return predict_metric("sleep", series)


def predict_hydration_trend(series: Sequence[Any]) -> ForecastResult:
    return predict_metric("hydration", series)


def predict_stress_trend(series: Sequence[Any]) -> ForecastResult:
    return predict_metric("stress", series)
