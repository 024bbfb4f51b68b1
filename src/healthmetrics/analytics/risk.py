"""Categorical risk bands from simple linear scores.

Each classifier maps the series mean(s) to a probability, clamps it to
[0, 1], picks a band from the clamped value and reports the probability
rounded to 2 dp.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from healthmetrics.analytics.series import clamp01, mean, round_fixed


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class RiskClassification:
    """Risk band and the probability it was derived from."""

    level: RiskLevel
    probability: float  # 0-1, rounded to 2 dp

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level.value, "probability": self.probability}

    def __repr__(self) -> str:
        return f"RiskClassification({self.level.value}, p={self.probability:.2f})"


# ---------------------------------------------------------------------------
# Band thresholds (probability strictly above -> band)
# ---------------------------------------------------------------------------

STRESS_HIGH = 0.7
STRESS_MEDIUM = 0.4

FATIGUE_HIGH = 0.6
FATIGUE_MEDIUM = 0.3

DEHYDRATION_HIGH = 0.6
DEHYDRATION_MEDIUM = 0.3

# Score model constants
STRESS_BASELINE = 3.0  # mean stress score that maps to p = 0
STRESS_SPAN = 4.0  # mean stress score above baseline that maps to p = 1
SLEEP_TARGET_H = 6.0
SLEEP_WEIGHT = 0.6
STEPS_TARGET = 2000.0
STEPS_SCALE = 4000.0
STEPS_WEIGHT = 0.4
HYDRATION_TARGET_L = 1.8
HYDRATION_SPAN_L = 1.2


def _band(probability: float, high: float, medium: float) -> RiskLevel:
    if probability > high:
        return RiskLevel.HIGH
    if probability > medium:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def _classify(probability: float, high: float, medium: float) -> RiskClassification:
    p = clamp01(probability)
    return RiskClassification(level=_band(p, high, medium), probability=round_fixed(p, 2))


def classify_stress(series: Sequence[Any]) -> RiskClassification:
    """Stress risk from daily stress scores: ``(mean - 3) / 4``."""
    p = (mean(series) - STRESS_BASELINE) / STRESS_SPAN
    return _classify(p, STRESS_HIGH, STRESS_MEDIUM)


def classify_fatigue(
    sleep_series: Sequence[Any],
    steps_series: Sequence[Any],
) -> RiskClassification:
    """Fatigue risk from sleep hours and daily step counts.

    score = max(0, (6 - mean_sleep) * 0.6 + (2000 - mean_steps) / 4000 * 0.4)
    """
    sleep_term = (SLEEP_TARGET_H - mean(sleep_series)) * SLEEP_WEIGHT
    steps_term = (STEPS_TARGET - mean(steps_series)) / STEPS_SCALE * STEPS_WEIGHT
    score = max(0.0, sleep_term + steps_term)
    return _classify(score, FATIGUE_HIGH, FATIGUE_MEDIUM)


def classify_dehydration(series: Sequence[Any]) -> RiskClassification:
    """Dehydration risk from daily intake in litres; 0 at or above 1.8 L."""
    avg = mean(series)
    if avg < HYDRATION_TARGET_L:
        p = (HYDRATION_TARGET_L - avg) / HYDRATION_SPAN_L
    else:
        p = 0.0
    return _classify(p, DEHYDRATION_HIGH, DEHYDRATION_MEDIUM)
