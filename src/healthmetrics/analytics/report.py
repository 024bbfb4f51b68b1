"""Health report aggregator.

Runs every analytics module over a mapping of named daily series and
collects the results into a single JSON-serializable :class:`HealthReport`
for the reporting and notification screens.

Metric names are matched case-sensitively against the conventional keys
``sleep``, ``steps``, ``stress`` and ``hydration``; other metrics still take
part in anomaly detection and correlation.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Mapping, Sequence

from healthmetrics.analytics.anomaly import MetricAnomalyReport, detect_all
from healthmetrics.analytics.correlation import (
    CorrelationMatrix,
    CorrelationPair,
    build_matrix,
    relation_pairs,
)
from healthmetrics.analytics.forecast import (
    METRIC_CONFIDENCE,
    ForecastResult,
    predict_metric,
)
from healthmetrics.analytics.risk import (
    RiskClassification,
    RiskLevel,
    classify_dehydration,
    classify_fatigue,
    classify_stress,
)
from healthmetrics.analytics.series import mean
from healthmetrics.config import AnalyticsConfig

logger = logging.getLogger(__name__)


class RecommendationType(str, Enum):
    WARNING = "warning"
    SUGGESTION = "suggestion"
    INFO = "info"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class Recommendation:
    type: RecommendationType
    message: str
    priority: Priority

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "message": self.message,
            "priority": self.priority.value,
        }


ANOMALY_WARNING = "Anomalies detected. Please consult healthcare professional."
RISK_SUGGESTION = "Consider lifestyle adjustments based on predicted risk factors."
HEALTHY_INFO = "Continue maintaining identified healthy patterns."

# Overall score: base, then +/- steps and sleep adjustments, bonus for a clean day
HEALTH_SCORE_BASE = 75
HEALTH_SCORE_STEP = 5
STEPS_HIGH = 10000  # mean daily steps above this adds a step
STEPS_LOW = 5000  # below this subtracts one
SLEEP_HIGH_H = 7.0
SLEEP_LOW_H = 6.0


@dataclass
class HealthReport:
    """Everything the analytics engine derives for one user on one day."""

    date: str  # ISO date string, e.g. "2026-10-19"
    overall_health_score: int = HEALTH_SCORE_BASE
    anomalies: dict[str, MetricAnomalyReport] = field(default_factory=dict)
    total_anomalies: int = 0
    correlations: CorrelationMatrix = field(
        default_factory=lambda: CorrelationMatrix(metrics=[])
    )
    relations: list[CorrelationPair] = field(default_factory=list)
    forecasts: dict[str, ForecastResult] = field(default_factory=dict)
    risks: dict[str, RiskClassification] = field(default_factory=dict)
    recommendations: list[Recommendation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        return {
            "date": self.date,
            "overall_health_score": self.overall_health_score,
            "anomalies": {k: v.to_dict() for k, v in self.anomalies.items()},
            "total_anomalies": self.total_anomalies,
            "correlations": self.correlations.to_dict(),
            "relations": [r.to_dict() for r in self.relations],
            "forecasts": {k: v.to_dict() for k, v in self.forecasts.items()},
            "risks": {k: v.to_dict() for k, v in self.risks.items()},
            "recommendations": [r.to_dict() for r in self.recommendations],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        levels = ", ".join(f"{k}={v.level.value}" for k, v in self.risks.items())
        return (
            f"HealthReport({self.date}: "
            f"score={self.overall_health_score}, "
            f"{len(self.anomalies)} metrics, "
            f"anomalies={self.total_anomalies}, "
            f"risks=[{levels}])"
        )


# ---------------------------------------------------------------------------
# Risk, recommendations and score
# ---------------------------------------------------------------------------


def assess_risks(series_by_metric: Mapping[str, Sequence[Any]]) -> dict[str, RiskClassification]:
    """Run whichever classifiers the available metrics allow."""
    risks: dict[str, RiskClassification] = {}
    if "stress" in series_by_metric:
        risks["stress"] = classify_stress(series_by_metric["stress"])
    if "sleep" in series_by_metric and "steps" in series_by_metric:
        risks["fatigue"] = classify_fatigue(
            series_by_metric["sleep"], series_by_metric["steps"]
        )
    if "hydration" in series_by_metric:
        risks["dehydration"] = classify_dehydration(series_by_metric["hydration"])
    return risks


def recommend(
    anomalies: Mapping[str, MetricAnomalyReport],
    risks: Mapping[str, RiskClassification],
) -> list[Recommendation]:
    """Turn anomaly and risk findings into prioritized recommendations."""
    recommendations: list[Recommendation] = []

    if any(report.count for report in anomalies.values()):
        recommendations.append(
            Recommendation(RecommendationType.WARNING, ANOMALY_WARNING, Priority.HIGH)
        )

    if any(r.level is not RiskLevel.LOW for r in risks.values()):
        recommendations.append(
            Recommendation(RecommendationType.SUGGESTION, RISK_SUGGESTION, Priority.MEDIUM)
        )
    elif risks:
        recommendations.append(
            Recommendation(RecommendationType.INFO, HEALTHY_INFO, Priority.LOW)
        )

    return recommendations


def _adjust(avg: float, high: float, low: float) -> int:
    if avg > high:
        return HEALTH_SCORE_STEP
    if avg < low:
        return -HEALTH_SCORE_STEP
    return 0


def health_score(
    series_by_metric: Mapping[str, Sequence[Any]],
    anomalies: Mapping[str, MetricAnomalyReport],
) -> int:
    """Overall 0-100 score from mean steps, mean sleep and the anomaly findings.

    Starts at :data:`HEALTH_SCORE_BASE`. Each of steps and sleep moves it by
    :data:`HEALTH_SCORE_STEP` when its mean is above the high or below the low
    mark; an absent or empty series leaves it alone. A day with no anomaly
    from either detector earns one more step.
    """
    score = HEALTH_SCORE_BASE

    steps = series_by_metric.get("steps")
    if steps is not None and len(steps) > 0:
        score += _adjust(mean(steps), STEPS_HIGH, STEPS_LOW)

    sleep = series_by_metric.get("sleep")
    if sleep is not None and len(sleep) > 0:
        score += _adjust(mean(sleep), SLEEP_HIGH_H, SLEEP_LOW_H)

    if not any(report.count for report in anomalies.values()):
        score += HEALTH_SCORE_STEP

    return max(0, min(100, score))


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


def build_report(
    series_by_metric: Mapping[str, Sequence[Any]],
    config: AnalyticsConfig | None = None,
    day: date | str | None = None,
) -> HealthReport:
    """Run the full analytics engine over named daily series.

    Args:
        series_by_metric: Metric name -> daily samples, oldest first.
        config: Optional parameter overrides.
        day: Report date (default: today).

    Returns:
        A populated HealthReport.
    """
    cfg = config or AnalyticsConfig()
    if day is None:
        day = date.today()
    date_str = day if isinstance(day, str) else day.isoformat()

    names = list(series_by_metric.keys())
    series_list = [
        [] if series_by_metric[name] is None else series_by_metric[name] for name in names
    ]
    logger.debug("building report for %s over %d metric(s)", date_str, len(names))

    # --- Anomalies ---
    anomalies = detect_all(series_by_metric, cfg)
    # Only whole-series anomalies count towards the headline total
    total = sum(len(r.z_anomalies) for r in anomalies.values())

    # --- Correlations ---
    matrix = build_matrix(series_list, names)
    relations = relation_pairs(dict(zip(names, series_list)))

    # --- Forecasts ---
    forecasts = {
        name: predict_metric(name, series, cfg.ma_window, cfg.alpha)
        for name, series in zip(names, series_list)
        if name in METRIC_CONFIDENCE
    }

    # --- Risks ---
    risks = assess_risks(series_by_metric)

    return HealthReport(
        date=date_str,
        overall_health_score=health_score(series_by_metric, anomalies),
        anomalies=anomalies,
        total_anomalies=total,
        correlations=matrix,
        relations=relations,
        forecasts=forecasts,
        risks=risks,
        recommendations=recommend(anomalies, risks),
    )
