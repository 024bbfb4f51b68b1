"""Analytics engine for daily health metric series.

Modules:
    series      -- Sample coercion, mean/std, z-score, fixed-point rounding
    anomaly     -- Global and rolling z-score anomaly detection
    correlation -- Pearson correlation, correlation matrix, insights
    forecast    -- Moving average / exponential smoothing forecasts
    risk        -- Stress, fatigue and dehydration risk bands
    report      -- Full health report aggregation
"""

from healthmetrics.analytics.series import coerce_series, mean, population_std
from healthmetrics.analytics.anomaly import (
    detect_global,
    detect_rolling,
    detect_all,
    ZScoreAnomaly,
    RollingAnomaly,
    MetricAnomalyReport,
)
from healthmetrics.analytics.correlation import (
    pearson,
    build_matrix,
    insight,
    relation_pairs,
    CorrelationMatrix,
    CorrelationPair,
)
from healthmetrics.analytics.forecast import (
    moving_average,
    exponential_smoothing,
    blend,
    trend_direction,
    predict,
    predict_metric,
    predict_sleep_trend,
    predict_hydration_trend,
    predict_stress_trend,
    ForecastResult,
    TrendDirection,
)
from healthmetrics.analytics.risk import (
    classify_stress,
    classify_fatigue,
    classify_dehydration,
    RiskClassification,
    RiskLevel,
)
from healthmetrics.analytics.report import build_report, health_score, HealthReport, Recommendation

__all__ = [
    # series
    "coerce_series",
    "mean",
    "population_std",
    # anomaly
    "detect_global",
    "detect_rolling",
    "detect_all",
    "ZScoreAnomaly",
    "RollingAnomaly",
    "MetricAnomalyReport",
    # correlation
    "pearson",
    "build_matrix",
    "insight",
    "relation_pairs",
    "CorrelationMatrix",
    "CorrelationPair",
    # forecast
    "moving_average",
    "exponential_smoothing",
    "blend",
    "trend_direction",
    "predict",
    "predict_metric",
    "predict_sleep_trend",
    "predict_hydration_trend",
    "predict_stress_trend",
    "ForecastResult",
    "TrendDirection",
    # risk
    "classify_stress",
    "classify_fatigue",
    "classify_dehydration",
    "RiskClassification",
    "RiskLevel",
    # report
    "build_report",
    "health_score",
    "HealthReport",
    "Recommendation",
]
