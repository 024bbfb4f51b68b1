"""Pairwise linear correlation between metric series.

Correlations are Pearson coefficients rounded to 2 dp.  Degenerate inputs
(length mismatch, empty series, zero variance) yield 0 rather than an error.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from itertools import combinations
from typing import Any, Mapping, Sequence

import numpy as np

from healthmetrics.analytics.series import as_array, round_fixed

# Insight bands, checked strictly in this order
STRONG_POSITIVE = 0.6
MILD_POSITIVE = 0.3
STRONG_NEGATIVE = -0.6
MILD_NEGATIVE = -0.3


@dataclass
class CorrelationMatrix:
    """Square correlation matrix over an ordered list of metric names."""

    metrics: list[str]
    matrix: list[list[float]] = field(default_factory=list)

    def get(self, metric_a: str, metric_b: str) -> float:
        """Look up the cell for two metric names."""
        i = self.metrics.index(metric_a)
        j = self.metrics.index(metric_b)
        return self.matrix[i][j]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class CorrelationPair:
    """One labelled correlation with its textual insight."""

    pair: str  # "A vs B"
    value: float
    insight: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def pearson(series_a: Sequence[Any], series_b: Sequence[Any]) -> float:
    """Pearson correlation coefficient, rounded to 2 dp.

    Returns 0.0 if the series differ in length, either is empty, or either
    has zero variance.
    """
    a = as_array(series_a)
    b = as_array(series_b)
    if len(a) != len(b) or len(a) == 0:
        return 0.0

    da = a - np.mean(a)
    db = b - np.mean(b)
    num = float(np.sum(da * db))
    denom = math.sqrt(float(np.sum(da ** 2)) * float(np.sum(db ** 2)))
    if denom == 0:
        return 0.0
    return round_fixed(num / denom, 2)


def build_matrix(
    series_list: Sequence[Sequence[Any]],
    names: Sequence[str],
) -> CorrelationMatrix:
    """Correlation matrix with the diagonal fixed at 1.0.

    Self-correlation is never computed, so even a one-sample series gets
    1.0 on the diagonal.  Only the upper triangle is computed; the lower
    triangle mirrors it.
    """
    if len(series_list) != len(names):
        raise ValueError(
            f"got {len(series_list)} series but {len(names)} names"
        )
    n = len(names)
    matrix = [[0.0] * n for _ in range(n)]
    for i in range(n):
        matrix[i][i] = 1.0
        for j in range(i + 1, n):
            r = pearson(series_list[i], series_list[j])
            matrix[i][j] = r
            matrix[j][i] = r
    return CorrelationMatrix(metrics=list(names), matrix=matrix)


def insight(label_a: str, label_b: str, value: float) -> str:
    """One-sentence qualitative reading of a correlation value."""
    if value > STRONG_POSITIVE:
        return f"{label_a} and {label_b} are strongly correlated."
    if value > MILD_POSITIVE:
        return f"{label_a} and {label_b} have mild correlation."
    if value < STRONG_NEGATIVE:
        return f"{label_a} increases as {label_b} decreases."
    if value < MILD_NEGATIVE:
        return f"{label_a} and {label_b} have mild negative correlation."
    return f"{label_a} and {label_b} are mostly independent."


def relation_pairs(
    series_by_metric: Mapping[str, Sequence[Any]],
    pairs: Sequence[tuple[str, str]] | None = None,
) -> list[CorrelationPair]:
    """Correlate labelled metric pairs and attach an insight to each.

    Args:
        series_by_metric: Metric name -> daily samples.
        pairs: ``(label_a, label_b)`` tuples to evaluate.  Defaults to every
            unordered pair of metrics, in input order.

    Raises:
        KeyError: if a pair names a metric that isn't in *series_by_metric*.
    """
    if pairs is None:
        pairs = list(combinations(series_by_metric.keys(), 2))

    results: list[CorrelationPair] = []
    for label_a, label_b in pairs:
        r = pearson(series_by_metric[label_a], series_by_metric[label_b])
        results.append(
            CorrelationPair(
                pair=f"{label_a} vs {label_b}",
                value=r,
                insight=insight(label_a, label_b, r),
            )
        )
    return results
