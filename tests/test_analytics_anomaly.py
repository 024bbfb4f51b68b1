"""Tests for healthmetrics.analytics.anomaly -- global and rolling z-score detection."""

import pytest

from healthmetrics.analytics.anomaly import (
    detect_global,
    detect_rolling,
    detect_all,
    MetricAnomalyReport,
    RollingAnomaly,
    ZScoreAnomaly,
)
from healthmetrics.analytics.series import round_fixed
from healthmetrics.config import AnalyticsConfig

from tests.conftest import spiky_series, week_of_metrics


# ========================== detect_global ==========================


class TestDetectGlobal:
    def test_empty(self):
        assert detect_global([]) == []

    @pytest.mark.parametrize("threshold", [0.0, 0.5, 2.5, 10.0])
    def test_constant_series_never_flags(self, threshold):
        assert detect_global([72.0] * 30, threshold) == []

    def test_single_outlier(self):
        # mean 19, population std 27 -> z(100) = 3.0, z(10) = -0.333
        series = [10.0] * 9 + [100.0]
        result = detect_global(series)
        assert len(result) == 1
        a = result[0]
        assert a.index == 9
        assert a.value == 100.0
        assert a.z_score == 3.0
        assert a.is_anomaly is True

    def test_threshold_is_strict(self):
        series = [10.0] * 9 + [100.0]
        assert detect_global(series, threshold=3.0) == []

    def test_low_threshold_flags_everything_non_mean(self):
        series = [10.0] * 9 + [100.0]
        result = detect_global(series, threshold=0.3)
        assert [a.index for a in result] == list(range(10))
        assert result[0].z_score == -0.333

    def test_original_indices_preserved(self):
        result = detect_global(spiky_series(spike_at=15))
        assert [a.index for a in result] == [15]

    def test_negative_outlier(self):
        series = [100.0] * 9 + [10.0]
        result = detect_global(series)
        assert len(result) == 1
        assert result[0].z_score == -3.0

    def test_missing_samples_coerced_to_zero(self):
        # None becomes 0, which is the outlier here
        series = [50.0] * 9 + [None]
        result = detect_global(series)
        assert len(result) == 1
        assert result[0].index == 9
        assert result[0].value == 0.0

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValueError):
            detect_global([1.0, 2.0], threshold=-1.0)

    def test_integer_beyond_float_range_does_not_raise(self):
        assert detect_global([1, 2, 10**400]) == []
        # an infinite sample is infinitely far from a finite window
        assert [a.index for a in detect_rolling([1, 2, 10**400], window=2)] == [2]

    def test_to_dict(self):
        a = ZScoreAnomaly(index=3, value=9.0, z_score=2.8)
        assert a.to_dict() == {"index": 3, "value": 9.0, "z_score": 2.8, "is_anomaly": True}


# ========================== detect_rolling ==========================


class TestDetectRolling:
    def test_shorter_than_window_plus_one(self):
        assert detect_rolling([1.0] * 7, window=7) == []

    def test_empty(self):
        assert detect_rolling([]) == []

    def test_spike_after_alternating_window(self):
        series = [10, 12, 10, 12, 10, 12, 10, 30]
        result = detect_rolling(series, window=7, threshold=2)
        assert len(result) == 1
        a = result[0]
        assert a.index == 7
        assert a.value == 30.0
        assert a.window_mean == 10.86  # 76 / 7
        assert a.z_score == round_fixed(a.severity, 2)
        assert a.severity > 19.0

    def test_sample_excluded_from_its_own_window(self):
        # If sample 7 were part of its own baseline the std would be
        # non-zero; with the preceding 7 samples constant it's zero -> z = 0
        series = [5.0] * 7 + [9.0]
        assert detect_rolling(series, window=7) == []

    def test_spike_only_flagged_once(self):
        result = detect_rolling(spiky_series(spike_at=15))
        assert [a.index for a in result] == [15]

    def test_severity_is_abs_z(self):
        series = [12, 10, 12, 10, 12, 10, 12, -10]
        result = detect_rolling(series, window=7)
        assert len(result) == 1
        assert result[0].z_score < 0
        assert result[0].severity == pytest.approx(-result[0].z_score, abs=0.005)

    def test_small_window(self):
        series = [1.0, 2.0, 1.0, 2.0, 50.0]
        result = detect_rolling(series, window=2, threshold=2)
        assert [a.index for a in result] == [4]
        assert result[0].window_mean == 1.5

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            detect_rolling([1.0, 2.0, 3.0], window=0)

    def test_to_dict_keys(self):
        a = RollingAnomaly(index=8, value=30.0, window_mean=10.86, z_score=19.34, severity=19.341)
        assert set(a.to_dict()) == {"index", "value", "window_mean", "z_score", "severity"}


# ========================== detect_all ==========================


class TestDetectAll:
    def test_report_per_metric(self):
        data = week_of_metrics()
        report = detect_all(data)
        assert list(report) == list(data)
        for result in report.values():
            assert isinstance(result, MetricAnomalyReport)

    def test_week_is_too_short_for_rolling(self):
        report = detect_all(week_of_metrics())
        assert all(r.rolling_anomalies == [] for r in report.values())

    def test_uses_both_detectors(self):
        report = detect_all({"heart_rate": spiky_series(spike_at=15)})
        hr = report["heart_rate"]
        assert [a.index for a in hr.z_anomalies] == [15]
        assert [a.index for a in hr.rolling_anomalies] == [15]
        assert hr.count == 2

    def test_config_overrides(self):
        series = [10.0] * 9 + [100.0]
        strict = AnalyticsConfig(global_threshold=3.5)
        assert detect_all({"x": series}, strict)["x"].z_anomalies == []
        assert len(detect_all({"x": series})["x"].z_anomalies) == 1

    def test_none_series_treated_as_empty(self):
        report = detect_all({"sleep": None})
        assert report["sleep"].count == 0

    def test_empty_mapping(self):
        assert detect_all({}) == {}

    def test_to_dict(self):
        report = detect_all({"x": [10.0] * 9 + [100.0]})
        d = report["x"].to_dict()
        assert d["z_anomalies"][0]["index"] == 9
        assert d["rolling_anomalies"] == []
