"""Tests for healthmetrics.analytics.correlation -- Pearson, matrix, insights."""

import pytest

from healthmetrics.analytics.correlation import (
    pearson,
    build_matrix,
    insight,
    relation_pairs,
    CorrelationMatrix,
)

from tests.conftest import SLEEP_WEEK, STRESS_WEEK, STEPS_WEEK, week_of_metrics


class TestPearson:
    def test_perfect_positive(self):
        assert pearson([1, 2, 3], [2, 4, 6]) == 1.0

    def test_perfect_negative(self):
        assert pearson([1, 2, 3], [3, 2, 1]) == -1.0

    def test_length_mismatch(self):
        assert pearson([1, 2, 3], [1, 2]) == 0.0

    def test_empty(self):
        assert pearson([], []) == 0.0
        assert pearson([1.0], []) == 0.0

    def test_zero_variance(self):
        assert pearson([5, 5, 5], [1, 2, 3]) == 0.0

    def test_single_sample(self):
        assert pearson([4.0], [9.0]) == 0.0

    def test_known_value(self):
        # Sxy = -0.86, Sxx = 1.06, Syy = 3.0486 -> r = -0.478
        assert pearson(SLEEP_WEEK, STRESS_WEEK) == -0.48

    def test_symmetric(self):
        assert pearson(SLEEP_WEEK, STEPS_WEEK) == pearson(STEPS_WEEK, SLEEP_WEEK)
        assert pearson(STRESS_WEEK, STEPS_WEEK) == pearson(STEPS_WEEK, STRESS_WEEK)

    def test_rounded_to_two_places(self):
        r = pearson([1, 2, 3, 4, 5], [2, 1, 4, 3, 5])
        assert r == 0.8
        assert round(r, 2) == r

    def test_bounded(self):
        r = pearson(STEPS_WEEK, SLEEP_WEEK)
        assert -1.0 <= r <= 1.0

    def test_missing_values_coerced(self):
        assert pearson([1, None, 3], [1, 0, 3]) == 1.0


class TestBuildMatrix:
    def test_diagonal_is_one(self):
        data = week_of_metrics()
        m = build_matrix(list(data.values()), list(data))
        for i in range(len(data)):
            assert m.matrix[i][i] == 1.0

    def test_diagonal_forced_for_single_sample(self):
        m = build_matrix([[5.0], [3.0]], ["a", "b"])
        assert m.matrix[0][0] == 1.0
        assert m.matrix[1][1] == 1.0
        assert m.matrix[0][1] == 0.0

    def test_diagonal_forced_for_constant_series(self):
        m = build_matrix([[2, 2, 2]], ["flat"])
        assert m.matrix == [[1.0]]

    def test_symmetric(self):
        data = week_of_metrics()
        m = build_matrix(list(data.values()), list(data))
        n = len(data)
        for i in range(n):
            for j in range(n):
                assert m.matrix[i][j] == m.matrix[j][i]

    def test_off_diagonal_is_pearson(self):
        m = build_matrix([SLEEP_WEEK, STRESS_WEEK], ["Sleep", "Stress"])
        assert m.get("Sleep", "Stress") == pearson(SLEEP_WEEK, STRESS_WEEK)

    def test_metrics_order_kept(self):
        m = build_matrix([[1, 2], [2, 1], [1, 1]], ["z", "a", "m"])
        assert m.metrics == ["z", "a", "m"]

    def test_empty(self):
        m = build_matrix([], [])
        assert m.metrics == []
        assert m.matrix == []

    def test_names_mismatch(self):
        with pytest.raises(ValueError):
            build_matrix([[1, 2]], ["a", "b"])

    def test_to_dict(self):
        m = build_matrix([[1, 2, 3], [3, 2, 1]], ["a", "b"])
        assert m.to_dict() == {"metrics": ["a", "b"], "matrix": [[1.0, -1.0], [-1.0, 1.0]]}


class TestInsight:
    @pytest.mark.parametrize("value,expected", [
        (0.9, "Sleep and Mood are strongly correlated."),
        (0.61, "Sleep and Mood are strongly correlated."),
        (0.6, "Sleep and Mood have mild correlation."),
        (0.31, "Sleep and Mood have mild correlation."),
        (0.3, "Sleep and Mood are mostly independent."),
        (0.0, "Sleep and Mood are mostly independent."),
        (-0.3, "Sleep and Mood are mostly independent."),
        (-0.31, "Sleep and Mood have mild negative correlation."),
        (-0.6, "Sleep and Mood have mild negative correlation."),
        (-0.61, "Sleep increases as Mood decreases."),
        (-1.0, "Sleep increases as Mood decreases."),
    ])
    def test_bands(self, value, expected):
        assert insight("Sleep", "Mood", value) == expected


class TestRelationPairs:
    def test_explicit_pairs(self):
        data = {"Sleep": SLEEP_WEEK, "Stress": STRESS_WEEK}
        pairs = relation_pairs(data, [("Sleep", "Stress")])
        assert len(pairs) == 1
        p = pairs[0]
        assert p.pair == "Sleep vs Stress"
        assert p.value == -0.48
        assert p.insight == "Sleep and Stress have mild negative correlation."

    def test_default_all_unordered_pairs(self):
        pairs = relation_pairs(week_of_metrics())
        assert len(pairs) == 6  # 4 choose 2
        assert pairs[0].pair == "sleep vs hydration"

    def test_unknown_metric(self):
        with pytest.raises(KeyError):
            relation_pairs({"a": [1, 2]}, [("a", "b")])
