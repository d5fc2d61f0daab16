# tests for services/scoring.py
# covers the per-factor transforms, trend adjustment, aggregation and risk level bands

import pytest

from crisis_engine.models.engine_config import RiskThresholds
from crisis_engine.models.prediction import Factor
from crisis_engine.services.scoring import (
    FALLBACK_RISK_SCORE,
    adjusted_subscore,
    calculate_risk_score,
    determine_risk_level,
    factor_subscore,
)


def factor(factor_type, value, threshold=0.0, weight=0.2, trend="stable"):
    return Factor(type=factor_type, weight=weight, current_value=value, threshold=threshold, trend=trend)


# sub-score transforms

class TestSubscores:

    @pytest.mark.parametrize("value,expected", [(1.0, 1.0), (3.0, 0.5), (5.0, 0.0), (4.17, 0.2075)])
    def test_mood(self, value, expected):
        assert factor_subscore(factor("mood_decline", value, 2.5)) == pytest.approx(expected)

    @pytest.mark.parametrize("value,expected", [(-1.0, 1.0), (0.0, 0.5), (1.0, 0.0)])
    def test_sentiment(self, value, expected):
        assert factor_subscore(factor("negative_sentiment", value, -0.3)) == pytest.approx(expected)

    def test_stress_keywords_saturate_at_ten(self):
        assert factor_subscore(factor("stress_keywords", 4.5, 3.0)) == pytest.approx(0.45)
        assert factor_subscore(factor("stress_keywords", 15.0, 3.0)) == 1.0

    def test_low_frequency_is_risk(self):
        assert factor_subscore(factor("journal_frequency", 0.1, 0.5)) == pytest.approx(0.8)
        assert factor_subscore(factor("journal_frequency", 0.0, 0.5)) == 1.0

    def test_high_frequency_is_not_risk(self):
        assert factor_subscore(factor("journal_frequency", 2.0, 0.5)) == 0.0

    def test_trend_below_threshold(self):
        assert factor_subscore(factor("trend", -0.6, -0.1)) == pytest.approx(0.5)
        assert factor_subscore(factor("trend", -3.0, -0.1)) == 1.0

    def test_flat_or_rising_trend_is_not_risk(self):
        assert factor_subscore(factor("trend", 0.0, -0.1)) == 0.0
        assert factor_subscore(factor("trend", 0.4, -0.1)) == 0.0

    def test_other_types_use_threshold_overflow(self):
        # types outside the built-in five are scored by how far they exceed the threshold
        def custom(value, threshold):
            return Factor.model_construct(
                type="sleep_quality", weight=0.2, current_value=value, threshold=threshold, trend="stable",
            )

        assert factor_subscore(custom(0.9, 0.6)) == pytest.approx(0.5)
        assert factor_subscore(custom(0.5, 0.6)) == 0.0
        assert factor_subscore(custom(0.2, 0.0)) == 1.0


class TestTrendAdjustment:

    def test_declining_amplifies(self):
        assert adjusted_subscore(factor("mood_decline", 3.0, 2.5, trend="declining")) == pytest.approx(0.6)

    def test_improving_dampens(self):
        assert adjusted_subscore(factor("mood_decline", 3.0, 2.5, trend="improving")) == pytest.approx(0.4)

    def test_stable_unchanged(self):
        assert adjusted_subscore(factor("mood_decline", 3.0, 2.5)) == pytest.approx(0.5)


# aggregation

class TestRiskScore:

    def test_weighted_mean(self):
        factors = [
            factor("mood_decline", 1.0, 2.5, weight=0.5),
            factor("negative_sentiment", 1.0, -0.3, weight=0.5),
        ]
        # (1.0 * 0.5 + 0.0 * 0.5) / 1.0
        assert calculate_risk_score(factors) == pytest.approx(0.5)

    def test_normalized_by_total_weight(self):
        factors = [factor("mood_decline", 1.0, 2.5, weight=0.2)]
        assert calculate_risk_score(factors) == pytest.approx(1.0)

    def test_clamped_to_one(self):
        factors = [
            factor("mood_decline", 1.0, 2.5, weight=0.5, trend="declining"),
            factor("stress_keywords", 20.0, 3.0, weight=0.5, trend="declining"),
        ]
        assert calculate_risk_score(factors) == 1.0

    def test_zero_weights_use_fallback(self):
        factors = [factor("mood_decline", 1.0, 2.5, weight=0.0)]
        assert calculate_risk_score(factors) == FALLBACK_RISK_SCORE

    def test_no_factors_use_fallback(self):
        assert calculate_risk_score([]) == FALLBACK_RISK_SCORE

    def test_rounded_to_three_decimals(self):
        factors = [
            factor("mood_decline", 4.17, 2.5, weight=0.3),
            factor("negative_sentiment", 0.123, -0.3, weight=0.7),
        ]
        score = calculate_risk_score(factors)
        assert score == round(score, 3)

    def test_lower_mood_never_lowers_risk(self):
        scores = [
            calculate_risk_score([
                factor("mood_decline", value, 2.5, weight=0.3),
                factor("negative_sentiment", 0.2, -0.3, weight=0.25),
            ])
            for value in (5.0, 4.0, 3.0, 2.0, 1.0)
        ]
        assert scores == sorted(scores)


# risk level bands

class TestRiskLevel:

    @pytest.mark.parametrize("score,level", [
        (0.0, "low"),
        (0.29999, "low"),
        (0.30, "medium"),
        (0.59, "medium"),
        (0.60, "high"),
        (0.79, "high"),
        (0.80, "critical"),
        (1.0, "critical"),
    ])
    def test_default_bands(self, score, level):
        assert determine_risk_level(score, RiskThresholds()) == level

    def test_custom_thresholds(self):
        thresholds = RiskThresholds(low=0.2, medium=0.4, high=0.6, critical=1.0)
        assert determine_risk_level(0.25, thresholds) == "medium"
        assert determine_risk_level(0.65, thresholds) == "critical"
