# risk scoring: factor sub-scores, weighted aggregation and risk level bands

import logging
import math
from typing import Callable, Dict, Iterable, List

from crisis_engine.models.engine_config import RiskThresholds
from crisis_engine.models.prediction import Factor, RiskLevel

logger = logging.getLogger(__name__)

TREND_MULTIPLIERS = {"declining": 1.2, "stable": 1.0, "improving": 0.8}
FALLBACK_RISK_SCORE = 0.1
SCORE_DECIMALS = 3


def clip(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


# sub-score transforms, keyed by factor type. each maps a raw value to [0, 1]

def _mood_risk(factor: Factor) -> float:
    # 5.0 is no risk, 1.0 is full risk
    return clip((5.0 - factor.current_value) / 4.0)


def _sentiment_risk(factor: Factor) -> float:
    # +1 is no risk, -1 is full risk
    return clip((1.0 - factor.current_value) / 2.0)


def _stress_keyword_risk(factor: Factor) -> float:
    # 10 or more keywords per entry saturates
    return clip(factor.current_value / 10.0)


def _frequency_risk(factor: Factor) -> float:
    # only journaling less than expected counts, high frequency is never a risk signal
    if factor.threshold > 0 and factor.current_value < factor.threshold:
        return clip((factor.threshold - factor.current_value) / factor.threshold)
    return 0.0


def _trend_risk(factor: Factor) -> float:
    # shortfall of the slope below the threshold, one point per day saturates
    return clip(factor.threshold - factor.current_value)


def _exceeds_threshold_risk(factor: Factor) -> float:
    # catch-all for factor types without a dedicated transform: proportional overflow above the threshold
    if factor.current_value <= factor.threshold:
        return 0.0
    if factor.threshold == 0:
        return 1.0
    return clip((factor.current_value - factor.threshold) / abs(factor.threshold))


SUBSCORE_TRANSFORMS: Dict[str, Callable[[Factor], float]] = {
    "mood_decline": _mood_risk,
    "negative_sentiment": _sentiment_risk,
    "stress_keywords": _stress_keyword_risk,
    "journal_frequency": _frequency_risk,
    "trend": _trend_risk,
}


def factor_subscore(factor: Factor) -> float:
    """normalized risk contribution of one factor before trend adjustment"""
    transform = SUBSCORE_TRANSFORMS.get(factor.type, _exceeds_threshold_risk)
    return transform(factor)


def adjusted_subscore(factor: Factor) -> float:
    return factor_subscore(factor) * TREND_MULTIPLIERS.get(factor.trend, 1.0)


def calculate_risk_score(factors: Iterable[Factor]) -> float:
    """weighted mean of trend-adjusted sub-scores, clamped to [0, 1] and rounded to 3 dp"""
    weighted = 0.0
    total_weight = 0.0
    for factor in factors:
        weighted += adjusted_subscore(factor) * factor.weight
        total_weight += factor.weight

    score = weighted / total_weight if total_weight > 0 else float("nan")
    if math.isnan(score):
        logger.warning(f"Risk score undefined (total weight {total_weight}), using fallback {FALLBACK_RISK_SCORE}")
        score = FALLBACK_RISK_SCORE
    return round(clip(score), SCORE_DECIMALS)


def determine_risk_level(score: float, thresholds: RiskThresholds) -> RiskLevel:
    """each threshold is the upper bound of its band: reaching `low` means medium risk, and so on"""
    if score >= thresholds.high:
        return "critical"
    if score >= thresholds.medium:
        return "high"
    if score >= thresholds.low:
        return "medium"
    return "low"


def normalized_subscores(factors: Iterable[Factor]) -> List[float]:
    return [factor_subscore(f) for f in factors]
