# confidence estimation: how far the risk score can be trusted
# four equally weighted signals: data volume, time coverage, sentiment completeness
# and agreement between factors

import logging
import math
from typing import Dict, Sequence

import numpy as np

from crisis_engine.models.observation import PredictionInput
from crisis_engine.models.prediction import Factor
from crisis_engine.services.scoring import clip, normalized_subscores

logger = logging.getLogger(__name__)

COMPONENT_WEIGHT = 0.25
FULL_VOLUME_POINTS = 20
FULL_COVERAGE_DAYS = 14
MIN_CONFIDENCE = 0.3
MAX_CONFIDENCE = 1.0
FALLBACK_CONFIDENCE = 0.5


def factor_consistency(factors: Sequence[Factor]) -> float:
    """1 - variance of the normalized sub-scores; factors that agree give high consistency"""
    scores = np.array(normalized_subscores(factors), dtype=float)
    if scores.size == 0:
        return 0.0
    variance = float(np.var(scores))
    return 1.0 - min(1.0, variance)


def confidence_components(data: PredictionInput, factors: Sequence[Factor]) -> Dict[str, float]:
    """each component already in [0, 1], before weighting"""
    journals = data.journal_observations
    with_sentiment = sum(1 for j in journals if j.sentiment_score is not None)
    return {
        "data_volume": clip(data.total_observations / FULL_VOLUME_POINTS),
        "time_coverage": clip((data.analysis_window.days or 0) / FULL_COVERAGE_DAYS),
        "sentiment_completeness": clip(with_sentiment / len(journals)) if journals else 0.0,
        "factor_consistency": clip(factor_consistency(factors)),
    }


def calculate_confidence(data: PredictionInput, factors: Sequence[Factor]) -> float:
    components = confidence_components(data, factors)
    confidence = sum(value * COMPONENT_WEIGHT for value in components.values())
    if math.isnan(confidence):
        logger.warning(f"Confidence undefined ({components}), using fallback {FALLBACK_CONFIDENCE}")
        confidence = FALLBACK_CONFIDENCE
    logger.debug(f"Confidence components: {components}")
    return round(clip(confidence, MIN_CONFIDENCE, MAX_CONFIDENCE), 3)
