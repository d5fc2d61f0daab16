# summary of a user's stored predictions for dashboards
# the caller loads the predictions; this only aggregates them

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd
from pydantic import ValidationError as PydanticValidationError

from crisis_engine.errors import ValidationError
from crisis_engine.models.prediction import RISK_LEVELS, CrisisPrediction, RiskTrend
from crisis_engine.services.engine import TREND_STABILITY_BAND

logger = logging.getLogger(__name__)

HISTORY_DAYS = 30
TREND_SPAN = 5


def _as_prediction(item: Union[CrisisPrediction, Mapping[str, Any]]) -> CrisisPrediction:
    if isinstance(item, CrisisPrediction):
        return item
    try:
        return CrisisPrediction.model_validate(dict(item))
    except (PydanticValidationError, TypeError, ValueError) as e:
        raise ValidationError(f"malformed stored prediction: {e}") from e


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def history_trend(scores: List[float]) -> RiskTrend:
    """mean of the last 5 scores vs the first 5, in chronological order"""
    if len(scores) < 2:
        return "stable"
    series = pd.Series(scores, dtype=float)
    difference = float(series.tail(TREND_SPAN).mean() - series.head(TREND_SPAN).mean())
    if abs(round(difference, 3)) < TREND_STABILITY_BAND:
        return "stable"
    return "worsening" if difference > 0 else "improving"


def summarize_predictions(
    predictions: Iterable[Union[CrisisPrediction, Mapping[str, Any]]],
    now: Optional[datetime] = None,
    days: int = HISTORY_DAYS,
) -> Dict[str, Any]:
    """risk distribution, averages and overall trend over the last `days` days"""
    if isinstance(predictions, (Mapping, str, bytes)) or not isinstance(predictions, Iterable):
        raise ValidationError(f"predictions must be a list, got {type(predictions).__name__}")
    now = _as_utc(now or datetime.now(timezone.utc))
    cutoff = now - timedelta(days=days)

    recent = [p for p in map(_as_prediction, predictions) if _as_utc(p.created_at) >= cutoff]
    recent.sort(key=lambda p: _as_utc(p.created_at))

    if not recent:
        return {
            "total_predictions": 0,
            "risk_distribution": {level: 0 for level in RISK_LEVELS},
            "average_risk_score": 0.0,
            "average_confidence": 0.0,
            "trend": "stable",
            "last_prediction": None,
        }

    df = pd.DataFrame({
        "risk_level": [p.risk_level for p in recent],
        "risk_score": [p.risk_score for p in recent],
        "confidence_score": [p.confidence_score for p in recent],
    })
    counts = df["risk_level"].value_counts()

    summary = {
        "total_predictions": len(recent),
        "risk_distribution": {level: int(counts.get(level, 0)) for level in RISK_LEVELS},
        "average_risk_score": round(float(df["risk_score"].mean()), 3),
        "average_confidence": round(float(df["confidence_score"].mean()), 3),
        "trend": history_trend(df["risk_score"].tolist()),
        "last_prediction": recent[-1],
    }
    logger.debug(f"Summarized {len(recent)} predictions since {cutoff.isoformat()}")
    return summary
