# prediction models: factors, interventions and the final crisis prediction
# serialize with model_dump(by_alias=True) to get the camelCase shape the app stores

from datetime import datetime
from typing import Literal, Optional, Tuple

from pydantic import AliasChoices, BaseModel, Field

FactorType = Literal[
    "mood_decline",
    "negative_sentiment",
    "stress_keywords",
    "journal_frequency",
    "trend",
]
TrendDirection = Literal["improving", "stable", "declining"]
RiskLevel = Literal["low", "medium", "high", "critical"]
RiskTrend = Literal["improving", "worsening", "stable"]
InterventionPriority = Literal["immediate", "urgent", "moderate", "preventive"]
InterventionType = Literal[
    "breathing",
    "journaling",
    "emergency_contact",
    "professional_help",
    "self_care",
]

# canonical orderings, lowest first
RISK_LEVELS = ("low", "medium", "high", "critical")
FACTOR_TYPES = (
    "mood_decline",
    "negative_sentiment",
    "stress_keywords",
    "journal_frequency",
    "trend",
)


def _camel(name: str, alias: str, default=...):
    return Field(default, validation_alias=AliasChoices(name, alias), serialization_alias=alias)


class Factor(BaseModel):
    """one normalized signal contributing to the risk score"""
    type: FactorType
    weight: float = Field(..., ge=0.0, le=1.0)
    current_value: float = _camel("current_value", "currentValue")
    threshold: float
    trend: TrendDirection = "stable"
    description: str = ""

    model_config = {"frozen": True}


class Intervention(BaseModel):
    """catalog entry for a recommended coping action"""
    id: str
    priority: InterventionPriority
    type: InterventionType
    title: str
    description: str
    estimated_minutes: int = _camel("estimated_minutes", "estimatedMinutes", 0)
    instructions: Tuple[str, ...] = ()
    trigger_factor_types: Tuple[str, ...] = _camel("trigger_factor_types", "triggerFactorTypes", ())

    model_config = {"frozen": True}


class PredictionWindow(BaseModel):
    start_date: datetime = _camel("start_date", "startDate")
    end_date: datetime = _camel("end_date", "endDate")
    days: int

    model_config = {"frozen": True}


class PreviousPrediction(BaseModel):
    """minimal view of an earlier prediction, as supplied by the caller"""
    risk_score: float = _camel("risk_score", "riskScore")
    risk_level: RiskLevel = _camel("risk_level", "riskLevel")

    model_config = {"frozen": True, "extra": "ignore"}


class PredictionComparison(BaseModel):
    risk_score: float = _camel("risk_score", "riskScore")
    risk_level: RiskLevel = _camel("risk_level", "riskLevel")
    trend: RiskTrend

    model_config = {"frozen": True}


class CrisisPrediction(BaseModel):
    """the engine's only output, built once per predict() call"""
    id: str
    user_id: str = _camel("user_id", "userId")
    risk_score: float = _camel("risk_score", "riskScore")
    risk_level: RiskLevel = _camel("risk_level", "riskLevel")
    confidence_score: float = _camel("confidence_score", "confidenceScore")
    factors: Tuple[Factor, ...]
    interventions: Tuple[Intervention, ...]
    algorithm_version: str = _camel("algorithm_version", "algorithmVersion")
    data_points_analyzed: int = _camel("data_points_analyzed", "dataPointsAnalyzed")
    analysis_window: PredictionWindow = _camel("analysis_window", "analysisWindow")
    expires_at: datetime = _camel("expires_at", "expiresAt")
    next_update_at: datetime = _camel("next_update_at", "nextUpdateAt")
    previous_prediction_trend: Optional[PredictionComparison] = _camel(
        "previous_prediction_trend", "previousPredictionTrend", None,
    )
    created_at: datetime = _camel("created_at", "createdAt")
    updated_at: datetime = _camel("updated_at", "updatedAt")

    model_config = {"frozen": True}

