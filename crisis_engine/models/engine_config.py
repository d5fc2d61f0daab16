# engine configuration models: weights, risk thresholds, window settings
# configs are frozen values; updates go through a typed diff merged field by field
# every field accepts both the snake_case name and the camelCase name used by the app

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from crisis_engine.config import settings
from crisis_engine.errors import ConfigError

logger = logging.getLogger(__name__)

WEIGHT_SUM_TOLERANCE = 0.01


def _field(default: Any, *names: str, **kwargs) -> Any:
    """field accepting any of `names` on input and serializing to the first camelCase one"""
    return Field(
        default,
        validation_alias=AliasChoices(*names),
        serialization_alias=names[1] if len(names) > 1 else names[0],
        **kwargs,
    )


class FactorWeights(BaseModel):
    """relative importance of each factor in the final risk score"""
    mood: float = _field(0.30, "mood", "moodWeight", ge=0.0, le=1.0)
    sentiment: float = _field(0.25, "sentiment", "sentimentWeight", ge=0.0, le=1.0)
    stress_keyword: float = _field(
        0.20, "stress_keyword", "stressKeywordWeight", "stressKeyword", ge=0.0, le=1.0,
    )
    frequency: float = _field(0.15, "frequency", "frequencyWeight", ge=0.0, le=1.0)
    trend: float = _field(0.10, "trend", "trendWeight", ge=0.0, le=1.0)

    model_config = {"frozen": True}

    def total(self) -> float:
        return self.mood + self.sentiment + self.stress_keyword + self.frequency + self.trend


class RiskThresholds(BaseModel):
    """upper bound of each risk band, strictly increasing in [0, 1]"""
    low: float = _field(0.30, "low", "lowRisk", ge=0.0, le=1.0)
    medium: float = _field(0.60, "medium", "mediumRisk", ge=0.0, le=1.0)
    high: float = _field(0.80, "high", "highRisk", ge=0.0, le=1.0)
    critical: float = _field(1.00, "critical", "criticalRisk", ge=0.0, le=1.0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> "RiskThresholds":
        if not (self.low < self.medium < self.high < self.critical):
            raise ValueError(
                f"risk thresholds must be strictly increasing, got "
                f"{self.low}/{self.medium}/{self.high}/{self.critical}"
            )
        return self


class WindowSettings(BaseModel):
    default_days: int = _field(
        settings.DEFAULT_WINDOW_DAYS, "default_days", "defaultDays", ge=3,
    )
    minimum_data_points: int = _field(
        settings.MINIMUM_DATA_POINTS, "minimum_data_points", "minimumDataPoints", ge=0,
    )
    confidence_threshold: float = _field(
        settings.CONFIDENCE_THRESHOLD, "confidence_threshold", "confidenceThreshold", ge=0.0, le=1.0,
    )

    model_config = {"frozen": True}


class PredictionConfig(BaseModel):
    """full configuration bound to an engine instance"""
    version: str = settings.CONFIG_VERSION
    weights: FactorWeights = Field(default_factory=FactorWeights)
    thresholds: RiskThresholds = Field(default_factory=RiskThresholds)
    analysis_window: WindowSettings = Field(
        default_factory=WindowSettings,
        validation_alias=AliasChoices("analysis_window", "analysisWindow"),
        serialization_alias="analysisWindow",
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_weights(self) -> "PredictionConfig":
        total = self.weights.total()
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            logger.warning(f"Factor weights sum to {total:.3f}, expected 1.0; scores are normalized by the total")
        return self

    def merged(self, update: "ConfigUpdate") -> "PredictionConfig":
        """return a new config with every explicitly set field of `update` applied"""
        data = self.model_dump()
        if update.version is not None:
            data["version"] = update.version
        for section in ("weights", "thresholds", "analysis_window"):
            diff = getattr(update, section)
            if diff is None:
                continue
            data[section].update(diff.model_dump(exclude_unset=True, exclude_none=True))
        try:
            return PredictionConfig.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigError(f"invalid configuration: {e}") from e


# typed config diff: every field optional, unknown keys rejected

class WeightsUpdate(BaseModel):
    mood: Optional[float] = _field(None, "mood", "moodWeight", ge=0.0, le=1.0)
    sentiment: Optional[float] = _field(None, "sentiment", "sentimentWeight", ge=0.0, le=1.0)
    stress_keyword: Optional[float] = _field(
        None, "stress_keyword", "stressKeywordWeight", "stressKeyword", ge=0.0, le=1.0,
    )
    frequency: Optional[float] = _field(None, "frequency", "frequencyWeight", ge=0.0, le=1.0)
    trend: Optional[float] = _field(None, "trend", "trendWeight", ge=0.0, le=1.0)

    model_config = {"extra": "forbid"}


class ThresholdsUpdate(BaseModel):
    low: Optional[float] = _field(None, "low", "lowRisk", ge=0.0, le=1.0)
    medium: Optional[float] = _field(None, "medium", "mediumRisk", ge=0.0, le=1.0)
    high: Optional[float] = _field(None, "high", "highRisk", ge=0.0, le=1.0)
    critical: Optional[float] = _field(None, "critical", "criticalRisk", ge=0.0, le=1.0)

    model_config = {"extra": "forbid"}


class WindowSettingsUpdate(BaseModel):
    default_days: Optional[int] = _field(None, "default_days", "defaultDays", ge=3)
    minimum_data_points: Optional[int] = _field(
        None, "minimum_data_points", "minimumDataPoints", ge=0,
    )
    confidence_threshold: Optional[float] = _field(
        None, "confidence_threshold", "confidenceThreshold", ge=0.0, le=1.0,
    )

    model_config = {"extra": "forbid"}


class ConfigUpdate(BaseModel):
    """partial configuration; only the fields that are set override the current config"""
    version: Optional[str] = None
    weights: Optional[WeightsUpdate] = None
    thresholds: Optional[ThresholdsUpdate] = None
    analysis_window: Optional[WindowSettingsUpdate] = _field(
        None, "analysis_window", "analysisWindow",
    )

    model_config = {"extra": "forbid"}

    @classmethod
    def coerce(cls, value: Union["ConfigUpdate", Mapping[str, Any]]) -> "ConfigUpdate":
        if isinstance(value, ConfigUpdate):
            return value
        try:
            return cls.model_validate(dict(value))
        except (PydanticValidationError, TypeError, ValueError) as e:
            raise ConfigError(f"invalid config update: {e}") from e


def default_prediction_config() -> PredictionConfig:
    """defaults, with window settings taken from the environment"""
    return PredictionConfig()
