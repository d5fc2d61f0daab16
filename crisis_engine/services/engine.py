# crisis prediction engine: validate -> analyze factors -> score -> confidence -> interventions -> assemble
# the engine is a pure function of (snapshot, config); it never reads or writes storage.
# the previous prediction used for trend comparison is supplied by the caller.

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from crisis_engine.config import settings
from crisis_engine.errors import ComputationError, CrisisEngineError, ValidationError
from crisis_engine.models.engine_config import ConfigUpdate, PredictionConfig, default_prediction_config
from crisis_engine.models.observation import PredictionInput
from crisis_engine.models.prediction import (
    CrisisPrediction,
    Factor,
    Intervention,
    PredictionComparison,
    PredictionWindow,
    PreviousPrediction,
    RiskLevel,
    RiskTrend,
)
from crisis_engine.services.confidence import calculate_confidence
from crisis_engine.services.factors import analyze_factors
from crisis_engine.services.interventions import select_interventions
from crisis_engine.services.scoring import calculate_risk_score, determine_risk_level
from crisis_engine.services.validator import coerce_input, validate_input

logger = logging.getLogger(__name__)

TREND_STABILITY_BAND = 0.05

PreviousLike = Union[CrisisPrediction, PreviousPrediction, Mapping[str, Any]]
ConfigLike = Union[ConfigUpdate, Mapping[str, Any]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def compare_scores(previous_score: float, current_score: float) -> RiskTrend:
    """worsening / improving once the scores differ by at least 0.05, else stable"""
    difference = round(current_score - previous_score, 3)
    if abs(difference) < TREND_STABILITY_BAND:
        return "stable"
    return "worsening" if difference > 0 else "improving"


def coerce_previous(previous: Optional[PreviousLike]) -> Optional[PreviousPrediction]:
    if previous is None or isinstance(previous, PreviousPrediction):
        return previous
    if isinstance(previous, CrisisPrediction):
        return PreviousPrediction(risk_score=previous.risk_score, risk_level=previous.risk_level)
    try:
        return PreviousPrediction.model_validate(dict(previous))
    except (PydanticValidationError, TypeError, ValueError) as e:
        raise ValidationError(f"malformed previous prediction: {e}") from e


def assemble_prediction(
    data: PredictionInput,
    factors: Sequence[Factor],
    risk_score: float,
    risk_level: RiskLevel,
    confidence_score: float,
    interventions: Sequence[Intervention],
    end_date: datetime,
    now: datetime,
    previous: Optional[PreviousPrediction] = None,
) -> CrisisPrediction:
    """package the analysis into a CrisisPrediction; ids and timestamps are the only non-derived fields"""
    days = data.analysis_window.days
    comparison = None
    if previous is not None:
        comparison = PredictionComparison(
            risk_score=previous.risk_score,
            risk_level=previous.risk_level,
            trend=compare_scores(previous.risk_score, risk_score),
        )

    return CrisisPrediction(
        id=str(uuid.uuid4()),
        user_id=data.user_id,
        risk_score=risk_score,
        risk_level=risk_level,
        confidence_score=confidence_score,
        factors=tuple(factors),
        interventions=tuple(interventions),
        algorithm_version=settings.ALGORITHM_VERSION,
        data_points_analyzed=data.total_observations,
        analysis_window=PredictionWindow(
            start_date=end_date - timedelta(days=days),
            end_date=end_date,
            days=days,
        ),
        expires_at=now + timedelta(hours=settings.PREDICTION_TTL_HOURS),
        next_update_at=now + timedelta(hours=settings.PREDICTION_REFRESH_HOURS),
        previous_prediction_trend=comparison,
        created_at=now,
        updated_at=now,
    )


class CrisisPredictionEngine:
    """stateless crisis risk scorer bound to an immutable configuration.

    predict() reads the config reference once per call, so swapping the config with
    update_config() never affects a prediction that is already running. prefer
    with_config(), which leaves this engine untouched and returns a new one.
    """

    def __init__(
        self,
        config: Optional[PredictionConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._config = config if config is not None else default_prediction_config()
        self._clock = clock or _utcnow

    @property
    def version(self) -> str:
        return settings.ALGORITHM_VERSION

    @property
    def config(self) -> PredictionConfig:
        return self._config

    def get_config(self) -> PredictionConfig:
        return self._config.model_copy(deep=True)

    def with_config(self, update: ConfigLike) -> "CrisisPredictionEngine":
        merged = self._config.merged(ConfigUpdate.coerce(update))
        return CrisisPredictionEngine(merged, clock=self._clock)

    def update_config(self, update: ConfigLike) -> None:
        merged = self._config.merged(ConfigUpdate.coerce(update))
        self._config = merged
        logger.info(f"Engine config updated: {merged.model_dump(by_alias=True)}")

    # main entry point

    def predict(
        self,
        data: Union[PredictionInput, Mapping[str, Any]],
        previous: Optional[PreviousLike] = None,
    ) -> CrisisPrediction:
        config = self._config
        snapshot = coerce_input(data)
        validate_input(snapshot, config)
        previous_summary = coerce_previous(previous)

        try:
            now = self._clock()
            end_date = snapshot.analysis_window.end_date or now

            factors = analyze_factors(snapshot, end_date, config)
            risk_score = calculate_risk_score(factors)
            risk_level = determine_risk_level(risk_score, config.thresholds)
            confidence = calculate_confidence(snapshot, factors)
            interventions = select_interventions(factors, risk_level)

            prediction = assemble_prediction(
                snapshot,
                factors,
                risk_score,
                risk_level,
                confidence,
                interventions,
                end_date=end_date,
                now=now,
                previous=previous_summary,
            )
        except CrisisEngineError:
            raise
        except Exception as e:
            logger.error(f"Prediction failed for user {snapshot.user_id}: {e}", exc_info=True)
            raise ComputationError(str(e)) from e

        logger.info(
            f"Prediction for user {prediction.user_id}: risk={prediction.risk_score} "
            f"({prediction.risk_level}), confidence={prediction.confidence_score}, "
            f"{prediction.data_points_analyzed} data points"
        )
        if prediction.confidence_score < config.analysis_window.confidence_threshold:
            logger.warning(
                f"Low confidence prediction for user {prediction.user_id}: "
                f"{prediction.confidence_score} < {config.analysis_window.confidence_threshold}"
            )
        return prediction

