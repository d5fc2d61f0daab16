# input validation, runs before any analyzer
# fails fast: a snapshot either passes every check or nothing is computed

import logging
from typing import Any, Mapping, Union

from pydantic import ValidationError as PydanticValidationError

from crisis_engine.errors import ValidationError
from crisis_engine.models.engine_config import PredictionConfig
from crisis_engine.models.observation import PredictionInput

logger = logging.getLogger(__name__)

MINIMUM_WINDOW_DAYS = 3


def coerce_input(data: Union[PredictionInput, Mapping[str, Any]]) -> PredictionInput:
    """accept a ready snapshot or a raw mapping (parsed json, db rows)"""
    if isinstance(data, PredictionInput):
        return data
    if not isinstance(data, Mapping):
        raise ValidationError(f"prediction input must be a mapping, got {type(data).__name__}")
    try:
        return PredictionInput.model_validate(dict(data))
    except PydanticValidationError as e:
        raise ValidationError(f"malformed prediction input: {e}") from e


def validate_input(data: PredictionInput, config: PredictionConfig) -> None:
    if not data.user_id:
        raise ValidationError("userId is required")

    days = data.analysis_window.days
    if not days:
        raise ValidationError("analysisWindow.days is required")
    if days < MINIMUM_WINDOW_DAYS:
        raise ValidationError(f"analysis window must be at least {MINIMUM_WINDOW_DAYS} days, got {days}")

    required = config.analysis_window.minimum_data_points
    if data.total_observations < required:
        raise ValidationError(
            f"insufficient data: at least {required} entries required, got {data.total_observations}"
        )

    logger.debug(f"Input valid for user {data.user_id}: {data.total_observations} observations over {days} days")
