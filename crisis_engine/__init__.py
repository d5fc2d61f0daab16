# crisis risk scoring engine
# turns a user's recent mood and journal history into a crisis risk assessment

from .errors import ComputationError, ConfigError, CrisisEngineError, ValidationError
from .models import ConfigUpdate, CrisisPrediction, PredictionConfig, PredictionInput
from .services import CrisisPredictionEngine, summarize_predictions

__all__ = [
    "ComputationError",
    "ConfigError",
    "ConfigUpdate",
    "CrisisEngineError",
    "CrisisPrediction",
    "CrisisPredictionEngine",
    "PredictionConfig",
    "PredictionInput",
    "ValidationError",
    "summarize_predictions",
]
