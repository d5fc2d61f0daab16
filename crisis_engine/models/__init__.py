from .engine_config import ConfigUpdate, FactorWeights, PredictionConfig, RiskThresholds, WindowSettings
from .observation import (
    AnalysisWindow,
    JournalObservation,
    MoodObservation,
    MoodTag,
    PredictionInput,
    UserProfile,
)
from .prediction import CrisisPrediction, Factor, Intervention, PredictionComparison, PreviousPrediction

__all__ = [
    "AnalysisWindow",
    "ConfigUpdate",
    "CrisisPrediction",
    "Factor",
    "FactorWeights",
    "Intervention",
    "JournalObservation",
    "MoodObservation",
    "MoodTag",
    "PredictionComparison",
    "PredictionConfig",
    "PredictionInput",
    "PreviousPrediction",
    "RiskThresholds",
    "UserProfile",
    "WindowSettings",
]
