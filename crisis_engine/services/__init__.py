from .engine import CrisisPredictionEngine
from .history import summarize_predictions

__all__ = ["CrisisPredictionEngine", "summarize_predictions"]
