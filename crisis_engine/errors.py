# error types raised at the engine boundary
# callers only ever need to catch CrisisEngineError

ERROR_PREFIX = "Crisis prediction engine error: "


class CrisisEngineError(Exception):
    """base class for everything the engine raises"""

    def __init__(self, message: str):
        if not message.startswith(ERROR_PREFIX):
            message = f"{ERROR_PREFIX}{message}"
        super().__init__(message)
        self.message = message


class ValidationError(CrisisEngineError):
    """input snapshot is missing required fields or has too little data"""


class ComputationError(CrisisEngineError):
    """unexpected failure while analysing a valid snapshot"""


class ConfigError(CrisisEngineError, ValueError):
    """invalid engine configuration or config update"""
