# engine settings
# loads env vars for the algorithm version, logging and default window settings

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# load .env from project root
load_dotenv(Path(__file__).parent.parent / ".env")


class Settings(BaseSettings):
    # algorithm
    ALGORITHM_VERSION: str = "1.0.0"
    CONFIG_VERSION: str = "1.0"

    # logging
    LOG_LEVEL: str = os.getenv("CRISIS_LOG_LEVEL", "INFO")

    # analysis window defaults
    DEFAULT_WINDOW_DAYS: int = int(os.getenv("CRISIS_DEFAULT_WINDOW_DAYS", "14"))
    MINIMUM_DATA_POINTS: int = int(os.getenv("CRISIS_MINIMUM_DATA_POINTS", "1"))
    CONFIDENCE_THRESHOLD: float = float(os.getenv("CRISIS_CONFIDENCE_THRESHOLD", "0.65"))

    # prediction lifetime
    PREDICTION_TTL_HOURS: int = 24
    PREDICTION_REFRESH_HOURS: int = 6

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
