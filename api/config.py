"""Process settings for the API, read from the environment (and a local .env)."""

import os
from pydantic import BaseModel, ConfigDict
from typing import List

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CORS_ORIGINS = "http://localhost:5173"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    cors_origins: List[str]
    log_level: str = "INFO"


def get_settings() -> Settings:
    origins = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return Settings(
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        log_level=os.environ.get("GOLF_SCORING_LOG_LEVEL", "INFO").upper(),
    )
