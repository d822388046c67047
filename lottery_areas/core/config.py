from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    database_url: str = Field("sqlite:///./areas.db", alias="DATABASE_URL")
    environment: str = Field("development", alias="ENVIRONMENT")
    log_file: str = Field("app.log", alias="LOG_FILE")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    series_min_width: int = Field(4, alias="SERIES_MIN_WIDTH")
    default_max_tickets_per_series: int = Field(2500, alias="DEFAULT_MAX_TICKETS_PER_SERIES")
    series_cycle_attempts: int = Field(3, alias="SERIES_CYCLE_ATTEMPTS")
    audit_log_limit: int = Field(200, alias="AUDIT_LOG_LIMIT")

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
