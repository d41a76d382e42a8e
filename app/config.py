"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the lawn season service."""
    model_config = SettingsConfigDict(env_prefix="LAWN_", extra="ignore")

    weather_source: str = "open_meteo"  # options: open_meteo
    default_latitude: float = 32.78
    default_longitude: float = -96.80
    timezone: str = "America/Chicago"
    forecast_days: int = 3
    weather_ttl_seconds: int = 1800
    weather_redis_url: str | None = None
    api_key: str | None = None
    api_key_redis_url: str | None = None
    api_key_redis_set: str = "api_keys"
    badge_limit: int = 3
    log_level: str = "INFO"

    @field_validator("log_level", mode="after")
    @classmethod
    def upper_level(cls, v: str) -> str:
        """Normalize log levels so `debug` and `DEBUG` both work."""
        return str(v).upper()


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
