"""Library configuration loaded from the environment."""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from ``CRITERIA_ENGINE_*`` environment variables."""

    # Rule files
    rules_dir: str | None = None
    rule_file_glob: str = "*.yaml"
    validate_on_load: bool = True

    # Logging
    log_level: str = "WARNING"

    model_config = {
        "env_prefix": "CRITERIA_ENGINE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply ``log_level`` to the package logger.

    The library never installs handlers on import; host applications that
    want the engine's log output call this once at startup.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("criteria_engine").setLevel(level)
