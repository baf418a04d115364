"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file)."""

    # --- App ---
    app_name: str = "Cyclewise"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # --- Engine ---
    cycle_config_path: str | None = None  # overrides the bundled cycle_config.yaml

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "CYCLEWISE_",
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()
