"""Runtime settings for the expense tracker."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Values read from ``TRACKER_*`` environment variables or a ``.env`` file."""

    seed_path: str = "data/seed.json"
    # currency every stored amount is recorded in
    base_currency: str = "USD"
    display_currency: str = "USD"
    week_window: int = Field(default=8, gt=0)
    trend_months: int = Field(default=6, gt=0)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_settings() -> Settings:
    return Settings()
