from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "WARNING"

    output_path: str = "./places_anonymized.sqlite"
    places_path: str | None = None
    force_overwrite: bool = False

    discovery_mode: Literal["generic", "places"] = "places"
    vacuum_after_rewrite: bool = True
    excluded_tables: list[str] = []
