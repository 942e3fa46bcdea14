from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    archive_engine: str = "zipfile"
    archive_extension: str = ".zip"
    entry_encoding: str = "utf-8"
    entry_read_workers: int = 1

    anomaly_min_readings: int = 4
    anomaly_fence_multiplier: float = 1.5

    report_output_dir: str = ""
