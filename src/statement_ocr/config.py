"""Application configuration using Pydantic settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (and an optional .env file)."""

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent.parent.parent / ".env"),
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # OCR engine
    tesseract_cmd: str | None = None
    poppler_path: str | None = None
    ocr_language: str = "eng"

    # Page processing
    ocr_max_workers: int = 1
    ocr_page_timeout_seconds: int = 60
    ocr_document_timeout_seconds: int = 300


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
