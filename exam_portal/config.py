from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    exams_file: str = Field(default="", alias="EXAMS_FILE")
    max_upload_size_mb: int = Field(default=5, alias="MAX_UPLOAD_SIZE_MB")
    enable_paragraph_fallback: bool = Field(default=False, alias="ENABLE_PARAGRAPH_FALLBACK")
    enable_metrics_endpoint: bool = Field(default=True, alias="ENABLE_METRICS_ENDPOINT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def exams_path(self) -> Path | None:
        return Path(self.exams_file) if self.exams_file else None

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
