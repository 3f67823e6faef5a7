from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Validated (not clamped) by the middleware at construction time.
    sample_rate: float = Field(default=1.0, alias="SAMPLE_RATE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")
    metadata_log_file: str | None = Field(default=None, alias="METADATA_LOG_FILE")
    enable_metrics_endpoint: bool = Field(default=True, alias="ENABLE_METRICS_ENDPOINT")
    seed_patients: int = Field(default=5, alias="SEED_PATIENTS")
    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8080, alias="PORT")

    @property
    def metadata_log_path(self) -> Path | None:
        if not self.metadata_log_file:
            return None
        return Path(self.metadata_log_file)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
