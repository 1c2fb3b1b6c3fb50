from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./voicesync.db"
    provider_base_url: str = "https://api.elevenlabs.io"
    request_timeout_seconds: float = 30.0
    sync_delay_seconds: float = 0.1  # pause between provider calls within one batch
    retry_sweep_hour: int = 4

    model_config = SettingsConfigDict(
        env_prefix="VOICESYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
