"""Tests for Settings."""
from voicesync.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("DATABASE_URL", "PROVIDER_BASE_URL", "SYNC_DELAY_SECONDS", "RETRY_SWEEP_HOUR"):
            monkeypatch.delenv(f"VOICESYNC_{name}", raising=False)
        settings = Settings(_env_file=None)
        assert settings.database_url == "sqlite:///./voicesync.db"
        assert settings.provider_base_url == "https://api.elevenlabs.io"
        assert settings.sync_delay_seconds == 0.1
        assert settings.retry_sweep_hour == 4

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("VOICESYNC_SYNC_DELAY_SECONDS", "0.5")
        monkeypatch.setenv("VOICESYNC_DATABASE_URL", "postgresql://db/voices")
        settings = Settings(_env_file=None)
        assert settings.sync_delay_seconds == 0.5
        assert settings.database_url == "postgresql://db/voices"

    def test_unprefixed_env_is_ignored(self, monkeypatch):
        monkeypatch.delenv("VOICESYNC_RETRY_SWEEP_HOUR", raising=False)
        monkeypatch.setenv("RETRY_SWEEP_HOUR", "9")
        assert Settings(_env_file=None).retry_sweep_hour == 4
