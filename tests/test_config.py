"""
Tests for settings loading.
"""

from terrain_party.config import Settings


class TestSettings:
    """Test environment-driven configuration."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("VERCEL_GIT_COMMIT_SHA", raising=False)
        monkeypatch.delenv("GIT_COMMIT_HASH", raising=False)
        settings = Settings(_env_file=None)

        assert settings.grid_size == 1081
        assert settings.default_scale == 50.0
        assert settings.tile_user_agent == "TerrainParty/1.0"
        assert settings.cors_origins == ["*"]

    def test_commit_hash_aliases(self, monkeypatch):
        monkeypatch.delenv("VERCEL_GIT_COMMIT_SHA", raising=False)
        monkeypatch.setenv("GIT_COMMIT_HASH", "abc1234def")
        assert Settings(_env_file=None).commit_hash == "abc1234def"

        monkeypatch.setenv("VERCEL_GIT_COMMIT_SHA", "fff0000")
        assert Settings(_env_file=None).commit_hash == "fff0000"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("GRID_SIZE", "257")
        monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test")
        settings = Settings(_env_file=None)

        assert settings.grid_size == 257
        assert settings.cors_origins == ["http://a.test", "http://b.test"]
