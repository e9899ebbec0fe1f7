"""
Tests for runtime settings.
"""

from pathlib import Path

from hirefunnel.env import get_settings, load_env


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("HIREFUNNEL_DB_PATH", "HIREFUNNEL_LOG_LEVEL", "HIREFUNNEL_RESUME_BASE_URL",
                     "HIREFUNNEL_OPTIMISTIC_LOCKING"):
            monkeypatch.delenv(name, raising=False)

        settings = get_settings()

        assert settings.db_path == Path("data/candidates.db")
        assert settings.log_level == "INFO"
        assert settings.optimistic_locking is False
        assert settings.resume_base_url.startswith("file://")

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HIREFUNNEL_DB_PATH", str(tmp_path / "x.db"))
        monkeypatch.setenv("HIREFUNNEL_OPTIMISTIC_LOCKING", "true")
        monkeypatch.setenv("HIREFUNNEL_RESUME_BASE_URL", "https://cdn.example.com/cv/")

        settings = get_settings()

        assert settings.db_path == tmp_path / "x.db"
        assert settings.optimistic_locking is True
        assert settings.resume_base_url == "https://cdn.example.com/cv"

    def test_explicit_db_path_wins(self, monkeypatch):
        monkeypatch.setenv("HIREFUNNEL_DB_PATH", "from-env.db")
        assert get_settings("from-flag.db").db_path == Path("from-flag.db")

    def test_load_env_reads_dotenv(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("HIREFUNNEL_LOG_LEVEL", raising=False)
        (tmp_path / ".env").write_text("HIREFUNNEL_LOG_LEVEL=DEBUG\n")

        load_env()

        assert get_settings().log_level == "DEBUG"
        monkeypatch.delenv("HIREFUNNEL_LOG_LEVEL")
