"""
Tests for core.settings - JSON parameter store
"""

import json

from codevanta.core import settings


class TestSettingsFile:
    """Test generic save/load against a temporary config dir"""

    def test_path_follows_env(self, config_dir):
        assert settings.get_settings_path() == config_dir / "settings.json"

    def test_defaults_without_file(self, config_dir):
        assert settings.load_setting("Missing", "fallback") == "fallback"
        assert settings.load_github_host() == "api.github.com"
        assert settings.load_user_agent() == "CodeVanta/1.0"
        assert settings.load_github_token() is None

    def test_round_trip_creates_file(self, config_dir):
        settings.save_github_host("ghe.example.com")

        data = json.loads((config_dir / "settings.json").read_text(encoding="utf-8"))
        assert data == {"GitHubHost": "ghe.example.com"}
        assert settings.load_github_host() == "ghe.example.com"

    def test_corrupt_file_falls_back(self, config_dir):
        (config_dir / "settings.json").write_text("[1, 2", encoding="utf-8")

        assert settings.load_setting("GitHubHost", "api.github.com") == "api.github.com"

    def test_remove_setting(self, config_dir):
        settings.save_setting("A", "1")
        settings.remove_setting("A")

        assert settings.load_setting("A", "") == ""


class TestCredentials:
    """Test token and assistant key lookup"""

    def test_env_token_wins(self, config_dir, monkeypatch):
        settings.save_github_token("from-file")
        monkeypatch.setenv("CODEVANTA_GITHUB_TOKEN", "from-env")

        assert settings.load_github_token() == "from-env"

    def test_credentials_configured_needs_both(self, config_dir):
        settings.save_github_token("t")
        assert not settings.credentials_configured()

        settings.save_assistant_key("k")
        assert settings.credentials_configured()

    def test_clear_credentials(self, config_dir):
        settings.save_github_token("t")
        settings.save_assistant_key("k")
        settings.save_github_host("ghe.example.com")

        settings.clear_credentials()

        assert settings.load_github_token() is None
        assert settings.load_assistant_key() is None
        assert settings.load_github_host() == "ghe.example.com"

    def test_user_agent(self, config_dir):
        settings.save_user_agent("MyEditor/2.0")
        assert settings.load_user_agent() == "MyEditor/2.0"

        settings.save_user_agent("")
        assert settings.load_user_agent() == "CodeVanta/1.0"
