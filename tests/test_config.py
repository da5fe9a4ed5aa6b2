"""Tests for configuration management."""

from pathlib import Path

import pytest

from immuadmin import log
from immuadmin.config import AdminSettings, Options, default_config_paths, read_config_file
from immuadmin.errors import ConfigError


class TestOptions:
    """Test the lazily populated Options holder."""

    def test_options_start_empty(self):
        """Options hold no settings until initialized."""
        options = Options()

        assert not options.loaded
        assert options.settings is None
        with pytest.raises(ConfigError):
            options.get()

    def test_defaults(self):
        """Without file or environment the built-in defaults apply."""
        options = Options()
        settings = options.init_config("immuadmin")

        assert options.loaded
        assert options.get() is settings
        assert settings.address == "127.0.0.1"
        assert settings.port == 3322
        assert settings.mtls is False
        assert settings.tokenfile == "token_admin"
        assert options.config_source is None

    def test_environment_overrides(self, monkeypatch):
        """IMMUADMIN_* variables override the defaults."""
        monkeypatch.setenv("IMMUADMIN_ADDRESS", "10.0.0.5")
        monkeypatch.setenv("IMMUADMIN_PORT", "3323")
        monkeypatch.setenv("IMMUADMIN_MTLS", "true")

        settings = Options().init_config("immuadmin")

        assert settings.address == "10.0.0.5"
        assert settings.port == 3323
        assert settings.mtls is True

    def test_app_name_scopes_environment(self, monkeypatch):
        """The environment prefix follows the application name."""
        monkeypatch.setenv("IMMUADMIN_PORT", "1111")
        monkeypatch.setenv("IMMUCLIENT_PORT", "2222")

        settings = Options().init_config("immuclient")

        assert settings.port == 2222

    def test_init_config_is_idempotent(self, monkeypatch):
        """A second call keeps the settings from the first one."""
        options = Options()
        first = options.init_config("immuadmin")

        monkeypatch.setenv("IMMUADMIN_PORT", "4000")
        second = options.init_config("immuadmin")

        assert second is first
        assert second.port == 3322

    def test_invalid_value_is_config_error(self, monkeypatch):
        """Values that fail validation surface as ConfigError from get()."""
        monkeypatch.setenv("IMMUADMIN_PORT", "not-a-port")
        options = Options()

        assert options.init_config("immuadmin") is None
        assert not options.loaded
        with pytest.raises(ConfigError, match="port"):
            options.get()

    def test_load_error_is_kept(self, monkeypatch):
        """A failed load is not retried and get() keeps reporting it."""
        monkeypatch.setenv("IMMUADMIN_PORT", "not-a-port")
        options = Options()
        options.init_config("immuadmin")

        monkeypatch.setenv("IMMUADMIN_PORT", "3400")
        assert options.init_config("immuadmin") is None
        with pytest.raises(ConfigError, match="port"):
            options.get()

    def test_log_settings_are_applied(self, monkeypatch):
        """Logging is reconfigured from the loaded settings."""
        monkeypatch.setenv("IMMUADMIN_LOG_LEVEL", "debug")
        monkeypatch.setenv("IMMUADMIN_LOG_FORMAT", "json")

        settings = Options().init_config("immuadmin")

        assert settings.log_level == "DEBUG"
        assert log.get_config() == {"level": "DEBUG", "format": "json"}


class TestConfigFiles:
    """Test config file discovery and precedence."""

    def test_default_paths(self):
        """Project-local configs/ is searched before the home directory."""
        paths = default_config_paths("immuadmin")

        assert paths == [Path("configs") / "immuadmin.toml", Path.home() / ".immuadmin.toml"]

    def test_project_config_file(self, isolated_env):
        """configs/<app>.toml in the working directory is picked up."""
        config_dir = isolated_env / "configs"
        config_dir.mkdir()
        (config_dir / "immuadmin.toml").write_text('address = "db.internal"\nport = 3400\n')

        options = Options()
        settings = options.init_config("immuadmin")

        assert settings.address == "db.internal"
        assert settings.port == 3400
        assert options.config_source == Path("configs") / "immuadmin.toml"

    def test_home_config_file(self):
        """~/.<app>.toml is used when there is no project config."""
        (Path.home() / ".immuadmin.toml").write_text("mtls = true\n")

        settings = Options().init_config("immuadmin")

        assert settings.mtls is True

    def test_environment_beats_config_file(self, monkeypatch, tmp_path):
        """Environment variables take precedence over file values."""
        config_file = tmp_path / "admin.toml"
        config_file.write_text('address = "from-file"\nport = 3400\n')
        monkeypatch.setenv("IMMUADMIN_ADDRESS", "from-env")

        settings = Options(config_file=config_file).init_config("immuadmin")

        assert settings.address == "from-env"
        assert settings.port == 3400

    def test_dotenv_file(self, isolated_env):
        """A .env file in the working directory is honoured."""
        (isolated_env / ".env").write_text("IMMUADMIN_PORT=3500\n")

        settings = Options().init_config("immuadmin")

        assert settings.port == 3500

    def test_explicit_file_must_exist(self, tmp_path):
        """A missing --config file is an error, not a silent fallback."""
        options = Options(config_file=tmp_path / "missing.toml")
        options.init_config("immuadmin")

        with pytest.raises(ConfigError, match="not found"):
            options.get()

    def test_malformed_file(self, tmp_path):
        """Broken TOML is reported with the file path."""
        config_file = tmp_path / "broken.toml"
        config_file.write_text("port = = 1\n")

        with pytest.raises(ConfigError) as exc:
            read_config_file(config_file)

        assert exc.value.source == str(config_file)
        assert "broken.toml" in str(exc.value)

    def test_malformed_project_file_is_deferred(self, isolated_env):
        """A broken default config file fails get(), not init_config()."""
        config_dir = isolated_env / "configs"
        config_dir.mkdir()
        (config_dir / "immuadmin.toml").write_text("port = = 1\n")
        options = Options()

        assert options.init_config("immuadmin") is None
        with pytest.raises(ConfigError, match="immuadmin.toml"):
            options.get()

    def test_unknown_keys_are_ignored(self, tmp_path):
        """Keys the client does not know about do not fail the load."""
        config_file = tmp_path / "admin.toml"
        config_file.write_text('dir = "./data"\nport = 3401\n')

        settings = Options(config_file=config_file).init_config("immuadmin")

        assert settings.port == 3401
        assert not hasattr(settings, "dir")


def test_log_level_is_validated():
    """Unknown log levels are rejected."""
    with pytest.raises(ValueError):
        AdminSettings(log_level="chatty")
