"""Tests for discarta.config module."""

import pytest

from discarta.config import ConfigError, Settings


class TestSettings:
    """Tests for the Settings class."""

    def test_default_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that default values are set correctly."""
        monkeypatch.delenv("TILE_ROOT", raising=False)
        monkeypatch.delenv("MAX_ZOOM_LEVEL", raising=False)

        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
        )

        assert settings.TILE_ROOT is None
        assert settings.DEFAULT_PROJECTION == "equirectangular"
        assert settings.MAX_ZOOM_LEVEL == 19
        assert settings.LINE_SIZE == pytest.approx(37.795, abs=1e-3)
        assert settings.TILE_FAILURE_POLICY == "raise"
        assert settings.DISCARD_STALE_TILES is True
        assert settings.TILE_LINE_COLOR == (255, 0, 0, 255)

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that environment variables override defaults."""
        monkeypatch.setenv("TILE_ROOT", "/srv/tiles")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("MAX_ZOOM_LEVEL", "12")
        monkeypatch.setenv("TILE_FAILURE_POLICY", "placeholder")

        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
        )

        assert settings.TILE_ROOT == "/srv/tiles"
        assert settings.LOG_LEVEL == "DEBUG"
        assert settings.MAX_ZOOM_LEVEL == 12
        assert settings.TILE_FAILURE_POLICY == "placeholder"

    def test_rejects_unknown_failure_policy(self) -> None:
        """Test TILE_FAILURE_POLICY only accepts the known policies."""
        with pytest.raises(ValueError):
            Settings(
                TILE_FAILURE_POLICY="ignore",  # type: ignore[arg-type]
                _env_file=None,  # type: ignore[call-arg]
            )

    @pytest.mark.parametrize(
        "overrides",
        [
            {"MAX_ZOOM_LEVEL": -1},
            {"MAX_ZOOM_LEVEL": 31},
            {"LINE_SIZE": 0},
            {"LOG_FORMAT": "xml"},
            {"TILE_LINE_COLOR": (255, 0, 0, 300)},
        ],
    )
    def test_rejects_out_of_range_values(self, overrides: dict[str, object]) -> None:
        """Test map and tile settings are validated on load."""
        with pytest.raises(ValueError):
            Settings(**overrides, _env_file=None)  # type: ignore[arg-type]

    def test_default_projection_is_normalized(self) -> None:
        """Test DEFAULT_PROJECTION is stripped and lower-cased."""
        settings = Settings(
            DEFAULT_PROJECTION="  Pseudo-Mercator ",
            _env_file=None,  # type: ignore[call-arg]
        )
        assert settings.DEFAULT_PROJECTION == "pseudo-mercator"

    def test_log_format_options(self) -> None:
        """Test that LOG_FORMAT accepts valid options."""
        settings = Settings(
            LOG_FORMAT="json",
            _env_file=None,  # type: ignore[call-arg]
        )
        assert settings.LOG_FORMAT == "json"

    def test_fixture_settings(self, test_settings: Settings) -> None:
        """Test that settings can be created with custom values."""
        assert test_settings.LOG_LEVEL == "DEBUG"


class TestConfigError:
    """Tests for the ConfigError exception."""

    def test_config_error_message_format(self) -> None:
        """Test ConfigError message includes key name and env var."""
        error = ConfigError("Tile root directory", "TILE_ROOT")
        assert "Tile root directory" in str(error)
        assert "TILE_ROOT" in str(error)
        assert ".env" in str(error)

    def test_config_error_attributes(self) -> None:
        """Test ConfigError stores key name and env var as attributes."""
        error = ConfigError("Test key", "TEST_VAR")
        assert error.key_name == "Test key"
        assert error.env_var == "TEST_VAR"


class TestRequireTileRoot:
    """Tests for require_tile_root()."""

    def test_when_set(self) -> None:
        """Test require_tile_root returns the directory when set."""
        settings = Settings(
            TILE_ROOT="/srv/tiles",
            _env_file=None,  # type: ignore[call-arg]
        )
        assert settings.require_tile_root() == "/srv/tiles"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_rejects_missing_or_blank(
        self, monkeypatch: pytest.MonkeyPatch, value: str | None
    ) -> None:
        """Test require_tile_root raises ConfigError for missing/blank values."""
        monkeypatch.delenv("TILE_ROOT", raising=False)
        settings = Settings(
            TILE_ROOT=value,
            _env_file=None,  # type: ignore[call-arg]
        )
        with pytest.raises(ConfigError) as exc_info:
            settings.require_tile_root()
        assert "TILE_ROOT" in str(exc_info.value)
