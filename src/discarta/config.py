"""DisCarta configuration using pydantic-settings.

All configuration is strongly typed and supports environment variables
and .env files.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from discarta.errors import DisCartaError


class ConfigError(DisCartaError):
    """Raised when required configuration is missing or invalid.

    Example:
        >>> Settings(_env_file=None).require_tile_root()  # doctest: +ELLIPSIS
        Traceback (most recent call last):
        ...
        ConfigError: Tile root directory not configured. Set it in .env file or
        TILE_ROOT environment variable.
    """

    def __init__(self, key_name: str, env_var: str) -> None:
        """Initialize configuration error.

        Args:
            key_name: Human-readable name of the missing key.
            env_var: Environment variable name to set.
        """
        self.key_name = key_name
        self.env_var = env_var
        super().__init__(
            f"{key_name} not configured. "
            f"Set it in .env file or {env_var} environment variable."
        )


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["console", "json"] = "console"

    # Map
    DEFAULT_PROJECTION: str = "equirectangular"
    MAX_ZOOM_LEVEL: int = Field(default=19, ge=0, le=30)  # 20 zoom levels, 0-19
    LINE_SIZE: float = Field(default=96 / 2.54, gt=0)  # 1 cm in DIPs

    # Tiles
    TILE_FAILURE_POLICY: Literal["raise", "placeholder"] = "raise"
    DISCARD_STALE_TILES: bool = True
    TILE_LINE_COLOR: tuple[int, int, int, int] = (255, 0, 0, 255)
    TILE_ROOT: str | None = None  # Output of `discarta preprocess`

    @field_validator("DEFAULT_PROJECTION")
    @classmethod
    def _normalize_projection(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("TILE_LINE_COLOR")
    @classmethod
    def _validate_color(
        cls, value: tuple[int, int, int, int]
    ) -> tuple[int, int, int, int]:
        if any(not 0 <= channel <= 255 for channel in value):
            raise ValueError(f"RGBA channels must be within 0-255, got {value}")
        return value

    def require_tile_root(self) -> str:
        """Get the preprocessed tile directory, raising ConfigError if not set.

        Returns:
            The tile root directory.

        Raises:
            ConfigError: If TILE_ROOT is not configured.
        """
        if self.TILE_ROOT is None or self.TILE_ROOT.strip() == "":
            raise ConfigError("Tile root directory", "TILE_ROOT")
        return self.TILE_ROOT


# Singleton instance for import convenience
settings = Settings()
