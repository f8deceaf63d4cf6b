"""Shared pytest fixtures and configuration."""

from collections.abc import Iterator

import pytest

from discarta.config import Settings
from discarta.geometry import Size
from discarta.projections import EquirectangularProjection, PseudoMercatorProjection
from discarta.utils.logging import clear_correlation_context, configure_logging
from discarta.view import Extent


@pytest.fixture(autouse=True)
def reset_logging_context() -> Iterator[None]:
    """Reset correlation context between tests."""
    clear_correlation_context()
    yield
    clear_correlation_context()


@pytest.fixture
def test_settings() -> Settings:
    """Create a Settings instance with test-safe defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
    )


@pytest.fixture
def configure_test_logging() -> Iterator[None]:
    """Configure logging for tests with console output."""
    configure_logging(level="DEBUG", log_format="console")
    yield


@pytest.fixture
def equirectangular() -> EquirectangularProjection:
    return EquirectangularProjection()


@pytest.fixture
def mercator() -> PseudoMercatorProjection:
    return PseudoMercatorProjection()


@pytest.fixture
def world_extent(equirectangular: EquirectangularProjection) -> Extent:
    """Zoom 0 extent showing the whole equirectangular world."""
    return Extent(
        area=equirectangular.world,
        zoom_level=0,
        screen_size=Size(width=512, height=256),
    )
