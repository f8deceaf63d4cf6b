"""Map projections for DisCarta.

Key Components:
    - Projection: Abstract base shared by all projections
    - EquirectangularProjection: Linear lat/lon scaling, 512x256 tiles
    - PseudoMercatorProjection: Web Mercator, 256x256 tiles
    - get_projection / projection_for_wkt: Registry lookups

Example:
    from discarta.projections import get_projection

    projection = get_projection("pseudo-mercator")
    projection.full_map_size_for(1)  # Size(width=512.0, height=512.0)
"""

from discarta.projections.base import Projection
from discarta.projections.equirectangular import EquirectangularProjection
from discarta.projections.pseudo_mercator import PseudoMercatorProjection

PROJECTIONS: dict[str, type[Projection]] = {
    EquirectangularProjection.key: EquirectangularProjection,
    PseudoMercatorProjection.key: PseudoMercatorProjection,
}


def get_projection(name: str) -> Projection:
    """Resolve a projection by registry key or display name.

    Args:
        name: A key such as ``"pseudo-mercator"`` or a full name such as
            ``"WGS 84 / Pseudo - Mercator"``. Case insensitive.

    Returns:
        A new projection instance.

    Raises:
        ValueError: If no registered projection matches.
    """
    wanted = name.strip().lower()
    for key, projection_cls in PROJECTIONS.items():
        if wanted in (key, projection_cls.name.lower()):
            return projection_cls()
    raise ValueError(
        f"Unknown projection {name!r}. Choose from: {', '.join(sorted(PROJECTIONS))}"
    )


def projection_for_wkt(wkt: str) -> Projection:
    """Infer the display projection for a raster from its WKT definition.

    Anything mentioning Mercator is shown in Pseudo-Mercator; every other
    coordinate system falls back to Equirectangular.
    """
    if "mercator" in wkt.lower():
        return PseudoMercatorProjection()
    return EquirectangularProjection()


__all__ = [
    "PROJECTIONS",
    "EquirectangularProjection",
    "Projection",
    "PseudoMercatorProjection",
    "get_projection",
    "projection_for_wkt",
]
