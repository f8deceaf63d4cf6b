"""Raster preprocessing for DisCarta.

Key Components:
    - RasterInfo: Metadata and georeference of a source raster
    - ImageRasterProvider: Pillow-backed metadata provider
    - RasterTiler: Crops and resamples a raster into a tile pyramid
    - ProgressReporter / Status: Forward-only progress notifications
"""

from discarta.raster.info import (
    ImageRasterProvider,
    RasterCatalog,
    RasterInfo,
    RasterMetadataProvider,
)
from discarta.raster.progress import ProgressObserver, ProgressReporter, Status
from discarta.raster.tiler import RasterTiler

__all__ = [
    "ImageRasterProvider",
    "ProgressObserver",
    "ProgressReporter",
    "RasterCatalog",
    "RasterInfo",
    "RasterMetadataProvider",
    "RasterTiler",
    "Status",
]
