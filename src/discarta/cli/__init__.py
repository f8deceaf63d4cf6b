"""CLI module for DisCarta.

Provides the command-line interface for inspecting tile coverage,
rendering viewport snapshots and preprocessing rasters into tiles.
"""

from __future__ import annotations

from discarta.cli.main import ProjectionName, app

__all__ = ["ProjectionName", "app"]
