"""View state for DisCarta."""

from discarta.view.extent import Extent, ExtentChange, ExtentObserver

__all__ = ["Extent", "ExtentChange", "ExtentObserver"]
