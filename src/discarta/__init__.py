"""DisCarta: a slippy map engine.

Projects geographic coordinates to map pixels, works out which tiles a
viewport can see, renders or loads them asynchronously and places
geo-tagged elements in screen space.
"""

__version__ = "0.1.0"
