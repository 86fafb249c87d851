"""trndvi: NDVI trend reporting over geeLite hexagon grids.

Loads per-cell MODIS NDVI tables from a geeLite SQLite store, reshapes
them to long format, summarizes each period across cells and classifies
the baseline-to-latest change.
"""

__version__ = "0.1.0"
