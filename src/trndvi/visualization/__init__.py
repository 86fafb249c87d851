"""Visualization and plotting module for NDVI summaries."""

from .plotter import NdviPlotter

__all__ = ['NdviPlotter']
