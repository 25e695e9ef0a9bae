"""Data-to-geometry binding pipeline for choropleth maps."""

__version__ = "1.0.0"
