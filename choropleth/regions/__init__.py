"""Region extraction from geometry documents."""

from choropleth.regions.extractor import extract_regions, extract_regions_from_file

__all__ = [
    "extract_regions",
    "extract_regions_from_file",
]
