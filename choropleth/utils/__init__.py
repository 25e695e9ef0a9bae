"""Utility functions for the binding pipeline."""

from choropleth.utils.lru_cache import LRUCache
from choropleth.utils.sanitize import sanitize_for_logging, sanitize_names

__all__ = [
    "LRUCache",
    "sanitize_for_logging",
    "sanitize_names",
]
