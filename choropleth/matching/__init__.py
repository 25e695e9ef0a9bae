"""Fuzzy region matching."""

from choropleth.matching.matcher import RegionMatcher, match_regions
from choropleth.matching.model import MatchReason, MatchResult, MatchSuggestion

__all__ = [
    "RegionMatcher",
    "match_regions",
    "MatchReason",
    "MatchResult",
    "MatchSuggestion",
]
