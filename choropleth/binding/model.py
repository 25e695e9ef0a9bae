"""Data models for binding results."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from choropleth.classification.model import DataClassification
from choropleth.colors.schemes import ColorScheme
from choropleth.matching.model import MatchResult


@dataclass
class RowBinding:
    """Binding outcome for one table row."""

    row_index: int
    region: str
    value: Any
    matched_region_id: Optional[str]
    color: str

    def to_dict(self) -> dict:
        return {
            "row_index": self.row_index,
            "region": self.region,
            "value": self.value,
            "matched_region_id": self.matched_region_id,
            "color": self.color,
        }


@dataclass
class BindingResult:
    """Everything a renderer needs to color a map, recomputed as a whole."""

    region_column: str
    value_column: str
    scheme: ColorScheme
    matches: List[MatchResult] = field(default_factory=list)
    classification: Optional[DataClassification] = None
    scale: List[str] = field(default_factory=list)
    rows: List[RowBinding] = field(default_factory=list)
    color_lookup: Dict[str, str] = field(default_factory=dict)
    legend_range: Tuple[float, float] = (0.0, 100.0)
    legend_stops: List[Tuple[float, str]] = field(default_factory=list)

    @property
    def matches_by_name(self) -> Dict[str, MatchResult]:
        return {m.original: m for m in self.matches}

    @property
    def unmatched(self) -> List[str]:
        return [m.original for m in self.matches if not m.is_matched]

    def color_for_region(self, region_id: str, default: Optional[str] = None) -> Optional[str]:
        """Fill color for a geometry region id, or ``default`` when it has no data."""
        return self.color_lookup.get(region_id, default)

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "region_column": self.region_column,
            "value_column": self.value_column,
            "scheme": self.scheme.to_dict(),
            "matches": [m.to_dict() for m in self.matches],
            "classification": self.classification.to_dict() if self.classification else None,
            "scale": list(self.scale),
            "rows": [r.to_dict() for r in self.rows],
            "color_lookup": dict(self.color_lookup),
            "unmatched": self.unmatched,
            "legend": {
                "minimum": self.legend_range[0],
                "maximum": self.legend_range[1],
                "stops": [{"position": p, "color": c} for p, c in self.legend_stops],
            },
        }
