"""Data models for region matching."""

from dataclasses import dataclass, field
from typing import List, Optional


class MatchReason:
    """Why a suggestion was proposed."""
    EXACT = "exact"
    ALIAS = "alias"
    FUZZY = "fuzzy"


@dataclass
class MatchSuggestion:
    """A ranked candidate for one table region name."""

    match: str
    confidence: float
    reason: str

    def to_dict(self) -> dict:
        return {"match": self.match, "confidence": self.confidence, "reason": self.reason}


@dataclass
class MatchResult:
    """Best-effort mapping of one table region name onto a geometry identifier."""

    original: str
    matched: Optional[str]  # None when no suggestion clears the threshold
    confidence: float
    suggestions: List[MatchSuggestion] = field(default_factory=list)

    @property
    def is_matched(self) -> bool:
        return self.matched is not None

    @property
    def reason(self) -> Optional[str]:
        """Reason of the top suggestion, if any."""
        return self.suggestions[0].reason if self.suggestions else None

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "original": self.original,
            "matched": self.matched,
            "confidence": self.confidence,
            "suggestions": [s.to_dict() for s in self.suggestions],
        }
