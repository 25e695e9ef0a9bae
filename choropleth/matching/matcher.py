"""Fuzzy region matcher.

Maps table region names onto region identifiers extracted from a geometry
document: case-insensitive exact match first, then an optional alias table,
then approximate string similarity.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from rapidfuzz import fuzz, process, utils

from choropleth.config import get_config
from choropleth.matching.model import MatchReason, MatchResult, MatchSuggestion
from choropleth.utils.sanitize import sanitize_for_logging, sanitize_names

logger = logging.getLogger(__name__)


class RegionMatcher:
    """Matches region names against a fixed candidate set.

    The candidate index is built once, so one matcher can be reused for every
    distinct name in a table.
    """

    def __init__(
        self,
        candidates: Iterable[str],
        aliases: Optional[Mapping[str, str]] = None,
        threshold: Optional[float] = None,
        max_suggestions: Optional[int] = None,
        alias_confidence: Optional[float] = None,
        score_cutoff: Optional[float] = None,
    ):
        """
        Initialize the matcher.

        Args:
            candidates: Region identifiers; duplicates are ignored, order is kept for tie-breaks
            aliases: Optional alias -> candidate table (case-insensitive on both sides)
            threshold: Confidence a top suggestion must exceed to be accepted
            max_suggestions: Maximum number of ranked suggestions per name
            alias_confidence: Confidence reported for alias hits
            score_cutoff: Scorer cutoff on the 0-100 scale
        """
        matching_config = get_config().matching
        self.threshold = matching_config.threshold if threshold is None else threshold
        self.max_suggestions = (
            matching_config.max_suggestions if max_suggestions is None else max_suggestions
        )
        self.alias_confidence = (
            matching_config.alias_confidence if alias_confidence is None else alias_confidence
        )
        self.score_cutoff = matching_config.score_cutoff if score_cutoff is None else score_cutoff

        self.candidates: List[str] = list(dict.fromkeys(c for c in candidates if c))

        # First candidate wins when two differ only by case
        self._by_lower: Dict[str, str] = {}
        for candidate in self.candidates:
            self._by_lower.setdefault(candidate.lower(), candidate)

        self._aliases: Dict[str, str] = {}
        for alias, target in (aliases or {}).items():
            resolved = self._by_lower.get(str(target).strip().lower())
            if resolved is None:
                logger.debug(f"Ignoring alias '{sanitize_for_logging(alias)}': target is not a candidate")
                continue
            self._aliases[str(alias).strip().lower()] = resolved

    def match(self, name: str) -> MatchResult:
        """
        Match a single region name.

        Args:
            name: Region name from the table

        Returns:
            MatchResult; ``matched`` is None when no suggestion clears the threshold
        """
        original = str(name)
        key = original.strip().lower()

        if not key or not self.candidates:
            return MatchResult(original=original, matched=None, confidence=0.0, suggestions=[])

        exact = self._by_lower.get(key)
        if exact is not None:
            return MatchResult(
                original=original,
                matched=exact,
                confidence=1.0,
                suggestions=[MatchSuggestion(match=exact, confidence=1.0, reason=MatchReason.EXACT)],
            )

        alias_target = self._aliases.get(key)
        if alias_target is not None:
            suggestion = MatchSuggestion(
                match=alias_target, confidence=self.alias_confidence, reason=MatchReason.ALIAS
            )
            return self._accept(original, [suggestion])

        return self._accept(original, self._fuzzy_suggestions(original))

    def match_all(self, names: Sequence[str]) -> List[MatchResult]:
        """
        Match every name, preserving input order.

        Args:
            names: Region names (duplicates are matched again, not collapsed)

        Returns:
            One MatchResult per input name, in input order
        """
        results = [self.match(name) for name in names]

        unmatched = [r.original for r in results if not r.is_matched]
        exact = sum(1 for r in results if r.reason == MatchReason.EXACT)
        logger.info(
            f"Matched {len(results) - len(unmatched)}/{len(results)} regions "
            f"({exact} exact) against {len(self.candidates)} candidates"
        )
        if unmatched:
            logger.warning(f"No acceptable match for {len(unmatched)} regions: {sanitize_names(unmatched)}")

        return results

    def _fuzzy_suggestions(self, name: str) -> List[MatchSuggestion]:
        scored = process.extract(
            name,
            self.candidates,
            scorer=fuzz.WRatio,
            processor=utils.default_process,
            limit=None,
            score_cutoff=self.score_cutoff,
        )
        # Highest score first; ties keep candidate order
        ranked = sorted(
            ((choice, score, index) for choice, score, index in scored if score > 0),
            key=lambda item: (-item[1], item[2]),
        )
        return [
            MatchSuggestion(
                match=choice,
                confidence=min(max(score / 100.0, 0.0), 1.0),
                reason=MatchReason.FUZZY,
            )
            for choice, score, _ in ranked[: self.max_suggestions]
        ]

    def _accept(self, original: str, suggestions: List[MatchSuggestion]) -> MatchResult:
        if not suggestions:
            return MatchResult(original=original, matched=None, confidence=0.0, suggestions=[])

        best = suggestions[0]
        matched = best.match if best.confidence > self.threshold else None
        if matched is None:
            logger.debug(
                f"Best suggestion for '{sanitize_for_logging(original)}' is "
                f"'{sanitize_for_logging(best.match)}' at {best.confidence:.2f}, below threshold"
            )
        return MatchResult(
            original=original,
            matched=matched,
            confidence=best.confidence,
            suggestions=suggestions,
        )


def match_regions(
    names: Sequence[str],
    candidates: Iterable[str],
    aliases: Optional[Mapping[str, str]] = None,
    **kwargs,
) -> List[MatchResult]:
    """
    Match region names against candidates.

    Args:
        names: Region names from the table
        candidates: Region identifiers from the geometry document
        aliases: Optional alias -> candidate table
        **kwargs: Overrides forwarded to RegionMatcher (threshold, max_suggestions, ...)

    Returns:
        One MatchResult per name, in input order
    """
    return RegionMatcher(candidates, aliases=aliases, **kwargs).match_all(names)
