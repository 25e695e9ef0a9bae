"""Data model for a value classification."""

from dataclasses import dataclass, field
from typing import List

import numpy as np

from choropleth.classification.methods import ClassificationMethod


@dataclass
class DataClassification:
    """Break points and labels for ``buckets`` classes.

    ``breaks`` has ``buckets + 1`` non-decreasing entries and ``labels`` has
    ``buckets`` entries.
    """

    method: ClassificationMethod
    buckets: int
    breaks: List[float] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)

    @property
    def minimum(self) -> float:
        return self.breaks[0]

    @property
    def maximum(self) -> float:
        return self.breaks[-1]

    def bucket_index(self, value: float) -> int:
        """
        Bucket holding ``value``.

        Bucket ``i`` covers ``breaks[i] < value <= breaks[i+1]``; the first
        bucket also takes everything at or below ``breaks[1]``. Values outside
        the break range are clamped into the first or last bucket.

        Args:
            value: Numeric value

        Returns:
            Index in ``[0, buckets - 1]``
        """
        inner = self.breaks[1:-1]
        index = int(np.searchsorted(inner, value, side="left")) if inner else 0
        return min(max(index, 0), self.buckets - 1)

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "method": self.method.to_dict(),
            "buckets": self.buckets,
            "breaks": list(self.breaks),
            "labels": list(self.labels),
        }
