"""Data models for loaded tables."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

import pandas as pd

Cell = Union[str, int, float]
TableRow = Dict[str, Cell]


@dataclass
class ValidationResult:
    """Outcome of validating a parsed table.

    ``is_valid`` is true exactly when ``errors`` is empty.
    """

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    row_count: int = 0
    column_count: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "row_count": self.row_count,
            "column_count": self.column_count,
        }


@dataclass(frozen=True)
class LoadedTable:
    """Parsed rows plus the validation report for one upload."""

    headers: Tuple[str, ...]
    rows: Tuple[TableRow, ...]
    validation: ValidationResult

    @property
    def columns(self) -> List[str]:
        """Unique column names in header order (duplicates collapse to one)."""
        return list(dict.fromkeys(self.headers))

    def has_column(self, name: str) -> bool:
        return name in self.headers

    def column_values(self, name: str) -> List[Cell]:
        """Values of ``name`` for every row, in row order."""
        return [row.get(name, "") for row in self.rows]

    def distinct_values(self, name: str) -> List[Cell]:
        """Distinct values of ``name`` in first-seen order."""
        return list(dict.fromkeys(self.column_values(name)))

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(list(self.rows), columns=self.columns)

    def preview(self, limit: int = 20) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.rows[:limit]]
