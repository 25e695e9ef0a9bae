"""Serialize a loaded table, augmented with match results, back to delimited text."""

import io
import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from choropleth.data.model import LoadedTable, TableRow
from choropleth.matching.model import MatchResult

logger = logging.getLogger(__name__)

MATCHED_REGION_COLUMN = "matched_region"
MATCH_CONFIDENCE_COLUMN = "match_confidence"


def match_column_names(columns: Sequence[str]) -> Tuple[str, str]:
    """
    Names for the appended match columns that do not clash with existing ones.

    A table that was exported before already holds ``matched_region`` and
    ``match_confidence``; the new columns then become ``matched_region_2``
    and ``match_confidence_2`` (or the next free suffix).

    Args:
        columns: Existing column names

    Returns:
        Tuple of (matched region column, confidence column)
    """
    taken = set(columns)
    suffix = 1
    while True:
        tail = "" if suffix == 1 else f"_{suffix}"
        region_name = f"{MATCHED_REGION_COLUMN}{tail}"
        confidence_name = f"{MATCH_CONFIDENCE_COLUMN}{tail}"
        if region_name not in taken and confidence_name not in taken:
            return region_name, confidence_name
        suffix += 1


def augment_rows(
    table: LoadedTable,
    region_column: str,
    matches: Mapping[str, MatchResult],
) -> List[Dict]:
    """
    Copy the table rows and append match columns.

    Args:
        table: Loaded table
        region_column: Column holding region names
        matches: MatchResult keyed by the trimmed region name

    Returns:
        New row dicts with the match columns from ``match_column_names`` appended;
        unmatched rows get an empty region and their best confidence
    """
    region_name, confidence_name = match_column_names(table.columns)
    augmented = []
    for row in table.rows:
        result = matches.get(str(row.get(region_column, "")).strip())
        new_row = dict(row)
        new_row[region_name] = result.matched if result and result.matched else ""
        new_row[confidence_name] = round(result.confidence, 4) if result else 0.0
        augmented.append(new_row)
    return augmented


def serialize_rows(
    rows: Sequence[TableRow],
    columns: Optional[Sequence[str]] = None,
    delimiter: str = ",",
) -> str:
    """
    Write rows as delimited text with a header line.

    Args:
        rows: Row dicts
        columns: Column order (default: keys of the first row)
        delimiter: Field delimiter

    Returns:
        Delimited text
    """
    if columns is None:
        columns = list(rows[0].keys()) if rows else []

    df = pd.DataFrame(list(rows), columns=list(columns))
    buffer = io.StringIO()
    df.to_csv(buffer, index=False, sep=delimiter, lineterminator="\n")
    return buffer.getvalue()


def export_table(
    table: LoadedTable,
    region_column: str,
    matches: Mapping[str, MatchResult],
    delimiter: str = ",",
) -> str:
    """
    Serialize the table with ``matched_region`` and ``match_confidence`` appended.

    Original columns round-trip: parsing the output reproduces their values, even
    when the table is itself an earlier export (see ``match_column_names``).

    Args:
        table: Loaded table
        region_column: Column holding region names
        matches: MatchResult keyed by the trimmed region name
        delimiter: Field delimiter

    Returns:
        Delimited text
    """
    columns = table.columns + list(match_column_names(table.columns))
    rows = augment_rows(table, region_column, matches)
    logger.info(f"Exporting {len(rows)} rows with {len(columns)} columns")
    return serialize_rows(rows, columns=columns, delimiter=delimiter)
