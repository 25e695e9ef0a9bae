"""Tabular data loading and export."""

from choropleth.data.export import export_table, serialize_rows
from choropleth.data.loader import check_upload, load_table, parse_table, validate_table
from choropleth.data.model import LoadedTable, TableRow, ValidationResult

__all__ = [
    "LoadedTable",
    "TableRow",
    "ValidationResult",
    "check_upload",
    "load_table",
    "parse_table",
    "validate_table",
    "export_table",
    "serialize_rows",
]
