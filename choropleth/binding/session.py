"""Binding session: the inputs of one map plus its latest binding result.

A session is an explicit context object. Callers change inputs through its
methods and then call ``recompute()``, which replaces the result as a whole.
"""

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple, Union

from choropleth.binding.model import BindingResult
from choropleth.binding.orchestrator import bind_table
from choropleth.classification.methods import MethodType, get_method
from choropleth.colors.schemes import ColorScheme, custom_scheme, get_scheme
from choropleth.config import get_config
from choropleth.data.export import export_table
from choropleth.data.loader import check_upload, load_table
from choropleth.data.model import LoadedTable, ValidationResult
from choropleth.exceptions import BindingError, InvalidBucketCountError, TableError
from choropleth.regions.extractor import extract_regions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BindingSettings:
    """User choices that drive a binding."""

    region_column: Optional[str] = None
    value_column: Optional[str] = None
    scheme_id: Optional[str] = None
    custom_colors: Optional[Tuple[str, ...]] = None
    interpolation: Optional[str] = None
    method: Optional[str] = None
    buckets: Optional[int] = None
    manual_breaks: Optional[Tuple[float, ...]] = None
    aliases: Dict[str, str] = field(default_factory=dict)
    classify_values: bool = True

    def resolve_scheme(self) -> ColorScheme:
        """Custom colors take precedence over the scheme id."""
        if self.custom_colors:
            return custom_scheme(list(self.custom_colors), interpolation=self.interpolation)
        return get_scheme(self.scheme_id or get_config().default_scheme_id)


def guess_columns(table: LoadedTable) -> Tuple[Optional[str], Optional[str]]:
    """
    Pick default region and value columns.

    The region column is the first column holding any text; the value column
    is the first other column holding any number.

    Args:
        table: Loaded table

    Returns:
        Tuple of (region_column, value_column), either may be None
    """
    columns = table.columns

    def has(column: str, kind: type) -> bool:
        return any(isinstance(v, kind) and v != "" for v in table.column_values(column))

    region = next((c for c in columns if has(c, str)), columns[0] if columns else None)
    value = next(
        (c for c in columns if c != region and any(
            isinstance(v, (int, float)) and not isinstance(v, bool) for v in table.column_values(c)
        )),
        None,
    )
    return region, value


class BindingSession:
    """Holds one map's table, geometry candidates, settings and latest result."""

    def __init__(self, session_id: Optional[str] = None, title: str = ""):
        """
        Initialize an empty session.

        Args:
            session_id: Identifier (default: random hex id)
            title: Map title shown with the legend
        """
        self.session_id = session_id or uuid.uuid4().hex
        self.title = title
        self.table: Optional[LoadedTable] = None
        self.table_filename: Optional[str] = None
        self.candidates: List[str] = []
        self.geometry_filename: Optional[str] = None
        self.settings = BindingSettings()
        self.result: Optional[BindingResult] = None
        self.created_at = datetime.now(timezone.utc)
        self.updated_at = self.created_at

    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

    def load_table(self, content: Union[str, bytes], filename: Optional[str] = None) -> ValidationResult:
        """
        Load a table, replacing any previous one.

        Column selections that no longer exist are replaced by guessed defaults.

        Args:
            content: Table text or bytes
            filename: Original file name; when given, type and size are checked first

        Returns:
            ValidationResult of the new table

        Raises:
            WrongFileTypeError: If the file name has an unsupported extension
            FileTooLargeError: If the content is too large
        """
        if filename is not None:
            size = len(content) if isinstance(content, bytes) else len(content.encode("utf-8"))
            check_upload(filename, size)

        table = load_table(content)
        self.table = table
        self.table_filename = filename
        self.result = None

        if table.validation.is_valid:
            region, value = guess_columns(table)
            if self.settings.region_column not in table.headers:
                self.settings = replace(self.settings, region_column=region)
            if self.settings.value_column not in table.headers:
                self.settings = replace(self.settings, value_column=value)

        self._touch()
        return table.validation

    def load_geometry(self, markup: Union[str, bytes], filename: Optional[str] = None) -> List[str]:
        """
        Load a geometry document and extract its candidate regions.

        Args:
            markup: Geometry document text or bytes
            filename: Original file name; when given, type and size are checked first

        Returns:
            Sorted candidate region ids (empty when none could be extracted)
        """
        if filename is not None:
            upload_config = get_config().upload
            size = len(markup) if isinstance(markup, bytes) else len(markup.encode("utf-8"))
            check_upload(filename, size, allowed_extensions=upload_config.allowed_geometry_extensions)

        self.candidates = extract_regions(markup)
        self.geometry_filename = filename
        self.result = None
        self._touch()
        return list(self.candidates)

    def update_settings(self, **changes) -> BindingSettings:
        """
        Replace selected settings.

        Args:
            **changes: BindingSettings fields to change

        Returns:
            The new settings

        Raises:
            BindingError: If a setting is unknown or invalid
        """
        unknown = set(changes) - set(BindingSettings.__dataclass_fields__)
        if unknown:
            raise BindingError(f"Unknown settings: {sorted(unknown)}")

        if changes.get("custom_colors") is not None:
            changes["custom_colors"] = tuple(changes["custom_colors"])
        if changes.get("manual_breaks") is not None:
            changes["manual_breaks"] = tuple(changes["manual_breaks"])
        if "aliases" in changes:
            changes["aliases"] = dict(changes["aliases"] or {})

        settings = replace(self.settings, **changes)

        # Fail fast on values that would only surface at recompute time
        if settings.method is not None:
            get_method(settings.method)
        if settings.buckets is not None and (isinstance(settings.buckets, bool) or settings.buckets < 1):
            raise InvalidBucketCountError(f"Bucket count must be at least 1, got {settings.buckets}")
        settings.resolve_scheme()

        self.settings = settings
        self.result = None
        self._touch()
        return settings

    @property
    def is_ready(self) -> bool:
        return (
            self.table is not None
            and self.table.validation.is_valid
            and bool(self.settings.region_column)
            and bool(self.settings.value_column)
        )

    def recompute(self) -> BindingResult:
        """
        Run the full binding pipeline on the current inputs.

        Returns:
            The new BindingResult (also stored on the session)

        Raises:
            TableError: If no valid table is loaded
            BindingError: If the settings cannot be applied
        """
        if self.table is None:
            raise TableError("No table loaded")
        if not self.settings.region_column or not self.settings.value_column:
            raise BindingError("Select a region column and a value column first")

        settings = self.settings
        method = settings.method or get_config().default_method
        result = bind_table(
            self.table,
            region_column=settings.region_column,
            value_column=settings.value_column,
            candidates=self.candidates,
            scheme=settings.resolve_scheme(),
            method=method,
            buckets=settings.buckets,
            manual_breaks=settings.manual_breaks if method == MethodType.MANUAL else None,
            aliases=settings.aliases,
            classify_values=settings.classify_values,
        )
        self.result = result
        self._touch()
        return result

    def current_result(self) -> BindingResult:
        """Latest result, recomputing if an input changed since it was built."""
        if self.result is None:
            return self.recompute()
        return self.result

    def export_csv(self) -> str:
        """
        Serialize the table with match columns appended.

        Raises:
            TableError: If no valid table is loaded
        """
        result = self.current_result()
        return export_table(self.table, result.region_column, result.matches_by_name)

    def summary(self) -> dict:
        """Convert to dictionary"""
        return {
            "session_id": self.session_id,
            "title": self.title,
            "table_filename": self.table_filename,
            "columns": self.table.columns if self.table else [],
            "validation": self.table.validation.to_dict() if self.table else None,
            "geometry_filename": self.geometry_filename,
            "candidate_count": len(self.candidates),
            "settings": {
                "region_column": self.settings.region_column,
                "value_column": self.settings.value_column,
                "scheme_id": self.settings.scheme_id,
                "custom_colors": list(self.settings.custom_colors) if self.settings.custom_colors else None,
                "interpolation": self.settings.interpolation,
                "method": self.settings.method,
                "buckets": self.settings.buckets,
                "manual_breaks": list(self.settings.manual_breaks) if self.settings.manual_breaks else None,
                "aliases": dict(self.settings.aliases),
                "classify_values": self.settings.classify_values,
            },
            "ready": self.is_ready,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
