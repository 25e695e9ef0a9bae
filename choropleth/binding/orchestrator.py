"""Binding Orchestrator

Composes the pipeline in one pass over a loaded table:
1. Match - resolve each distinct region name to a geometry region id
2. Classify - place break points over the value column
3. Color - derive a color for every row and a region-id -> color lookup
"""

import logging
from typing import List, Mapping, Optional, Sequence, Union

from choropleth.binding.model import BindingResult, RowBinding
from choropleth.classification.classifier import classify, numeric_values
from choropleth.classification.methods import ClassificationMethod
from choropleth.colors.scale import (
    generate_color_scale,
    get_color_for_value,
    legend_gradient_stops,
    legend_range,
)
from choropleth.colors.schemes import ColorScheme
from choropleth.config import get_config
from choropleth.data.model import LoadedTable
from choropleth.exceptions import ColumnNotFoundError, TableError
from choropleth.matching.matcher import RegionMatcher

logger = logging.getLogger(__name__)


def distinct_region_names(table: LoadedTable, region_column: str) -> List[str]:
    """Non-blank region names in first-seen order."""
    names = (str(v).strip() for v in table.column_values(region_column))
    return list(dict.fromkeys(name for name in names if name))


def bind_table(
    table: LoadedTable,
    region_column: str,
    value_column: str,
    candidates: Sequence[str],
    scheme: ColorScheme,
    method: Optional[Union[str, ClassificationMethod]] = None,
    buckets: Optional[int] = None,
    manual_breaks: Optional[Sequence[float]] = None,
    aliases: Optional[Mapping[str, str]] = None,
    neutral_color: Optional[str] = None,
    classify_values: bool = True,
) -> BindingResult:
    """
    Bind a table to geometry regions and derive colors.

    Args:
        table: Loaded, valid table
        region_column: Column holding region names
        value_column: Column holding the values to map
        candidates: Region ids extracted from the geometry document
        scheme: Color scheme
        method: Classification method id (default: configured method)
        buckets: Bucket count (default: configured count)
        manual_breaks: Break points for the manual method
        aliases: Optional alias -> region id table
        neutral_color: Color for rows without a numeric value
        classify_values: When False, colors come straight from the gradient
            scaled by the column maximum instead of from buckets

    Returns:
        BindingResult

    Raises:
        TableError: If the table failed validation
        ColumnNotFoundError: If a selected column is not in the table
        InvalidBucketCountError: If ``buckets`` is below 1
        InvalidBreaksError: If manual breaks are invalid
    """
    app_config = get_config()
    method = method or app_config.default_method
    buckets = app_config.default_buckets if buckets is None else buckets
    neutral_color = neutral_color or app_config.neutral_color

    if not table.validation.is_valid:
        raise TableError(f"Cannot bind an invalid table: {'; '.join(table.validation.errors)}")
    for column in (region_column, value_column):
        if not table.has_column(column):
            raise ColumnNotFoundError(
                f"Column '{column}' not found. Available columns: {table.columns}"
            )

    # Step 1: Match each distinct region name once
    matcher = RegionMatcher(candidates, aliases=aliases)
    matches = matcher.match_all(distinct_region_names(table, region_column))
    matches_by_name = {m.original: m for m in matches}

    # Step 2: Classify the value column
    values = table.column_values(value_column)
    numeric = numeric_values(values)
    classification = (
        classify(values, method=method, buckets=buckets, manual_breaks=manual_breaks)
        if classify_values else None
    )

    # Step 3: Color every row
    rows = []
    color_lookup = {}
    for index, row in enumerate(table.rows):
        region = str(row.get(region_column, "")).strip()
        value = row.get(value_column, "")
        match = matches_by_name.get(region)
        matched_id = match.matched if match else None
        color = get_color_for_value(
            value, classification, scheme, fallback_values=numeric, neutral_color=neutral_color
        )
        rows.append(RowBinding(
            row_index=index,
            region=region,
            value=value,
            matched_region_id=matched_id,
            color=color,
        ))
        if matched_id is not None:
            if matched_id in color_lookup and color_lookup[matched_id] != color:
                logger.debug(f"Region '{matched_id}' is bound by several rows; the last row wins")
            color_lookup[matched_id] = color

    if classification is not None:
        scale = generate_color_scale(scheme, classification.buckets)
        legend = legend_range(classification)
    else:
        # Unclassified colors are scaled from 0 to the column maximum
        scale = []
        legend = legend_range(None, start=0.0, end=max(numeric) if numeric else None)

    logger.info(
        f"Bound {len(rows)} rows: {len(color_lookup)} regions colored, "
        f"{sum(1 for m in matches if not m.is_matched)} names unmatched"
    )

    return BindingResult(
        region_column=region_column,
        value_column=value_column,
        scheme=scheme,
        matches=matches,
        classification=classification,
        scale=scale,
        rows=rows,
        color_lookup=color_lookup,
        legend_range=legend,
        legend_stops=legend_gradient_stops(scheme),
    )
