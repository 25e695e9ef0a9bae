"""Pydantic request models for the binding API."""

import math
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from choropleth.classification.methods import CLASSIFICATION_METHODS
from choropleth_api.models.validation_helpers import (
    validate_aliases,
    validate_breaks,
    validate_color_list,
    validate_column_name,
)


class CreateSessionRequest(BaseModel):
    """Request model for creating a binding session."""

    title: str = Field(default="", max_length=200, description="Map title shown with the legend")


class UpdateSettingsRequest(BaseModel):
    """Request model for changing binding settings.

    Only fields present in the request are changed.
    """

    region_column: Optional[str] = Field(None, description="Column holding region names")
    value_column: Optional[str] = Field(None, description="Column holding values to map")
    scheme_id: Optional[str] = Field(None, description="Preset or configured color scheme id")
    custom_colors: Optional[List[str]] = Field(
        None, description="Anchor colors for a custom gradient (overrides scheme_id)"
    )
    interpolation: Optional[Literal["linear", "cubic", "basis"]] = Field(
        None, description="Interpolation for custom gradients"
    )
    method: Optional[str] = Field(None, description="Classification method id")
    buckets: Optional[int] = Field(None, ge=1, le=20, description="Number of buckets")
    manual_breaks: Optional[List[float]] = Field(
        None, description="Break points for the manual method (buckets + 1 values)"
    )
    aliases: Optional[Dict[str, str]] = Field(None, description="Alias -> region id table")
    classify_values: Optional[bool] = Field(
        None, description="When false, colors come straight from the gradient instead of buckets"
    )

    @field_validator("region_column", "value_column")
    @classmethod
    def validate_columns(cls, v: Optional[str]) -> Optional[str]:
        """Normalize column names."""
        return validate_column_name(v) if v is not None else v

    @field_validator("custom_colors")
    @classmethod
    def validate_custom_colors(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        """Validate custom anchor colors."""
        return validate_color_list(v) if v is not None else v

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: Optional[str]) -> Optional[str]:
        """Validate classification method id."""
        valid = [m.id for m in CLASSIFICATION_METHODS]
        if v is not None and v not in valid:
            raise ValueError(f"method must be one of: {valid}")
        return v

    @field_validator("manual_breaks")
    @classmethod
    def validate_manual_breaks(cls, v: Optional[List[float]]) -> Optional[List[float]]:
        """Validate manual break points."""
        if v is None:
            return v
        if any(not math.isfinite(b) for b in v):
            raise ValueError("Break points must be finite numbers")
        return validate_breaks(v)

    @field_validator("aliases")
    @classmethod
    def validate_alias_table(cls, v: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
        """Normalize aliases."""
        return validate_aliases(v) if v is not None else v
