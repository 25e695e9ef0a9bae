"""Pydantic response models for the binding API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ValidationResultResponse(BaseModel):
    """Response model for a table validation report."""

    is_valid: bool
    errors: List[str]
    warnings: List[str]
    row_count: int
    column_count: int


class TableUploadResponse(BaseModel):
    """Response model for a table upload."""

    filename: Optional[str]
    columns: List[str]
    validation: ValidationResultResponse
    preview: List[Dict[str, Any]]
    region_column: Optional[str]
    value_column: Optional[str]


class GeometryUploadResponse(BaseModel):
    """Response model for a geometry upload."""

    filename: Optional[str]
    candidate_count: int
    candidates: List[str]


class SettingsResponse(BaseModel):
    """Current binding settings."""

    region_column: Optional[str]
    value_column: Optional[str]
    scheme_id: Optional[str]
    custom_colors: Optional[List[str]]
    interpolation: Optional[str]
    method: Optional[str]
    buckets: Optional[int]
    manual_breaks: Optional[List[float]]
    aliases: Dict[str, str]
    classify_values: bool


class SessionResponse(BaseModel):
    """Response model for session information."""

    session_id: str
    title: str
    table_filename: Optional[str]
    columns: List[str]
    validation: Optional[ValidationResultResponse]
    geometry_filename: Optional[str]
    candidate_count: int
    settings: SettingsResponse
    ready: bool
    created_at: str
    updated_at: str


class MatchSuggestionResponse(BaseModel):
    """A ranked match candidate."""

    match: str
    confidence: float
    reason: str


class MatchResultResponse(BaseModel):
    """Match outcome for one region name."""

    original: str
    matched: Optional[str]
    confidence: float
    suggestions: List[MatchSuggestionResponse]


class ClassificationMethodResponse(BaseModel):
    """Response model for a classification method."""

    id: str
    name: str


class ClassificationResponse(BaseModel):
    """Response model for a data classification."""

    method: ClassificationMethodResponse
    buckets: int
    breaks: List[float]
    labels: List[str]


class RowBindingResponse(BaseModel):
    """Binding outcome for one table row."""

    row_index: int
    region: str
    value: Any
    matched_region_id: Optional[str]
    color: str


class LegendStopResponse(BaseModel):
    """One legend gradient stop."""

    position: float
    color: str


class LegendResponse(BaseModel):
    """Legend gradient and end values."""

    title: str
    minimum: float
    maximum: float
    stops: List[LegendStopResponse]


class ColorSchemeResponse(BaseModel):
    """Response model for a color scheme."""

    id: str
    name: str
    type: str
    colors: List[str]
    accessibility_compliant: bool
    interpolation: Optional[str]


class BindingResponse(BaseModel):
    """Response model for a full binding."""

    session_id: str
    region_column: str
    value_column: str
    scheme: ColorSchemeResponse
    matches: List[MatchResultResponse]
    classification: Optional[ClassificationResponse]
    scale: List[str]
    rows: List[RowBindingResponse]
    color_lookup: Dict[str, str]
    unmatched: List[str]
    legend: LegendResponse


class ColorScaleResponse(BaseModel):
    """Response model for a generated color scale."""

    scheme_id: str
    buckets: int
    colors: List[str]
