"""Color schemes and classification methods API router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from choropleth.classification.methods import CLASSIFICATION_METHODS
from choropleth.colors.scale import generate_color_scale
from choropleth.colors.schemes import SCHEME_TYPES, SchemeRegistry
from choropleth.config import get_config
from choropleth_api.dependencies import get_schemes
from choropleth_api.models.responses import (
    ClassificationMethodResponse,
    ColorScaleResponse,
    ColorSchemeResponse,
)

router = APIRouter(prefix="/api/v1", tags=["schemes"])


@router.get("/schemes", response_model=List[ColorSchemeResponse])
def list_schemes(
    type: Optional[str] = Query(None, description=f"Filter by scheme type: {', '.join(SCHEME_TYPES)}"),
    registry: SchemeRegistry = Depends(get_schemes),
):
    """
    List available color schemes.

    Args:
        type: Optional scheme type filter
        registry: Scheme registry dependency

    Returns:
        Color schemes in registry order
    """
    return [ColorSchemeResponse(**s.to_dict()) for s in registry.list(type)]


@router.get("/schemes/{scheme_id}/scale", response_model=ColorScaleResponse)
def get_scheme_scale(
    scheme_id: str,
    buckets: Optional[int] = Query(None, ge=1, le=20, description="Number of colors"),
    registry: SchemeRegistry = Depends(get_schemes),
):
    """
    Preview the colors a scheme produces for a bucket count.

    Raises:
        UnknownSchemeError: If the scheme does not exist
    """
    scheme = registry.get(scheme_id)
    count = buckets or get_config().default_buckets
    return ColorScaleResponse(
        scheme_id=scheme.id,
        buckets=count,
        colors=generate_color_scale(scheme, count),
    )


@router.get("/classification-methods", response_model=List[ClassificationMethodResponse])
def list_classification_methods():
    """List the classification methods."""
    return [ClassificationMethodResponse(**m.to_dict()) for m in CLASSIFICATION_METHODS]
