"""Color schemes and scales."""

from choropleth.colors.scale import (
    color_at,
    generate_color_scale,
    get_color_for_value,
    legend_gradient_stops,
    legend_range,
)
from choropleth.colors.schemes import (
    PRESET_SCHEMES,
    ColorScheme,
    SchemeRegistry,
    SchemeType,
    custom_scheme,
    get_scheme,
    get_scheme_registry,
    load_schemes_file,
    make_scheme,
)

__all__ = [
    "color_at",
    "generate_color_scale",
    "get_color_for_value",
    "legend_gradient_stops",
    "legend_range",
    "PRESET_SCHEMES",
    "ColorScheme",
    "SchemeRegistry",
    "SchemeType",
    "custom_scheme",
    "get_scheme",
    "get_scheme_registry",
    "load_schemes_file",
    "make_scheme",
]
