"""Color scale engine.

Gradients are interpolated in CIE LCh so that evenly spaced positions look
evenly spaced. Identical inputs always give identical colors.
"""

import logging
from functools import lru_cache
from typing import Any, Callable, Iterable, List, Optional, Tuple

from coloraide import Color

from choropleth.classification.classifier import numeric_values
from choropleth.classification.model import DataClassification
from choropleth.colors.schemes import (
    ColorScheme,
    Interpolation,
    SchemeType,
    normalize_color,
    to_hex,
)
from choropleth.config import get_config

logger = logging.getLogger(__name__)

INTERPOLATION_SPACE = "lch"


@lru_cache(maxsize=128)
def _interpolator(colors: Tuple[str, ...]) -> Callable[[float], Any]:
    return Color.interpolate(list(colors), space=INTERPOLATION_SPACE, out_space="srgb")


def color_at(scheme: ColorScheme, position: float) -> str:
    """
    Color at ``position`` along the scheme's gradient.

    Args:
        scheme: Color scheme (its anchors are spread evenly over [0, 1])
        position: Position in [0, 1]; values outside are clamped

    Returns:
        Hex color string
    """
    position = min(max(float(position), 0.0), 1.0)
    return to_hex(_interpolator(scheme.colors)(position))


def _positions(count: int) -> List[float]:
    if count == 1:
        return [0.5]
    return [i / (count - 1) for i in range(count)]


@lru_cache(maxsize=256)
def _scale(scheme: ColorScheme, bucket_count: int) -> Tuple[str, ...]:
    if scheme.type == SchemeType.CATEGORICAL:
        return tuple(normalize_color(c) for c in scheme.colors[:bucket_count])
    return tuple(color_at(scheme, t) for t in _positions(bucket_count))


def generate_color_scale(scheme: ColorScheme, bucket_count: int) -> List[str]:
    """
    Produce the ordered bucket colors for a scheme.

    Gradient schemes (sequential, diverging, custom) yield exactly
    ``bucket_count`` evenly spaced colors. Categorical schemes yield their first
    ``bucket_count`` anchors verbatim, so the result is shorter than requested
    when the scheme has fewer anchors.

    Args:
        scheme: Color scheme
        bucket_count: Number of colors wanted

    Returns:
        Hex color strings
    """
    if bucket_count < 1:
        return []
    return list(_scale(scheme, int(bucket_count)))


def get_color_for_value(
    value: Any,
    classification: Optional[DataClassification],
    scheme: ColorScheme,
    fallback_values: Iterable = (),
    neutral_color: Optional[str] = None,
) -> str:
    """
    Color for a single data value.

    With a classification, the value's bucket picks an entry from
    ``generate_color_scale``. Without one, the value is normalized against the
    maximum of ``fallback_values`` and placed directly on the gradient.

    Args:
        value: Data value
        classification: Optional classification of the value column
        scheme: Color scheme
        fallback_values: Values used to normalize when there is no classification
        neutral_color: Color for non-numeric values (default: configured neutral)

    Returns:
        Hex color string
    """
    if neutral_color is None:
        neutral_color = get_config().neutral_color

    if not numeric_values([value]):
        return neutral_color

    if classification is None:
        values = numeric_values(fallback_values)
        maximum = max(values) if values else 0.0
        if maximum <= 0:
            return neutral_color
        return color_at(scheme, float(value) / maximum)

    colors = generate_color_scale(scheme, classification.buckets)
    if not colors:
        return neutral_color
    index = classification.bucket_index(float(value))
    # Categorical schemes can have fewer colors than buckets; reuse them in order
    return colors[index % len(colors)]


def _lightness(color: Any) -> float:
    return color.convert("lab")["lightness"]


def _corrected_position(interpolate: Callable[[float], Any], t: float, start: float, end: float) -> float:
    """Position whose Lab lightness is the linear target for ``t``."""
    target = start + (end - start) * t
    descending = start > end
    low, high = 0.0, 1.0
    position = t
    for _ in range(20):
        position = (low + high) / 2
        actual = _lightness(interpolate(position))
        if abs(actual - target) < 0.01:
            break
        if (actual > target) != descending:
            high = position
        else:
            low = position
    return position


def legend_gradient_stops(scheme: ColorScheme) -> List[Tuple[float, str]]:
    """
    Gradient stops for a legend bar.

    The gradient itself is always linear in LCh. Linear schemes get 10
    intervals; cubic and basis schemes get 20 with lightness corrected to
    progress evenly from the first anchor to the last.

    Args:
        scheme: Color scheme

    Returns:
        List of (position percent, hex color) pairs from 0 to 100
    """
    mode = scheme.interpolation or Interpolation.LINEAR
    steps = 10 if mode == Interpolation.LINEAR else 20
    interpolate = _interpolator(scheme.colors)

    start = end = 0.0
    if mode != Interpolation.LINEAR:
        start, end = _lightness(interpolate(0.0)), _lightness(interpolate(1.0))

    stops = []
    for i in range(steps + 1):
        t = i / steps
        if mode != Interpolation.LINEAR and 0 < i < steps:
            t = _corrected_position(interpolate, t, start, end)
        stops.append((i * 100 / steps, to_hex(interpolate(t))))
    return stops


def legend_range(
    classification: Optional[DataClassification],
    start: Optional[float] = None,
    end: Optional[float] = None,
) -> Tuple[float, float]:
    """Legend end values: explicit bounds, else the outer breaks, else 0 and 100."""
    if start is None:
        start = classification.minimum if classification else 0.0
    if end is None:
        end = classification.maximum if classification else 100.0
    return float(start), float(end)
