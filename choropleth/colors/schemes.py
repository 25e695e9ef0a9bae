"""
Color Scheme Definitions

Preset sequential, diverging and categorical schemes, plus validation for
user-constructed custom schemes and loading additional schemes from YAML.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import yaml
from coloraide import Color

from choropleth.config import get_config
from choropleth.exceptions import InvalidColorError, UnknownSchemeError

logger = logging.getLogger(__name__)


class SchemeType:
    """Color scheme types."""
    SEQUENTIAL = "sequential"
    DIVERGING = "diverging"
    CATEGORICAL = "categorical"
    CUSTOM = "custom"


class Interpolation:
    """Legend smoothing modes; the gradient itself is always linear in LCh."""
    LINEAR = "linear"
    CUBIC = "cubic"
    BASIS = "basis"


SCHEME_TYPES = (SchemeType.SEQUENTIAL, SchemeType.DIVERGING, SchemeType.CATEGORICAL, SchemeType.CUSTOM)
INTERPOLATIONS = (Interpolation.LINEAR, Interpolation.CUBIC, Interpolation.BASIS)


@dataclass(frozen=True)
class ColorScheme:
    """An ordered set of anchor colors."""

    id: str
    name: str
    type: str
    colors: Tuple[str, ...]
    accessibility_compliant: bool = False
    interpolation: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "colors": list(self.colors),
            "accessibility_compliant": self.accessibility_compliant,
            "interpolation": self.interpolation,
        }


def to_hex(color: Color) -> str:
    """Gamut-mapped sRGB hex for a color in any space."""
    return color.convert("srgb").to_string(hex=True)


def normalize_color(value: str) -> str:
    """
    Parse any CSS color string and return canonical ``#rrggbb`` hex.

    Raises:
        InvalidColorError: If the color cannot be parsed
    """
    try:
        return to_hex(Color(str(value).strip()))
    except ValueError as e:
        raise InvalidColorError(f"Invalid color: {value!r}") from e


def make_scheme(
    id: str,
    name: str,
    type: str,
    colors: Sequence[str],
    accessibility_compliant: bool = False,
    interpolation: Optional[str] = None,
) -> ColorScheme:
    """
    Build a validated ColorScheme.

    Args:
        id: Scheme identifier
        name: Display name
        type: One of sequential, diverging, categorical, custom
        colors: At least two anchor colors in any CSS color syntax
        accessibility_compliant: Whether the scheme is safe for color-vision deficiencies
        interpolation: Optional linear, cubic or basis

    Returns:
        ColorScheme with colors normalized to hex

    Raises:
        InvalidColorError: If any field is invalid
    """
    if not id or not str(id).strip():
        raise InvalidColorError("Color scheme id cannot be empty")
    if type not in SCHEME_TYPES:
        raise InvalidColorError(f"Invalid scheme type: {type}. Must be one of: {list(SCHEME_TYPES)}")
    if interpolation is not None and interpolation not in INTERPOLATIONS:
        raise InvalidColorError(
            f"Invalid interpolation: {interpolation}. Must be one of: {list(INTERPOLATIONS)}"
        )
    if isinstance(colors, str) or len(colors) < 2:
        raise InvalidColorError("A color scheme needs at least 2 colors")

    return ColorScheme(
        id=str(id).strip(),
        name=name or str(id),
        type=type,
        colors=tuple(normalize_color(c) for c in colors),
        accessibility_compliant=bool(accessibility_compliant),
        interpolation=interpolation,
    )


def custom_scheme(
    colors: Sequence[str],
    name: str = "Custom",
    interpolation: Optional[str] = None,
) -> ColorScheme:
    """Build a user-defined gradient scheme from anchor colors."""
    return make_scheme(
        id="custom",
        name=name,
        type=SchemeType.CUSTOM,
        colors=colors,
        accessibility_compliant=False,
        interpolation=interpolation,
    )


def _preset(id: str, name: str, type: str, colors: List[str]) -> ColorScheme:
    return ColorScheme(id=id, name=name, type=type, colors=tuple(colors), accessibility_compliant=True)


PRESET_SCHEMES: Dict[str, List[ColorScheme]] = {
    SchemeType.SEQUENTIAL: [
        _preset("buenos-aries", "Buenos-Aries", SchemeType.SEQUENTIAL, ["#f7fbff", "#08519c"]),
        _preset("bucharest", "Bucharest", SchemeType.SEQUENTIAL, ["#fff5f0", "#a50f15"]),
        _preset("bellagio", "Bellagio", SchemeType.SEQUENTIAL, ["#f7fcf5", "#00441b"]),
        _preset("helsinki", "Helsinki", SchemeType.SEQUENTIAL, ["#fcfbfd", "#3f007d"]),
        _preset("dhaka", "Dhaka", SchemeType.SEQUENTIAL, ["#f7fbff", "#0c4d9c"]),
        _preset("paris", "Paris", SchemeType.SEQUENTIAL, ["#fff5eb", "#8b2500"]),
    ],
    SchemeType.DIVERGING: [
        _preset("rdbu", "Red-Blue", SchemeType.DIVERGING, ["#b2182b", "#f7f7f7", "#2166ac"]),
        _preset("rdylgn", "Red-Yellow-Green", SchemeType.DIVERGING, ["#d73027", "#ffffbf", "#1a9850"]),
        _preset("brbg", "Brown-Blue-Green", SchemeType.DIVERGING, ["#8c510a", "#f5f5f5", "#01665e"]),
        _preset("piyg", "Pink-Yellow-Green", SchemeType.DIVERGING, ["#e9a3c9", "#f7f7f7", "#a1d76a"]),
    ],
    SchemeType.CATEGORICAL: [
        _preset("set1", "Set 1", SchemeType.CATEGORICAL, [
            "#e41a1c", "#377eb8", "#4daf4a", "#984ea3", "#ff7f00", "#ffff33", "#a65628", "#f781bf",
        ]),
        _preset("set2", "Set 2", SchemeType.CATEGORICAL, [
            "#66c2a5", "#fc8d62", "#8da0cb", "#e78ac3", "#a6d854", "#ffd92f", "#e5c494", "#b3b3b3",
        ]),
    ],
}


def load_schemes_file(path: Union[str, Path]) -> List[ColorScheme]:
    """
    Load additional color schemes from a YAML file.

    The file holds a ``schemes`` list whose items have ``id``, ``name``,
    ``type``, ``colors`` and optionally ``accessibility_compliant`` and
    ``interpolation``.

    Args:
        path: Path to the YAML file

    Returns:
        Validated schemes

    Raises:
        InvalidColorError: If the file is malformed or a scheme is invalid
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise InvalidColorError(f"Could not load color schemes from {path}: {e}") from e

    entries = data.get("schemes") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise InvalidColorError(f"Color scheme file {path} must contain a 'schemes' list")

    schemes = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise InvalidColorError(f"Each scheme in {path} must be a mapping, got: {entry!r}")
        schemes.append(make_scheme(
            id=entry.get("id", ""),
            name=entry.get("name", ""),
            type=entry.get("type", SchemeType.CUSTOM),
            colors=entry.get("colors") or [],
            accessibility_compliant=entry.get("accessibility_compliant", False),
            interpolation=entry.get("interpolation"),
        ))
    logger.info(f"Loaded {len(schemes)} color schemes from {path}")
    return schemes


class SchemeRegistry:
    """Lookup over preset schemes plus any extra schemes."""

    def __init__(self, extra: Optional[Iterable[ColorScheme]] = None):
        self._schemes: Dict[str, ColorScheme] = {}
        for group in PRESET_SCHEMES.values():
            for scheme in group:
                self._schemes[scheme.id] = scheme
        for scheme in extra or []:
            if scheme.id in self._schemes:
                logger.warning(f"Color scheme '{scheme.id}' overrides an existing scheme")
            self._schemes[scheme.id] = scheme

    def get(self, scheme_id: str) -> ColorScheme:
        """
        Get a scheme by id.

        Raises:
            UnknownSchemeError: If no scheme has this id
        """
        try:
            return self._schemes[scheme_id]
        except KeyError:
            raise UnknownSchemeError(f"Unknown color scheme: {scheme_id}") from None

    def list(self, scheme_type: Optional[str] = None) -> List[ColorScheme]:
        """Schemes in registration order, optionally filtered by type."""
        return [s for s in self._schemes.values() if scheme_type is None or s.type == scheme_type]

    def __contains__(self, scheme_id: str) -> bool:
        return scheme_id in self._schemes


@lru_cache()
def get_scheme_registry() -> SchemeRegistry:
    """Registry of presets plus the configured custom schemes file, if any."""
    schemes_path = get_config().schemes_path
    extra = load_schemes_file(schemes_path) if schemes_path else []
    return SchemeRegistry(extra)


def get_scheme(scheme_id: str) -> ColorScheme:
    """Get a scheme by id from the default registry."""
    return get_scheme_registry().get(scheme_id)
