"""Tests for color schemes and scales."""

import re

import pytest

from choropleth.classification.classifier import classify
from choropleth.classification.methods import MethodType
from choropleth.colors.scale import (
    color_at,
    generate_color_scale,
    get_color_for_value,
    legend_gradient_stops,
    legend_range,
)
from choropleth.colors.schemes import (
    PRESET_SCHEMES,
    SchemeRegistry,
    SchemeType,
    custom_scheme,
    get_scheme,
    load_schemes_file,
    make_scheme,
    normalize_color,
)
from choropleth.exceptions import InvalidColorError, UnknownSchemeError

HEX_PATTERN = re.compile(r"^#[0-9a-f]{6}$")
NEUTRAL = "#e5e5e5"


class TestSchemes:
    def test_presets(self):
        assert [s.id for s in PRESET_SCHEMES[SchemeType.SEQUENTIAL]] == [
            "buenos-aries", "bucharest", "bellagio", "helsinki", "dhaka", "paris",
        ]
        assert [s.id for s in PRESET_SCHEMES[SchemeType.DIVERGING]] == ["rdbu", "rdylgn", "brbg", "piyg"]
        assert [s.id for s in PRESET_SCHEMES[SchemeType.CATEGORICAL]] == ["set1", "set2"]
        for group in PRESET_SCHEMES.values():
            for scheme in group:
                assert len(scheme.colors) >= 2
                assert scheme.accessibility_compliant

    def test_get_scheme(self):
        scheme = get_scheme("bucharest")
        assert scheme.colors == ("#fff5f0", "#a50f15")

    def test_unknown_scheme(self):
        with pytest.raises(UnknownSchemeError):
            get_scheme("not-a-scheme")

    def test_registry_filters_by_type(self):
        registry = SchemeRegistry()
        assert {s.type for s in registry.list(SchemeType.DIVERGING)} == {SchemeType.DIVERGING}
        assert "set1" in registry

    def test_normalize_color(self):
        assert normalize_color("#FFF") == "#ffffff"
        assert normalize_color("red") == "#ff0000"
        assert normalize_color("rgb(0, 128, 0)") == "#008000"

    def test_invalid_color(self):
        with pytest.raises(InvalidColorError):
            normalize_color("not-a-color")

    def test_custom_scheme(self):
        scheme = custom_scheme(["white", "#000"], interpolation="cubic")
        assert scheme.type == SchemeType.CUSTOM
        assert scheme.colors == ("#ffffff", "#000000")
        assert scheme.interpolation == "cubic"

    @pytest.mark.parametrize("kwargs", [
        {"colors": ["#fff"]},
        {"colors": ["#fff", "nope"]},
        {"colors": ["#fff", "#000"], "type": "rainbow"},
        {"colors": ["#fff", "#000"], "interpolation": "spline"},
        {"colors": ["#fff", "#000"], "id": ""},
    ])
    def test_invalid_schemes(self, kwargs):
        params = {"id": "x", "name": "X", "type": SchemeType.CUSTOM}
        params.update(kwargs)
        with pytest.raises(InvalidColorError):
            make_scheme(**params)

    def test_load_schemes_file(self, tmp_path):
        path = tmp_path / "schemes.yaml"
        path.write_text(
            "schemes:\n"
            "  - id: ocean\n"
            "    name: Ocean\n"
            "    type: sequential\n"
            "    colors: ['#e0f3f8', '#045a8d']\n"
            "    interpolation: basis\n",
            encoding="utf-8",
        )
        schemes = load_schemes_file(path)
        assert len(schemes) == 1
        assert schemes[0].id == "ocean"
        assert schemes[0].interpolation == "basis"

        registry = SchemeRegistry(schemes)
        assert registry.get("ocean") is schemes[0]

    def test_load_malformed_schemes_file(self, tmp_path):
        path = tmp_path / "schemes.yaml"
        path.write_text("colors: [red]\n", encoding="utf-8")
        with pytest.raises(InvalidColorError):
            load_schemes_file(path)


class TestColorScale:
    @pytest.mark.parametrize("count", [1, 2, 5, 9])
    def test_gradient_length_and_format(self, blues, count):
        scale = generate_color_scale(blues, count)
        assert len(scale) == count
        assert all(HEX_PATTERN.match(c) for c in scale)

    def test_gradient_endpoints(self, blues):
        scale = generate_color_scale(blues, 5)
        assert scale[0] == "#f7fbff"
        assert scale[-1] == "#08519c"

    def test_single_color_is_midpoint(self, blues):
        assert generate_color_scale(blues, 1) == [color_at(blues, 0.5)]

    def test_deterministic(self):
        for scheme_id in ("buenos-aries", "rdbu", "set2"):
            scheme = get_scheme(scheme_id)
            assert generate_color_scale(scheme, 7) == generate_color_scale(scheme, 7)

    def test_diverging_endpoints(self):
        scale = generate_color_scale(get_scheme("rdbu"), 5)
        assert (scale[0], scale[-1]) == ("#b2182b", "#2166ac")

    def test_categorical_takes_anchors_verbatim(self):
        set1 = get_scheme("set1")
        assert generate_color_scale(set1, 3) == ["#e41a1c", "#377eb8", "#4daf4a"]
        assert len(generate_color_scale(set1, 12)) == 8

    def test_zero_buckets(self, blues):
        assert generate_color_scale(blues, 0) == []

    @pytest.mark.parametrize("interpolation", ["cubic", "basis"])
    def test_interpolation_does_not_change_bucket_colors(self, interpolation):
        colors = ["#ffffcc", "#41b6c4", "#253494"]
        smooth = custom_scheme(colors, interpolation=interpolation)
        linear = custom_scheme(colors, interpolation="linear")
        assert generate_color_scale(smooth, 7) == generate_color_scale(linear, 7)
        assert color_at(smooth, 0.3) == color_at(linear, 0.3)

    def test_lightness_progresses(self, blues):
        from coloraide import Color

        lightness = [Color(c).convert("lch")["lightness"] for c in generate_color_scale(blues, 6)]
        assert lightness == sorted(lightness, reverse=True)


class TestColorForValue:
    def test_non_numeric_value_is_neutral(self, blues):
        classification = classify([0, 10], MethodType.EQUAL_INTERVAL, 2)
        assert get_color_for_value("abc", classification, blues) == NEUTRAL
        assert get_color_for_value("", None, blues, fallback_values=[1, 2]) == NEUTRAL

    def test_bucket_coverage(self, blues):
        values = [3, 17, 4, 99, 42, 8]
        classification = classify(values, MethodType.EQUAL_INTERVAL, 5)
        scale = generate_color_scale(blues, 5)
        for value in list(range(3, 100, 4)) + values:
            assert get_color_for_value(value, classification, blues) in scale

    def test_bucket_lookup(self, blues):
        classification = classify([0, 10, 20, 30, 40], MethodType.EQUAL_INTERVAL, 4)
        scale = generate_color_scale(blues, 4)
        assert get_color_for_value(10, classification, blues) == scale[0]
        assert get_color_for_value(11, classification, blues) == scale[1]
        assert get_color_for_value(1000, classification, blues) == scale[3]
        assert get_color_for_value(-1000, classification, blues) == scale[0]

    def test_categorical_colors_are_reused(self):
        set2 = get_scheme("set2")
        values = list(range(10))
        classification = classify(values, MethodType.EQUAL_INTERVAL, 10)
        assert get_color_for_value(9, classification, set2) == set2.colors[1]

    def test_unclassified_uses_gradient(self, blues):
        assert get_color_for_value(50, None, blues, fallback_values=[10, 50]) == color_at(blues, 1.0)
        assert get_color_for_value(25, None, blues, fallback_values=[10, 50]) == color_at(blues, 0.5)

    def test_unclassified_without_positive_maximum_is_neutral(self, blues):
        assert get_color_for_value(5, None, blues, fallback_values=[]) == NEUTRAL
        assert get_color_for_value(-5, None, blues, fallback_values=[-5, -1]) == NEUTRAL

    def test_custom_neutral(self, blues):
        assert get_color_for_value(None, None, blues, neutral_color="#cccccc") == "#cccccc"


class TestLegend:
    def test_linear_stops(self, blues):
        stops = legend_gradient_stops(blues)
        assert len(stops) == 11
        assert stops[0] == (0.0, "#f7fbff")
        assert stops[-1] == (100.0, "#08519c")
        assert [p for p, _ in stops] == [i * 10.0 for i in range(11)]

    @pytest.mark.parametrize("interpolation", ["cubic", "basis"])
    def test_smooth_stops(self, interpolation):
        scheme = custom_scheme(["#ffffcc", "#41b6c4", "#253494"], interpolation=interpolation)
        stops = legend_gradient_stops(scheme)
        assert len(stops) == 21
        assert all(HEX_PATTERN.match(c) for _, c in stops)

    def test_range(self):
        classification = classify([5, 10, 50], MethodType.EQUAL_INTERVAL, 3)
        assert legend_range(classification) == (5.0, 50.0)
        assert legend_range(None) == (0.0, 100.0)
        assert legend_range(classification, start=0) == (0.0, 50.0)
