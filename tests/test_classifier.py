"""Tests for value classification."""

import math

import mapclassify
import pytest

from choropleth.classification.classifier import classify, natural_breaks, numeric_values
from choropleth.classification.methods import CLASSIFICATION_METHODS, MethodType, get_method
from choropleth.exceptions import InvalidBreaksError, InvalidBucketCountError, UnknownMethodError


class TestNumericValues:
    def test_filters_non_numeric(self):
        assert numeric_values([1, "abc", 3, "", None, True, float("nan"), math.inf, 2.5]) == [1.0, 3.0, 2.5]

    def test_numeric_strings_are_not_numbers(self):
        assert numeric_values(["1", "3"]) == []


class TestEqualInterval:
    def test_four_buckets(self):
        result = classify([0, 10, 20, 30, 40], MethodType.EQUAL_INTERVAL, 4)
        assert result.breaks == [0, 10, 20, 30, 40]
        assert result.labels == ["0.0 - 10.0", "10.0 - 20.0", "20.0 - 30.0", "30.0 - 40.0"]

    def test_unsorted_input(self):
        result = classify([40, 0, 20], MethodType.EQUAL_INTERVAL, 2)
        assert result.breaks == [0, 20, 40]

    def test_all_values_equal(self):
        result = classify([5, 5, 5], MethodType.EQUAL_INTERVAL, 3)
        assert result.breaks == [5, 5, 5, 5]
        assert result.labels == ["5.0 - 5.0"] * 3

    def test_last_break_is_maximum(self):
        values = [0.1, 0.2, 0.7]
        assert classify(values, MethodType.EQUAL_INTERVAL, 3).breaks[-1] == 0.7

    def test_non_numeric_entries_are_discarded(self):
        result = classify([1, "abc", 3], MethodType.EQUAL_INTERVAL, 2)
        assert result.breaks == [1, 2, 3]


class TestQuantile:
    def test_quartiles(self):
        result = classify([1, 2, 3, 4, 5], MethodType.QUANTILE, 4)
        assert result.breaks == pytest.approx([1, 2, 3, 4, 5])

    def test_linear_interpolation(self):
        result = classify([0, 10], MethodType.QUANTILE, 4)
        assert result.breaks == pytest.approx([0, 2.5, 5, 7.5, 10])


class TestNaturalBreaks:
    def test_finds_clusters(self):
        values = [1, 2, 3, 10, 11, 12, 20, 21, 22]
        result = classify(values, MethodType.NATURAL, 3)
        assert result.breaks == pytest.approx([1, 3, 12, 22])

    def test_falls_back_with_few_distinct_values(self):
        result = classify([1, 1, 9, 9], MethodType.NATURAL, 4)
        assert result.breaks == pytest.approx([1, 3, 5, 7, 9])

    def test_single_bucket(self):
        assert classify([3, 8, 1], MethodType.NATURAL, 1).breaks == [1, 8]

    def test_large_inputs_are_sampled(self, monkeypatch):
        sizes = []
        fisher_jenks = mapclassify.FisherJenks

        def recording_fisher_jenks(values, k):
            sizes.append(len(values))
            return fisher_jenks(values, k=k)

        monkeypatch.setattr(mapclassify, "FisherJenks", recording_fisher_jenks)

        values = [(i * 37) % 3001 for i in range(3000)]
        result = classify(values, MethodType.NATURAL, 5)

        assert sizes == [300]
        assert len(result.breaks) == 6
        assert result.breaks[0] == min(values)
        assert result.breaks[-1] == max(values)
        assert result.breaks == sorted(result.breaks)
        assert classify(values, MethodType.NATURAL, 5).breaks == result.breaks

    def test_sample_size_override(self):
        values = [1, 2, 3, 10, 11, 12, 20, 21, 22]
        assert natural_breaks(values, 3, sample_size=100) == pytest.approx([1, 3, 12, 22])


class TestManual:
    def test_breaks_are_used_as_given(self):
        result = classify([1, 500], MethodType.MANUAL, 3, manual_breaks=[0, 10, 50, 100])
        assert result.breaks == [0, 10, 50, 100]
        assert result.labels == ["0.0 - 10.0", "10.0 - 50.0", "50.0 - 100.0"]

    @pytest.mark.parametrize("breaks", [
        None,
        [0, 10, 100],
        [0, 50, 10, 100],
        [0, 10, float("nan"), 100],
        [0, 10, "x", 100],
    ])
    def test_invalid_breaks(self, breaks):
        with pytest.raises(InvalidBreaksError):
            classify([1, 2], MethodType.MANUAL, 3, manual_breaks=breaks)


class TestDegenerateInput:
    @pytest.mark.parametrize("method", [MethodType.EQUAL_INTERVAL, MethodType.QUANTILE, MethodType.NATURAL])
    def test_empty_values(self, method):
        result = classify([], method, 3)
        assert result.breaks == [0.0, 0.0, 0.0, 0.0]
        assert result.labels == ["0.0 - 0.0"] * 3

    @pytest.mark.parametrize("buckets", [0, -1, 2.5, True, "3"])
    def test_invalid_bucket_count(self, buckets):
        with pytest.raises(InvalidBucketCountError):
            classify([1, 2, 3], MethodType.EQUAL_INTERVAL, buckets)

    def test_unknown_method(self):
        with pytest.raises(UnknownMethodError):
            classify([1, 2, 3], "kmeans", 3)


class TestClassificationShape:
    @pytest.mark.parametrize("method", [MethodType.EQUAL_INTERVAL, MethodType.QUANTILE, MethodType.NATURAL])
    @pytest.mark.parametrize("buckets", [1, 2, 5, 7])
    def test_breaks_and_labels(self, method, buckets):
        values = [3, 17, 4, 99, 42, 8, 8, 15, 60, 23, 1]
        result = classify(values, method, buckets)

        assert len(result.breaks) == buckets + 1
        assert len(result.labels) == buckets
        assert all(a <= b for a, b in zip(result.breaks, result.breaks[1:]))


class TestBucketIndex:
    @pytest.mark.parametrize("value, expected", [
        (0, 0),
        (10, 0),
        (10.1, 1),
        (20, 1),
        (39.9, 3),
        (40, 3),
        (-5, 0),
        (100, 3),
    ])
    def test_bucket_boundaries(self, value, expected):
        classification = classify([0, 10, 20, 30, 40], MethodType.EQUAL_INTERVAL, 4)
        assert classification.bucket_index(value) == expected

    def test_single_bucket(self):
        classification = classify([1, 2], MethodType.EQUAL_INTERVAL, 1)
        assert classification.bucket_index(100) == 0


class TestMethodCatalog:
    def test_catalog(self):
        assert [(m.id, m.name) for m in CLASSIFICATION_METHODS] == [
            ("equalInterval", "Equal Intervals"),
            ("quantile", "Quantiles"),
            ("natural", "Natural Breaks (Jenks)"),
            ("manual", "Manual"),
        ]

    def test_get_method_passes_instances_through(self):
        method = get_method("quantile")
        assert get_method(method) is method
