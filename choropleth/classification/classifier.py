"""Data classifier.

Partitions a numeric value range into buckets using equal intervals,
quantiles, natural breaks (Fisher-Jenks) or caller-supplied break points.
"""

import logging
import math
import numbers
from typing import Iterable, List, Optional, Sequence, Union

import mapclassify
import numpy as np

from choropleth.classification.methods import ClassificationMethod, MethodType, get_method
from choropleth.classification.model import DataClassification
from choropleth.config import get_config
from choropleth.exceptions import InvalidBreaksError, InvalidBucketCountError

logger = logging.getLogger(__name__)


def numeric_values(values: Iterable) -> List[float]:
    """
    Keep only finite numbers.

    Strings (even numeric-looking ones), booleans, None and NaN are discarded.

    Args:
        values: Raw column values

    Returns:
        Finite values as floats, in input order
    """
    result = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            continue
        value = float(value)
        if math.isfinite(value):
            result.append(value)
    return result


def format_label(lower: float, upper: float) -> str:
    """Human-readable interval label with one decimal place."""
    return f"{lower:.1f} - {upper:.1f}"


def make_labels(breaks: Sequence[float]) -> List[str]:
    return [format_label(breaks[i], breaks[i + 1]) for i in range(len(breaks) - 1)]


def equal_interval_breaks(sorted_values: Sequence[float], buckets: int) -> List[float]:
    vmin, vmax = sorted_values[0], sorted_values[-1]
    step = (vmax - vmin) / buckets
    breaks = [vmin + i * step for i in range(buckets + 1)]
    breaks[-1] = vmax
    return breaks


def quantile_breaks(sorted_values: Sequence[float], buckets: int) -> List[float]:
    """Quantile breaks with linear interpolation between order statistics."""
    probabilities = np.linspace(0.0, 1.0, buckets + 1)
    return [float(q) for q in np.quantile(np.asarray(sorted_values), probabilities)]


def natural_breaks(sorted_values: Sequence[float], buckets: int, sample_size: Optional[int] = None) -> List[float]:
    """
    Fisher-Jenks optimal breaks.

    Fisher-Jenks is quadratic in the number of values, so larger value sets are
    first reduced to ``sample_size`` evenly spaced quantiles. The sample always
    keeps the minimum and maximum, and is deterministic.

    Falls back to equal intervals when there are fewer distinct values than
    buckets, since no partition into that many non-empty classes exists.
    """
    if sample_size is None:
        sample_size = get_config().natural_breaks_sample_size

    values = np.asarray(sorted_values, dtype=float)
    if len(values) > sample_size >= 2:
        logger.debug(f"Sampling {sample_size} of {len(values)} values for natural breaks")
        values = np.quantile(values, np.linspace(0.0, 1.0, sample_size))

    distinct = len(np.unique(values))
    if buckets == 1 or distinct < buckets:
        if buckets > 1:
            logger.debug(
                f"Only {distinct} distinct values for {buckets} natural breaks; using equal intervals"
            )
        return equal_interval_breaks(sorted_values, buckets)

    classifier = mapclassify.FisherJenks(values, k=buckets)
    # ``bins`` holds the upper bound of each class
    upper_bounds = [float(b) for b in classifier.bins]
    upper_bounds[-1] = float(sorted_values[-1])
    return [float(sorted_values[0])] + upper_bounds


def validate_manual_breaks(breaks: Optional[Sequence[float]], buckets: int) -> List[float]:
    """
    Check caller-supplied break points.

    Args:
        breaks: Break points
        buckets: Bucket count

    Returns:
        Breaks as floats

    Raises:
        InvalidBreaksError: If breaks are missing, not finite, mis-sized or decreasing
    """
    if breaks is None:
        raise InvalidBreaksError("Manual classification requires break points")

    values = list(breaks)
    if len(values) != buckets + 1:
        raise InvalidBreaksError(
            f"Manual classification with {buckets} buckets needs {buckets + 1} breaks, got {len(values)}"
        )

    if len(numeric_values(values)) != len(values):
        raise InvalidBreaksError(f"Manual breaks must be finite numbers: {values}")

    values = [float(v) for v in values]
    if any(later < earlier for earlier, later in zip(values, values[1:])):
        raise InvalidBreaksError(f"Manual breaks must be non-decreasing: {values}")

    return values


def classify(
    values: Iterable,
    method: Union[str, ClassificationMethod] = MethodType.EQUAL_INTERVAL,
    buckets: int = 5,
    manual_breaks: Optional[Sequence[float]] = None,
) -> DataClassification:
    """
    Classify a value column into buckets.

    Args:
        values: Raw column values; non-numeric entries are discarded
        method: Method id or ClassificationMethod
        buckets: Number of buckets (at least 1)
        manual_breaks: Break points for the manual method

    Returns:
        DataClassification with ``buckets + 1`` breaks and ``buckets`` labels

    Raises:
        InvalidBucketCountError: If ``buckets`` is not an integer of at least 1
        UnknownMethodError: If the method id is not recognised
        InvalidBreaksError: If manual breaks are invalid
    """
    if isinstance(buckets, bool) or not isinstance(buckets, numbers.Integral) or buckets < 1:
        raise InvalidBucketCountError(f"Bucket count must be an integer of at least 1, got {buckets!r}")
    buckets = int(buckets)

    resolved = get_method(method)

    if resolved.id == MethodType.MANUAL:
        breaks = validate_manual_breaks(manual_breaks, buckets)
        return DataClassification(
            method=resolved, buckets=buckets, breaks=breaks, labels=make_labels(breaks)
        )

    sorted_values = sorted(numeric_values(values))
    if not sorted_values:
        logger.warning("No numeric values to classify; using a degenerate classification")
        breaks = [0.0] * (buckets + 1)
    elif resolved.id == MethodType.QUANTILE:
        breaks = quantile_breaks(sorted_values, buckets)
    elif resolved.id == MethodType.NATURAL:
        breaks = natural_breaks(sorted_values, buckets)
    else:
        breaks = equal_interval_breaks(sorted_values, buckets)

    logger.debug(f"Classified {len(sorted_values)} values with {resolved.id}: {breaks}")
    return DataClassification(
        method=resolved, buckets=buckets, breaks=breaks, labels=make_labels(breaks)
    )
