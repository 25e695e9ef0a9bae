"""Value classification."""

from choropleth.classification.classifier import classify, numeric_values
from choropleth.classification.methods import (
    CLASSIFICATION_METHODS,
    ClassificationMethod,
    MethodType,
    get_method,
)
from choropleth.classification.model import DataClassification

__all__ = [
    "classify",
    "numeric_values",
    "CLASSIFICATION_METHODS",
    "ClassificationMethod",
    "MethodType",
    "get_method",
    "DataClassification",
]
