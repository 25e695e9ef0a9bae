"""Classification method catalog."""

from dataclasses import dataclass
from typing import List, Union

from choropleth.exceptions import UnknownMethodError


class MethodType:
    """Classification method ids."""
    EQUAL_INTERVAL = "equalInterval"
    QUANTILE = "quantile"
    NATURAL = "natural"
    MANUAL = "manual"


@dataclass(frozen=True)
class ClassificationMethod:
    """A selectable way of placing break points."""

    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


CLASSIFICATION_METHODS: List[ClassificationMethod] = [
    ClassificationMethod(id=MethodType.EQUAL_INTERVAL, name="Equal Intervals"),
    ClassificationMethod(id=MethodType.QUANTILE, name="Quantiles"),
    ClassificationMethod(id=MethodType.NATURAL, name="Natural Breaks (Jenks)"),
    ClassificationMethod(id=MethodType.MANUAL, name="Manual"),
]

_METHODS_BY_ID = {method.id: method for method in CLASSIFICATION_METHODS}


def get_method(method: Union[str, ClassificationMethod]) -> ClassificationMethod:
    """
    Resolve a method id (or pass through a method).

    Args:
        method: Method id such as "quantile", or a ClassificationMethod

    Returns:
        The catalog entry

    Raises:
        UnknownMethodError: If the id is not in the catalog
    """
    if isinstance(method, ClassificationMethod):
        method = method.id
    try:
        return _METHODS_BY_ID[method]
    except KeyError:
        raise UnknownMethodError(
            f"Unknown classification method: {method}. "
            f"Must be one of: {sorted(_METHODS_BY_ID)}"
        ) from None
