"""Binding orchestration."""

from choropleth.binding.model import BindingResult, RowBinding
from choropleth.binding.orchestrator import bind_table
from choropleth.binding.session import BindingSession, BindingSettings, guess_columns

__all__ = [
    "BindingResult",
    "RowBinding",
    "bind_table",
    "BindingSession",
    "BindingSettings",
    "guess_columns",
]
