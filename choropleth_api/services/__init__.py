"""API services."""

from choropleth_api.services.session_service import SessionService

__all__ = ["SessionService"]
