"""FastAPI dependencies for services."""

from functools import lru_cache

from choropleth.colors.schemes import SchemeRegistry, get_scheme_registry
from choropleth_api.services.session_service import SessionService


@lru_cache()
def get_session_service() -> SessionService:
    """
    Get the process-wide session service.

    Returns:
        SessionService instance
    """
    return SessionService()


def get_schemes() -> SchemeRegistry:
    """Get the color scheme registry."""
    return get_scheme_registry()
