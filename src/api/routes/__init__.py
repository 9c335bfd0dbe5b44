"""API route handlers."""

from .deidentify import router as deidentify_router
from .health import router as health_router
from .inspect import router as inspect_router

__all__ = ["deidentify_router", "health_router", "inspect_router"]
