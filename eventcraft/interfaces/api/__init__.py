"""API interface for eventcraft.

This module exports the FastAPI router and app factory.
"""

from eventcraft.interfaces.api.routes import create_app, router

__all__ = ["router", "create_app"]
