"""
HTTP API for the OpenCode auth store.
"""

from .routes import router

__all__ = ["router"]
