"""
HTTP boundary - FastAPI application.
"""

from .app import create_app

__all__ = ["create_app"]
