"""
Auth API package.

Contains the registration and email verification routes.
"""

from src.api.auth.routes import router

__all__ = ["router"]
