"""
Auth API package.

Contains the registration, availability and login routes.
"""

from authcore.api.auth.routes import router

__all__ = ["router"]
