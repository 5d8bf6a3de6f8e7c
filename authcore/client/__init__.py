"""
Desktop client - Account service calls, local token storage and error reporting.
"""

from authcore.adapters.storage import JsonFileStore
from authcore.config.settings import Settings
from authcore.domain.tokens import TokenStore

from .service import AccountServiceClient

__all__ = ["AccountServiceClient", "open_token_store"]


def open_token_store(settings: Settings) -> TokenStore:
    """Open the token store backed by the configured local secure file."""
    return TokenStore(JsonFileStore(settings.token_store_path))
