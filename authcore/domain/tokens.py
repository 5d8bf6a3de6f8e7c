"""
Token store - Session token pair persisted in the local secure store.

The pair lives under two fixed keys. save() and clear() stage the
complete new state for both keys before a single flush, and roll the
in-memory state back if that flush fails, so a failed flush leaves the
previous pair in place both on disk and in this process.
"""

import logging

from .exceptions import TokenStorageError
from .models import TokenPair
from .ports import KeyValueStore

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"
_KEYS = (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY)


class TokenStore:
    """Persists, retrieves and clears the session token pair."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def save(self, access_token: str, refresh_token: str) -> None:
        """
        Replace the stored pair and flush it to disk.

        Once this returns, get_access()/get_refresh() observe the new values.

        Raises:
            TokenStorageError: If the flush failed; the previous pair is kept
        """
        self._commit({ACCESS_TOKEN_KEY: access_token, REFRESH_TOKEN_KEY: refresh_token})

    def get_access(self) -> str | None:
        return self._read(ACCESS_TOKEN_KEY)

    def get_refresh(self) -> str | None:
        return self._read(REFRESH_TOKEN_KEY)

    def get_pair(self) -> TokenPair | None:
        """Both tokens, or None unless both are present."""
        access_token = self.get_access()
        refresh_token = self.get_refresh()
        if access_token is None or refresh_token is None:
            return None
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def clear(self) -> None:
        """
        Remove both tokens and flush. Clearing an empty store succeeds.

        Raises:
            TokenStorageError: If the flush failed; the previous pair is kept
        """
        self._commit({ACCESS_TOKEN_KEY: None, REFRESH_TOKEN_KEY: None})

    def _read(self, key: str) -> str | None:
        value = self._store.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            logger.warning("Ignoring non-string value stored under %s", key)
            return None
        return value

    def _commit(self, new_state: dict[str, str | None]) -> None:
        previous = {key: self._store.get(key) for key in _KEYS}
        self._apply(new_state)

        try:
            self._store.save()
        except OSError as e:
            self._apply(previous)
            logger.error("Token store flush failed: %s", e)
            raise TokenStorageError(str(e)) from e

    def _apply(self, state: dict) -> None:
        for key, value in state.items():
            if value is None:
                self._store.delete(key)
            else:
                self._store.set(key, value)
