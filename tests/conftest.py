"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A low-cost Argon2id hasher so unit tests stay fast
- An in-memory key-value store standing in for the local secure file
"""

from typing import Any

import pytest

from authcore.domain.hashing import CredentialHasher


class MemoryKeyValueStore:
    """KeyValueStore whose flush can be made to fail."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.flushed: dict[str, Any] = {}
        self.fail_on_save = False
        self.save_calls = 0

    def get(self, key: str) -> Any | None:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def save(self) -> None:
        self.save_calls += 1
        if self.fail_on_save:
            raise PermissionError("store file is read-only")
        self.flushed = dict(self.data)


@pytest.fixture
def fast_hasher() -> CredentialHasher:
    """Argon2id hasher with minimal cost parameters."""
    return CredentialHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()
