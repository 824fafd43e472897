"""
Shared fixtures for the record store tests.
"""
from typing import Optional

import pytest

from summary_shelf.errors import StorageUnavailable, StorageWriteError
from summary_shelf.storage import MemoryStorage
from summary_shelf.store import RecordStore


class FlakyStorage(MemoryStorage):
    """In-memory medium whose reads or writes can be switched off."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0

    async def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageUnavailable("disk unreadable")
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageWriteError("disk full")
        self.writes += 1
        await super().set(key, value)


@pytest.fixture
def storage() -> FlakyStorage:
    return FlakyStorage()


@pytest.fixture
def store(storage) -> RecordStore:
    return RecordStore(storage)


@pytest.fixture
async def seeded_store(store) -> RecordStore:
    """Store whose medium already holds the seed set."""
    await store.load_books()
    return store
