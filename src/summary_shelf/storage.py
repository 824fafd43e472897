import asyncio
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from .errors import StorageUnavailable, StorageWriteError

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStorage(Protocol):
    """
    A flat string-keyed medium holding opaque text blobs.

    Implementations raise StorageUnavailable when a read fails and
    StorageWriteError when a write does not land.
    """

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """Process-local medium, used in tests and as a scratch backend."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        # Yield like real I/O would so callers interleave
        await asyncio.sleep(0)
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        self.data[key] = value


class JsonFileStorage:
    """Stores each key as ``<key>.json`` inside a data directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def _read(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def _write(self, key: str, value: str):
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    async def get(self, key: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._read, key)
        except OSError as e:
            raise StorageUnavailable(f"Cannot read {key!r} from {self.directory}: {e}") from e

    async def set(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._write, key, value)
        except OSError as e:
            raise StorageWriteError(f"Cannot write {key!r} to {self.directory}: {e}") from e
        logger.debug(f"Wrote {len(value)} chars to {self._path(key)}")
