"""
Storage capabilities for the preload cache.

The cache only needs two async operations: load the last persisted blob for
a network on cold start, and persist a freshly published one.
"""
import asyncio
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import structlog

logger = structlog.get_logger()


@runtime_checkable
class CacheStorage(Protocol):
    """Persistence capability injected into PreloadCache."""

    async def get_data(self, network: Any) -> Optional[Any]:
        ...

    async def save_data(self, network: Any, data: Any) -> None:
        ...


def _to_jsonable(data: Any) -> Any:
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    return data


class InMemoryStorage:
    """Keeps persisted blobs in a dict keyed by network id."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    async def get_data(self, network: Any) -> Optional[Any]:
        return self._data.get(network.id)

    async def save_data(self, network: Any, data: Any) -> None:
        self._data[network.id] = data


class JsonFileStorage:
    """
    Persists one JSON file per network under a directory.

    Writes go to a temporary file which is then renamed over the target, so a
    crash mid-write never leaves a truncated file behind.
    """

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def path_for(self, network: Any) -> Path:
        return self.directory / f"{network.id}.json"

    def _read(self, path: Path) -> Optional[Any]:
        if not path.exists():
            return None
        with path.open(encoding="utf-8") as f:
            return json.load(f)

    def _write(self, path: Path, payload: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(payload, f)
        os.replace(tmp_path, path)

    async def get_data(self, network: Any) -> Optional[Any]:
        path = self.path_for(network)
        try:
            return await asyncio.to_thread(self._read, path)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("preload_storage_corrupt", network=network.id, path=str(path), error=str(e))
            return None

    async def save_data(self, network: Any, data: Any) -> None:
        path = self.path_for(network)
        await asyncio.to_thread(self._write, path, _to_jsonable(data))
        logger.debug("preload_storage_saved", network=network.id, path=str(path))
