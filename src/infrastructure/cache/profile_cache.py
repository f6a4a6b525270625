"""Local profile cache implementations."""

import asyncio
import hashlib
from pathlib import Path
from typing import Optional

import orjson
import structlog

from domain.entities.user import UserProfile

logger = structlog.get_logger()


class InMemoryProfileCache:
    """Process-local cache, one entry per userID."""

    def __init__(self) -> None:
        self._entries: dict[str, dict] = {}

    async def get(self, user_id: str) -> Optional[UserProfile]:
        record = self._entries.get(user_id)
        if record is None:
            return None
        return UserProfile.from_record(record)

    async def put(self, user: UserProfile) -> None:
        # Stored as records so callers never share a mutable profile
        self._entries[user.user_id] = user.to_record()

    async def invalidate(self, user_id: str) -> None:
        self._entries.pop(user_id, None)


class JsonFileProfileCache:
    """Cache that mirrors each profile to one JSON file per userID.

    Survives restarts the way the browser's local storage copy does. A
    corrupt entry is treated as a miss and removed. File I/O runs in a
    worker thread so the event loop is never blocked on disk.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def _path(self, user_id: str) -> Path:
        # Hashed so distinct ids never share a file and no id escapes the directory
        digest = hashlib.sha256(user_id.encode("utf-8")).hexdigest()
        return self._directory / f"{digest}.json"

    async def get(self, user_id: str) -> Optional[UserProfile]:
        return await asyncio.to_thread(self._read, user_id)

    async def put(self, user: UserProfile) -> None:
        await asyncio.to_thread(self._write, user)

    async def invalidate(self, user_id: str) -> None:
        await asyncio.to_thread(self._path(user_id).unlink, missing_ok=True)

    def _read(self, user_id: str) -> Optional[UserProfile]:
        path = self._path(user_id)
        if not path.exists():
            return None
        try:
            record = orjson.loads(path.read_bytes())
        except orjson.JSONDecodeError:
            logger.warning("profile_cache_corrupt", user_id=user_id, path=str(path))
            path.unlink(missing_ok=True)
            return None
        if not isinstance(record, dict) or record.get("userID") != user_id:
            logger.warning("profile_cache_key_mismatch", user_id=user_id, path=str(path))
            return None
        return UserProfile.from_record(record)

    def _write(self, user: UserProfile) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._path(user.user_id)
        tmp = path.with_suffix(".tmp")
        tmp.write_bytes(orjson.dumps(user.to_record()))
        tmp.replace(path)
