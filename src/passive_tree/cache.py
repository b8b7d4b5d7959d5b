"""Persisted snapshot cache keyed by tree version."""

import json
import logging
import re
from pathlib import Path
from typing import Protocol

from .snapshot import GraphSnapshot, TreeDataError

logger = logging.getLogger(__name__)


class CacheCorruptionError(Exception):
    """Raised when a cached payload cannot be decoded into a snapshot."""


def cache_key(version: str) -> str:
    """Storage key for a tree version."""
    return f"{version}_passive_tree_data"


class KeyValueStore(Protocol):
    """Minimal string key-value persistence surface."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed store, useful for tests and single-process runs."""

    def __init__(self):
        self.data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class FileStore:
    """One JSON file per key under a cache directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        safe = re.sub(r"[^A-Za-z0-9._-]", "_", key)
        return self.directory / f"{safe}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text()

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        # Write then rename so a crash never leaves a half-written entry
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value)
        tmp.replace(path)


def decode_snapshot(payload: str) -> GraphSnapshot:
    """Parse a cached payload.

    Raises:
        CacheCorruptionError: If the payload is not a valid snapshot document.
    """
    try:
        return GraphSnapshot.from_dict(json.loads(payload))
    except (json.JSONDecodeError, TreeDataError) as e:
        raise CacheCorruptionError(str(e)) from e


class SnapshotCache:
    """Version-keyed snapshot cache with no expiry.

    Each version's data is immutable upstream, so a stored entry is trusted
    until overwritten. Neither operation raises.
    """

    def __init__(self, backend: KeyValueStore):
        self.backend = backend

    def load(self, version: str) -> GraphSnapshot | None:
        """Return the cached snapshot for a version, or None on miss or corruption."""
        key = cache_key(version)
        try:
            payload = self.backend.get(key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read cache entry %s: %s", key, e)
            return None
        if payload is None:
            logger.debug("Cache miss for %s", key)
            return None

        try:
            snapshot = decode_snapshot(payload)
        except CacheCorruptionError as e:
            logger.warning("Ignoring corrupt cache entry %s: %s", key, e)
            return None
        logger.debug("Cache hit for %s", key)
        return snapshot

    def store(self, version: str, snapshot: GraphSnapshot) -> bool:
        """Persist a snapshot under its version key.

        Returns:
            True if the snapshot was written, False if persisting failed.
        """
        key = cache_key(version)
        try:
            self.backend.set(key, json.dumps(snapshot.to_dict()))
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not persist cache entry %s: %s", key, e)
            return False
        return True
