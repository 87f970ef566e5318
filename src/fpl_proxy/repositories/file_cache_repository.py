"""File-backed implementation of CacheStore.

Entries live in a flat directory, one file per key, named by the SHA-256
digest of the upstream URL. Each file holds the content type on its first
line followed by the raw payload, so there is no companion metadata file.
The file's modification time is the entry's ``stored_at``.
"""

import contextlib
import hashlib
import logging
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

from fpl_proxy.config import settings
from fpl_proxy.entities import CacheEntryEntity
from fpl_proxy.exceptions import StorageFailureError

logger = logging.getLogger(__name__)

_TMP_PREFIX = ".tmp-"


class FileCacheRepository:
    """Flat-directory cache store.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Writes go to a temporary file in the cache directory and are moved into
    place with ``os.replace``, so a reader sees either the old entry or the
    new one, never a partial file. Concurrent writers to the same key race
    harmlessly: the last replace wins.
    """

    def __init__(
        self,
        cache_dir: str | os.PathLike | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize the file cache repository.

        The directory is not touched here; it is created on first store.

        Args:
            cache_dir: Cache directory. Defaults to settings.cache_dir.
            clock: Returns the current Unix time. Defaults to time.time.
        """
        self._cache_dir = Path(cache_dir or settings.cache_dir)
        self._clock = clock or time.time

    @classmethod
    def create(
        cls,
        cache_dir: str | os.PathLike | None = None,
        clock: Callable[[], float] | None = None,
    ) -> "FileCacheRepository":
        """Factory method to create FileCacheRepository with defaults.

        Args:
            cache_dir: Cache directory. If None, uses settings.
            clock: Time source. If None, uses time.time.

        Returns:
            Configured FileCacheRepository
        """
        return cls(cache_dir=cache_dir, clock=clock)

    @property
    def cache_dir(self) -> Path:
        """Directory holding the cache files."""
        return self._cache_dir

    def key_for(self, target: str) -> str:
        return hashlib.sha256(target.encode("utf-8")).hexdigest()

    def path_for(self, key: str) -> Path:
        """Location of the file for a key."""
        return self._cache_dir / key

    def lookup(self, key: str) -> CacheEntryEntity | None:
        """Read the entry for a key.

        Unreadable or malformed files are treated as absent; the next
        successful fetch overwrites them.
        """
        path = self.path_for(key)
        try:
            stored_at = path.stat().st_mtime
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Failed to read cache entry %s: %s", key, e)
            return None

        header, sep, payload = data.partition(b"\n")
        if not sep:
            logger.warning("Malformed cache entry %s", key)
            return None

        return CacheEntryEntity(
            key=key,
            payload=payload,
            content_type=header.decode("ascii", errors="replace").strip(),
            stored_at=stored_at,
        )

    def store(self, key: str, payload: bytes, content_type: str) -> CacheEntryEntity:
        """Atomically overwrite the entry for a key.

        Raises:
            StorageFailureError: If the directory or file cannot be written
        """
        now = self._clock()
        header = content_type.replace("\n", " ").encode("ascii", errors="replace")

        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=_TMP_PREFIX, dir=self._cache_dir)
        except OSError as e:
            raise StorageFailureError(f"Cannot create cache file in {self._cache_dir}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(header + b"\n" + payload)
            os.utime(tmp_name, (now, now))
            os.replace(tmp_name, self.path_for(key))
        except OSError as e:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise StorageFailureError(f"Cannot write cache entry {key}: {e}") from e

        return CacheEntryEntity(
            key=key,
            payload=payload,
            content_type=content_type,
            stored_at=now,
        )

    def _entry_paths(self) -> list[Path]:
        if not self._cache_dir.is_dir():
            return []
        return [
            p for p in self._cache_dir.iterdir()
            if p.is_file() and not p.name.startswith(_TMP_PREFIX)
        ]

    def count_all(self) -> int:
        return len(self._entry_paths())

    def health_check(self) -> bool:
        """Check that the cache directory exists (or can be created) and is writable."""
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            return False
        return os.access(self._cache_dir, os.W_OK)

    def get_stats(self) -> dict:
        paths = self._entry_paths()
        total_size = 0
        for p in paths:
            try:
                total_size += p.stat().st_size
            except OSError:
                continue
        return {
            "backend": "file",
            "cache_dir": str(self._cache_dir),
            "total_entries": len(paths),
            "total_size_bytes": total_size,
        }
