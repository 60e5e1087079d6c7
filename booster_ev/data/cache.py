"""Two-tier, time-boxed cache for dataset documents and derived tables."""

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

MAX_ENTRY_SIZE = 2_000_000  # characters of serialized JSON per entry


class ValuationCache:
    """
    Cache with an in-memory tier and a best-effort persistent tier.

    The memory tier is authoritative and always checked first. The
    persistent tier stores one JSON file per key; entries whose serialized
    form exceeds ``max_entry_size`` are kept in memory only. Expired entries
    are purged lazily on ``get``.
    """

    def __init__(
        self,
        cache_dir: Optional[str] = ".cache",
        max_entry_size: int = MAX_ENTRY_SIZE,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize cache.

        Args:
            cache_dir: Directory for persisted entries (None disables the tier)
            max_entry_size: Largest serialized entry the persistent tier accepts
            clock: Time source returning epoch seconds
        """
        self.cache_dir = Path(cache_dir) if cache_dir else None
        self.max_entry_size = max_entry_size
        self.clock = clock
        self._memory: dict[str, dict] = {}
        self._ensure_cache_dir()

    def _ensure_cache_dir(self) -> None:
        """Create cache directory if it doesn't exist."""
        if self.cache_dir is None:
            return
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cache directory unavailable, using memory only: {e}")
            self.cache_dir = None

    def _get_cache_path(self, key: str) -> Optional[Path]:
        """Get file path for cache key."""
        if self.cache_dir is None:
            return None
        digest = hashlib.md5(key.encode()).hexdigest()
        return self.cache_dir / f"{digest}.json"

    def _is_expired(self, entry: dict) -> bool:
        expires_at = entry.get("expires_at")
        return expires_at is not None and expires_at < self.clock()

    def _read_entry(self, key: str) -> Optional[dict]:
        if key in self._memory:
            return self._memory[key]

        cache_path = self._get_cache_path(key)
        if cache_path is None or not cache_path.exists():
            return None

        try:
            with open(cache_path, "r", encoding="utf-8") as f:
                entry = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read cache entry {key}: {e}")
            return None

        if entry.get("key") != key:
            return None

        self._memory[key] = entry
        return entry

    def _persist_entry(self, key: str, entry: dict) -> None:
        cache_path = self._get_cache_path(key)
        if cache_path is None:
            return

        try:
            serialized = json.dumps(entry, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.warning(f"Entry {key} is not JSON serializable, memory only: {e}")
            self._discard_file(key, cache_path)
            return

        if len(serialized) > self.max_entry_size:
            logger.info(
                f"Skip caching entry {key} (> {self.max_entry_size} chars). "
                "Data stays in memory for this session."
            )
            self._discard_file(key, cache_path)
            return

        try:
            with open(cache_path, "w", encoding="utf-8") as f:
                f.write(serialized)
        except OSError as e:
            logger.warning(f"Failed to persist cache entry {key}: {e}")
            self._discard_file(key, cache_path)

    def _discard_file(self, key: str, cache_path: Path) -> None:
        """Drop an older persisted copy that a memory-only write supersedes."""
        try:
            cache_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove stale cache entry {key}: {e}")

    def _remove_entry(self, key: str) -> None:
        self._memory.pop(key, None)
        cache_path = self._get_cache_path(key)
        if cache_path is None:
            return
        self._discard_file(key, cache_path)

    def _persisted_entries(self) -> list[tuple[Path, Optional[str], Optional[dict]]]:
        """List (path, key, entry) for every file in the persistent tier."""
        if self.cache_dir is None:
            return []

        entries = []
        for cache_file in self.cache_dir.glob("*.json"):
            try:
                with open(cache_file, "r", encoding="utf-8") as f:
                    entry = json.load(f)
                entries.append((cache_file, entry.get("key"), entry))
            except (OSError, ValueError):
                entries.append((cache_file, None, None))
        return entries

    def get(self, key: str) -> Optional[Any]:
        """
        Retrieve cached payload.

        Args:
            key: Cache key

        Returns:
            Cached payload or None if not found/expired
        """
        entry = self._read_entry(key)
        if entry is None:
            return None

        if self._is_expired(entry):
            logger.debug(f"Cache entry expired: {key}")
            self._remove_entry(key)
            return None

        return entry.get("payload")

    def set(self, key: str, payload: Any, ttl: Optional[float] = None) -> None:
        """
        Store payload in cache.

        Args:
            key: Cache key
            payload: JSON-serializable data to cache
            ttl: Time-to-live in seconds (None never expires)
        """
        entry = {
            "key": key,
            "payload": payload,
            "expires_at": self.clock() + ttl if ttl else None,
        }
        self._memory[key] = entry
        self._persist_entry(key, entry)

    def clear(self, prefix: Optional[str] = None) -> int:
        """
        Clear cached entries from both tiers.

        Args:
            prefix: Only clear keys starting with this prefix (None clears all)

        Returns:
            Number of distinct keys removed
        """
        removed: set[str] = set()

        for key in list(self._memory):
            if prefix is None or key.startswith(prefix):
                self._memory.pop(key, None)
                removed.add(key)

        for cache_file, key, _ in self._persisted_entries():
            if prefix is not None and (key is None or not key.startswith(prefix)):
                continue
            try:
                cache_file.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Failed to clear cache file {cache_file}: {e}")
                continue
            removed.add(key if key is not None else str(cache_file))

        return len(removed)

    def get_stats(self) -> dict:
        """Get cache statistics."""
        persisted = self._persisted_entries()
        total_size = sum(path.stat().st_size for path, _, _ in persisted if path.exists())
        expired = sum(1 for _, _, entry in persisted if entry and self._is_expired(entry))

        return {
            "memory_entries": len(self._memory),
            "total_entries": len(persisted),
            "valid_entries": len(persisted) - expired,
            "expired_entries": expired,
            "total_size_bytes": total_size,
            "total_size_mb": round(total_size / (1024 * 1024), 2),
            "cache_dir": str(self.cache_dir) if self.cache_dir else None,
        }
