"""
Actions Dashboard Page Cache

Stores aggregated pages keyed by (organization, page) for a fixed TTL so that
repeated dashboard loads do not spend GitHub quota. The cache is advisory:
any read or write problem is logged and treated as a miss.
"""

import hashlib
import json
import os
import time
from typing import Any

try:
    from ..config import CACHE_DIR, PAGE_CACHE_TTL_MS
except ImportError:
    from config import CACHE_DIR, PAGE_CACHE_TTL_MS


def _is_cache_enabled() -> bool:
    """Check if caching is enabled (evaluated at runtime)."""
    return os.environ.get("CACHE_DISABLED") != "1"


def cache_key(org: str, page: int) -> str:
    return f"actions:{org.lower()}:page:{page}"


class PageCache:
    """File-backed page cache. One JSON file per (org, page)."""

    def __init__(self, cache_dir: str = CACHE_DIR, ttl_ms: int = PAGE_CACHE_TTL_MS, clock=time.time):
        self.cache_dir = cache_dir
        self.ttl_ms = ttl_ms
        self.clock = clock

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    # --- storage primitives (overridden by MemoryPageCache) ---

    def _get_cache_path(self, key: str) -> str:
        key_hash = hashlib.md5(key.encode()).hexdigest()
        return os.path.join(self.cache_dir, f"{key_hash}.json")

    def _read(self, key: str) -> dict | None:
        path = self._get_cache_path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, key: str, entry: dict) -> None:
        os.makedirs(self.cache_dir, exist_ok=True)
        with open(self._get_cache_path(key), "w", encoding="utf-8") as f:
            json.dump(entry, f, indent=2)

    def _delete(self, key: str) -> bool:
        path = self._get_cache_path(key)
        if os.path.exists(path):
            os.remove(path)
            return True
        return False

    def _entries(self) -> list[dict]:
        if not os.path.isdir(self.cache_dir):
            return []
        entries = []
        for filename in os.listdir(self.cache_dir):
            if not filename.endswith(".json"):
                continue
            try:
                with open(os.path.join(self.cache_dir, filename), "r", encoding="utf-8") as f:
                    entries.append(json.load(f))
            except (ValueError, OSError):
                entries.append({})
        return entries

    # --- public interface ---

    def is_fresh(self, entry: dict) -> bool:
        timestamp = entry.get("timestamp")
        if not isinstance(timestamp, (int, float)):
            return False
        return self._now_ms() - timestamp < self.ttl_ms

    def get(self, org: str, page: int) -> dict | None:
        """Return the cached payload for (org, page), or None on miss/expiry/corruption."""
        if not _is_cache_enabled():
            return None

        key = cache_key(org, page)
        try:
            entry = self._read(key)
        except (ValueError, OSError, TypeError) as e:
            print(f"[CACHE] ERROR reading {key}: {e}")
            return None

        if not isinstance(entry, dict):
            return None
        if not self.is_fresh(entry):
            print(f"[CACHE] EXPIRED: {key}")
            return None

        try:
            payload = {
                "organization": entry["organization"],
                "repositories": entry["repositories"],
                "pagination": entry["pagination"],
                "rate_limit": entry["rate_limit"],
            }
        except KeyError as e:
            print(f"[CACHE] ERROR malformed entry {key}: missing {e}")
            return None
        if "rateLimitInfo" in entry:
            payload["_rate_limit_info"] = entry["rateLimitInfo"]

        print(f"[CACHE] HIT: {key}")
        return payload

    def put(self, org: str, page: int, payload: dict[str, Any]) -> None:
        """Store an aggregated page payload. Failures are logged, never raised."""
        if not _is_cache_enabled():
            return

        key = cache_key(org, page)
        entry = {
            "key": key,
            "organization": payload.get("organization", org),
            "page": page,
            "repositories": payload.get("repositories", []),
            "pagination": payload.get("pagination"),
            "rate_limit": payload.get("rate_limit"),
            "timestamp": self._now_ms(),
        }
        if "_rate_limit_info" in payload:
            entry["rateLimitInfo"] = payload["_rate_limit_info"]
        try:
            self._write(key, entry)
            print(f"[CACHE] SET: {key} (TTL: {self.ttl_ms // 1000}s)")
        except (OSError, TypeError, ValueError) as e:
            print(f"[CACHE] ERROR setting {key}: {e}")

    def invalidate(self, org: str | None = None, page: int | None = None) -> int:
        """Clear cached pages. With no org every entry goes; with org but no page, all of that org's pages.

        Returns:
            Number of cache entries cleared
        """
        cleared = 0
        try:
            if org is not None and page is not None:
                cleared = int(self._delete(cache_key(org, page)))
            else:
                for entry in self._entries():
                    key = entry.get("key")
                    if org is not None and not (key or "").startswith(f"actions:{org.lower()}:"):
                        continue
                    if key and self._delete(key):
                        cleared += 1
                if org is None:
                    cleared += self._clear_unreadable()
        except OSError as e:
            print(f"[CACHE] ERROR clearing cache: {e}")
        print(f"[CACHE] CLEARED: {cleared} entries")
        return cleared

    def _clear_unreadable(self) -> int:
        """Remove leftover files that could not be parsed as entries."""
        if not os.path.isdir(self.cache_dir):
            return 0
        removed = 0
        for filename in os.listdir(self.cache_dir):
            if filename.endswith(".json"):
                os.remove(os.path.join(self.cache_dir, filename))
                removed += 1
        return removed

    def stats(self) -> dict:
        """Get cache statistics."""
        stats = {
            "enabled": _is_cache_enabled(),
            "ttl_seconds": self.ttl_ms // 1000,
            "entries": 0,
            "valid_entries": 0,
            "expired_entries": 0,
        }
        for entry in self._entries():
            stats["entries"] += 1
            if self.is_fresh(entry):
                stats["valid_entries"] += 1
            else:
                stats["expired_entries"] += 1
        return stats


class MemoryPageCache(PageCache):
    """In-process page cache with the same interface, for tests and single-worker runs."""

    def __init__(self, ttl_ms: int = PAGE_CACHE_TTL_MS, clock=time.time):
        super().__init__(cache_dir="", ttl_ms=ttl_ms, clock=clock)
        self._store: dict[str, str] = {}

    def _read(self, key):
        raw = self._store.get(key)
        return json.loads(raw) if raw is not None else None

    def _write(self, key, entry):
        self._store[key] = json.dumps(entry)

    def _delete(self, key):
        return self._store.pop(key, None) is not None

    def _entries(self):
        entries = []
        for raw in self._store.values():
            try:
                entries.append(json.loads(raw))
            except ValueError:
                entries.append({})
        return entries

    def _clear_unreadable(self):
        return 0
