"""
On-disk store for raw source responses.

Switched on with ``cache_enabled`` so that re-running the same search during a
review session does not hit the remote databases again. Each entry is one JSON
file named after a SHA-256 digest of the namespace and the request that
produced it, and carries its own expiry time.
"""

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any

from litscout.constants import CACHE_TTL

logger = logging.getLogger(__name__)


def request_digest(namespace: str, request: dict[str, Any]) -> str:
    """Stable hex digest of a namespace plus request description."""
    raw = json.dumps([namespace, request], sort_keys=True, default=str)
    return hashlib.sha256(raw.encode()).hexdigest()


class ResponseCache:
    """Directory of expiring JSON entries, one per distinct request."""

    def __init__(self, directory: Path, ttl_seconds: int = CACHE_TTL):
        self.directory = Path(directory)
        self.ttl_seconds = ttl_seconds

    def _path(self, namespace: str, request: dict[str, Any]) -> Path:
        return self.directory / f"{request_digest(namespace, request)}.json"

    def get(self, namespace: str, request: dict[str, Any]) -> Any | None:
        """Stored payload for ``request``, or None if absent, stale or unreadable."""
        path = self._path(namespace, request)
        try:
            entry = json.loads(path.read_text())
            expires_at = float(entry["expires_at"])
            payload = entry["payload"]
        except FileNotFoundError:
            return None
        except (ValueError, KeyError, TypeError):
            logger.debug("Discarding unreadable cache entry %s", path.name)
            path.unlink(missing_ok=True)
            return None

        if time.time() >= expires_at:
            logger.debug("Cache entry for %s expired", namespace)
            path.unlink(missing_ok=True)
            return None
        logger.debug("Cache hit for %s", namespace)
        return payload

    def set(self, namespace: str, request: dict[str, Any], payload: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        entry = {
            "namespace": namespace,
            "expires_at": time.time() + self.ttl_seconds,
            "payload": payload,
        }
        self._path(namespace, request).write_text(json.dumps(entry, default=str))

    def clear(self) -> int:
        """Delete every entry; return how many were removed."""
        if not self.directory.is_dir():
            return 0
        removed = 0
        for path in self.directory.glob("*.json"):
            path.unlink(missing_ok=True)
            removed += 1
        logger.info("Cleared %d cached responses from %s", removed, self.directory)
        return removed
