"""
On-disk memoisation cache.

Values are stored as JSON files named by a SHA-1 digest of the call
parameters. The extractor and the renderer each own one cache directory.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import os
import shutil
import tempfile

log = logging.getLogger(__name__)


def default_cache_dir(name):
    root = os.environ.get("JSDOC2MD_CACHE_DIR") or os.path.join(tempfile.gettempdir(), "jsdoc2md")
    return os.path.join(root, name)


class Cache:
    def __init__(self, directory):
        self.directory = directory

    @staticmethod
    def key(*parts):
        blob = json.dumps(parts, sort_keys=True, default=str)
        return hashlib.sha1(blob.encode("utf-8")).hexdigest()

    def _path(self, key):
        return os.path.join(self.directory, f"{key}.json")

    def read(self, key):
        """Return the cached value for ``key``, or ``None`` on a miss."""
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                value = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            log.debug("jsdoc2md: unreadable cache entry %s: %s", path, exc)
            return None
        log.debug("jsdoc2md: cache hit %s", path)
        return value

    def write(self, key, value):
        os.makedirs(self.directory, exist_ok=True)
        path = self._path(key)
        fd, tmp = tempfile.mkstemp(prefix=f"{key}.", suffix=".tmp", dir=self.directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f)
            os.replace(tmp, path)
        except BaseException:
            os.remove(tmp)
            raise

    def clear_sync(self):
        if os.path.isdir(self.directory):
            shutil.rmtree(self.directory)
        log.debug("jsdoc2md: cleared cache %s", self.directory)

    async def clear(self):
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.clear_sync)
