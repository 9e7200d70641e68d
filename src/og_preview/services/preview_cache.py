import asyncio
import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Awaitable, Callable, Dict, Optional, Tuple

from og_preview.models.preview_record import PreviewRecord

logger = logging.getLogger(__name__)

FetchFn = Callable[[str], Awaitable[PreviewRecord]]


class ReadWriteLock:
    """
    asyncio reader-writer lock.

    Any number of readers may hold the lock together; a writer holds it alone.
    Once a writer is waiting, new readers queue behind it.
    """

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    @asynccontextmanager
    async def reader(self):
        async with self._cond:
            await self._cond.wait_for(
                lambda: not self._writer_active and self._writers_waiting == 0
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def writer(self):
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(
                    lambda: not self._writer_active and self._readers == 0
                )
            except asyncio.CancelledError:
                self._writers_waiting -= 1
                self._cond.notify_all()
                raise
            self._writers_waiting -= 1
            self._writer_active = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer_active = False
                self._cond.notify_all()


class PreviewCache:
    """
    Process-lifetime map from the raw request URL to its preview.

    Entries are never evicted or revalidated. ``read``/``write`` are the plain
    locked accessors; ``get_or_fetch`` adds a per-key in-flight task so that
    concurrent misses for one URL share a single fetch.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, PreviewRecord] = {}
        self._lock = ReadWriteLock()
        self._inflight: Dict[str, asyncio.Task] = {}
        self._inflight_lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def size(self) -> int:
        return len(self._entries)

    async def read(self, key: str) -> Optional[PreviewRecord]:
        async with self._lock.reader():
            return self._entries.get(key)

    async def write(self, key: str, record: PreviewRecord) -> None:
        async with self._lock.writer():
            self._entries[key] = record

    async def get_or_fetch(
        self, key: str, fetch: FetchFn, store_failures: bool = True
    ) -> Tuple[PreviewRecord, bool]:
        """
        Return ``(record, hit)`` for ``key``.

        On a miss the fresh record (``cached=False``) is returned to every
        caller waiting on the same in-flight fetch, and a copy flagged
        ``cached=True`` is stored for later hits.
        """
        cached = await self.read(key)
        if cached is not None:
            return cached, True

        async with self._inflight_lock:
            task = self._inflight.get(key)
            if task is None:
                # the previous fetch for this key may have finished since the read
                cached = await self.read(key)
                if cached is not None:
                    return cached, True
                task = asyncio.get_running_loop().create_task(
                    self._fetch_and_store(key, fetch, store_failures)
                )
                self._inflight[key] = task
            else:
                logger.debug(f"Joining in-flight fetch for {key}")

        # shielded so a disconnecting caller does not cancel the shared fetch
        record = await asyncio.shield(task)
        return record, False

    async def _fetch_and_store(
        self, key: str, fetch: FetchFn, store_failures: bool
    ) -> PreviewRecord:
        try:
            try:
                record = await fetch(key)
            except Exception as e:
                # not stored, so the next request tries again
                logger.error(f"Error building preview for {key}: {e!r}")
                return PreviewRecord.failed()
            if record.ok or store_failures:
                await self.write(key, record.as_cached())
            return record
        finally:
            async with self._inflight_lock:
                self._inflight.pop(key, None)


@lru_cache()
def get_preview_cache() -> PreviewCache:
    logger.info("Initializing PreviewCache (should happen once)")
    return PreviewCache()
