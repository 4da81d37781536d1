"""
Reader/writer lock for coroutines sharing the flag store
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class ReadWriteLock:
    """Single-writer / multi-reader lock for one event loop.

    Readers share the lock with each other. A writer holds it alone. Once a
    writer is queued, new readers wait behind it so writes are not starved by
    a steady stream of reads. Releasing never awaits, which keeps the lock
    consistent when the holding task is cancelled.
    """

    def __init__(self):
        self._readers = 0
        self._writer = False
        self._write_lock = asyncio.Lock()
        self._no_readers = asyncio.Event()
        self._no_readers.set()
        self._no_writer = asyncio.Event()
        self._no_writer.set()

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def write_locked(self) -> bool:
        return self._writer

    async def acquire_read(self):
        while self._writer:
            await self._no_writer.wait()
        self._readers += 1
        self._no_readers.clear()

    def release_read(self):
        if self._readers <= 0:
            raise RuntimeError("release_read() called without a held read lock")
        self._readers -= 1
        if self._readers == 0:
            self._no_readers.set()

    async def acquire_write(self):
        # Serializes writers; the flag below then turns new readers away.
        await self._write_lock.acquire()
        self._writer = True
        self._no_writer.clear()
        try:
            while self._readers:
                await self._no_readers.wait()
        except BaseException:
            self._reset_writer()
            raise

    def release_write(self):
        if not self._writer:
            raise RuntimeError("release_write() called without a held write lock")
        self._reset_writer()

    def _reset_writer(self):
        self._writer = False
        self._no_writer.set()
        self._write_lock.release()

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        await self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        await self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
