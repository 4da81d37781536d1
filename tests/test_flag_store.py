"""
Tests for the in-memory flag store
"""

import asyncio

import pytest

from flag_service.feature_flags.store import FlagStore, InMemoryFlagStore


class TestInMemoryFlagStore:
    """Test InMemoryFlagStore class"""

    @pytest.mark.asyncio
    async def test_get_nonexistent_flag(self):
        """Test getting a never-set flag returns False"""
        store = InMemoryFlagStore()

        assert await store.get_flag("nonexistent.flag") is False
        assert await store.get_flag("") is False

    @pytest.mark.asyncio
    async def test_set_and_get_flag(self):
        """Test setting and getting feature flags"""
        store = InMemoryFlagStore()

        assert await store.set_flag("test.feature", True) is True
        assert await store.get_flag("test.feature") is True

        assert await store.set_flag("test.feature", False) is True
        assert await store.get_flag("test.feature") is False

    @pytest.mark.asyncio
    async def test_last_write_wins(self):
        """Test sequential writes leave the last value in place"""
        store = InMemoryFlagStore()

        await store.set_flag("beta", False)
        await store.set_flag("beta", True)
        await store.set_flag("beta", True)

        assert await store.get_flag("beta") is True
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        """Test writing one key does not affect another"""
        store = InMemoryFlagStore({"other": True})

        await store.set_flag("beta", False)

        assert await store.get_flag("other") is True
        assert await store.get_flag("unrelated") is False

    @pytest.mark.asyncio
    async def test_empty_key_is_a_key(self):
        """Test the empty string is stored like any other key"""
        store = InMemoryFlagStore()

        await store.set_flag("", True)

        assert await store.get_flag("") is True
        assert await store.get_flag(" ") is False

    @pytest.mark.asyncio
    async def test_initial_flags_are_copied(self):
        """Test the seed mapping is not shared with the store"""
        seed = {"beta": True}
        store = InMemoryFlagStore(seed)

        seed["beta"] = False
        await store.set_flag("gamma", True)

        assert await store.get_flag("beta") is True
        assert "gamma" not in seed

    def test_is_a_flag_store(self):
        """Test the in-memory store implements the abstract capability"""
        assert isinstance(InMemoryFlagStore(), FlagStore)

        with pytest.raises(TypeError):
            FlagStore()


class TestConcurrentAccess:
    """Test the store under concurrent callers"""

    @pytest.mark.asyncio
    async def test_concurrent_reads_agree(self):
        """Test many concurrent reads of one key all see the same value"""
        store = InMemoryFlagStore({"beta": True})

        results = await asyncio.wait_for(
            asyncio.gather(*(store.get_flag("beta") for _ in range(200))),
            timeout=5,
        )

        assert results == [True] * 200

    @pytest.mark.asyncio
    async def test_racing_writes_leave_a_written_value(self):
        """Test racing True/False writes end on one of the written values"""
        store = InMemoryFlagStore()

        writes = [store.set_flag("beta", i % 2 == 0) for i in range(101)]
        reads = [store.get_flag("beta") for _ in range(100)]
        results = await asyncio.gather(*writes, *reads)

        assert all(ack is True for ack in results[:101])
        assert all(isinstance(value, bool) for value in results[101:])
        assert await store.get_flag("beta") in (True, False)

    @pytest.mark.asyncio
    async def test_write_waits_for_readers(self):
        """Test a write does not commit while a read is in progress"""
        store = InMemoryFlagStore()

        await store._lock.acquire_read()
        write = asyncio.create_task(store.set_flag("beta", True))
        await asyncio.sleep(0)

        assert not write.done()
        assert store._flags == {}

        store._lock.release_read()
        assert await write is True
        assert await store.get_flag("beta") is True

    @pytest.mark.asyncio
    async def test_reads_during_write_see_committed_value(self):
        """Test reads queued behind a write observe the written value"""
        store = InMemoryFlagStore({"beta": False})

        await store._lock.acquire_write()
        reads = [asyncio.create_task(store.get_flag("beta")) for _ in range(10)]
        await asyncio.sleep(0)
        assert not any(read.done() for read in reads)

        store._flags["beta"] = True
        store._lock.release_write()

        assert await asyncio.gather(*reads) == [True] * 10

    @pytest.mark.asyncio
    async def test_cancelled_writer_keeps_store_usable(self):
        """Test cancelling a queued write leaves the store working"""
        store = InMemoryFlagStore()

        await store._lock.acquire_read()
        write = asyncio.create_task(store.set_flag("beta", True))
        await asyncio.sleep(0)
        write.cancel()
        with pytest.raises(asyncio.CancelledError):
            await write
        store._lock.release_read()

        assert await asyncio.wait_for(store.get_flag("beta"), timeout=1) is False
        assert await asyncio.wait_for(store.set_flag("beta", True), timeout=1) is True
        assert await store.get_flag("beta") is True
