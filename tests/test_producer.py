"""Tests for from_() producer stores."""

import asyncio

import pytest

from konbini import Store, computed, from_, konbini, watch
from konbini import _tracking


class TestFrom:
    def test_initial_value(self):
        assert from_(lambda store: None, 7)() == 7

    def test_default_initial_value(self):
        assert from_(lambda store: None)() is None

    def test_producer_write_visible(self):
        assert from_(lambda store: store(99), 0)() == 99

    def test_executor_called_once_with_store(self):
        calls = []
        s = from_(calls.append, 1)
        assert calls == [s]
        assert isinstance(s, Store)

    def test_producer_subscribes_to_other_store(self):
        count = konbini(1)
        tripled = from_(lambda store: count.subscribe(lambda v, *_: store(v * 3)), 0)
        assert tripled() == 3
        count(2)
        assert tripled() == 6

    def test_externally_writable(self):
        s = from_(lambda store: None, 0)
        s(5)
        assert s() == 5

    def test_not_tracked(self):
        depths = []
        from_(lambda store: depths.append(_tracking.depth()))
        assert depths == [0]

    def test_executor_error_propagates(self):
        def fail(store):
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            from_(fail, 0)

    def test_feeds_computed(self):
        source = from_(lambda store: store(4), 0)
        squared = computed(lambda: source() ** 2)
        assert squared() == 16
        source(5)
        assert squared() == 25


class TestDeferredWrites:
    def test_write_from_thread(self):
        handles = []

        def load(store):
            store(42)

        s = from_(lambda store: handles.append(watch(load, store)), 0)
        assert handles[0].join(timeout=2)
        assert s() == 42

    def test_write_from_asyncio_task(self):
        async def main():
            tasks = []

            async def load(store):
                await asyncio.sleep(0)
                store("ready")

            s = from_(lambda store: tasks.append(asyncio.ensure_future(load(store))), "pending")
            assert s() == "pending"
            await tasks[0]
            return s()

        assert asyncio.run(main()) == "ready"

    def test_late_write_notifies_subscribers(self):
        writers = []
        s = from_(writers.append, "pending")
        log = []
        s.subscribe(lambda *args: log.append(args))
        writers[0]("done")
        assert log == [("pending",), ("done", "pending")]
