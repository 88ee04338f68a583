"""Tests for the in-process state stream."""

import asyncio

import pytest

from counterflow.app.bus import InProcessStateStream
from counterflow.core.state import CounterState


class TestCallbacks:

    def test_publish_updates_value_and_version(self):
        stream = InProcessStateStream()
        assert stream.value is None and stream.version == 0

        stream.publish(CounterState.build(1))

        assert stream.value.count == 1
        assert stream.version == 1

    def test_subscribers_receive_in_order(self):
        stream = InProcessStateStream(CounterState.build(0))
        seen = []
        stream.subscribe(lambda s: seen.append(("a", s.count)))
        stream.subscribe(lambda s: seen.append(("b", s.count)))

        stream.publish(CounterState.build(1))
        stream.publish(CounterState.build(2))

        assert seen == [("a", 1), ("b", 1), ("a", 2), ("b", 2)]

    def test_unsubscribe_callable(self):
        stream = InProcessStateStream()
        seen = []
        unsubscribe = stream.subscribe(seen.append)

        unsubscribe()
        stream.publish(CounterState.build(3))

        assert seen == []
        assert stream.subscriber_count == 0

    def test_handler_error_is_isolated(self, caplog):
        stream = InProcessStateStream()
        seen = []

        def broken(state):
            raise RuntimeError("boom")

        stream.subscribe(broken)
        stream.subscribe(seen.append)

        stream.publish(CounterState.build(4))

        assert [s.count for s in seen] == [4]
        assert "raised while handling" in caplog.text

    def test_clear_subscribers(self):
        stream = InProcessStateStream()
        stream.subscribe(lambda s: None)
        stream.subscribe(lambda s: None)

        stream.clear_subscribers()

        assert stream.subscriber_count == 0


class TestUpdates:

    @pytest.mark.asyncio
    async def test_updates_yield_current_then_later_snapshots(self):
        stream = InProcessStateStream(CounterState.build(0))
        updates = stream.updates()

        first = await updates.__anext__()
        stream.publish(CounterState.build(1))
        stream.publish(CounterState.build(2))
        second = await updates.__anext__()
        third = await updates.__anext__()

        assert [first.count, second.count, third.count] == [0, 1, 2]
        await updates.aclose()

    @pytest.mark.asyncio
    async def test_reader_counts_as_subscriber_until_closed(self):
        stream = InProcessStateStream(CounterState.build(0))
        updates = stream.updates()
        await updates.__anext__()

        assert stream.subscriber_count == 1

        await updates.aclose()
        assert stream.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_reader_task_sees_every_publish(self):
        stream = InProcessStateStream(CounterState.build(0))
        received = []

        async def reader():
            async for state in stream.updates():
                received.append(state.count)
                if state.count == 3:
                    return

        task = asyncio.create_task(reader())
        await asyncio.sleep(0)
        for count in (1, 2, 3):
            stream.publish(CounterState.build(count))

        await asyncio.wait_for(task, timeout=1)
        assert received == [0, 1, 2, 3]
