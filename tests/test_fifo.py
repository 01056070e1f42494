"""Tests for the FIFO call serializer."""

import asyncio

import pytest

from promiseutil import Deferred, Fifo, QueueStoppedError, fifo


def call(fn):
    return fn()


class TestFifo:
    """Test queuing calls through fifo()."""

    def test_returns_a_callable(self) -> None:
        wrapped = fifo(lambda x: x)

        assert isinstance(wrapped, Fifo)
        assert callable(wrapped)

    def test_requires_a_function(self) -> None:
        with pytest.raises(TypeError, match="first argument must be a function"):
            fifo({})

    def test_queue_starts_lazily(self) -> None:
        """Creating a fifo outside an event loop does not start anything."""
        assert fifo(lambda x: x).queue is None

    @pytest.mark.asyncio
    async def test_returns_a_deferred(self) -> None:
        wrapped = fifo(lambda x: x)

        result = wrapped(1)

        assert isinstance(result, Deferred)
        assert await result == 1

    @pytest.mark.asyncio
    async def test_resolves_awaitables(self) -> None:
        wrapped = fifo(lambda x: x)

        assert await wrapped(asyncio.sleep(0, result=1)) == 1

    @pytest.mark.asyncio
    async def test_resolves_no_argument(self) -> None:
        wrapped = fifo(lambda: 1)

        assert await wrapped() == 1

    @pytest.mark.asyncio
    async def test_resolves_generators_as_coroutines(self) -> None:
        def generator():
            value = yield asyncio.sleep(0, result=1)
            return value

        assert await fifo(generator)() == 1

    @pytest.mark.asyncio
    async def test_rejects_failing_awaitables(self) -> None:
        async def fail(_):
            raise ValueError("error")

        with pytest.raises(ValueError, match="error"):
            await fifo(fail)(0)

    @pytest.mark.asyncio
    async def test_rejects_raising_functions(self) -> None:
        def fail():
            raise ValueError("error")

        with pytest.raises(ValueError, match="error"):
            await fifo(fail)()

    @pytest.mark.asyncio
    async def test_rejects_failing_generators(self) -> None:
        async def fail():
            raise ValueError("error")

        def generator():
            value = yield fail()
            return value

        with pytest.raises(ValueError, match="error"):
            await fifo(generator)()

    @pytest.mark.asyncio
    async def test_runs_added_functions_in_order(self) -> None:
        wrapped = fifo(call)

        async def action(x):
            return x

        calls = [wrapped(lambda x=x: action(x)) for x in [1, 2, 3, 4]]

        assert await asyncio.gather(*calls) == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_serializes_calls(self) -> None:
        """With one worker each call finishes before the next starts."""
        events = []

        async def action(name):
            events.append(f"start {name}")
            await asyncio.sleep(0.001)
            events.append(f"end {name}")

        wrapped = fifo(action)
        await asyncio.gather(wrapped("a"), wrapped("b"))

        assert events == ["start a", "end a", "start b", "end b"]

    @pytest.mark.asyncio
    async def test_keeps_resolving_functions_infinitely(self) -> None:
        wrapped = fifo(call)

        first = await asyncio.gather(wrapped(lambda: 1), wrapped(lambda: 2))
        await asyncio.sleep(0)
        second = await asyncio.gather(wrapped(lambda: 3), wrapped(lambda: 4))

        assert first + second == [1, 2, 3, 4]
        assert wrapped.queue.get_stats()["stopped"] is False

    @pytest.mark.asyncio
    async def test_keeps_resolving_after_an_error(self) -> None:
        wrapped = fifo(call)

        def fail():
            raise RuntimeError("error")

        with pytest.raises(RuntimeError):
            await wrapped(fail)

        assert await wrapped(lambda: 1) == 1

    @pytest.mark.asyncio
    async def test_close_stops_the_queue(self) -> None:
        wrapped = fifo(call)
        assert await wrapped(lambda: 1) == 1
        queue = wrapped.queue

        wrapped.close()
        await asyncio.sleep(0)

        assert queue.get_stats()["stopped"] is True
        assert wrapped.queue is None
        assert await wrapped(lambda: 2) == 2

    @pytest.mark.asyncio
    async def test_close_rejects_calls_that_have_not_started(self) -> None:
        wrapped = fifo(lambda x: x)
        queued = wrapped(1)

        wrapped.close()

        with pytest.raises(QueueStoppedError):
            await asyncio.wait_for(queued, 0.5)

    @pytest.mark.asyncio
    async def test_cancelled_call_does_not_break_later_calls(self) -> None:
        """A call whose awaitable is cancelled is cancelled alone."""

        async def passthrough(future):
            return await future

        loop = asyncio.get_running_loop()
        cancelled = loop.create_future()
        cancelled.cancel()
        ready = loop.create_future()
        ready.set_result(5)
        wrapped = fifo(passthrough)

        first = wrapped(cancelled)
        with pytest.raises(asyncio.CancelledError):
            await first

        assert await asyncio.wait_for(wrapped(ready), 0.5) == 5
        assert wrapped.queue.get_stats()["stopped"] is False

    @pytest.mark.asyncio
    async def test_restarts_after_queue_is_cancelled(self) -> None:
        wrapped = fifo(lambda x: x)
        assert await wrapped(1) == 1
        old_queue = wrapped.queue

        run = wrapped._run
        run.cancel()
        with pytest.raises(asyncio.CancelledError):
            await run
        await asyncio.sleep(0)

        assert wrapped.queue is None
        assert await asyncio.wait_for(wrapped(2), 0.5) == 2
        assert wrapped.queue is not old_queue


class TestFifoParallel:
    """Test the parallel option."""

    @pytest.mark.asyncio
    async def test_runs_items_in_parallel(self) -> None:
        """Two calls run at once; the third waits for a free slot."""
        state = {"value": 0}

        def generator(_):
            count = state["value"]
            state["value"] += 1
            yield 1
            count += yield asyncio.sleep(0, result=1)
            state["value"] += 1
            return count

        wrapped = fifo(generator, parallel=2)

        results = await asyncio.gather(wrapped(None), wrapped(None), wrapped(None))

        assert results == [1, 2, 5]
        assert state["value"] == 6
