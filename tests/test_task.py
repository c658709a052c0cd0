"""Tests for task handles."""

import asyncio
import gc
import pytest
from parseq import TaskHandle, spawn, background_tasks


async def double(x: int) -> int:
    await asyncio.sleep(0)
    return x * 2


def own_background_tasks():
    loop = asyncio.get_running_loop()
    return {task for task in background_tasks() if task.get_loop() is loop}


class TestSpawn:
    @pytest.mark.asyncio
    async def test_returns_before_running(self):
        started = []

        async def op(x):
            started.append(x)
            return x

        handle = spawn(7, op)
        assert isinstance(handle, TaskHandle)
        assert started == []
        assert not handle.done()
        assert await handle == 7
        assert started == [7]

    @pytest.mark.asyncio
    async def test_binds_element_at_spawn(self):
        handles = [spawn(x, double) for x in range(3)]
        assert [await h for h in handles] == [0, 2, 4]

    @pytest.mark.asyncio
    async def test_named_task(self):
        handle = spawn(1, double, name="double-1")
        assert "double-1" in repr(handle)
        await handle

    def test_requires_running_loop(self):
        with pytest.raises(RuntimeError):
            spawn(1, double)


class TestTaskHandle:
    @pytest.mark.asyncio
    async def test_value_is_idempotent(self):
        handle = spawn(4, double)
        assert not handle.collected
        assert await handle.value() == 8
        assert handle.collected
        assert await handle.value() == 8
        assert await handle == 8

    @pytest.mark.asyncio
    async def test_failure_is_idempotent(self):
        async def fail(x):
            raise ValueError(x)

        handle = spawn(1, fail)
        with pytest.raises(ValueError) as first:
            await handle
        with pytest.raises(ValueError) as second:
            await handle
        assert first.value is second.value
        assert handle.collected

    @pytest.mark.asyncio
    async def test_already_finished(self):
        handle = spawn(2, double)
        await asyncio.sleep(0.01)
        assert handle.done()
        assert "done" in repr(handle)
        assert await handle == 4

    @pytest.mark.asyncio
    async def test_cancelling_waiter_leaves_task_running(self):
        gate = asyncio.Event()

        async def op(x):
            await gate.wait()
            return x

        handle = spawn(1, op)
        waiter = asyncio.create_task(handle.value())
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        assert not handle.done()
        assert not handle.collected
        gate.set()
        assert await handle == 1


class TestDetach:
    @pytest.mark.asyncio
    async def test_detached_task_runs_to_completion(self):
        finished = []

        async def op(x):
            await asyncio.sleep(0.01)
            finished.append(x)

        handle = spawn(1, op)
        handle.detach()
        assert handle.collected
        assert own_background_tasks()

        await asyncio.sleep(0.05)
        assert finished == [1]
        assert not own_background_tasks()

    @pytest.mark.asyncio
    async def test_detached_failure_is_not_reported(self):
        loop = asyncio.get_running_loop()
        reported = []
        loop.set_exception_handler(lambda _loop, context: reported.append(context))
        try:
            async def fail(x):
                await asyncio.sleep(0.01)
                raise ValueError(x)

            handle = spawn(1, fail)
            handle.detach()
            del handle
            await asyncio.sleep(0.05)
            gc.collect()
            assert reported == []
            assert not own_background_tasks()
        finally:
            loop.set_exception_handler(None)

    @pytest.mark.asyncio
    async def test_detach_after_collect_is_noop(self):
        handle = spawn(3, double)
        await handle
        handle.detach()
        assert not own_background_tasks()
