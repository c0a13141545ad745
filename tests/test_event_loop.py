"""
Tests for the dedicated-thread EventLoop.

These tests verify that the EventLoop:
1. Always runs its own loop in a dedicated daemon thread
2. Never reuses a loop that is already running in the caller
3. Executes coroutines and callbacks scheduled from other threads
4. Cleans up on shutdown
"""

import asyncio
import threading

import pytest
import uvloop

from serial_task_queue.infrastructure import EventLoop


@pytest.fixture
def event_loop_fixture():
    """
    Fixture that provides a clean EventLoop instance.
    """
    loop = EventLoop()
    yield loop
    # Ensure cleanup
    if loop.is_running():
        loop.shutdown()


class TestEventLoopLifecycle:
    """Tests for starting and stopping the EventLoop."""

    def test_should_start_in_clean_state(self, event_loop_fixture):
        assert not event_loop_fixture.is_running()

    def test_should_create_dedicated_daemon_thread(self, event_loop_fixture):
        # When: We start the EventLoop
        event_loop_fixture.start()

        # Then: It runs in its own named daemon thread
        assert event_loop_fixture.is_running()
        assert event_loop_fixture._thread is not None
        assert event_loop_fixture._thread.daemon
        assert event_loop_fixture._thread.name == "SerialQueueThread"
        assert event_loop_fixture._thread is not threading.current_thread()

    def test_start_should_be_idempotent(self, event_loop_fixture):
        # Given: An EventLoop already started
        event_loop_fixture.start()
        original_loop = event_loop_fixture._loop

        # When: We call start() again
        event_loop_fixture.start()

        # Then: The state does not change
        assert event_loop_fixture.is_running()
        assert event_loop_fixture._loop is original_loop

    def test_get_loop_should_auto_start(self, event_loop_fixture):
        loop = event_loop_fixture.get_loop()

        assert event_loop_fixture.is_running()
        assert isinstance(loop, asyncio.AbstractEventLoop)

    def test_should_use_uvloop_by_default(self, event_loop_fixture):
        assert isinstance(event_loop_fixture.get_loop(), uvloop.Loop)

    def test_should_allow_the_default_loop_implementation(self):
        event_loop = EventLoop(use_uvloop=False)
        try:
            assert not isinstance(event_loop.get_loop(), uvloop.Loop)
        finally:
            event_loop.shutdown()

    def test_shutdown_should_reset_state(self, event_loop_fixture):
        event_loop_fixture.start()
        thread = event_loop_fixture._thread

        event_loop_fixture.shutdown()

        assert not event_loop_fixture.is_running()
        assert event_loop_fixture._loop is None
        assert not thread.is_alive()

        # Should be safe to call shutdown multiple times
        event_loop_fixture.shutdown()
        assert not event_loop_fixture.is_running()

    def test_shutdown_should_cancel_outstanding_coroutines(self, event_loop_fixture):
        async def never_finishes():
            await asyncio.Event().wait()

        future = event_loop_fixture.run_coroutine(never_finishes())
        event_loop_fixture.shutdown()

        assert future.cancelled()


class TestEventLoopExecution:
    """Tests for running work on the EventLoop."""

    def test_should_execute_coroutines_in_loop_thread(self, event_loop_fixture):
        async def current_thread_name():
            await asyncio.sleep(0.01)
            return threading.current_thread().name

        future = event_loop_fixture.run_coroutine(current_thread_name())

        assert future.result(timeout=1.0) == "SerialQueueThread"

    def test_should_propagate_coroutine_exceptions(self, event_loop_fixture):
        async def failing():
            raise ValueError("Test error")

        future = event_loop_fixture.run_coroutine(failing())

        with pytest.raises(ValueError, match="Test error"):
            future.result(timeout=1.0)

    def test_call_soon_should_run_callback_in_loop_thread(self, event_loop_fixture):
        seen = []
        done = threading.Event()

        def callback(value):
            seen.append((value, event_loop_fixture.in_loop_thread()))
            done.set()

        event_loop_fixture.call_soon(callback, "ping")

        assert done.wait(timeout=1.0)
        assert seen == [("ping", True)]
        assert not event_loop_fixture.in_loop_thread()


def test_should_create_dedicated_thread_even_inside_asyncio_run():
    """Test that an outer running loop is never reused."""

    async def inside_existing_loop():
        external_loop = asyncio.get_running_loop()

        event_loop = EventLoop()
        try:
            assert event_loop.get_loop() is not external_loop
            assert event_loop._thread is not threading.current_thread()
        finally:
            event_loop.shutdown()

    asyncio.run(inside_existing_loop())
