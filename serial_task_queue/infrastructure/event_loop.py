"""
EventLoop component that owns a dedicated thread running its own loop.
"""

import asyncio
import concurrent.futures
import logging
import threading
import warnings
from typing import Any, Awaitable, Callable, Optional, TypeVar

import uvloop

logger = logging.getLogger(__name__)
T = TypeVar("T")


class EventLoop:
    """
    Runs an event loop in a dedicated daemon thread.

    The loop is always created and owned by this object, never borrowed from
    the calling thread, so callers outside the loop can block on results
    without deadlocking.
    """

    def __init__(self, use_uvloop: bool = True, thread_name: str = "SerialQueueThread") -> None:
        """Initialize the EventLoop."""
        self._use_uvloop = use_uvloop
        self._thread_name = thread_name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._is_running = False
        logger.debug("EventLoop initialized")

    def start(self) -> None:
        """Start the event loop thread if not already running."""
        if self._is_running:
            logger.warning("EventLoop is already running")
            return

        try:
            self._loop = uvloop.new_event_loop() if self._use_uvloop else asyncio.new_event_loop()
            self._thread = threading.Thread(
                target=self._run_forever, name=self._thread_name, daemon=True
            )
            self._thread.start()
            self._is_running = True
            logger.info(f"Started event loop in thread {self._thread_name}")
        except Exception as e:
            error_msg = f"Failed to start event loop: {e}"
            logger.error(error_msg)
            warnings.warn(error_msg, RuntimeWarning)
            self._is_running = False

    def _run_forever(self) -> None:
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_forever()
        except Exception as e:
            logger.error(f"Error in event loop: {e}")

    def run_coroutine(self, coro: Awaitable[T]) -> "concurrent.futures.Future[T]":
        """Schedule a coroutine on the loop from any thread."""
        return asyncio.run_coroutine_threadsafe(coro, self.get_loop())

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Schedule a plain callback on the loop from any thread."""
        self.get_loop().call_soon_threadsafe(callback, *args)

    def get_loop(self) -> asyncio.AbstractEventLoop:
        """Get the event loop, starting it if necessary."""
        if not self._is_running:
            self.start()
        if self._loop is None:
            raise RuntimeError("Event loop not initialized")
        return self._loop

    def in_loop_thread(self) -> bool:
        """Check if the caller runs on the loop's own thread."""
        return self._thread is not None and threading.current_thread() is self._thread

    def shutdown(self, timeout: float = 2.0) -> None:
        """Cancel outstanding tasks, stop the loop and join its thread."""
        if not self._is_running:
            return

        loop = self._loop
        try:
            logger.info("Shutting down event loop")
            if not self.in_loop_thread():
                try:
                    asyncio.run_coroutine_threadsafe(_cancel_outstanding(), loop).result(timeout)
                except concurrent.futures.TimeoutError:
                    logger.warning("Outstanding tasks did not finish cancelling in time")
            loop.call_soon_threadsafe(loop.stop)

            if self._thread and self._thread.is_alive() and not self.in_loop_thread():
                self._thread.join(timeout=timeout)
                if self._thread.is_alive():
                    logger.warning("Event loop thread did not terminate gracefully")

            if not loop.is_running() and not loop.is_closed():
                loop.close()
        except Exception as e:
            error_msg = f"Error during shutdown: {e}"
            logger.error(error_msg)
            warnings.warn(error_msg, RuntimeWarning)
        finally:
            self._loop = None
            self._thread = None
            self._is_running = False

    def is_running(self) -> bool:
        """Check if the event loop is running."""
        return self._is_running and self._loop is not None and not self._loop.is_closed()


async def _cancel_outstanding() -> None:
    current = asyncio.current_task()
    tasks = [task for task in asyncio.all_tasks() if task is not current]
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
