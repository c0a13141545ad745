"""
Worker component that hosts a SerialQueue on a dedicated event loop thread.
"""

import atexit
import concurrent.futures
import logging
import threading
from typing import Any, Optional

from serial_task_queue.domain.codec import ItemCodec
from serial_task_queue.domain.submission import Submission
from serial_task_queue.domain.worker import WorkerInterface
from serial_task_queue.exceptions import QueueNotRunningError, SerialQueueError
from serial_task_queue.infrastructure.event_loop import EventLoop
from serial_task_queue.infrastructure.serial_queue import SerialQueue

logger = logging.getLogger(__name__)


def _failed_future(error: BaseException) -> concurrent.futures.Future:
    future: concurrent.futures.Future = concurrent.futures.Future()
    future.set_exception(error)
    return future


class Worker(WorkerInterface):
    """
    Lets any thread queue tasks on one SerialQueue.

    Items are encoded in the submitting thread, so the task sees the item as
    it was at submit time. Admission then happens on the worker's loop in
    the order submit was called. Task functions run on the loop thread.
    """

    def __init__(self, codec: Optional[ItemCodec] = None, use_uvloop: bool = True) -> None:
        """Initialize the Worker component."""
        self._event_loop = EventLoop(use_uvloop=use_uvloop)
        self._queue = SerialQueue(codec)
        self._lock = threading.Lock()
        self._closed = False

        # Register cleanup at process termination
        atexit.register(self.shutdown)
        logger.debug("Worker initialized")

    @property
    def queue(self) -> SerialQueue:
        """The hosted queue; only usable from the worker's loop thread."""
        return self._queue

    def start(self) -> None:
        """Start the worker's event loop thread."""
        with self._lock:
            self._ensure_started()

    def _ensure_started(self) -> None:
        # Caller holds self._lock
        if self._closed:
            raise QueueNotRunningError("Worker has been shut down")
        if self._event_loop.is_running():
            return
        self._event_loop.start()
        logger.info("Worker started")

    def submit(self, *args: Any) -> concurrent.futures.Future:
        """
        Queue a task from any thread.

        Args:
            *args: Either ``(task,)`` or ``(item, task)``

        Returns:
            A future settling with the task's outcome. Invalid arguments, an
            unencodable item or a stopped worker give an already failed future.
        """
        try:
            submission = self._queue.capture(*args)
        except SerialQueueError as e:
            return _failed_future(e)

        # Checked and scheduled together so a concurrent shutdown cannot
        # restart the loop behind a closed worker
        with self._lock:
            try:
                self._ensure_started()
            except QueueNotRunningError as e:
                return _failed_future(e)
            return self._event_loop.run_coroutine(self._admit(submission))

    async def _admit(self, submission: Submission) -> Any:
        return await self._queue.admit(submission)

    def shutdown(self) -> None:
        """Stop the worker; tasks still waiting for their turn are cancelled."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            atexit.unregister(self.shutdown)
            if not self._event_loop.is_running():
                return
            logger.info("Stopping worker")

        # Outside the lock: tasks on the loop may still call submit while
        # they are being cancelled
        self._event_loop.shutdown()
        logger.info("Worker stopped")

    def is_running(self) -> bool:
        """Check if the worker is running."""
        return self._event_loop.is_running()
