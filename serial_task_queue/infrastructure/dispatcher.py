"""
Dispatcher component that runs tasks through the serial queue and waits for them.
"""

import concurrent.futures
import logging
from typing import Any, Optional

from serial_task_queue.domain.dispatcher import DispatcherInterface
from serial_task_queue.infrastructure.worker import Worker

logger = logging.getLogger(__name__)


class Dispatcher(DispatcherInterface):
    """
    Blocking front end over a Worker.
    """

    def __init__(self, worker: Optional[Worker] = None) -> None:
        """Initialize the Dispatcher component."""
        self._owns_worker = worker is None
        self._worker = worker or Worker()
        self._worker.start()
        logger.debug("Dispatcher initialized and worker started")

    def execute(self, *args: Any, timeout: Optional[float] = None) -> Any:
        """
        Run a task through the serial queue and wait for its outcome.

        Args:
            *args: Either ``(task,)`` or ``(item, task)``
            timeout: Optional timeout in seconds

        Returns:
            The result of the task

        Raises:
            TimeoutError: If the task does not settle within timeout seconds.
                A task that already started keeps running; one still waiting
                for its turn is skipped.
            Exception: Any exception raised by the task, unchanged
        """
        future = self.execute_async(*args)
        try:
            return future.result(timeout=timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            raise TimeoutError(f"Task did not settle within {timeout} seconds")

    def execute_async(self, *args: Any) -> concurrent.futures.Future:
        """Run a task through the serial queue without waiting for it."""
        return self._worker.submit(*args)

    def shutdown(self) -> None:
        """Stop the underlying worker."""
        self._worker.shutdown()

    def __del__(self) -> None:
        """Cleanup when the dispatcher is destroyed."""
        if getattr(self, "_owns_worker", False):
            self._worker.shutdown()
            logger.debug("Dispatcher cleaned up")
