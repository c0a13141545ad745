"""
Module-level access to a process-wide serial queue.
"""

import concurrent.futures
import threading
from typing import Any, Optional

from serial_task_queue.infrastructure.dispatcher import Dispatcher

_dispatcher: Optional[Dispatcher] = None
_dispatcher_lock = threading.Lock()


def _get_dispatcher() -> Dispatcher:
    global _dispatcher

    with _dispatcher_lock:
        if _dispatcher is None:
            _dispatcher = Dispatcher()
        return _dispatcher


def enqueue_task(*args: Any, timeout: Optional[float] = None) -> Any:
    """
    Run a task through the shared serial queue and wait for it.

    This is the main interface for synchronous callers. If the dispatcher
    hasn't been initialized, it will be automatically created.

    Args:
        *args: Either ``(task,)`` or ``(item, task)``
        timeout: Maximum time to wait for the result in seconds

    Returns:
        The result of the task

    Raises:
        TimeoutError: If the operation times out
        InvalidInvocationError: On a wrong argument count
        SerializationError: If the item cannot be encoded
        Exception: Any exception raised by the task
    """
    return _get_dispatcher().execute(*args, timeout=timeout)


def submit_task(*args: Any) -> concurrent.futures.Future:
    """Queue a task on the shared serial queue and return its future."""
    return _get_dispatcher().execute_async(*args)


def shutdown() -> None:
    """Stop the shared queue; the next call creates a fresh one."""
    global _dispatcher

    with _dispatcher_lock:
        if _dispatcher is not None:
            _dispatcher.shutdown()
            _dispatcher = None
