"""
Domain interface for the Dispatcher component.
"""

import concurrent.futures
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class DispatcherInterface(Protocol):
    """
    Interface for the Dispatcher component.
    Defines the contract that all Dispatcher implementations must follow.
    """

    def execute(self, *args: Any, timeout: Optional[float] = None) -> Any:
        """
        Run a task through the serial queue and wait for it.

        Args:
            *args: Either ``(task,)`` or ``(item, task)``
            timeout: Optional timeout in seconds

        Returns:
            The result of the task

        Raises:
            TimeoutError: If the task does not settle within timeout seconds
            Exception: Any exception raised by the task
        """
        ...

    def execute_async(self, *args: Any) -> concurrent.futures.Future:
        """
        Run a task through the serial queue without waiting for it.
        """
        ...
