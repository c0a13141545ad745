"""
Domain interface for the Worker component.
"""

import concurrent.futures
from typing import Any, Protocol


class WorkerInterface(Protocol):
    """
    Interface for the Worker component.
    Defines the contract that all Worker implementations must follow.
    """

    def start(self) -> None:
        """
        Start the worker.
        """
        ...

    def submit(self, *args: Any) -> concurrent.futures.Future:
        """
        Queue a task on the worker's serial queue.

        Args:
            *args: Either ``(task,)`` or ``(item, task)``

        Returns:
            A future that settles with the task's outcome
        """
        ...

    def shutdown(self) -> None:
        """
        Shutdown the worker.
        """
        ...

    def is_running(self) -> bool:
        """
        Check if the worker is running.
        """
        ...
