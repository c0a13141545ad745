"""
Serial queue domain abstractions.
"""

import asyncio
from typing import Any, Protocol, runtime_checkable

from serial_task_queue.domain.submission import Submission


@runtime_checkable
class SerialQueueInterface(Protocol):
    """Protocol defining the serial queue interface."""

    def enqueue(self, *args: Any) -> "asyncio.Future[Any]":
        """Queue a task, optionally preceded by an item, and return its result future."""
        ...

    def capture(self, *args: Any) -> Submission:
        """Validate the arguments and snapshot the item."""
        ...

    def admit(self, submission: Submission) -> "asyncio.Future[Any]":
        """Link a captured submission onto the chain."""
        ...

    async def join(self) -> None:
        """Wait until every admitted submission has settled."""
        ...

    @property
    def pending(self) -> int:
        """Number of admitted submissions that have not settled yet."""
        ...
