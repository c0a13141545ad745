"""
Exception module for serial_task_queue.

This module defines specific exceptions that may be raised by the component.
Task failures are not wrapped: the task's own exception is delivered as-is.
"""


class SerialQueueError(Exception):
    """Base exception for errors in the SerialQueue."""


class InvalidInvocationError(SerialQueueError):
    """Raised when enqueue is called with the wrong arguments."""


class SerializationError(SerialQueueError):
    """Raised when an item cannot be encoded or decoded."""


class QueueNotRunningError(SerialQueueError):
    """Raised when trying to use a queue that has no running event loop."""
