"""
Serial task queue: runs task functions one at a time, in the order they were enqueued.
"""

from serial_task_queue.core import enqueue_task, shutdown, submit_task
from serial_task_queue.domain.submission import ServiceInvocation
from serial_task_queue.exceptions import (
    InvalidInvocationError,
    QueueNotRunningError,
    SerialQueueError,
    SerializationError,
)
from serial_task_queue.infrastructure import Dispatcher, JsonItemCodec, SerialQueue, Worker

__all__ = [
    "SerialQueue",
    "ServiceInvocation",
    "JsonItemCodec",
    "Worker",
    "Dispatcher",
    "enqueue_task",
    "submit_task",
    "shutdown",
    "SerialQueueError",
    "InvalidInvocationError",
    "SerializationError",
    "QueueNotRunningError",
]
