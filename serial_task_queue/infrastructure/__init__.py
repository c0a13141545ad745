from serial_task_queue.infrastructure.codec import JsonItemCodec
from serial_task_queue.infrastructure.dispatcher import Dispatcher
from serial_task_queue.infrastructure.event_loop import EventLoop
from serial_task_queue.infrastructure.serial_queue import SerialQueue
from serial_task_queue.infrastructure.worker import Worker

__all__ = ["JsonItemCodec", "Dispatcher", "EventLoop", "SerialQueue", "Worker"]
