"""
SerialQueue component that runs task functions one at a time, in order.
"""

import asyncio
import contextlib
import functools
import inspect
import logging
from typing import Any, AsyncIterator, Optional

from serial_task_queue.domain.codec import ItemCodec
from serial_task_queue.domain.queue import SerialQueueInterface
from serial_task_queue.domain.submission import ServiceInvocation, Submission
from serial_task_queue.exceptions import (
    InvalidInvocationError,
    QueueNotRunningError,
    SerialQueueError,
    SerializationError,
)
from serial_task_queue.infrastructure.codec import JsonItemCodec

logger = logging.getLogger(__name__)


def _task_name(task: Any) -> str:
    return getattr(task, "__qualname__", None) or repr(task)


def _settle(future: asyncio.Future, value: Any = None, error: Optional[BaseException] = None) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(value)


def _forward_failure(admission: asyncio.Future, target: asyncio.Future) -> None:
    if admission.cancelled():
        if not target.done():
            target.cancel()
        return
    error = admission.exception()
    if error is not None and not target.done():
        target.set_exception(error)


class SerialQueue(SerialQueueInterface):
    """
    Runs task functions strictly one after another, in the order they were
    enqueued, whether they return plainly or return an awaitable.

    The queue keeps a single internal chain: each admitted submission is an
    asyncio task that first waits for the previous link to settle, then runs
    its task function. A link counts as settled once its task is done and
    every link before it has settled, even when the link itself was
    cancelled. The caller gets a separate result future, so a failing task
    or slow follow-up work on the result never holds up the chain.

    All methods must be called from the event loop the queue is bound to;
    the queue binds to the running loop on first use.
    """

    def __init__(self, codec: Optional[ItemCodec] = None) -> None:
        """Initialize an empty queue whose chain is ready to admit."""
        self._codec = codec or JsonItemCodec()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._tail: Optional[asyncio.Future] = None
        self._admitted = 0
        self._pending = 0
        logger.debug("SerialQueue initialized")

    @property
    def pending(self) -> int:
        """Number of admitted submissions that have not settled yet."""
        return self._pending

    def enqueue(self, *args: Any) -> "asyncio.Future[Any]":
        """
        Queue a task function, optionally preceded by an item.

        ``enqueue(task)`` runs ``task`` with no item, ``enqueue(item, task)``
        hands it a copy of ``item``. The task is called with a
        ServiceInvocation once every previously enqueued task has settled.

        Args:
            *args: Either ``(task,)`` or ``(item, task)``

        Returns:
            A future that settles with the task's return value (awaited if it
            is awaitable) or with the exception the task raised. Invalid
            arguments or an item that cannot be encoded give a future that is
            already failed; nothing is queued in that case.

        Raises:
            QueueNotRunningError: If called outside the queue's event loop
        """
        loop = self._get_loop()
        try:
            submission = self.capture(*args)
        except SerialQueueError as e:
            logger.debug(f"Rejected submission: {e}")
            future = loop.create_future()
            future.set_exception(e)
            return future
        return self.admit(submission)

    def capture(self, *args: Any) -> Submission:
        """
        Validate enqueue arguments and snapshot the item.

        Safe to call from any thread; it does not touch the chain.

        Raises:
            InvalidInvocationError: On a wrong argument count or non-callable task
            SerializationError: If the item cannot be encoded
        """
        if len(args) == 1:
            task = args[0]
        elif len(args) == 2:
            item, task = args
        else:
            raise InvalidInvocationError(
                f"enqueue expects (task) or (item, task), got {len(args)} arguments"
            )

        if not callable(task):
            raise InvalidInvocationError(f"Task must be callable, got {type(task).__name__}")

        if len(args) == 1:
            return Submission(task=task)

        try:
            encoded = self._codec.encode(item)
        except Exception as e:
            raise SerializationError(f"Item is not serializable: {e}") from e
        return Submission(task=task, encoded_item=encoded)

    def admit(self, submission: Submission) -> "asyncio.Future[Any]":
        """Link a captured submission onto the chain and return its result future."""
        loop = self._get_loop()
        result = loop.create_future()
        settled = loop.create_future()

        previous = self._tail
        self._tail = settled
        self._admitted += 1
        link = loop.create_task(
            self._run_in_turn(previous, submission, result),
            name=f"serial-queue-link-{self._admitted}",
        )
        link.add_done_callback(
            functools.partial(self._on_link_done, submission, previous, settled, result)
        )
        self._pending += 1
        logger.debug(f"Admitted {_task_name(submission.task)} (pending={self._pending})")
        return result

    def _on_link_done(
        self,
        submission: Submission,
        previous: Optional[asyncio.Future],
        settled: asyncio.Future,
        result: asyncio.Future,
        link: asyncio.Task,
    ) -> None:
        """Account for a finished link and pass the turn on once its predecessor settled."""
        self._pending -= 1
        if not result.done():
            # Cancelled before or while running
            result.cancel()
        logger.debug(f"Settled {_task_name(submission.task)} (pending={self._pending})")

        # A link cancelled while waiting must still hold the chain until its
        # predecessor has settled
        if previous is None or previous.done():
            settled.set_result(None)
        else:
            previous.add_done_callback(lambda _: settled.set_result(None))

    async def join(self) -> None:
        """
        Wait until every submission admitted so far has settled.

        Awaiting this from inside a task function never returns, since the
        calling task is itself part of what is being waited for.
        """
        if self._tail is not None:
            await asyncio.wait({self._tail})

    @contextlib.asynccontextmanager
    async def turn(self, *args: Any) -> AsyncIterator[ServiceInvocation]:
        """
        Hold the queue for the duration of an ``async with`` block.

        Waits for this caller's turn, yields the ServiceInvocation and lets
        the next submission in once the block exits. Takes an optional item
        with the same encoding rules as enqueue.

            async with queue.turn({"port": 3}) as invocation:
                await device.write(invocation.item)
        """
        loop = self._get_loop()
        entered = loop.create_future()
        released = loop.create_future()

        def hold(invocation: ServiceInvocation) -> asyncio.Future:
            if not entered.done():
                entered.set_result(invocation)
            return released

        admission = self.enqueue(*args, hold)
        admission.add_done_callback(functools.partial(_forward_failure, target=entered))
        try:
            yield await entered
        finally:
            if not released.done():
                released.set_result(None)

    async def _run_in_turn(
        self,
        previous: Optional[asyncio.Future],
        submission: Submission,
        result: asyncio.Future,
    ) -> None:
        """Wait for the previous link to settle, then run the submission's task."""
        if previous is not None:
            await asyncio.wait({previous})

        if result.cancelled():
            logger.debug(f"Skipping {_task_name(submission.task)}, cancelled before its turn")
            return

        try:
            invocation = ServiceInvocation(item=self._decode(submission))
        except SerializationError as e:
            _settle(result, error=e)
            return

        try:
            outcome = submission.task(invocation)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except Exception as error:
            logger.debug(f"{_task_name(submission.task)} failed: {error!r}")
            _settle(result, error=error)
        else:
            _settle(result, value=outcome)

    def _decode(self, submission: Submission) -> Any:
        if not submission.has_item:
            return None
        try:
            return self._codec.decode(submission.encoded_item)
        except Exception as e:
            raise SerializationError(f"Item could not be deserialized: {e}") from e

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        """Return the bound loop, binding to the running one on first use."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise QueueNotRunningError("SerialQueue requires a running event loop") from e

        if self._loop is None:
            self._loop = loop
        elif self._loop is not loop:
            raise QueueNotRunningError("SerialQueue is bound to a different event loop")
        return self._loop
