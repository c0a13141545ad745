"""
Example sharing a single device between callers through a serial queue.
"""

import asyncio
import logging

from serial_task_queue import SerialQueue, ServiceInvocation, enqueue_task, shutdown

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def write_to_device(invocation: ServiceInvocation) -> str:
    """
    Example task that simulates a slow write to a device.

    Args:
        invocation: Carries the command to send as its item.

    Returns:
        str: A message indicating the write completed.
    """
    command = invocation.item
    logger.info(f"Writing {command['name']} ({command['duration']}s)")
    await asyncio.sleep(command["duration"])
    return f"{command['name']} done"


async def from_async_code() -> None:
    queue = SerialQueue()
    commands = [{"name": f"cmd-{i}", "duration": 0.3 - i * 0.1} for i in range(3)]

    # Started together, written one at a time in this order
    results = await asyncio.gather(*(queue.enqueue(c, write_to_device) for c in commands))
    logger.info(f"Got results: {results}")

    async with queue.turn({"name": "maintenance"}) as invocation:
        logger.info(f"Holding the device for {invocation.item['name']}")
        await asyncio.sleep(0.1)


def main():
    asyncio.run(from_async_code())

    try:
        # Blocking callers share a process-wide queue
        result = enqueue_task({"name": "sync-cmd", "duration": 0.2}, write_to_device)
        logger.info(f"Got result: {result}")

        try:
            enqueue_task({"name": "slow-cmd", "duration": 2.0}, write_to_device, timeout=0.5)
        except TimeoutError:
            logger.warning("Task timed out as expected")
    finally:
        # Clean shutdown
        shutdown()


if __name__ == "__main__":
    main()
