"""Best-effort task dispatch from async request handlers.

Publishing to the broker is blocking I/O, so ``.delay`` runs on the loop's
default executor and the caller returns immediately. Failures are logged,
never raised.
"""

import asyncio
import logging

logger = logging.getLogger(__name__)


def send_task(task, args: tuple, description: str) -> None:
    """Blocking ``task.delay(*args)`` that logs instead of raising."""
    try:
        task.delay(*args)
    except Exception as e:
        logger.warning("Could not queue %s: %s", description, e)


def dispatch(task, *args, description: str | None = None) -> asyncio.Future:
    """Queue ``task.delay(*args)`` off the event loop without waiting for it."""
    loop = asyncio.get_running_loop()
    return loop.run_in_executor(None, send_task, task, args, description or task.name)
