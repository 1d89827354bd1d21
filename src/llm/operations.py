"""
Long-running operation polling
Submit-then-wait helper for provider jobs that return a handle instead of a result.
"""
import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar

from loguru import logger

from flows.errors import OperationFailedError, OperationTimeoutError

Op = TypeVar("Op")


def operation_error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or error)
    return str(getattr(error, "message", None) or error)


def is_settled(operation: Any) -> bool:
    return bool(getattr(operation, "done", False)) or bool(getattr(operation, "error", None))


async def wait_for_operation(
    operation: Op,
    refresh: Callable[[Op], Awaitable[Op]],
    *,
    interval: float = 5.0,
    timeout: Optional[float] = None,
    max_polls: Optional[int] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    label: str = "operation",
) -> Op:
    """
    Poll an operation until it reports completion or an error.

    Args:
        operation: Handle returned by the submit call
        refresh: Coroutine returning the latest state of the handle
        interval: Seconds between status checks
        timeout: Upper bound on cumulative wait in seconds (None = unbounded)
        max_polls: Upper bound on status checks (None = unbounded)
        sleep: Awaitable sleep, injectable for tests
        label: Name used in log lines and errors

    Returns:
        The settled operation, with done set and no error

    Raises:
        OperationFailedError: The operation settled with an error
        OperationTimeoutError: One of the bounds was reached first
    """
    polls = 0
    waited = 0.0
    while not is_settled(operation):
        if max_polls is not None and polls >= max_polls:
            raise OperationTimeoutError(f"{label} did not finish after {polls} status checks")
        if timeout is not None and waited + interval > timeout:
            raise OperationTimeoutError(f"{label} did not finish within {timeout:g} seconds")
        await sleep(interval)
        waited += interval
        operation = await refresh(operation)
        polls += 1
        logger.debug(f"Polled {label} ({polls}): done={getattr(operation, 'done', None)}")

    error = getattr(operation, "error", None)
    if error:
        raise OperationFailedError(f"{label} failed: {operation_error_message(error)}")
    return operation
