import asyncio
import logging
import random
from typing import Awaitable
from typing import Callable
from typing import TypeVar

from botocore.exceptions import ClientError
from botocore.exceptions import ConnectionClosedError
from botocore.exceptions import ConnectTimeoutError
from botocore.exceptions import EndpointConnectionError
from botocore.exceptions import ReadTimeoutError


logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERROR_CODES = {
    "InternalError",
    "RequestTimeout",
    "ServiceUnavailable",
    "SlowDown",
    "Throttling",
    "ThrottlingException",
}


def compute_backoff_ms(attempt: int, base_ms: int = 200, max_ms: int = 2000) -> float:
    """Compute exponential backoff with jitter."""
    exp_backoff = base_ms * (2 ** (attempt - 1))
    jitter = random.uniform(0, exp_backoff * 0.1)
    return float(min(exp_backoff + jitter, max_ms))


def is_transient_store_error(error: Exception) -> bool:
    if isinstance(error, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError, ConnectionClosedError)):
        return True
    if isinstance(error, ClientError):
        code = str(error.response.get("Error", {}).get("Code", ""))
        status = int(error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0) or 0)
        return code in TRANSIENT_ERROR_CODES or status >= 500
    return False


async def with_store_retry(
    func: Callable[[], Awaitable[T]],
    operation_name: str = "store operation",
    max_retries: int = 3,
    base_ms: int = 200,
    max_ms: int = 2000,
) -> T:
    """
    Execute an idempotent object store call, retrying transient failures.

    Only use for reads that can be repeated safely (listing). Permanent
    errors are raised on the first attempt.

    Raises:
        Last exception after max_retries exhausted
    """
    attempts = max(1, max_retries)
    last_error: Exception | None = None

    for attempt in range(1, attempts + 1):
        try:
            return await func()
        except Exception as e:
            if not is_transient_store_error(e):
                raise
            last_error = e
            if attempt < attempts:
                delay_ms = compute_backoff_ms(attempt, base_ms, max_ms)
                logger.warning(
                    f"Transient store error during {operation_name} (attempt {attempt}/{attempts}): {e}. "
                    f"Retrying in {delay_ms:.0f}ms"
                )
                await asyncio.sleep(delay_ms / 1000)
            else:
                logger.error(f"Store error during {operation_name} after {attempts} attempts: {e}")

    if last_error is None:
        raise RuntimeError(f"Store operation {operation_name} failed with no exception recorded")
    raise last_error
