import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Awaitable
from typing import Callable
from typing import Generic
from typing import Iterable
from typing import Optional
from typing import TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class TaskOutcome(Generic[T, R]):
    item: T
    result: Optional[R] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def bounded_map(
    func: Callable[[T], Awaitable[R]],
    items: Iterable[T],
    pool_size: int = 2,
    on_complete: Optional[Callable[[TaskOutcome[T, R]], None]] = None,
) -> list[TaskOutcome[T, R]]:
    """Run func over items with at most pool_size calls in flight.

    Each worker pulls the next unprocessed item until the queue is empty.
    A failing item is recorded in its outcome and never cancels siblings.
    Outcomes are returned in input order.
    """
    if pool_size < 1:
        raise ValueError("pool_size must be at least 1")

    pending = deque(enumerate(items))
    outcomes: list[Optional[TaskOutcome[T, R]]] = [None] * len(pending)

    async def worker() -> None:
        while pending:
            index, item = pending.popleft()
            try:
                outcome = TaskOutcome(item=item, result=await func(item))
            except Exception as e:
                outcome = TaskOutcome(item=item, error=e)
            outcomes[index] = outcome
            if on_complete is not None:
                on_complete(outcome)

    await asyncio.gather(*(worker() for _ in range(min(pool_size, len(pending)))))

    return [outcome for outcome in outcomes if outcome is not None]
