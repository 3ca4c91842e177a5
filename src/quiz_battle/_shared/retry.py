# Area: Shared
"""Bounded retry with exponential backoff for store calls."""

import logging
import time
from typing import Callable, Optional, Tuple, Type, TypeVar

logger = logging.getLogger("quiz_battle.retry")

T = TypeVar("T")


class RetryExhausted(Exception):
    """All attempts failed. ``last_error`` holds the final exception."""

    def __init__(self, attempts: int, last_error: Optional[BaseException]):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Gave up after {attempts} attempts: {last_error!r}")


def retry_call(
    fn: Callable[[], T],
    attempts: int = 3,
    base_delay: float = 0.25,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
    label: str = "call",
) -> T:
    """
    Call ``fn`` until it succeeds or ``attempts`` are used up.

    Waits ``base_delay * 2**n`` between attempts n=0,1,...

    Raises:
        RetryExhausted: If every attempt raised one of ``retry_on``
    """
    last_error: Optional[BaseException] = None
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except retry_on as e:
            last_error = e
            logger.warning(
                "%s failed (attempt %d/%d): %s", label, attempt, attempts, e
            )
            if attempt < attempts:
                sleep(base_delay * (2 ** (attempt - 1)))
    raise RetryExhausted(attempts, last_error)
