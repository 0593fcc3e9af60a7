"""
Retry logic with a fixed delay.

Handles transient failures by waiting the same delay before every retry.
"""

import time
from typing import Callable, TypeVar, Optional
import logging

from ..exceptions import KlokError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RetryStrategy:
    """
    Fixed-delay retry strategy.

    Features:
    - Constant delay between attempts
    - Configurable retry conditions
    - Injectable sleep for tests
    """

    def __init__(
        self,
        max_retries: int = 3,
        delay: float = 1.0,
        retry_on: tuple[type[BaseException], ...] = (Exception,),
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize retry strategy.

        Args:
            max_retries: Maximum retry attempts
            delay: Seconds to wait before each retry
            retry_on: Exception types that trigger a retry
            sleep: Blocking sleep function
        """
        self.max_retries = max_retries
        self.delay = max(0, delay)
        self.retry_on = retry_on
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        """Total calls made before giving up."""
        return self.max_retries + 1

    def _should_retry(self, exception: Exception, attempt: int) -> bool:
        """Determine if exception should trigger retry."""
        if attempt >= self.max_retries:
            return False

        return isinstance(exception, self.retry_on)

    def execute(self, func: Callable[..., T], *args, **kwargs) -> T:
        """
        Execute function with retry logic.

        Args:
            func: Function to execute
            *args: Positional arguments
            **kwargs: Keyword arguments

        Returns:
            Function result

        Raises:
            Last exception if all retries exhausted
        """
        last_exception: Optional[Exception] = None
        name = getattr(func, "__name__", repr(func))

        for attempt in range(self.max_attempts):
            try:
                return func(*args, **kwargs)

            except Exception as e:
                last_exception = e

                if not self._should_retry(e, attempt):
                    logger.debug(
                        f"Not retrying {name} after attempt {attempt + 1}: "
                        f"{type(e).__name__}"
                    )
                    raise

                logger.warning(
                    f"Retry {attempt + 1}/{self.max_retries} for {name} "
                    f"after {type(e).__name__}: {e}. "
                    f"Waiting {self.delay:.2f}s"
                )

                self._sleep(self.delay)

        if last_exception:
            raise last_exception

        raise KlokError("Retry logic error")
