"""Rate-limited wrapper for Google Sheets API calls.

Every remote call made by the gsheet layer goes through ``safe_call``. It
sleeps a fixed interval before the call so that the process stays below the
API quota, then runs the call with a retry policy: on failure it waits a
full-jitter exponential backoff and tries again, logging a warning each time.
The last error is re-raised once every attempt has failed.

The throttle is a plain fixed delay, not a token bucket: the delay is paid on
every call, reads included, so callers should batch their writes (see
``Table.save``).

Example:
    >>> from clubsheets.gsheet import safe_call
    >>> values = safe_call(worksheet.get_all_values)
"""

from typing import Any, Callable, TypeVar

import logging
import random
import time

from gspread.exceptions import APIError

from .config import RateLimitConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_rate_limit_error(error: BaseException) -> bool:
    """Check if an error is due to Google API rate limiting.

    Args:
        error: The exception raised by a remote call.

    Returns:
        True if the error is rate limit related, False otherwise.
    """
    if not isinstance(error, APIError):
        return False

    response = getattr(error, "response", None)
    if response is not None and response.status_code in (429, 403):
        return True

    error_message = str(error).lower()
    rate_limit_keywords = [
        "rate limit",
        "quota",
        "too many requests",
        "user rate limit",
    ]
    return any(keyword in error_message for keyword in rate_limit_keywords)


class RateLimiter:
    """Throttles and retries calls to a remote API.

    Attributes:
        config: Throttle and retry settings.
        logger: Logger receiving retry warnings.
        target: Name of the remote service, used in log messages.
    """

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        logger: logging.Logger | None = None,
        sleep: Callable[[float], None] | None = None,
        target: str = "Google API",
    ) -> None:
        self.config = config or RateLimitConfig()
        self.logger = logger or logging.getLogger(__name__)
        self._sleep_func = sleep
        self.target = target

    def _sleep(self, seconds: float) -> None:
        if self._sleep_func is not None:
            self._sleep_func(seconds)
        else:
            time.sleep(seconds)

    def _backoff(self, retry: int) -> float:
        delay = self.config.backoff_for(retry)
        if self.config.jitter == "full":
            delay = random.uniform(0, delay)
        return delay

    def call(self, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Execute an operation after the throttle delay, retrying on failure.

        Args:
            operation: The function to execute.
            *args: Positional arguments for the operation.
            **kwargs: Keyword arguments for the operation.

        Returns:
            The result of the operation.

        Raises:
            Exception: Whatever the operation raised on its last attempt.
        """
        if self.config.min_interval > 0:
            self._sleep(self.config.min_interval)

        attempts = self.config.num_attempts
        for attempt in range(attempts):
            try:
                return operation(*args, **kwargs)
            except Exception as e:
                if attempt >= attempts - 1:
                    self.logger.error(
                        f"Request to {self.target} failed after {attempts} attempt(s): {e}"
                    )
                    raise

                wait_time = self._backoff(attempt)
                reason = "Rate limit error" if is_rate_limit_error(e) else "Error"
                self.logger.warning(
                    f"{reason} on attempt {attempt + 1}/{attempts}: {e}. "
                    f"Request to {self.target} failed. Retrying in {wait_time:.1f}s"
                )
                self._sleep(wait_time)

        # num_attempts >= 1, so the loop always returns or raises
        raise AssertionError("unreachable")


default_rate_limiter = RateLimiter()


def safe_call(operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run ``operation`` through the process-wide rate limiter."""
    return default_rate_limiter.call(operation, *args, **kwargs)
