"""Configuration module for the gsheet layer.

This module provides the configuration used by the rate-limited call wrapper
that guards every request sent to the Google Sheets API.

Classes:
    RateLimitConfig: Throttle and retry settings for Google Sheets requests.

Example:
    >>> from clubsheets.gsheet import RateLimitConfig
    >>> config = RateLimitConfig(requests_per_minute=60)
    >>> config.min_interval
    1.0
"""

from typing import Literal

from pydantic import BaseModel, Field

from ..shared.consts import (
    GOOGLE_API_NUM_ATTEMPTS,
    GOOGLE_API_REQUESTS_PER_MINUTE,
    GOOGLE_API_STARTING_DELAY,
)


class RateLimitConfig(BaseModel):
    """Throttle and retry settings for Google Sheets requests.

    The default quota on the Google Sheets API is 60 requests/minute/user, but
    reads and writes are counted separately, so the default doubles it.
    Failed requests are retried after a backoff that starts near the length
    of the per-minute quota window.

    Attributes:
        requests_per_minute: Target request rate. Every call sleeps
            ``60 / requests_per_minute`` seconds before it is sent. None
            disables the throttle.
        num_attempts: Total attempts per call, the first one included.
        starting_delay: Backoff before the first retry, in seconds.
        time_multiple: Growth factor of the backoff between retries.
        max_delay: Upper bound of a single backoff, in seconds. None means
            unbounded.
        jitter: "full" draws the actual wait uniformly from
            ``[0, backoff]``; "none" waits the full backoff.

    Example:
        >>> config = RateLimitConfig()
        >>> config.num_attempts
        2
        >>> config.backoff_for(0)
        60.0
    """

    requests_per_minute: int | None = Field(
        default=GOOGLE_API_REQUESTS_PER_MINUTE,
        gt=0,
        description="Target maximum number of requests per minute, None for no throttle",
    )
    num_attempts: int = Field(
        default=GOOGLE_API_NUM_ATTEMPTS,
        ge=1,
        description="Total number of attempts, including the first one",
    )
    starting_delay: float = Field(
        default=GOOGLE_API_STARTING_DELAY,
        ge=0,
        description="Backoff before the first retry, in seconds",
    )
    time_multiple: float = Field(
        default=2.0,
        ge=1,
        description="Exponential growth factor of the backoff",
    )
    max_delay: float | None = Field(
        default=None,
        description="Upper bound of a single backoff, in seconds",
    )
    jitter: Literal["full", "none"] = Field(
        default="full",
        description="Jitter strategy applied to the backoff",
    )

    @property
    def min_interval(self) -> float:
        """Seconds to wait before each request."""
        if self.requests_per_minute is None:
            return 0.0
        return 60.0 / self.requests_per_minute

    def backoff_for(self, retry: int) -> float:
        """Return the (un-jittered) backoff before the given 0-based retry."""
        delay = self.starting_delay * self.time_multiple**retry
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
