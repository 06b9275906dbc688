"""Chat notifications sent by reports.

Reports announce new rows (e.g. a new registration) through a Notifier. A
config row with a webhook gets a Google Chat notifier; rows without one get a
notifier that does nothing.
"""

from abc import ABC, abstractmethod

import logging

import requests

from .gsheet.config import RateLimitConfig
from .gsheet.ratelimit import RateLimiter
from .shared.consts import (
    WEBHOOK_MAX_DELAY,
    WEBHOOK_NUM_ATTEMPTS,
    WEBHOOK_STARTING_DELAY,
    WEBHOOK_TIMEOUT,
)

logger = logging.getLogger(__name__)


class Notifier(ABC):
    @abstractmethod
    def send_message(self, message: str) -> None: ...


class GoogleChatNotifier(Notifier):
    """Posts text messages to a Google Chat incoming webhook.

    Failed posts are retried with a full-jitter backoff capped at
    ``WEBHOOK_MAX_DELAY`` seconds; the last error is re-raised.
    """

    def __init__(
        self,
        url: str,
        session: requests.Session | None = None,
        rate_limiter: RateLimiter | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.url = url
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)
        self.rate_limiter = rate_limiter or RateLimiter(
            RateLimitConfig(
                requests_per_minute=None,
                num_attempts=WEBHOOK_NUM_ATTEMPTS,
                starting_delay=WEBHOOK_STARTING_DELAY,
                max_delay=WEBHOOK_MAX_DELAY,
            ),
            logger=self.logger,
            target="Google Chat",
        )

    def _post(self, message: str) -> None:
        res = self.session.post(
            self.url,
            json={"text": message},
            headers={"Content-Type": "application/json; charset=UTF-8"},
            timeout=WEBHOOK_TIMEOUT,
        )
        try:
            res.raise_for_status()

        except requests.HTTPError:
            self.logger.error(res.text)
            raise

    def send_message(self, message: str) -> None:
        self.logger.debug(f"Sending message to Google Chat: {message}")
        self.rate_limiter.call(self._post, message)


class NopNotifier(Notifier):
    def send_message(self, message: str) -> None:
        pass


def notifier_for(webhook: str | None) -> Notifier:
    """Return a Google Chat notifier for ``webhook``, or a no-op one if unset."""
    if webhook is None or not str(webhook).strip():
        return NopNotifier()
    return GoogleChatNotifier(str(webhook).strip())
