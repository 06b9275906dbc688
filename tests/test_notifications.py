"""Tests for chat notifications."""

from unittest.mock import MagicMock

import pytest
import requests

from clubsheets.gsheet import RateLimitConfig, RateLimiter
from clubsheets.notifications import GoogleChatNotifier, NopNotifier, notifier_for

WEBHOOK_URL = "https://chat.googleapis.com/v1/spaces/AAA/messages?key=k&token=t"


def _response(status_code: int = 200, text: str = "") -> MagicMock:
    response = MagicMock(status_code=status_code, text=text)
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return response


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


class TestGoogleChatNotifier:
    def test_posts_text_message(self, session: MagicMock) -> None:
        session.post.return_value = _response()

        GoogleChatNotifier(WEBHOOK_URL, session=session).send_message("New registration")

        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args == (WEBHOOK_URL,)
        assert kwargs["json"] == {"text": "New registration"}
        assert kwargs["headers"]["Content-Type"].startswith("application/json")

    def test_retries_failed_post(self, session: MagicMock) -> None:
        session.post.side_effect = [_response(503, "unavailable"), _response()]
        sleep = MagicMock()
        notifier = GoogleChatNotifier(
            WEBHOOK_URL,
            session=session,
            rate_limiter=RateLimiter(
                RateLimitConfig(requests_per_minute=None, num_attempts=3), sleep=sleep
            ),
        )

        notifier.send_message("hello")

        assert session.post.call_count == 2
        sleep.assert_called_once()

    def test_gives_up_after_all_attempts(
        self, session: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        session.post.return_value = _response(400, "bad payload")
        notifier = GoogleChatNotifier(WEBHOOK_URL, session=session)

        with pytest.raises(requests.HTTPError):
            notifier.send_message("hello")

        assert session.post.call_count == 10
        assert "bad payload" in caplog.text

    def test_default_retry_policy(self) -> None:
        config = GoogleChatNotifier(WEBHOOK_URL, session=MagicMock()).rate_limiter.config

        assert config.requests_per_minute is None
        assert config.num_attempts == 10
        assert config.starting_delay == 0.1
        assert config.max_delay == 10.0


class TestNotifierFor:
    @pytest.mark.parametrize("webhook", [None, "", "   "])
    def test_no_webhook(self, webhook) -> None:
        assert isinstance(notifier_for(webhook), NopNotifier)

    def test_webhook(self) -> None:
        notifier = notifier_for(f" {WEBHOOK_URL} ")

        assert isinstance(notifier, GoogleChatNotifier)
        assert notifier.url == WEBHOOK_URL

    def test_nop_notifier_sends_nothing(self) -> None:
        NopNotifier().send_message("ignored")
