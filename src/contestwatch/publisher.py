"""Report publishers — create or update one message per report."""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from typing import Any

import certifi
import requests

from contestwatch.errors import WatcherError, WatcherErrorCode


class BasePublisher(ABC):
    """Abstract publishing channel.

    ``publish`` updates the message *message_id* in place when given,
    otherwise creates a new message. It returns the id to pass on the
    next call for the same report.
    """

    @abstractmethod
    def publish(self, text: str, message_id: str | None = None) -> str:
        ...


class DiscordWebhookPublisher(BasePublisher):
    """Publish reports as Discord webhook messages.

    Args:
        webhook_url: Full webhook URL (``https://discord.com/api/webhooks/...``).
        timeout:     HTTP request timeout in seconds.
    """

    def __init__(self, webhook_url: str | None, timeout: float = 30.0) -> None:
        if not webhook_url:
            raise WatcherError(
                "Discord webhook URL required. Set DISCORD_WEBHOOK env var.",
                code=WatcherErrorCode.CONFIG_INVALID,
            )
        self.webhook_url = webhook_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.verify = certifi.where()

    def publish(self, text: str, message_id: str | None = None) -> str:
        payload = {"content": text}
        if message_id is not None:
            self._send("PATCH", f"{self.webhook_url}/messages/{message_id}", payload)
            return message_id

        data = self._send("POST", self.webhook_url, payload, params={"wait": "true"})
        created = data.get("id") if isinstance(data, dict) else None
        if created is None:
            raise WatcherError(
                "Discord did not return a message id",
                code=WatcherErrorCode.PUBLISH_FAILED,
                retryable=True,
            )
        return str(created)

    def _send(
        self,
        method: str,
        url: str,
        payload: dict[str, Any],
        params: dict[str, str] | None = None,
    ) -> Any:
        try:
            resp = self.session.request(
                method, url, json=payload, params=params, timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise WatcherError(
                f"Discord {method} failed: {exc}",
                code=WatcherErrorCode.PUBLISH_FAILED,
                retryable=True,
            ) from exc

        if resp.status_code == 429:
            raise WatcherError(
                "Discord rate limited",
                code=WatcherErrorCode.RATE_LIMITED,
                retryable=True,
            )
        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            raise WatcherError(
                f"Discord {method} failed: {exc}",
                code=WatcherErrorCode.PUBLISH_FAILED,
                retryable=True,
            ) from exc

        if method != "POST":
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise WatcherError(
                f"Discord returned invalid JSON: {exc}",
                code=WatcherErrorCode.PUBLISH_FAILED,
                retryable=True,
            ) from exc


class MemoryPublisher(BasePublisher):
    """In-memory publisher for testing and dry runs.

    ``messages`` maps id to the latest text; ``calls`` records every
    ``(text, message_id)`` passed to ``publish``.
    """

    def __init__(self) -> None:
        self.messages: dict[str, str] = {}
        self.calls: list[tuple[str, str | None]] = []
        self._ids = itertools.count(1)
        self._error: WatcherError | None = None

    def fail_with(self, error: WatcherError | None) -> None:
        """Raise *error* from every publish until reset with None."""
        self._error = error

    def publish(self, text: str, message_id: str | None = None) -> str:
        self.calls.append((text, message_id))
        if self._error is not None:
            raise self._error
        if message_id is None:
            message_id = str(next(self._ids))
        self.messages[message_id] = text
        return message_id
