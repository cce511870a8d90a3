from __future__ import annotations

import logging
from typing import Any

import requests

from ..models.messages import GroupUpdate, PostMessageResult

"""Minimal Slack Web API client.

Only the two methods the bug hunter job needs:
- chat.postMessage (status message and threaded replies)
- usergroups.users.update (make today's bug hunter the only group member)

Requests are form encoded with a bearer token. Nothing is retried; any
failure is raised as MessagingError and ends the current run.
"""

__all__ = [
    "MessagingError",
    "SlackClient",
]

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://slack.com/api"


class MessagingError(Exception):
    """Slack returned a non-success result or the request failed."""

    def __init__(self, method: str, error: str) -> None:
        super().__init__(f"{method} failed: {error}")
        self.method = method
        self.error = error


class SlackClient:
    """A client for interacting with the Slack Web API."""

    def __init__(
        self,
        token: str,
        *,
        session: requests.Session | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {token}"})

    def _call(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/{method}"
        try:
            response = self.session.post(url, data=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise MessagingError(method, str(e)) from e

        logger.debug(f"Web API ({method}) response: {response.text}")

        try:
            body = response.json()
        except ValueError as e:
            raise MessagingError(method, f"invalid JSON response: {e}") from e

        if not isinstance(body, dict) or not body.get("ok"):
            error = body.get("error", "unknown_error") if isinstance(body, dict) else "unknown_error"
            raise MessagingError(method, error)
        return body

    def post_message(self, channel: str, text: str, thread_ts: str | None = None) -> PostMessageResult:
        """Post a message to a channel, optionally as a reply in a thread.

        Args:
            channel: channel ID or name
            text: mrkdwn text
            thread_ts: ``ts`` of the parent message to reply to

        Returns:
            PostMessageResult whose ``ts`` can be used as a thread handle.
        """
        payload: dict[str, Any] = {"type": "mrkdwn", "channel": channel, "text": text}
        if thread_ts is not None:
            payload["thread_ts"] = thread_ts
        return PostMessageResult.from_payload(self._call("chat.postMessage", payload))

    def update_user_group(self, update: GroupUpdate) -> dict[str, Any]:
        """Replace the members of a user group."""
        return self._call(
            "usergroups.users.update",
            {"usergroup": update.user_group, "users": ",".join(update.users)},
        )
