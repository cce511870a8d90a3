from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""Outbound Slack request and response models."""

__all__ = [
    "OutboundMessage",
    "PostMessageResult",
    "GroupUpdate",
]


@dataclass(frozen=True)
class OutboundMessage:
    """A planned chat.postMessage call.

    ``threaded`` messages are posted as replies to the first message of the
    same notification; their thread handle is only known once that message
    has been sent.
    """
    channel: str
    text: str
    threaded: bool = False


@dataclass(frozen=True)
class PostMessageResult:
    ok: bool
    channel: str | None
    ts: str | None  # thread handle for replies
    text: str | None

    @staticmethod
    def from_payload(payload: dict[str, Any]) -> PostMessageResult:
        """Build from a chat.postMessage JSON body."""
        message = payload.get("message") or {}
        return PostMessageResult(
            ok=bool(payload.get("ok")),
            channel=payload.get("channel"),
            ts=payload.get("ts"),
            text=message.get("text", payload.get("text")),
        )


@dataclass(frozen=True)
class GroupUpdate:
    """A planned usergroups.users.update call (replaces all members)."""
    user_group: str
    users: tuple[str, ...]
