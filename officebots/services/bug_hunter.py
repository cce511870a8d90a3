from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime
from typing import Any

from ..models.config_models import InfoLink
from ..models.messages import GroupUpdate, OutboundMessage, PostMessageResult
from ..models.roster import Assignment
from .dates import is_workday
from .slack import MessagingError

"""Daily administration of the designated bug hunter.

A bug hunter is the engineer on first responder duty for the team (bug
reports, support inquiries). Administration means:
- notifying the team channel of today's bug hunter and the rotation ahead
  (workdays only)
- making today's bug hunter the only member of a Slack user group

The message bodies are built by pure functions; BugHunter only dispatches
them through an injected messenger (SlackClient or a test double).
"""

__all__ = [
    "build_status_message",
    "build_rotation_message",
    "build_info_message",
    "build_group_update",
    "plan_notifications",
    "BugHunter",
]

logger = logging.getLogger(__name__)


def build_status_message(assignment: Assignment) -> str:
    return f"Today's bug hunter is <@{assignment.current_assignee}>"


def build_rotation_message(assignment: Assignment, board_url: str) -> str:
    text = "The bug hunter rotation continues as follows:\n\n"
    for name in assignment.upcoming:
        text += f"• `@{name}`\n"
    text += f"Check out the <{board_url}|Bug Hunters> slide for more info."
    return text


def build_info_message(links: Sequence[InfoLink] = (), reminder: str | None = None) -> str | None:
    """Optional third message: reference links and a reminder.

    Returns None when there is nothing to say.
    """
    lines = [f"• <{link.url}|{link.title}>" for link in links]
    if reminder:
        if lines:
            lines.append("")
        lines.append(reminder)
    if not lines:
        return None
    return "\n".join(lines)


def build_group_update(assignment: Assignment, group_id: str) -> GroupUpdate:
    """Group membership becomes exactly today's bug hunter."""
    return GroupUpdate(user_group=group_id, users=(assignment.current_assignee,))


def plan_notifications(
    assignment: Assignment,
    reference: date | datetime,
    channel: str,
    board_url: str,
    info_text: str | None = None,
) -> list[OutboundMessage]:
    """Messages to post for ``reference``: none on weekends.

    On workdays: the status message, then the rotation message threaded
    under it, then ``info_text`` (also threaded) when given.
    """
    if not is_workday(reference):
        return []
    messages = [
        OutboundMessage(channel=channel, text=build_status_message(assignment)),
        OutboundMessage(
            channel=channel,
            text=build_rotation_message(assignment, board_url),
            threaded=True,
        ),
    ]
    if info_text:
        messages.append(OutboundMessage(channel=channel, text=info_text, threaded=True))
    return messages


class BugHunter:
    """Notify and assign today's bug hunter.

    ``messenger`` needs ``post_message(channel, text, thread_ts=None)``
    returning a PostMessageResult and ``update_user_group(GroupUpdate)``.
    """

    def __init__(
        self,
        messenger: Any,
        assignment: Assignment,
        board_url: str,
        today: date | datetime | None = None,
        info_text: str | None = None,
    ) -> None:
        self.messenger = messenger
        self.assignment = assignment
        self.board_url = board_url
        self.today = today or date.today()
        self.info_text = info_text

    def notify(self, channel: str) -> list[PostMessageResult]:
        """Post today's status; replies are threaded under the first post.

        Raises:
            MessagingError: a post failed. If it was the first one, no reply
                is attempted.
        """
        planned = plan_notifications(
            self.assignment, self.today, channel, self.board_url, self.info_text
        )
        if not planned:
            logger.info("Don't bother anybody, it's the weekend...")
            return []

        first, replies = planned[0], planned[1:]
        head = self.messenger.post_message(first.channel, first.text)
        if not head.ok or not head.ts:
            raise MessagingError("chat.postMessage", "no thread handle in response")
        logger.info(f"posted bug hunter status to {channel} (ts={head.ts})")

        results = [head]
        for message in replies:
            results.append(
                self.messenger.post_message(message.channel, message.text, thread_ts=head.ts)
            )
        logger.info(f"posted {len(replies)} threaded repl{'y' if len(replies) == 1 else 'ies'}")
        return results

    def assign(self, user_group: str) -> dict[str, Any]:
        """Make today's bug hunter the only member of ``user_group``."""
        update = build_group_update(self.assignment, user_group)
        response = self.messenger.update_user_group(update)
        logger.info(f"assigned {self.assignment.current_assignee} to user group {user_group}")
        return response
