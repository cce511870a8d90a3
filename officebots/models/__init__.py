"""Domain models for the office automation jobs.

Configuration, roster and Slack request/response records shared by the
services and the CLI.
"""

from .config_models import AppConfig, InfoLink, InvoiceConfig, MailConfig, RosterConfig, SlackConfig
from .error_record import ErrorRecord
from .messages import GroupUpdate, OutboundMessage, PostMessageResult
from .roster import Assignment, RosterEntry
from .run_result import RunResult

__all__ = [
    # Configuration models
    "AppConfig",
    "InfoLink",
    "InvoiceConfig",
    "MailConfig",
    "RosterConfig",
    "SlackConfig",
    # Roster models
    "Assignment",
    "RosterEntry",
    # Slack models
    "GroupUpdate",
    "OutboundMessage",
    "PostMessageResult",
    # Run bookkeeping
    "ErrorRecord",
    "RunResult",
]
