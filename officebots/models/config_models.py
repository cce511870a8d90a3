from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the office automation jobs.

These are produced by officebots.config.loader after schema validation and
environment overrides have been applied.
"""

DEFAULT_SLACK_API = "https://slack.com/api"
DEFAULT_TEMPLATE_SHEET = "YYYY-NNN"
DEFAULT_DATE_CELL = "F12"
DEFAULT_TAB_COLOR = "6AA84F"


@dataclass(frozen=True)
class SlackConfig:
    """Slack Web API settings.

    The token, channel and user group usually come from the environment
    (SLACK_OAUTH_TOKEN / SLACK_CHANNEL / SLACK_USER_GROUP).
    """
    token: str | None
    channel: str | None
    user_group: str | None
    api_base_url: str = DEFAULT_SLACK_API
    timeout: float = 30


@dataclass(frozen=True)
class InfoLink:
    title: str
    url: str


@dataclass(frozen=True)
class RosterConfig:
    """Where the bug hunter roster lives and which columns matter.

    Columns are spreadsheet letters ("O") or zero-based indices (14).
    """
    path: str
    board_url: str
    sheet: str | None = None
    identifier_column: str | int = "O"  # Assignee Slack member ID
    next_assignee_column: str | int = "R"  # Next assignee name
    info_links: tuple[InfoLink, ...] = ()
    info_reminder: str | None = None


@dataclass(frozen=True)
class MailConfig:
    host: str
    sender: str
    recipient: str
    port: int = 587
    username: str | None = None
    password: str | None = None
    signature: str = ""


@dataclass(frozen=True)
class InvoiceConfig:
    """Invoice workbook layout and delivery settings."""
    workbook: str
    template_sheet: str = DEFAULT_TEMPLATE_SHEET
    date_cell: str = DEFAULT_DATE_CELL
    tab_color: str = DEFAULT_TAB_COLOR
    output_dir: str = "./invoices"
    file_prefix: str = "invoice"
    mail: MailConfig | None = None


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    slack: SlackConfig
    roster: RosterConfig
    invoice: InvoiceConfig | None = None
    timezone: str = "UTC"
