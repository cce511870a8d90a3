# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pytest
from openpyxl import Workbook

from officebots.models.messages import PostMessageResult


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        # keep the developer's real .env/secrets out of the tests
        for name in ("SLACK_OAUTH_TOKEN", "SLACK_CHANNEL", "SLACK_USER_GROUP", "SMTP_PASSWORD"):
            monkeypatch.delenv(name, raising=False)
        yield p


def roster_row(identifier: str, next_assignee: str) -> list[object]:
    """A roster row shaped like the real sheet (ID in column O, name in R)."""
    row: list[object] = [0] * 18
    row[14] = identifier
    row[17] = next_assignee
    return row


@pytest.fixture()
def roster_rows() -> list[list[object]]:
    header = [f"col{i}" for i in range(18)]
    return [
        header,
        roster_row("U000000000X", "Bob"),
        roster_row("           ", "Alice"),
        roster_row("", "Charlie"),
        roster_row("", "  "),
        roster_row("", "Dave"),
    ]


@pytest.fixture()
def roster_workbook(temp_workdir: Path, roster_rows) -> Path:
    p = temp_workdir / "data" / "bug-hunters.xlsx"
    wb = Workbook()
    ws = wb.active
    ws.title = "Rotation"
    for row in roster_rows:
        ws.append(row)
    wb.save(p)
    return p


@pytest.fixture()
def invoice_workbook(temp_workdir: Path) -> Path:
    p = temp_workdir / "data" / "invoices.xlsx"
    wb = Workbook()
    current = wb.active
    current.title = "2023-002"
    current["A1"] = "Invoice"
    current["F12"] = "2023-02-28"
    template = wb.create_sheet("YYYY-NNN")
    template["A1"] = "Invoice"
    template["B20"] = "Consulting"
    wb.save(p)
    return p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """timezone: UTC
slack:
  token: xoxb-test
  channel: C000CHANNEL
  user_group: S000GROUP
roster:
  path: ./data/bug-hunters.xlsx
  sheet: Rotation
  board_url: https://docs.example.com/bug-hunters
invoice:
  workbook: ./data/invoices.xlsx
  output_dir: ./out
  file_prefix: acme
  mail:
    host: smtp.example.com
    sender: billing@example.com
    recipient: accounts@example.com
    signature: Alex
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "officebots.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


class FakeMessenger:
    """Records Slack calls; mirrors the chat.postMessage example response."""

    def __init__(self, fail_on_post: int | None = None) -> None:
        self.posts: list[dict[str, object]] = []
        self.group_updates: list[object] = []
        self.fail_on_post = fail_on_post

    def post_message(self, channel: str, text: str, thread_ts: str | None = None) -> PostMessageResult:
        from officebots.services.slack import MessagingError

        if self.fail_on_post is not None and len(self.posts) == self.fail_on_post:
            raise MessagingError("chat.postMessage", "channel_not_found")
        self.posts.append({"channel": channel, "text": text, "thread_ts": thread_ts})
        return PostMessageResult(ok=True, channel=channel, ts=f"123.45{len(self.posts)}", text=text)

    def update_user_group(self, update) -> dict[str, object]:
        self.group_updates.append(update)
        return {"ok": True}


@pytest.fixture()
def messenger() -> FakeMessenger:
    return FakeMessenger()


@pytest.fixture()
def failing_messenger() -> FakeMessenger:
    """Fails on the very first chat.postMessage call."""
    return FakeMessenger(fail_on_post=0)
