from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from officebots.models.config_models import (
    DEFAULT_DATE_CELL,
    DEFAULT_SLACK_API,
    DEFAULT_TAB_COLOR,
    DEFAULT_TEMPLATE_SHEET,
    AppConfig,
    InfoLink,
    InvoiceConfig,
    MailConfig,
    RosterConfig,
    SlackConfig,
)

"""Config loader.

Responsibilities:
- Load YAML (config/officebots.yml by default)
- Validate against schema.json (unknown keys are rejected)
- Apply defaults (timezone=UTC, columns O/R, ...)
- Let the environment override secrets: SLACK_OAUTH_TOKEN, SLACK_CHANNEL,
  SLACK_USER_GROUP, SMTP_PASSWORD
"""

SCHEMA_PATH = Path(__file__).with_name("schema.json")
DEFAULT_CONFIG_PATH = Path("config/officebots.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: the schema file is missing or invalid, or the data does
            not satisfy it.
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _env(name: str, fallback: Any) -> Any:
    # 環境変数が設定されていれば YAML より優先
    value = os.getenv(name)
    return value if value else fallback


def _slack_config(raw: dict[str, Any]) -> SlackConfig:
    return SlackConfig(
        token=_env("SLACK_OAUTH_TOKEN", raw.get("token")),
        channel=_env("SLACK_CHANNEL", raw.get("channel")),
        user_group=_env("SLACK_USER_GROUP", raw.get("user_group")),
        api_base_url=raw.get("api_base_url", DEFAULT_SLACK_API),
        timeout=raw.get("timeout", 30),
    )


def _roster_config(raw: dict[str, Any]) -> RosterConfig:
    info = raw.get("info", {})
    return RosterConfig(
        path=raw["path"],
        board_url=raw["board_url"],
        sheet=raw.get("sheet"),
        identifier_column=raw.get("identifier_column", "O"),
        next_assignee_column=raw.get("next_assignee_column", "R"),
        info_links=tuple(InfoLink(title=link["title"], url=link["url"]) for link in info.get("links", [])),
        info_reminder=info.get("reminder"),
    )


def _invoice_config(raw: dict[str, Any] | None) -> InvoiceConfig | None:
    if raw is None:
        return None
    mail_raw = raw.get("mail")
    mail = None
    if mail_raw is not None:
        mail = MailConfig(
            host=mail_raw["host"],
            sender=mail_raw["sender"],
            recipient=mail_raw["recipient"],
            port=mail_raw.get("port", 587),
            username=mail_raw.get("username"),
            password=_env("SMTP_PASSWORD", mail_raw.get("password")),
            signature=mail_raw.get("signature", ""),
        )
    return InvoiceConfig(
        workbook=raw["workbook"],
        template_sheet=raw.get("template_sheet", DEFAULT_TEMPLATE_SHEET),
        date_cell=raw.get("date_cell", DEFAULT_DATE_CELL).upper(),
        tab_color=raw.get("tab_color", DEFAULT_TAB_COLOR).lstrip("#").upper(),
        output_dir=raw.get("output_dir", "./invoices"),
        file_prefix=raw.get("file_prefix", "invoice"),
        mail=mail,
    )


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")

    _validate_config_schema(data)

    return AppConfig(
        slack=_slack_config(data.get("slack", {})),
        roster=_roster_config(data["roster"]),
        invoice=_invoice_config(data.get("invoice")),
        timezone=data.get("timezone", "UTC"),
    )
