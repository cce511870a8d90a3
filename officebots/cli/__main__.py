from __future__ import annotations

import argparse
import sys
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from officebots.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from officebots.logging.error_log import ErrorLogBuffer
from officebots.logging.init import log_summary, setup_logging
from officebots.models.config_models import AppConfig, SlackConfig
from officebots.models.error_record import ErrorRecord
from officebots.models.run_result import RunResult
from officebots.services.bug_hunter import (
    BugHunter,
    build_group_update,
    build_info_message,
    plan_notifications,
)
from officebots.services.invoices import (
    InvoiceError,
    create_invoice,
    email_invoice,
    export_invoice,
    menu_actions,
)
from officebots.services.slack import MessagingError, SlackClient
from officebots.services.summary import render_summary_line
from officebots.sheets.reader import MalformedRosterError, parse_roster, read_roster_rows

"""CLI entrypoint.

Commands:
- bug-hunter: notify the channel of today's bug hunter and assign them to the
  user group (the job a daily cron entry calls)
- invoice {menu,create,download,email}: invoice workbook helper

Exit codes: 0 success (weekend skip included), 1 fatal.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; its values win over the process env."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="officebots", description="Office automation jobs")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    bh = sub.add_parser("bug-hunter", help="Notify and assign today's bug hunter")
    bh.add_argument("--date", type=date.fromisoformat, help="Reference date (YYYY-MM-DD)")
    bh.add_argument("--dry-run", action="store_true", help="Print planned Slack calls, send nothing")
    bh.add_argument("--no-assign", action="store_true", help="Do not update the user group")

    inv = sub.add_parser("invoice", help="Invoice workbook helper")
    inv.add_argument("action", choices=["menu", "create", "download", "email"])
    inv.add_argument("--date", type=date.fromisoformat, help="Reference date (YYYY-MM-DD)")
    return p.parse_args(argv)


def _today(timezone: str) -> date:
    try:
        return datetime.now(ZoneInfo(timezone)).date()
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {timezone}") from e


def _make_slack_client(cfg: SlackConfig) -> SlackClient:
    if not cfg.token:
        raise ConfigError("slack token missing (set SLACK_OAUTH_TOKEN)")
    return SlackClient(cfg.token, base_url=cfg.api_base_url, timeout=cfg.timeout)


def _run_bug_hunter(cfg: AppConfig, args: argparse.Namespace, today: date) -> RunResult:
    logger = setup_logging()
    roster = cfg.roster
    rows = read_roster_rows(Path(roster.path), roster.sheet)
    assignment = parse_roster(rows, roster.identifier_column, roster.next_assignee_column)
    logger.info(
        f"bug hunter={assignment.current_assignee} upcoming={len(assignment.upcoming)} date={today.isoformat()}"
    )
    info_text = build_info_message(roster.info_links, roster.info_reminder)
    channel = cfg.slack.channel

    if args.dry_run:
        planned = plan_notifications(assignment, today, channel or "<channel>", roster.board_url, info_text)
        for i, message in enumerate(planned, start=1):
            thread = " (thread)" if message.threaded else ""
            print(f"--- message {i} to {message.channel}{thread}\n{message.text}")
        if cfg.slack.user_group and not args.no_assign:
            update = build_group_update(assignment, cfg.slack.user_group)
            print(f"--- usergroup {update.user_group} users={','.join(update.users)}")
        return RunResult(job="bug-hunter", skipped_reason="dry-run")

    if not channel:
        raise ConfigError("slack channel missing (set SLACK_CHANNEL)")

    client = _make_slack_client(cfg.slack)
    bug_hunter = BugHunter(client, assignment, roster.board_url, today=today, info_text=info_text)
    posted = bug_hunter.notify(channel)

    assigned = 0
    if args.no_assign:
        logger.debug("user group update disabled (--no-assign)")
    elif cfg.slack.user_group:
        bug_hunter.assign(cfg.slack.user_group)
        assigned = 1
    else:
        logger.warning("no user group configured, skipping assignment")

    return RunResult(
        job="bug-hunter",
        posted_messages=len(posted),
        group_updates=assigned,
        skipped_reason=None if posted else "weekend",
    )


def _run_invoice(cfg: AppConfig, args: argparse.Namespace, today: date) -> RunResult:
    if cfg.invoice is None:
        raise ConfigError("invoice section missing")
    inv = cfg.invoice
    workbook = Path(inv.workbook)

    if args.action == "menu":
        for label in menu_actions(workbook, today):
            print(label)
        return RunResult(job="invoice", detail="menu")
    if args.action == "create":
        return RunResult(job="invoice", detail=create_invoice(workbook, today, inv))
    if args.action == "download":
        return RunResult(job="invoice", detail=str(export_invoice(workbook, Path(inv.output_dir), today, inv)))
    return RunResult(job="invoice", detail=email_invoice(workbook, today, inv))


def main(argv: list[str] | None = None) -> int:
    # Initialize logging system with labeled prefixes
    logger = setup_logging()

    # None のときのみシステム引数を読む ([] はテストからの明示的な空引数)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        setup_logging(debug=True)
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
        today = args.date or _today(cfg.timezone)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    job = "bug-hunter" if args.command == "bug-hunter" else "invoice"
    errors = ErrorLogBuffer()
    try:
        if args.command == "bug-hunter":
            result = _run_bug_hunter(cfg, args, today)
        else:
            result = _run_invoice(cfg, args, today)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    except MalformedRosterError as e:
        logger.error(f"roster: {e}")
        errors.append(ErrorRecord.create(job, "MALFORMED_ROSTER", str(e)))
        errors.flush()
        return EXIT_FATAL
    except MessagingError as e:
        logger.error(f"slack: {e}")
        errors.append(ErrorRecord.create(job, "MESSAGING_FAILURE", str(e)))
        errors.flush()
        return EXIT_FATAL
    except InvoiceError as e:
        logger.error(f"invoice: {e}")
        errors.append(ErrorRecord.create(job, "INVOICE_FAILURE", str(e)))
        errors.flush()
        return EXIT_FATAL

    # log_summary adds the "SUMMARY " prefix itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
