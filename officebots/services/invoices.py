from __future__ import annotations

import logging
import smtplib
import tempfile
from collections.abc import Callable
from datetime import date
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from typing import Any

from openpyxl import load_workbook

from ..models.config_models import InvoiceConfig
from .dates import end_of_month, period_code

"""Invoice workbook helper.

The invoice workbook holds one sheet per invoice, named by invoice number
(``2023-009`` for September 2023), plus a template sheet named ``YYYY-NNN``.
Formulas in the template compute the amounts; the only value stamped here is
the issue date (last day of the month).

Operations:
- create: copy the template, name it, stamp the date, make it the first and
  active sheet, highlight its tab
- export: save the active invoice alone as <prefix>-invoice-<number>.xlsx
  under <output_dir>/<year>/
- email: export to a temporary directory and send it as an attachment
"""

__all__ = [
    "InvoiceError",
    "next_invoice_number",
    "menu_actions",
    "create_invoice",
    "export_invoice",
    "email_invoice",
]

logger = logging.getLogger(__name__)


class InvoiceError(Exception):
    """Invoice workbook or delivery problem."""


def next_invoice_number(today: date) -> str:
    return period_code(today)


def _load(workbook_path: Path) -> Any:
    if not workbook_path.exists():
        raise InvoiceError(f"invoice workbook not found: {workbook_path}")
    return load_workbook(workbook_path)


def menu_actions(workbook_path: Path, today: date) -> list[str]:
    """Actions available for the workbook, as menu labels.

    "Create Invoice" is only offered while no sheet carries this month's
    number yet.
    """
    wb = _load(workbook_path)
    next_num = next_invoice_number(today)
    current_num = wb.active.title

    actions = []
    if next_num not in wb.sheetnames:
        actions.append(f"Create Invoice (#{next_num})")
    actions.append(f"Download Invoice (#{current_num})")
    actions.append(f"Email Invoice (#{current_num})")
    return actions


def create_invoice(workbook_path: Path, today: date, config: InvoiceConfig) -> str:
    """Create this month's invoice sheet from the template. Returns its number."""
    wb = _load(workbook_path)
    invoice_num = next_invoice_number(today)

    if config.template_sheet not in wb.sheetnames:
        raise InvoiceError(f"template sheet '{config.template_sheet}' not found")
    if invoice_num in wb.sheetnames:
        raise InvoiceError(f"invoice {invoice_num} already exists")

    invoice = wb.copy_worksheet(wb[config.template_sheet])
    invoice.title = invoice_num
    invoice[config.date_cell] = end_of_month(today)
    invoice[config.date_cell].number_format = "yyyy-mm-dd"

    # Move the new invoice to the first position and make it active
    wb.move_sheet(invoice, offset=-wb.index(invoice))
    wb.active = 0

    for sheet in wb.worksheets:
        selected = sheet is invoice
        sheet.sheet_view.tabSelected = selected
        sheet.sheet_properties.tabColor = config.tab_color if selected else None

    wb.save(workbook_path)
    logger.info(f"created invoice {invoice_num} (issue date {end_of_month(today).isoformat()})")
    return invoice_num


def export_invoice(workbook_path: Path, output_dir: Path, today: date, config: InvoiceConfig) -> Path:
    """Save the active invoice sheet as a workbook of its own."""
    wb = _load(workbook_path)
    current = wb.active
    # Only a whole workbook can be exported; drop every other sheet from the copy
    for sheet in list(wb.worksheets):
        if sheet is not current:
            wb.remove(sheet)

    target_dir = output_dir / str(today.year)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / f"{config.file_prefix}-invoice-{current.title}.xlsx"
    wb.save(target)
    logger.info(f"Invoice saved in {target_dir}")
    return target


def _email_body(month_label: str, signature: str) -> str:
    body = (
        "Hi team,\n\n"
        f"Please find attached the invoice for {month_label}.\n\n"
        "Kind regards,"
    )
    if signature:
        body += f"\n{signature}"
    return body


def email_invoice(
    workbook_path: Path,
    today: date,
    config: InvoiceConfig,
    smtp_factory: Callable[..., Any] | None = None,
) -> str:
    """Email the active invoice as an attachment. Returns the recipient.

    ``smtp_factory`` defaults to smtplib.SMTP and is called as
    ``factory(host, port)``.
    """
    factory = smtp_factory or smtplib.SMTP
    mail = config.mail
    if mail is None:
        raise InvoiceError("invoice.mail is not configured")

    month_label = today.strftime("%B %Y")

    with tempfile.TemporaryDirectory() as tmp:
        attachment = export_invoice(workbook_path, Path(tmp), today, config)
        invoice_num = attachment.stem.rsplit("-invoice-", 1)[-1]

        msg = MIMEMultipart()
        msg["Subject"] = f"Invoice #{invoice_num} - {month_label}"
        msg["From"] = mail.sender
        msg["To"] = mail.recipient
        msg.attach(MIMEText(_email_body(month_label, mail.signature), "plain"))
        part = MIMEApplication(attachment.read_bytes(), Name=attachment.name)
        part["Content-Disposition"] = f'attachment; filename="{attachment.name}"'
        msg.attach(part)

        try:
            with factory(mail.host, mail.port) as server:
                if mail.username:
                    server.starttls()
                    server.login(mail.username, mail.password or "")
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise InvoiceError(f"failed to send invoice {invoice_num}: {e}") from e

    logger.info(f"Invoice sent to {mail.recipient}")
    return mail.recipient
