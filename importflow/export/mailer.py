"""Email delivery of the purchase-order CSV."""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Callable, Optional

from importflow.core.config import Settings
from importflow.export.sinks import csv_to_rows, excel_bytes

logger = logging.getLogger(__name__)

ORDER_SUBJECT = "Purchase Order"
ORDER_BODY = "Attached"
CSV_FILENAME = "orders.csv"
EXCEL_FILENAME = "orders.xlsx"


class MailTransport:
    """Authenticated SMTP-over-SSL session, usable as a context manager."""

    def __init__(self, host: str, port: int, username: str, password: str) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self._smtp: Optional[smtplib.SMTP_SSL] = None

    def __enter__(self) -> "MailTransport":
        self._smtp = smtplib.SMTP_SSL(self.host, self.port)
        try:
            self._smtp.login(self.username, self.password)
        except smtplib.SMTPException:
            self._smtp.close()
            self._smtp = None
            raise
        return self

    def __exit__(self, *exc_info) -> None:
        if self._smtp is not None:
            try:
                self._smtp.quit()
            except smtplib.SMTPServerDisconnected:
                pass
            self._smtp = None

    def send(self, message: EmailMessage) -> None:
        if self._smtp is None:
            raise RuntimeError("MailTransport must be opened with 'with' before sending")
        self._smtp.send_message(message)


MailTransportFactory = Callable[[str, int, str, str], MailTransport]


def build_order_message(
    csv_text: str, sender: str, recipient: str, attach_excel: bool = False
) -> EmailMessage:
    """Compose the purchase-order email with the CSV attached as ``orders.csv``."""

    message = EmailMessage()
    message["From"] = sender
    message["To"] = recipient
    message["Subject"] = ORDER_SUBJECT
    message.set_content(ORDER_BODY)
    message.add_attachment(csv_text, subtype="csv", filename=CSV_FILENAME)
    if attach_excel:
        message.add_attachment(
            excel_bytes(csv_to_rows(csv_text)),
            maintype="application",
            subtype="vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            filename=EXCEL_FILENAME,
        )
    return message


def send_purchase_order(
    csv_text: str,
    sender: str,
    password: str,
    settings: Settings,
    transport_factory: MailTransportFactory | None = None,
) -> EmailMessage:
    """Send the order CSV from ``sender`` to the configured recipient.

    Delivery errors propagate unchanged; there is no retry.
    """

    message = build_order_message(
        csv_text, sender, settings.order_recipient, attach_excel=settings.attach_excel
    )
    factory = transport_factory or MailTransport
    logger.info("Connecting to %s:%s as %s", settings.smtp_host, settings.smtp_port, sender)
    with factory(settings.smtp_host, settings.smtp_port, sender, password) as transport:
        transport.send(message)
    return message
