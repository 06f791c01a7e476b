"""SMTP delivery of download links, with an optional send history."""

from __future__ import annotations

import asyncio
import smtplib
from dataclasses import dataclass
from datetime import UTC, datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from datadesk.adapters.repositories import EmailHistoryRepository

logger = structlog.get_logger()

DOWNLOAD_SUBJECT = "Your Requested Data is Ready"

DOWNLOAD_BODY = """Dear User,

We are pleased to inform you that your requested data is now available for download.

You can access your data by visiting the following link:
{link}

This link will provide access to the CSV file you requested.

If you have any questions or need further assistance, please don't hesitate to contact our support team.

Thank you for using our service.

Best regards,
The Data Request Team
"""


@dataclass
class EmailConfig:
    """SMTP relay and sender identity."""

    smtp_host: str
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    from_email: str = "datadesk@example.com"
    from_name: str = "Data Request Team"
    use_tls: bool = True


class EmailNotifier:
    """Sends mail through one SMTP relay."""

    def __init__(
        self,
        config: EmailConfig,
        history: EmailHistoryRepository | None = None,
    ) -> None:
        """Initialize the notifier.

        Args:
            config: Relay and sender settings.
            history: Where send attempts are recorded, if anywhere.
        """
        self.config = config
        self.history = history

    async def send_download_link(self, to_email: str, link: str) -> bool:
        """Email a CSV download link and record the attempt.

        Args:
            to_email: Recipient address.
            link: Absolute URL of the artifact.

        Returns:
            True if the email was sent.
        """
        body_text = DOWNLOAD_BODY.format(link=link)
        body_html = _as_html(body_text)

        error: str | None = None
        try:
            await asyncio.to_thread(
                self._deliver, [to_email], DOWNLOAD_SUBJECT, body_html, body_text
            )
        except (smtplib.SMTPException, OSError) as e:
            error = str(e)
            logger.error("download_link_email_failed", to=to_email, error=error)
        else:
            logger.info("download_link_email_sent", to=to_email)

        await self._record(to_email, DOWNLOAD_SUBJECT, body_text, error)
        return error is None

    def _deliver(
        self,
        to_emails: list[str],
        subject: str,
        body_html: str,
        body_text: str | None,
    ) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.config.from_name} <{self.config.from_email}>"
        msg["To"] = ", ".join(to_emails)

        # Plain text first so clients prefer the HTML part
        if body_text:
            msg.attach(MIMEText(body_text, "plain"))
        msg.attach(MIMEText(body_html, "html"))

        with smtplib.SMTP(self.config.smtp_host, self.config.smtp_port) as server:
            if self.config.use_tls:
                server.starttls()

            if self.config.smtp_user and self.config.smtp_password:
                server.login(self.config.smtp_user, self.config.smtp_password)

            server.sendmail(
                self.config.from_email,
                to_emails,
                msg.as_string(),
            )

    async def _record(self, to_email: str, subject: str, body: str, error: str | None) -> None:
        if self.history is None:
            return
        try:
            await self.history.record(
                sender=self.config.from_email,
                recipient=to_email,
                subject=subject,
                body=body,
                status="failed" if error else "sent",
                error_message=error,
                sent_at=None if error else datetime.now(UTC),
            )
        except Exception as e:
            logger.error("email_history_persist_failed", to=to_email, error=str(e))


def _as_html(body_text: str) -> str:
    paragraphs = "".join(
        f"<p>{escape(block).replace(chr(10), '<br>')}</p>"
        for block in body_text.strip().split("\n\n")
    )
    return (
        '<html><body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">'
        f"{paragraphs}</body></html>"
    )
