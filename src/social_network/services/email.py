"""Outbound email delivery over SMTP."""

from __future__ import annotations

import logging
import mimetypes
from email.message import EmailMessage
from pathlib import Path
from typing import Protocol

import aiosmtplib

from social_network.core.settings import Settings

logger = logging.getLogger(__name__)


class EmailSenderProtocol(Protocol):
    """Anything able to deliver a single message."""

    async def send(
        self,
        to: str,
        subject: str,
        body: str,
        attachment: Path | None = None,
    ) -> bool: ...


class EmailSender:
    """Send plain-text email, optionally with one attachment, via aiosmtplib."""

    def __init__(self, settings: Settings) -> None:
        self._host = settings.smtp_host
        self._port = settings.smtp_port
        self._user = settings.smtp_user
        self._password = settings.smtp_password
        self._sender = settings.smtp_sender or settings.smtp_user or ""
        self._start_tls = settings.smtp_start_tls
        self._timeout = settings.smtp_timeout_seconds

    @property
    def enabled(self) -> bool:
        return bool(self._host)

    def build_message(
        self,
        to: str,
        subject: str,
        body: str,
        attachment: Path | None = None,
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        if attachment is not None:
            ctype, _ = mimetypes.guess_type(attachment.name)
            maintype, subtype = (ctype or "application/octet-stream").split("/", 1)
            message.add_attachment(
                attachment.read_bytes(),
                maintype=maintype,
                subtype=subtype,
                filename=attachment.name,
            )
        return message

    async def send(
        self,
        to: str,
        subject: str,
        body: str,
        attachment: Path | None = None,
    ) -> bool:
        """Deliver one message.

        Returns:
            True if the SMTP server accepted the message, False otherwise.
        """
        if not self.enabled:
            logger.warning("SMTP is not configured; email not sent", extra={"email": to})
            return False

        try:
            message = self.build_message(to, subject, body, attachment)
            await aiosmtplib.send(
                message,
                hostname=self._host,
                port=self._port,
                username=self._user,
                password=self._password,
                start_tls=self._start_tls,
                timeout=self._timeout,
            )
        except (aiosmtplib.SMTPException, OSError, TimeoutError) as e:
            logger.error("Email send error: %s", e, extra={"email": to})
            return False

        logger.info("Email sent", extra={"email": to})
        return True
