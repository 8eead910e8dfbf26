# app/services/mail.py
import logging
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

import aiosmtplib

from app.core.config import settings

logger = logging.getLogger(__name__)


class Mailer:
    """Sends transactional HTML e-mail over SMTP.

    ``send`` never raises: a delivery failure is logged and reported as
    ``False`` so callers decide whether it matters.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        start_tls: Optional[bool] = None,
        enabled: Optional[bool] = None,
    ):
        self.host = host or settings.mail_host
        self.port = port or settings.mail_port
        self.username = username if username is not None else settings.mail_username
        self.password = password if password is not None else settings.mail_password
        self.start_tls = settings.mail_start_tls if start_tls is None else start_tls
        self.enabled = settings.mail_enabled if enabled is None else enabled
        self.timeout = settings.mail_timeout

    @property
    def sender(self) -> str:
        address = settings.mail_from_address or self.username or ""
        return formataddr((settings.mail_from_name or settings.site_name, address))

    def build_message(self, to: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    async def send(self, to: str, subject: str, html: str) -> bool:
        if not self.enabled:
            logger.info(f"Mail delivery disabled, skipped '{subject}' to {to}")
            return True

        message = self.build_message(to, subject, html)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username or None,
                password=self.password or None,
                start_tls=self.start_tls,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send '{subject}' to {to}: {e}")
            return False

        logger.info(f"Mail '{subject}' sent to {to}")
        return True


mailer = Mailer()
