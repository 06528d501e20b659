"""
Outbound email over SMTP (aiosmtplib).

Sending is best effort: failures are logged and reported as ``False`` so the
caller (a background task after signup) never turns a mail outage into a
failed registration.
"""

import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import aiosmtplib

from .. import config

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender: str = "no-reply@campusconnect.local",
        client_url: str = "http://localhost:5173",
    ):
        self.host = host
        self.port = port
        self.username = username or None
        self.password = password or None
        self.sender = sender
        self.client_url = client_url.rstrip("/")

    @classmethod
    def from_config(cls) -> "EmailService":
        return cls(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            username=config.SMTP_USER,
            password=config.SMTP_PASSWORD,
            sender=config.EMAIL_FROM,
            client_url=config.CLIENT_URL,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.host)

    def verification_link(self, token: str) -> str:
        return f"{self.client_url}/verify-email/{token}"

    def build_verification_message(self, to_email: str, token: str) -> MIMEMultipart:
        link = self.verification_link(token)
        message = MIMEMultipart("alternative")
        message["Subject"] = "CampusConnect - Verify Your Email"
        message["From"] = self.sender
        message["To"] = to_email
        message.attach(MIMEText(f"Welcome to CampusConnect! Verify your email: {link}", "plain"))
        message.attach(MIMEText(
            "<h2>Welcome to CampusConnect!</h2>"
            "<p>Please click the link below to verify your email address:</p>"
            f'<a href="{link}">Verify Email</a>',
            "html",
        ))
        return message

    async def send(self, message: MIMEMultipart) -> None:
        await aiosmtplib.send(
            message,
            hostname=self.host,
            port=self.port,
            username=self.username,
            password=self.password,
        )

    async def send_verification_email(self, to_email: str, token: str) -> bool:
        if not self.is_configured:
            logger.warning("SMTP is not configured, skipping verification email to %s", to_email)
            return False
        try:
            await self.send(self.build_verification_message(to_email, token))
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send verification email to %s: %s", to_email, exc)
            return False
        logger.info("Sent verification email to %s", to_email)
        return True
