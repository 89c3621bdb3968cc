"""Templated transactional email over SMTP."""

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from src.config import Settings
from src.errors import EmailDeliveryError

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "emails"


@dataclass(frozen=True)
class EmailMessage:
    """A rendered email ready for the transport."""

    subject: str
    send_to: str
    send_from: str
    reply_to: str
    template: str
    html: str


class EmailService:
    """Renders email templates and delivers them over SMTP.

    With ``smtp_enabled`` off the message is logged instead of sent, which is
    how development and test environments run.
    """

    def __init__(self, settings: Settings, template_dir: Path = TEMPLATE_DIR) -> None:
        self.settings = settings
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, template: str, **context: str) -> str:
        """Render ``<template>.html`` with the given context."""
        return self.env.get_template(f"{template}.html").render(
            app_name=self.settings.app_name, **context
        )

    def build(self, subject: str, send_to: str, template: str, name: str, url: str) -> EmailMessage:
        """Render a template into a message addressed from the configured sender."""
        return EmailMessage(
            subject=subject,
            send_to=send_to,
            send_from=self.settings.mail_from,
            reply_to=self.settings.mail_reply_to,
            template=template,
            html=self.render(template, name=name, url=url),
        )

    def send(self, subject: str, send_to: str, template: str, name: str, url: str) -> EmailMessage:
        """Render and deliver a message.

        Raises:
            EmailDeliveryError: if the template is missing or SMTP fails.
        """
        try:
            message = self.build(subject, send_to, template, name, url)
        except Exception as e:
            raise EmailDeliveryError(f"Could not render email template {template!r}") from e

        if not self.settings.smtp_enabled:
            logger.info(f"SMTP disabled, not sending {template!r} to {send_to}: {url}")
            return message

        try:
            self._deliver(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send {template!r} email to {send_to}", exc_info=True)
            raise EmailDeliveryError(f"Could not send email to {send_to}") from e

        logger.info(f"Sent {template!r} email to {send_to}")
        return message

    def _deliver(self, message: EmailMessage) -> None:
        mime = MIMEMultipart()
        mime["From"] = message.send_from
        mime["To"] = message.send_to
        mime["Reply-To"] = message.reply_to
        mime["Subject"] = message.subject
        mime.attach(MIMEText(message.html, "html"))

        with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port) as server:
            server.starttls()
            if self.settings.smtp_username and self.settings.smtp_password:
                server.login(self.settings.smtp_username, self.settings.smtp_password)
            server.send_message(mime)
