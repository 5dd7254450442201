"""
maint_portal.notifications.email

E-mail delivery for the portal.

Responsibilities:
- Deliver HTML messages over SMTP (`SmtpMailer`); blocking I/O runs in a worker thread.
- Wrap a mailer as a `Notifier` whose `send` reports success as a bool and logs failures.
- Render and send the task assignment message.
"""

from __future__ import annotations

import asyncio
import smtplib
from datetime import date
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Protocol

from jinja2 import Environment, PackageLoader, select_autoescape

from maint_portal.observability.logging import get_logger
from maint_portal.settings import Settings

log = get_logger(__name__)

_templates = Environment(
    loader=PackageLoader("maint_portal.notifications", "templates"),
    autoescape=select_autoescape(["html"]),
)

TASK_ASSIGNED_SUBJECT = "New Maintenance Task Assigned"


class MailerError(Exception):
    pass


class Mailer(Protocol):
    async def send(self, *, to: str, subject: str, html: str) -> str:
        """Deliver one message and return its Message-ID."""
        ...


class SmtpMailer:
    def __init__(self, settings: Settings, *, timeout: float = 10.0) -> None:
        self._settings = settings
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._settings.mail_username and self._settings.mail_password)

    async def send(self, *, to: str, subject: str, html: str) -> str:
        if not self.configured:
            raise MailerError(
                "Email configuration is missing. Set MAINT_MAIL_USERNAME and MAINT_MAIL_PASSWORD."
            )

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._settings.mail_from or self._settings.mail_username
        msg["To"] = to
        msg["Message-ID"] = make_msgid(domain=self._settings.mail_server)
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")

        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            raise MailerError(f"Failed to send email to {to}: {e}") from e
        return str(msg["Message-ID"])

    def _deliver(self, msg: EmailMessage) -> None:
        s = self._settings
        with smtplib.SMTP(s.mail_server, s.mail_port, timeout=self._timeout) as smtp:
            if s.mail_use_tls:
                smtp.starttls()
            smtp.login(s.mail_username or "", s.mail_password or "")
            smtp.send_message(msg)


class Notifier:
    """
    Fire-and-forget front of a mailer: failures are logged, never raised.
    """

    def __init__(self, mailer: Mailer) -> None:
        self._mailer = mailer

    async def send(self, *, to: str, subject: str, html: str) -> bool:
        try:
            message_id = await self._mailer.send(to=to, subject=subject, html=html)
        except MailerError as e:
            log.warning("email_send_failed", to=to, subject=subject, error=str(e))
            return False
        log.info("email_sent", to=to, subject=subject, message_id=message_id)
        return True

    async def send_task_assignment(
        self,
        *,
        technician_email: str,
        technician_name: str,
        task_type: str,
        scheduled_date: date,
        priority_level: str,
    ) -> bool:
        html = render_task_assignment(
            technician_name=technician_name,
            task_type=task_type,
            scheduled_date=scheduled_date,
            priority_level=priority_level,
        )
        return await self.send(to=technician_email, subject=TASK_ASSIGNED_SUBJECT, html=html)


def render_task_assignment(
    *, technician_name: str, task_type: str, scheduled_date: date, priority_level: str
) -> str:
    return _templates.get_template("task_assigned.html").render(
        technician_name=technician_name,
        task_type=task_type,
        scheduled_date=scheduled_date.isoformat(),
        priority_level=priority_level,
    )


# --- Module Notes -----------------------------------------------------------
# `Notifier` only converts `MailerError`; anything else is a programming error and
# propagates.
