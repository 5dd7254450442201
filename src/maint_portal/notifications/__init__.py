"""
maint_portal.notifications

Outgoing e-mail.

Responsibilities:
- SMTP delivery (`email.SmtpMailer`).
- Fire-and-forget notifications that log instead of raising (`email.Notifier`).
- Message templates (task assignment).
"""

from maint_portal.notifications.email import Mailer, MailerError, Notifier, SmtpMailer

__all__ = ["Mailer", "MailerError", "Notifier", "SmtpMailer"]
