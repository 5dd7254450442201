"""
tests.test_notifications

Notifier semantics and the e-mail relay endpoint.
"""

from __future__ import annotations

from datetime import date

import httpx
import pytest
from fastapi import FastAPI

from maint_portal.auth.models import Role
from maint_portal.notifications import MailerError, Notifier, SmtpMailer
from maint_portal.notifications.email import render_task_assignment
from maint_portal.settings import Settings
from conftest import RecordingMailer, bearer, create_account, sign_in


@pytest.mark.asyncio
async def test_notifier_reports_success_as_bool() -> None:
    mailer = RecordingMailer()
    notifier = Notifier(mailer)

    assert await notifier.send(to="a@example.com", subject="Hi", html="<p>hi</p>") is True
    mailer.fail = True
    assert await notifier.send(to="a@example.com", subject="Hi", html="<p>hi</p>") is False
    assert len(mailer.sent) == 1


@pytest.mark.asyncio
async def test_unconfigured_smtp_mailer_refuses_to_send() -> None:
    mailer = SmtpMailer(Settings(mail_username=None, mail_password=None))
    assert not mailer.configured
    with pytest.raises(MailerError):
        await mailer.send(to="a@example.com", subject="Hi", html="<p>hi</p>")


def test_task_assignment_template_escapes_fields() -> None:
    html = render_task_assignment(
        technician_name="<b>Ravi</b>",
        task_type="Belt & pulley check",
        scheduled_date=date(2026, 11, 2),
        priority_level="Low",
    )
    assert "&lt;b&gt;Ravi&lt;/b&gt;" in html
    assert "Belt &amp; pulley check" in html
    assert "2026-11-02" in html


@pytest.mark.asyncio
async def test_email_relay(
    app: FastAPI, client: httpx.AsyncClient, mailer: RecordingMailer
) -> None:
    await create_account(app, email="sup@example.com", role=Role.supervisor)
    token = await sign_in(client, "sup@example.com")
    payload = {"to": "vendor@example.com", "subject": "Purchase order", "html": "<p>PO</p>"}

    r = await client.post("/v1/notifications/email", json=payload, headers=bearer(token))
    assert r.status_code == 200
    assert r.json() == {"success": True, "message_id": "<msg-1@test>"}
    assert mailer.sent[0].to == "vendor@example.com"

    mailer.fail = True
    r = await client.post("/v1/notifications/email", json=payload, headers=bearer(token))
    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Failed to send email"
    assert body["details"] == "SMTP relay refused the message"

    r = await client.post("/v1/notifications/email", json=payload)
    assert r.status_code == 401
