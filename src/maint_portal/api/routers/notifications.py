"""
maint_portal.api.routers.notifications

E-mail relay for signed-in clients.

Responsibilities:
- Accept {to, subject, html} and deliver it through the configured mailer.
- Report failures in the response body instead of raising to the client.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from maint_portal.api.deps import mailer_dep
from maint_portal.auth.deps import get_principal
from maint_portal.auth.models import Principal
from maint_portal.notifications.email import Mailer, MailerError
from maint_portal.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/v1/notifications", tags=["notifications"])


class EmailRequest(BaseModel):
    to: str = Field(min_length=3, max_length=320)
    subject: str = Field(min_length=1, max_length=255)
    html: str = Field(min_length=1)


class EmailResponse(BaseModel):
    success: bool
    message_id: str | None = None


@router.post("/email", response_model=EmailResponse)
async def send_email(
    body: EmailRequest,
    principal: Principal = Depends(get_principal),
    mailer: Mailer = Depends(mailer_dep),
) -> EmailResponse | JSONResponse:
    try:
        message_id = await mailer.send(to=body.to, subject=body.subject, html=body.html)
    except MailerError as e:
        log.warning("email_relay_failed", to=body.to, uid=principal.id, error=str(e))
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Failed to send email", "details": str(e)},
        )
    log.info("email_relayed", to=body.to, uid=principal.id, message_id=message_id)
    return EmailResponse(success=True, message_id=message_id)
