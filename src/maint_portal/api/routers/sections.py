"""
maint_portal.api.routers.sections

Server-side section guard.

Responsibilities:
- Describe a section (landing path + navigation) to callers allowed into it.
- Redirect everyone else, using the same guard as the session client.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from starlette.status import HTTP_303_SEE_OTHER, HTTP_404_NOT_FOUND

from maint_portal.auth.deps import get_optional_principal
from maint_portal.auth.guard import SectionGuard
from maint_portal.auth.models import Principal, Role, Session
from maint_portal.auth.routing import section_named
from maint_portal.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/v1/sections", tags=["sections"])

_TASK_VIEWS = [("Completed Tasks", "completed-tasks"), ("Overdue Tasks", "overdue-tasks")]

NAVIGATION: dict[Role, list[tuple[str, str]]] = {
    Role.admin: [("Dashboard", "dashboard"), ("Users", "users")],
    Role.supervisor: [
        ("Dashboard", "dashboard"),
        ("Tasks", "tasks"),
        *_TASK_VIEWS,
        ("Material Usage", "material-usage"),
        ("Machines", "machines"),
        ("Purchase Requests", "purchase-requests"),
        ("Service Log", "service-log"),
    ],
    Role.technician: [
        ("Dashboard", "dashboard"),
        ("Tasks", "tasks"),
        *_TASK_VIEWS,
        ("Material Usage", "material-usage"),
        ("Service Log", "service-log"),
        ("Request Materials", "request-materials"),
        ("Meter Reading", "meter-reading"),
        ("Profile", "profile"),
        ("Settings", "settings"),
    ],
    Role.inventory_employee: [
        ("Dashboard", "dashboard"),
        *_TASK_VIEWS,
        ("Material Usage", "material-usage"),
        ("Requested Materials", "requested-materials"),
        ("Stock", "stock"),
        ("Stock Transactions", "stock-transactions"),
        ("Reorder Low Stock", "reorder-low-stock"),
        ("Purchase Order", "purchase-order"),
    ],
}


class NavItem(BaseModel):
    label: str
    href: str


class SectionResponse(BaseModel):
    section: str
    role: Role
    landing_path: str
    nav_items: list[NavItem]


@router.get("/{name}", response_model=SectionResponse)
async def enter_section(
    name: str,
    principal: Principal | None = Depends(get_optional_principal),
) -> Any:
    section = section_named(name)
    if section is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Section not found")

    # Requests have no loading phase: the principal is resolved before the guard runs.
    session = Session.of(principal) if principal is not None else Session.SIGNED_OUT
    decision = SectionGuard.for_section(section).evaluate(session)
    if not decision.renders_children:
        log.info(
            "section_redirect",
            section=section.name,
            uid=principal.id if principal else None,
            redirect_to=decision.redirect_to,
        )
        return RedirectResponse(url=decision.redirect_to or "/", status_code=HTTP_303_SEE_OTHER)

    return SectionResponse(
        section=section.name,
        role=section.role,
        landing_path=section.landing_path,
        nav_items=[
            NavItem(label=label, href=f"{section.root}/{slug}")
            for label, slug in NAVIGATION[section.role]
        ],
    )
