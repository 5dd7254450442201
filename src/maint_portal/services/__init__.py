"""
maint_portal.services

Service layer (transaction owners).

Responsibilities:
- Identity: sign-in, token refresh, sign-out, user creation.
- Tasks: assignment with notification, role-scoped listing, status updates.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services commit; repositories only flush. Routers translate service exceptions
# into HTTP responses.
