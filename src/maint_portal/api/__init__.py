"""
maint_portal.api

API package for the Portal service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring and request/response models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers validate, authenticate and delegate; persistence rules live in services.
