"""
maint_portal.auth

Authentication/authorization package shared by the API and the session client.

Responsibilities:
- Identity types (`Role`, `Principal`, `Session`).
- The role-to-section lookup table and the section guard state machine.
- JWT/password helpers and FastAPI auth dependencies (API side only).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# `models`, `routing` and `guard` are dependency-free so the session client can
# import them without pulling in FastAPI or SQLAlchemy.
