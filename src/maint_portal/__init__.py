"""
maint_portal

Top-level package for the maintenance portal: the Portal API service and the
session/authorization client core.

Responsibilities:
- Expose package version metadata.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"


# --- Module Notes -----------------------------------------------------------
# Keep this file minimal; the session client is imported without the API stack.
