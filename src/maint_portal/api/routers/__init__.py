"""
maint_portal.api.routers

One module per URL prefix; each exposes a module-level `router`.
"""
