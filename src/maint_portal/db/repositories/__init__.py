"""
maint_portal.db.repositories

Thin data-access classes, one per table. Business rules live in `maint_portal.services`.
"""
