"""
inventory_access.services

Service-layer package.

Responsibilities:
- Ownership adoption of orphaned records.
- User-facing notification sinks.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services should be pure Python and easily testable with fake stores/sessions.
