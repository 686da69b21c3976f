"""
inventory_access.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for profiles, ownable records and claims.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; transaction boundaries belong to `SqlDataStore`.
