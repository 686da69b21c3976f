"""
inventory_access.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, repositories and the `SqlDataStore`.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The session manager and adoption service depend on the `DataStore` protocol,
# not on this package, so another backend can be dropped in.
