"""
inventory_access.identity_clients

Identity provider client package.

Responsibilities:
- Define the provider interface consumed by the session manager.
- Provide an HTTP implementation for a GoTrue-style auth server.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Tests substitute an in-memory provider; the session manager only sees the protocol.
