"""
inventory_access.auth

Session, role and navigation-admission package.

Responsibilities:
- Role hierarchy and profile cache.
- Session state machine driven by identity-provider events.
- Route guards evaluated from session state.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package performs I/O directly; providers and stores are injected.
