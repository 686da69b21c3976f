"""
inventory_access.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation for consistent log enrichment.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Session and adoption events are logged by their owning modules; this package
# only decides how log lines are shaped and where they go.
