"""
inventory_access.api.routers

Router modules for the UI-facing API.
"""
