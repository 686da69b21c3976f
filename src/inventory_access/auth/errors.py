"""
inventory_access.auth.errors

Error taxonomy for session, profile and adoption operations.

Responsibilities:
- Carry a human-readable message that can be shown to the user as-is.
- Let the API layer map failures onto HTTP status codes.
"""

from __future__ import annotations


class AccessError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthenticated(AccessError):
    def __init__(self, message: str = "Sign in to continue") -> None:
        super().__init__(message)


class Forbidden(AccessError):
    def __init__(self, message: str = "Your role does not allow this action") -> None:
        super().__init__(message)


class LookupFailed(AccessError):
    pass


class AdoptionConflict(AccessError):
    def __init__(self, message: str = "This record already has an owner") -> None:
        super().__init__(message)


class RecordNotFound(AccessError):
    def __init__(self, message: str = "Record not found") -> None:
        super().__init__(message)


class ProviderError(AccessError):
    """
    Failure reported by the identity provider (sign-in, sign-up, reset...).
    `message` is the provider's own text.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DataStoreError(AccessError):
    pass


# --- Module Notes -----------------------------------------------------------
# None of these are fatal: callers degrade to anonymous or lowest-role state.
