"""
inventory_access.auth.roles

Role hierarchy for navigation and record authorization.

Responsibilities:
- Define the three application roles and their strict ordering.
- Compare a held role against a required role.
"""

from __future__ import annotations

import enum


class Role(enum.StrEnum):
    # Values are stored in the profiles table; treat as stable API contract.
    intruso = "intruso"
    membro = "membro"
    gerente = "gerente"


_RANKS: dict[str, int] = {
    Role.intruso: 0,
    Role.membro: 1,
    Role.gerente: 2,
}


def rank(role: Role | str | None) -> int:
    # Unknown or missing roles rank as the most restrictive one.
    if role is None:
        return 0
    return _RANKS.get(str(role), 0)


def satisfies(held: Role | str | None, required: Role | str = Role.membro) -> bool:
    return rank(held) >= rank(required)


def is_member_or_manager(role: Role | str | None) -> bool:
    return satisfies(role, Role.membro)


def is_manager(role: Role | str | None) -> bool:
    return rank(role) == rank(Role.gerente)


# --- Module Notes -----------------------------------------------------------
# Pure and total: nothing here raises, so guards and adoption checks can call it
# with whatever the profile lookup produced.
