"""
minifeed.auth.models

Auth domain models.

Responsibilities:
- Define the closed set of role names.
- Define the authenticated identity type (`Principal`) threaded through requests.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

# Every scope claim entry becomes an authority with this prefix.
SCOPE_PREFIX = "SCOPE_"


class RoleName(enum.StrEnum):
    # Values and ids are seeded at startup; treat as a stable contract.
    admin = "ADMIN"
    basic = "BASIC"

    @property
    def role_id(self) -> int:
        return _ROLE_IDS[self]

    @property
    def authority(self) -> str:
        return SCOPE_PREFIX + self.value


_ROLE_IDS: dict[RoleName, int] = {RoleName.admin: 1, RoleName.basic: 2}

ADMIN_AUTHORITY = RoleName.admin.authority


def authorities_from_scope(scope: str) -> frozenset[str]:
    return frozenset(SCOPE_PREFIX + part for part in scope.split())


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, rebuilt from a verified token on every request.
    """

    subject: str
    authorities: frozenset[str]

    def has_authority(self, authority: str) -> bool:
        return authority in self.authorities

    @property
    def is_admin(self) -> bool:
        return ADMIN_AUTHORITY in self.authorities


# --- Module Notes -----------------------------------------------------------
# Principals are never persisted; `subject` is the user's UUID as a string.
