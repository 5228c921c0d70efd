"""
Role normalizer.

Free-form and legacy role strings (Spanish UI labels, old multi/single
department-head variants, migration leftovers) are translated into the closed
``Role`` enumeration here and nowhere else. Everything downstream switches on
``Role`` members only.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .vocabulary import Vocabulary


class Role(str, Enum):
    """Canonical roles understood by the permission matrix."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MAINTENANCE_LEAD = "maintenance_lead"
    DEPARTMENT_HEAD = "department_head"
    LOCATION_HEAD = "location_head"
    OPERATOR = "operator"
    AUDITOR = "auditor"


ADMIN_LIKE_ROLES = frozenset({Role.SUPER_ADMIN, Role.ADMIN, Role.MAINTENANCE_LEAD})
SCOPED_HEAD_ROLES = frozenset({Role.DEPARTMENT_HEAD, Role.LOCATION_HEAD})
MANAGER_ROLES = ADMIN_LIKE_ROLES | SCOPED_HEAD_ROLES


def normalize_role(raw: str | None, vocabulary: Vocabulary | None = None) -> Role | str | None:
    """
    Canonicalize a role string.

    Returns ``None`` for a missing or blank role. Unknown roles come back
    trimmed and lower-cased so they are never silently dropped, but they match
    no permission branch.
    """

    if raw is None:
        return None
    key = str(raw).strip().lower()
    if not key:
        return None

    if vocabulary is None:
        # Local import to avoid cycles (vocabulary validates against Role).
        from .vocabulary import default_vocabulary

        vocabulary = default_vocabulary()

    return vocabulary.roles.get(key, key)


def is_admin_like(role: Role | str | None) -> bool:
    return role in ADMIN_LIKE_ROLES


def is_scoped_head(role: Role | str | None) -> bool:
    return role in SCOPED_HEAD_ROLES


def is_manager_or_above(role: Role | str | None) -> bool:
    return role in MANAGER_ROLES
