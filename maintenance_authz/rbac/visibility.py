"""
Visibility filter and candidate query description.

``filter_visible`` is the authoritative per-item check. ``visibility_query``
only tells a persistence layer which predicates select a superset of what the
actor may see; its results still have to go through ``filter_visible``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TypeVar

from .matrix import resolve
from .records import Actor, coerce_work_item
from .roles import Role, normalize_role
from .status import WorkItemKind
from .vocabulary import Vocabulary

T = TypeVar("T")

DEPARTMENT_FIELDS = ("departmentId", "originDepartmentId", "targetDepartmentId")
LOCATION_FIELDS = ("locationId", "siteId")

_READ_ALL_ROLES = frozenset({Role.SUPER_ADMIN, Role.ADMIN, Role.MAINTENANCE_LEAD, Role.AUDITOR})


def filter_visible(
    items: Iterable[T],
    actor: Actor | None,
    actor_id: str | None,
    vocabulary: Vocabulary | None = None,
    kind: WorkItemKind | None = None,
) -> list[T]:
    """
    Keep the items the actor may view, in input order. Returns the caller's objects.

    ``kind`` overrides the records' own ``kind`` (task collections store none).
    """
    return [
        item for item in items if resolve(coerce_work_item(item, kind), actor, actor_id, vocabulary).can_view
    ]


@dataclass(frozen=True)
class VisibilityQuery:
    """
    Predicates a persistence layer ORs together to fetch candidate items.

    ``organization_id`` restricts every predicate when set. ``read_all`` means
    no further predicate is needed; ``deny`` means nothing should be fetched.
    Field names are the stored (camelCase) document keys.
    """

    deny: bool = False
    read_all: bool = False
    organization_id: str | None = None
    equals: tuple[tuple[str, str], ...] = ()
    any_of: tuple[tuple[str, frozenset[str]], ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.deny or (not self.read_all and not self.equals and not self.any_of)


def visibility_query(
    actor: Actor | None,
    actor_id: str | None,
    vocabulary: Vocabulary | None = None,
) -> VisibilityQuery:
    role = normalize_role(actor.role if actor is not None else None, vocabulary)
    if actor is None or not actor_id or not isinstance(role, Role):
        return VisibilityQuery(deny=True)

    if role is Role.SUPER_ADMIN:
        return VisibilityQuery(read_all=True)

    organization_id = actor.organization_id or None
    if role in _READ_ALL_ROLES:
        return VisibilityQuery(read_all=True, organization_id=organization_id)

    scope = actor.scope()
    equals = (("createdBy", actor_id), ("assignedTo", actor_id))
    any_of: list[tuple[str, frozenset[str]]] = []

    if role in (Role.DEPARTMENT_HEAD, Role.OPERATOR) and scope.departments:
        any_of.extend((name, scope.departments) for name in DEPARTMENT_FIELDS)
    if role in (Role.LOCATION_HEAD, Role.OPERATOR) and scope.locations:
        any_of.extend((name, scope.locations) for name in LOCATION_FIELDS)

    return VisibilityQuery(organization_id=organization_id, equals=equals, any_of=tuple(any_of))
