"""
Boundary records supplied by the persistence layer.

Documents arrive with camelCase keys and a mix of legacy single-valued and
newer multi-valued scope fields. The models accept them as-is; the
``department_scope`` / ``location_scope`` / ``Actor.scope()`` helpers are the
one place where those aliases are folded into plain sets.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .status import WorkItemKind

_RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    from_attributes=True,
    coerce_numbers_to_str=True,
    extra="ignore",
    frozen=True,
)


def _ids(*values: str | Iterable[str] | None) -> frozenset[str]:
    out: set[str] = set()
    for value in values:
        if value is None:
            continue
        if isinstance(value, str):
            value = (value,)
        out.update(v for v in value if v)
    return frozenset(out)


@dataclass(frozen=True)
class ScopeMembership:
    """An actor's organizational memberships, one set per dimension."""

    departments: frozenset[str]
    locations: frozenset[str]


class WorkItem(BaseModel):
    """Ticket (incident) or task (maintenance job); both share the scoping shape."""

    model_config = _RECORD_CONFIG

    id: str | None = None
    organization_id: str | None = None
    kind: WorkItemKind = "ticket"
    status: str | None = None
    created_by: str | None = None
    assigned_to: str | None = None

    department_id: str | None = None
    origin_department_id: str | None = None
    target_department_id: str | None = None

    location_id: str | None = None
    site_id: str | None = None

    @property
    def origin_department(self) -> str | None:
        return self.origin_department_id or self.department_id

    @property
    def target_department(self) -> str | None:
        return self.target_department_id or self.department_id

    @property
    def department_scope(self) -> frozenset[str]:
        """Origin and target departments; both match while a transfer is pending."""
        return _ids(self.origin_department, self.target_department)

    @property
    def location(self) -> str | None:
        return self.location_id or self.site_id

    @property
    def location_scope(self) -> frozenset[str]:
        return _ids(self.location)


class Actor(BaseModel):
    """The authenticated subject. ``active`` is gated upstream and not evaluated here."""

    model_config = _RECORD_CONFIG

    id: str | None = None
    organization_id: str | None = None
    role: str | None = None
    active: bool | None = True

    department_id: str | None = None
    department_ids: list[str] | None = None

    location_id: str | None = None
    site_id: str | None = None
    location_ids: list[str] | None = None
    site_ids: list[str] | None = None

    def scope(self) -> ScopeMembership:
        return ScopeMembership(
            departments=_ids(self.department_id, self.department_ids),
            locations=_ids(self.location_id, self.site_id, self.location_ids, self.site_ids),
        )


def coerce_work_item(obj: WorkItem | Mapping[str, Any] | Any, kind: WorkItemKind | None = None) -> WorkItem:
    """
    Validate ``obj`` as a ``WorkItem``.

    Stored task documents carry no ``kind``; callers that know the collection
    pass ``kind`` so the right status table applies.
    """
    item = obj if isinstance(obj, WorkItem) else WorkItem.model_validate(obj)
    if kind is not None and item.kind != kind:
        item = item.model_copy(update={"kind": kind})
    return item


def coerce_actor(obj: Actor | Mapping[str, Any] | Any | None) -> Actor | None:
    if obj is None or isinstance(obj, Actor):
        return obj
    return Actor.model_validate(obj)
