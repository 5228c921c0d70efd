"""
Permission engine facade.

Binds one loaded vocabulary to the pure functions of this package and accepts
raw persistence documents as well as validated records.

Usage:
    engine = PermissionEngine.from_yaml(Path("vocabulary.yaml"))
    caps = engine.resolve(ticket_doc, user_doc, uid)
    visible = engine.filter_visible(ticket_docs, user_doc, uid)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, TypeVar

from maintenance_authz.logging_config import configure_logging
from maintenance_authz.settings import get_settings

from . import matrix, visibility
from .capabilities import CapabilitySet
from .guards import Guards, build_guards
from .records import Actor, WorkItem, coerce_actor, coerce_work_item
from .roles import Role, normalize_role
from .status import TaskStatus, TicketStatus, WorkItemKind, normalize_status
from .vocabulary import Vocabulary, default_vocabulary, load_vocabulary

T = TypeVar("T")

ItemLike = WorkItem | Mapping[str, Any]
ActorLike = Actor | Mapping[str, Any] | None


class PermissionEngine:
    """Stateless apart from its (immutable) vocabulary; safe to share across threads."""

    def __init__(self, vocabulary: Vocabulary) -> None:
        self._vocabulary = vocabulary

    @classmethod
    def from_yaml(cls, path: Path) -> PermissionEngine:
        """Convenience: load vocabulary YAML and build an engine in one step."""
        return cls(load_vocabulary(path))

    @property
    def vocabulary(self) -> Vocabulary:
        return self._vocabulary

    def normalize_role(self, raw: str | None) -> Role | str | None:
        return normalize_role(raw, self._vocabulary)

    def normalize_status(self, kind: WorkItemKind, raw: str | None) -> TicketStatus | TaskStatus | str:
        return normalize_status(kind, raw, self._vocabulary)

    def build_guards(self, item: ItemLike, actor: ActorLike, actor_id: str | int | None) -> Guards:
        return build_guards(coerce_work_item(item), coerce_actor(actor), actor_id)

    def resolve(
        self,
        item: ItemLike,
        actor: ActorLike,
        actor_id: str | None,
        kind: WorkItemKind | None = None,
    ) -> CapabilitySet:
        """``kind`` overrides the record's own ``kind``; see ``resolve_task``."""
        return matrix.resolve(coerce_work_item(item, kind), coerce_actor(actor), actor_id, self._vocabulary)

    def resolve_ticket(self, item: ItemLike, actor: ActorLike, actor_id: str | None) -> CapabilitySet:
        return self.resolve(item, actor, actor_id, kind="ticket")

    def resolve_task(self, item: ItemLike, actor: ActorLike, actor_id: str | None) -> CapabilitySet:
        return self.resolve(item, actor, actor_id, kind="task")

    def filter_visible(
        self,
        items: Iterable[T],
        actor: ActorLike,
        actor_id: str | None,
        kind: WorkItemKind | None = None,
    ) -> list[T]:
        return visibility.filter_visible(items, coerce_actor(actor), actor_id, self._vocabulary, kind)

    def filter_visible_tickets(self, items: Iterable[T], actor: ActorLike, actor_id: str | None) -> list[T]:
        return self.filter_visible(items, actor, actor_id, kind="ticket")

    def filter_visible_tasks(self, items: Iterable[T], actor: ActorLike, actor_id: str | None) -> list[T]:
        return self.filter_visible(items, actor, actor_id, kind="task")

    def visibility_query(self, actor: ActorLike, actor_id: str | None) -> visibility.VisibilityQuery:
        return visibility.visibility_query(coerce_actor(actor), actor_id, self._vocabulary)

    def can_create_work_item(self, actor: ActorLike) -> bool:
        return matrix.can_create_work_item(coerce_actor(actor), self._vocabulary)

    def can_edit_org_settings(self, actor: ActorLike) -> bool:
        return matrix.can_edit_org_settings(coerce_actor(actor), self._vocabulary)

    def can_manage_roles(self, actor: ActorLike) -> bool:
        return matrix.can_manage_roles(coerce_actor(actor), self._vocabulary)


@lru_cache
def get_engine() -> PermissionEngine:
    """Process-wide engine on the configured vocabulary (built once, then shared)."""
    configure_logging(get_settings().log_level)
    return PermissionEngine(default_vocabulary())


# ---- Module-level shortcuts on the default engine ------------------------------------


def resolve(
    item: ItemLike,
    actor: ActorLike,
    actor_id: str | None,
    kind: WorkItemKind | None = None,
) -> CapabilitySet:
    return get_engine().resolve(item, actor, actor_id, kind)


def resolve_ticket(item: ItemLike, actor: ActorLike, actor_id: str | None) -> CapabilitySet:
    return get_engine().resolve_ticket(item, actor, actor_id)


def resolve_task(item: ItemLike, actor: ActorLike, actor_id: str | None) -> CapabilitySet:
    return get_engine().resolve_task(item, actor, actor_id)


def filter_visible(
    items: Iterable[T],
    actor: ActorLike,
    actor_id: str | None,
    kind: WorkItemKind | None = None,
) -> list[T]:
    return get_engine().filter_visible(items, actor, actor_id, kind)


def filter_visible_tickets(items: Iterable[T], actor: ActorLike, actor_id: str | None) -> list[T]:
    return get_engine().filter_visible_tickets(items, actor, actor_id)


def filter_visible_tasks(items: Iterable[T], actor: ActorLike, actor_id: str | None) -> list[T]:
    return get_engine().filter_visible_tasks(items, actor, actor_id)


def visibility_query(actor: ActorLike, actor_id: str | None) -> visibility.VisibilityQuery:
    return get_engine().visibility_query(actor, actor_id)
