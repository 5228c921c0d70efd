"""
Authorization and visibility engine for maintenance work items.

Pure decision functions: given a work item (ticket or task), an actor record
and the actor's id, compute the ``CapabilitySet``; over a batch, keep the items
the actor may view. Nothing here fetches, caches or enforces.
"""

from .capabilities import CapabilitySet
from .engine import (
    PermissionEngine,
    filter_visible,
    filter_visible_tasks,
    filter_visible_tickets,
    get_engine,
    resolve,
    resolve_task,
    resolve_ticket,
    visibility_query,
)
from .guards import Guards, build_guards
from .records import Actor, ScopeMembership, WorkItem
from .roles import Role, is_admin_like, is_manager_or_above, is_scoped_head, normalize_role
from .status import (
    TaskStatus,
    TicketStatus,
    is_closed,
    normalize_task_status,
    normalize_ticket_status,
    task_status_label,
    ticket_status_label,
)
from .visibility import VisibilityQuery
from .vocabulary import Vocabulary, VocabularyConfigError, load_vocabulary

__all__ = [
    "Actor",
    "CapabilitySet",
    "Guards",
    "PermissionEngine",
    "Role",
    "ScopeMembership",
    "TaskStatus",
    "TicketStatus",
    "VisibilityQuery",
    "Vocabulary",
    "VocabularyConfigError",
    "WorkItem",
    "build_guards",
    "filter_visible",
    "filter_visible_tasks",
    "filter_visible_tickets",
    "get_engine",
    "is_admin_like",
    "is_closed",
    "is_manager_or_above",
    "is_scoped_head",
    "load_vocabulary",
    "normalize_role",
    "normalize_task_status",
    "normalize_ticket_status",
    "resolve",
    "resolve_task",
    "resolve_ticket",
    "task_status_label",
    "ticket_status_label",
    "visibility_query",
]
