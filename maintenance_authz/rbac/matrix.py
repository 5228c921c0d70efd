"""
Permission matrix.

Pure function of (canonical role, guards, lifecycle state) -> ``CapabilitySet``.
Anything that cannot be evaluated (no actor id, no role, unknown role) resolves
to the all-false set instead of raising.
"""

from __future__ import annotations

from collections.abc import Callable
import logging

from .capabilities import CapabilitySet
from .guards import Guards, build_guards
from .records import Actor, WorkItem
from .roles import Role, is_manager_or_above, normalize_role
from .status import is_closed, is_initial
from .vocabulary import Vocabulary

logger = logging.getLogger(__name__)


# ---- Visibility ----------------------------------------------------------------------

# Evaluated only once the tenant wall has passed (super_admin skips it).
_VISIBILITY: dict[Role, Callable[[Guards], bool]] = {
    Role.SUPER_ADMIN: lambda g: True,
    Role.ADMIN: lambda g: True,
    Role.MAINTENANCE_LEAD: lambda g: True,
    Role.AUDITOR: lambda g: True,
    Role.DEPARTMENT_HEAD: lambda g: g.in_department_scope or g.is_creator or g.is_assignee,
    Role.LOCATION_HEAD: lambda g: g.in_location_scope or g.is_creator or g.is_assignee,
    Role.OPERATOR: lambda g: g.is_creator or g.is_assignee or g.in_scope,
}


def _can_view(role: Role, guards: Guards) -> bool:
    if role is Role.SUPER_ADMIN:
        return True
    if not guards.matches_org:
        return False
    return _VISIBILITY[role](guards)


def _head_in_scope(role: Role, guards: Guards) -> bool:
    """Scope check for scoped heads; other roles carry no extra scope requirement."""
    if role is Role.DEPARTMENT_HEAD:
        return guards.in_department_scope
    if role is Role.LOCATION_HEAD:
        return guards.in_location_scope
    return True


# ---- Main decision API ---------------------------------------------------------------


def evaluate(role: Role, guards: Guards, *, closed: bool, initial: bool) -> CapabilitySet:
    """Capability set for an already-normalized role and precomputed guards."""

    can_view = _can_view(role, guards)

    if role is Role.AUDITOR:
        # Read-only: auditors never comment, edit, assign or transition state.
        return CapabilitySet(can_view=can_view, can_view_audit_trail=can_view)

    is_operator = role is Role.OPERATOR
    is_super = role is Role.SUPER_ADMIN
    involved = guards.is_creator or guards.is_assignee

    manager_in_scope = is_manager_or_above(role) and (
        is_super or (guards.matches_org and _head_in_scope(role, guards))
    )

    can_assign_any_user = (
        is_super
        or role in (Role.ADMIN, Role.MAINTENANCE_LEAD)
        or (role is Role.DEPARTMENT_HEAD and guards.matches_org and guards.in_department_scope)
        or (role is Role.LOCATION_HEAD and guards.matches_org and guards.in_location_scope)
    )

    operator_involved = is_operator and can_view and involved

    content_rights = is_super or (
        guards.matches_org
        and (
            role in (Role.ADMIN, Role.MAINTENANCE_LEAD)
            or (role is Role.DEPARTMENT_HEAD and guards.in_department_scope)
            or (role is Role.LOCATION_HEAD and guards.in_location_scope)
            or (is_operator and involved)
        )
    )

    if is_operator:
        can_assign_to_self = can_view
        can_assign_to_bucket = can_view and not closed
        can_change_department = can_view and initial
        can_mark_complete = can_view and guards.is_assignee
    else:
        can_assign_to_self = can_assign_any_user
        can_assign_to_bucket = can_assign_any_user and guards.matches_org and not closed
        can_change_department = manager_in_scope
        can_mark_complete = manager_in_scope and not closed

    return CapabilitySet(
        can_view=can_view,
        can_comment=can_view,
        can_edit_content=content_rights,
        can_assign_any_user=can_assign_any_user,
        can_assign_to_self=can_assign_to_self,
        can_assign_to_department_bucket=can_assign_to_bucket,
        can_change_department=can_change_department,
        can_change_priority=manager_in_scope or operator_involved,
        can_escalate_to_critical=manager_in_scope and not closed,
        can_change_status=manager_in_scope or operator_involved,
        can_mark_complete=can_mark_complete,
        can_request_closure=(operator_involved or manager_in_scope) and not closed,
        can_close=manager_in_scope and not is_operator and not closed,
        can_reopen=manager_in_scope and not is_operator,
        can_reassign=manager_in_scope and not closed,
        can_unassign_self=is_operator and guards.is_assignee,
        can_view_audit_trail=content_rights,
    )


def resolve(
    item: WorkItem,
    actor: Actor | None,
    actor_id: str | None,
    vocabulary: Vocabulary | None = None,
) -> CapabilitySet:
    """
    Decide every capability of ``actor`` on ``item``.

    Algorithm:
    1. No actor id or no role -> deny all.
    2. Unknown (pass-through) role -> deny all.
    3. Build guards and evaluate the matrix for the item's lifecycle state.
    """

    role = normalize_role(actor.role if actor is not None else None, vocabulary)
    if not actor_id or role is None:
        logger.debug("RBAC: deny-by-default item=%s actor_id=%s role=%s", item.id, actor_id, role)
        return CapabilitySet.deny_all()

    if not isinstance(role, Role):
        logger.debug("RBAC: unknown role=%r actor_id=%s item=%s", role, actor_id, item.id)
        return CapabilitySet.deny_all()

    guards = build_guards(item, actor, actor_id)
    if not guards.matches_org and role is not Role.SUPER_ADMIN:
        logger.debug(
            "RBAC: tenant wall actor_id=%s actor_org=%s item=%s item_org=%s",
            actor_id,
            actor.organization_id if actor is not None else None,
            item.id,
            item.organization_id,
        )

    return evaluate(
        role,
        guards,
        closed=is_closed(item.kind, item.status, vocabulary),
        initial=is_initial(item.kind, item.status, vocabulary),
    )


# ---- Actor-level permissions ---------------------------------------------------------


def can_create_work_item(actor: Actor | None, vocabulary: Vocabulary | None = None) -> bool:
    """Every canonical role except the read-only auditor may open tickets and tasks."""
    role = normalize_role(actor.role if actor is not None else None, vocabulary)
    return isinstance(role, Role) and role is not Role.AUDITOR


def can_edit_org_settings(actor: Actor | None, vocabulary: Vocabulary | None = None) -> bool:
    return normalize_role(actor.role if actor is not None else None, vocabulary) is Role.SUPER_ADMIN


def can_manage_roles(actor: Actor | None, vocabulary: Vocabulary | None = None) -> bool:
    return normalize_role(actor.role if actor is not None else None, vocabulary) is Role.SUPER_ADMIN
