"""Scope resolver and guard builder."""

from __future__ import annotations

from dataclasses import dataclass

from .records import Actor, WorkItem


@dataclass(frozen=True)
class Guards:
    """
    Per-query facts about how an actor relates to a work item.

    Built fresh for every permission query and never stored.
    """

    is_creator: bool
    is_assignee: bool
    in_department_scope: bool
    in_location_scope: bool
    in_scope: bool
    matches_org: bool


def build_guards(item: WorkItem, actor: Actor | None, actor_id: str | int | None) -> Guards:
    # Record ids are coerced to str at the boundary; match that here.
    uid = str(actor_id) if actor_id is not None else ""
    # A missing actor org is permissive; only system/service contexts lack one.
    matches_org = actor is None or not actor.organization_id or actor.organization_id == item.organization_id

    if actor is not None:
        scope = actor.scope()
        in_department_scope = bool(scope.departments & item.department_scope)
        in_location_scope = bool(scope.locations & item.location_scope)
    else:
        in_department_scope = in_location_scope = False

    return Guards(
        is_creator=bool(uid) and item.created_by == uid,
        is_assignee=bool(uid) and item.assigned_to == uid,
        in_department_scope=in_department_scope,
        in_location_scope=in_location_scope,
        in_scope=in_department_scope or in_location_scope,
        matches_org=matches_org,
    )
