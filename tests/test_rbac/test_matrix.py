"""
Tests for the permission matrix.

Scenarios mirror how the UI and server-side rules consume the capability set:
one (item, actor, actor id) triple per assertion block.
"""
from __future__ import annotations

from dataclasses import fields

import pytest

from maintenance_authz.rbac.capabilities import CapabilitySet
from maintenance_authz.rbac.guards import Guards
from maintenance_authz.rbac.matrix import (
    _VISIBILITY,
    can_create_work_item,
    can_edit_org_settings,
    can_manage_roles,
    evaluate,
    resolve,
)
from maintenance_authz.rbac.roles import Role

ALL_ROLES = [
    "super_admin",
    "admin",
    "mantenimiento",
    "jefe_departamento",
    "jefe_ubicacion",
    "operario",
    "auditor",
]


def _only(caps: CapabilitySet, *names: str) -> None:
    assert set(caps.granted()) == set(names)


# ---- Deny by default -----------------------------------------------------------------


@pytest.mark.parametrize("role", ALL_ROLES)
@pytest.mark.parametrize("actor_id", ["", None])
def test_empty_actor_id_denies_everything(make_ticket, make_actor, role, actor_id):
    caps = resolve(make_ticket(), make_actor(role=role), actor_id)
    assert caps == CapabilitySet.deny_all()


@pytest.mark.parametrize("role", [None, "", "owner", "guest"])
def test_missing_or_unknown_role_denies_everything(make_ticket, make_actor, role):
    item = make_ticket(createdBy="user-1", assignedTo="user-1")
    assert resolve(item, make_actor(role=role), "user-1") == CapabilitySet.deny_all()


def test_missing_actor_denies_everything(make_ticket):
    assert resolve(make_ticket(), None, "user-1") == CapabilitySet.deny_all()


def test_every_canonical_role_has_a_visibility_rule():
    assert set(_VISIBILITY) == set(Role)


# ---- Tenant wall ---------------------------------------------------------------------


def test_super_admin_sees_and_edits_any_org(make_ticket, make_actor):
    caps = resolve(make_ticket(organizationId="org-9"), make_actor(role="super_admin", id="root"), "root")
    assert caps.can_view
    assert caps.can_edit_content
    assert caps.can_close
    assert caps.can_view_audit_trail


@pytest.mark.parametrize("role", ALL_ROLES[1:])
def test_other_roles_stop_at_tenant_wall(make_ticket, make_actor, role):
    item = make_ticket(createdBy="user-1", assignedTo="user-1")
    actor = make_actor(role=role, organizationId="org-2", departmentId="dept-1", locationId="loc-1")
    caps = resolve(item, actor, "user-1")
    assert not caps.can_view
    assert not caps.can_edit_content
    assert not caps.can_view_audit_trail


def test_cross_org_admin_cannot_view(make_ticket, make_task, make_actor):
    actor = make_actor(role="admin", id="user-admin", organizationId="org-2")
    assert not resolve(make_ticket(), actor, actor.id).can_view
    assert not resolve(make_task(), actor, actor.id).can_view


# ---- Auditor ---------------------------------------------------------------------------


def test_auditor_is_read_only(make_ticket, make_actor):
    actor = make_actor(role="auditor", id="user-audit")
    caps = resolve(make_ticket(assignedTo="user-audit"), actor, actor.id)
    _only(caps, "can_view", "can_view_audit_trail")


def test_auditor_in_other_org_gets_nothing(make_ticket, make_actor):
    actor = make_actor(role="auditor", id="user-audit", organizationId="org-2")
    assert resolve(make_ticket(), actor, actor.id) == CapabilitySet.deny_all()


# ---- Admin-like roles ------------------------------------------------------------------


@pytest.mark.parametrize("role", ["admin", "mantenimiento"])
def test_admin_like_roles_on_open_ticket(make_ticket, make_actor, role):
    actor = make_actor(role=role, id="mgr")
    caps = resolve(make_ticket(), actor, actor.id)
    _only(
        caps,
        "can_view",
        "can_comment",
        "can_edit_content",
        "can_assign_any_user",
        "can_assign_to_self",
        "can_assign_to_department_bucket",
        "can_change_department",
        "can_change_priority",
        "can_escalate_to_critical",
        "can_change_status",
        "can_mark_complete",
        "can_request_closure",
        "can_close",
        "can_reopen",
        "can_reassign",
        "can_view_audit_trail",
    )


def test_manager_on_closed_ticket(make_ticket, make_actor):
    actor = make_actor(role="admin", id="mgr")
    caps = resolve(make_ticket(status="Cerrada"), actor, actor.id)

    assert caps.can_view
    assert caps.can_reopen
    assert caps.can_change_status
    assert caps.can_change_priority
    assert caps.can_change_department
    assert caps.can_assign_any_user

    assert not caps.can_close
    assert not caps.can_escalate_to_critical
    assert not caps.can_reassign
    assert not caps.can_mark_complete
    assert not caps.can_request_closure
    assert not caps.can_assign_to_department_bucket


# ---- Scoped heads ----------------------------------------------------------------------


def test_department_head_in_scope_can_assign_anyone(make_ticket, make_actor):
    actor = make_actor(role="jefe_departamento", id="user-dept", departmentId="dept-1")
    caps = resolve(make_ticket(originDepartmentId="dept-1", targetDepartmentId="dept-1"), actor, actor.id)
    assert caps.can_assign_any_user
    assert caps.can_close
    assert caps.can_edit_content


def test_department_head_matches_transfer_target(make_ticket, make_actor):
    actor = make_actor(role="dept_head_multi", id="head", departmentIds=["dept-7", "dept-8"])
    item = make_ticket(originDepartmentId="dept-1", targetDepartmentId="dept-8")
    assert resolve(item, actor, actor.id).can_reassign


def test_department_head_out_of_scope_creator_can_only_view(make_ticket, make_actor):
    actor = make_actor(role="jefe_departamento", id="head", departmentId="dept-5")
    caps = resolve(make_ticket(createdBy="head"), actor, actor.id)
    _only(caps, "can_view", "can_comment")


def test_department_head_ignores_location_scope(make_ticket, make_actor):
    actor = make_actor(role="jefe_departamento", id="head", departmentId="dept-5", locationId="loc-1")
    assert not resolve(make_ticket(), actor, actor.id).can_view


def test_location_head_in_scope_can_view_and_edit(make_ticket, make_task, make_actor):
    actor = make_actor(role="jefe_ubicacion", id="user-loc", locationId="loc-2")
    for item in (
        make_ticket(originDepartmentId="dept-2", targetDepartmentId="dept-2", locationId="loc-2"),
        make_task(originDepartmentId="dept-2", targetDepartmentId="dept-2", locationId="loc-2"),
    ):
        caps = resolve(item, actor, actor.id)
        assert caps.can_view
        assert caps.can_edit_content
        assert caps.can_assign_any_user
        assert caps.can_close


def test_location_head_matches_legacy_site_alias(make_ticket, make_actor):
    actor = make_actor(role="jefe_ubicacion", id="user-loc", siteIds=["site-legacy"])
    item = make_ticket(locationId=None)
    assert resolve(item, actor, actor.id).can_view


def test_location_head_out_of_scope(make_ticket, make_actor):
    actor = make_actor(role="jefe_ubicacion", id="user-loc", locationId="loc-9", departmentId="dept-1")
    assert not resolve(make_ticket(), actor, actor.id).can_view


# ---- Operator --------------------------------------------------------------------------


def test_operator_sees_own_department_ticket(make_ticket, make_actor):
    item = make_ticket(originDepartmentId="dept-1", targetDepartmentId="dept-1", createdBy="other-user")
    actor = make_actor(role="operario", id="user-op", departmentId="dept-1")
    caps = resolve(item, actor, actor.id)
    _only(
        caps,
        "can_view",
        "can_comment",
        "can_assign_to_self",
        "can_assign_to_department_bucket",
        "can_change_department",
    )


def test_operator_out_of_scope_cannot_view(make_ticket, make_task, make_actor):
    actor = make_actor(role="operario", id="user-op", departmentId="dept-1", locationId="loc-1")
    ticket = make_ticket(originDepartmentId="dept-2", targetDepartmentId="dept-2", locationId="loc-2", createdBy="x")
    task = make_task(originDepartmentId="dept-2", targetDepartmentId="dept-2", locationId="loc-2")
    assert not resolve(ticket, actor, actor.id).can_view
    assert not resolve(task, actor, actor.id).can_view


def test_operator_sees_location_scoped_item(make_ticket, make_actor):
    actor = make_actor(role="operario", id="user-op", departmentId="dept-1", locationId="loc-1")
    item = make_ticket(originDepartmentId="dept-2", targetDepartmentId="dept-2", locationId="loc-1")
    assert resolve(item, actor, actor.id).can_view


def test_operator_assignee_rights(make_ticket, make_actor):
    actor = make_actor(role="operario", id="user-op", departmentId="dept-9")
    caps = resolve(make_ticket(assignedTo="user-op", status="En curso"), actor, actor.id)
    _only(
        caps,
        "can_view",
        "can_comment",
        "can_edit_content",
        "can_assign_to_self",
        "can_assign_to_department_bucket",
        "can_change_priority",
        "can_change_status",
        "can_mark_complete",
        "can_request_closure",
        "can_unassign_self",
        "can_view_audit_trail",
    )


def test_operator_creator_cannot_mark_complete(make_ticket, make_actor):
    actor = make_actor(role="operario", id="user-op")
    caps = resolve(make_ticket(createdBy="user-op"), actor, actor.id)
    assert caps.can_request_closure
    assert caps.can_edit_content
    assert not caps.can_mark_complete
    assert not caps.can_unassign_self


def test_operator_never_closes_or_reopens(make_ticket, make_actor):
    actor = make_actor(role="operario", id="user-op", departmentId="dept-1")
    for status in ("new", "Cerrada"):
        caps = resolve(make_ticket(assignedTo="user-op", status=status), actor, actor.id)
        assert not caps.can_close
        assert not caps.can_reopen
        assert not caps.can_reassign
        assert not caps.can_escalate_to_critical
        assert not caps.can_assign_any_user


def test_operator_change_department_only_while_new(make_ticket, make_task, make_actor):
    actor = make_actor(role="operario", id="user-op", departmentId="dept-1")
    assert resolve(make_ticket(status="Abierta"), actor, actor.id).can_change_department
    assert not resolve(make_ticket(status="En curso"), actor, actor.id).can_change_department
    assert resolve(make_task(status="pendiente"), actor, actor.id).can_change_department
    assert not resolve(make_task(status="en_progreso"), actor, actor.id).can_change_department


def test_operator_on_closed_item(make_task, make_actor):
    actor = make_actor(role="operario", id="user-op")
    caps = resolve(make_task(status="completada", assignedTo="user-op"), actor, actor.id)
    assert caps.can_view
    assert caps.can_mark_complete
    assert caps.can_change_status
    assert not caps.can_request_closure
    assert not caps.can_assign_to_department_bucket


# ---- Properties ------------------------------------------------------------------------


def test_resolution_is_idempotent(make_ticket, make_actor):
    item = make_ticket(assignedTo="user-op")
    actor = make_actor(role="operario", id="user-op")
    first = resolve(item, actor, actor.id)
    second = resolve(item, actor, actor.id)
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_evaluate_with_explicit_guards():
    guards = Guards(
        is_creator=False,
        is_assignee=False,
        in_department_scope=False,
        in_location_scope=True,
        in_scope=True,
        matches_org=True,
    )
    caps = evaluate(Role.DEPARTMENT_HEAD, guards, closed=False, initial=True)
    assert not caps.can_view
    assert not caps.can_assign_any_user

    caps = evaluate(Role.LOCATION_HEAD, guards, closed=False, initial=True)
    assert caps.can_view
    assert caps.can_assign_any_user


def test_capability_set_serialization():
    caps = CapabilitySet(can_view=True, can_mark_complete=True)
    data = caps.to_dict()
    assert data["canView"] is True
    assert data["canMarkComplete"] is True
    assert data["canClose"] is False
    assert len(data) == len(fields(CapabilitySet)) == 17
    assert caps.granted() == ("can_view", "can_mark_complete")


# ---- Actor-level permissions -----------------------------------------------------------


@pytest.mark.parametrize(
    "role, expected",
    [
        ("super_admin", True),
        ("admin", True),
        ("mantenimiento", True),
        ("jefe_departamento", True),
        ("jefe_ubicacion", True),
        ("operario", True),
        ("auditor", False),
        ("owner", False),
        (None, False),
    ],
)
def test_can_create_work_item(make_actor, role, expected):
    assert can_create_work_item(make_actor(role=role)) is expected


def test_org_settings_and_role_management_are_super_admin_only(make_actor):
    assert can_edit_org_settings(make_actor(role="superadmin"))
    assert can_manage_roles(make_actor(role="super_admin"))
    assert not can_edit_org_settings(make_actor(role="admin"))
    assert not can_manage_roles(make_actor(role="admin"))
    assert not can_manage_roles(None)
