"""
Pytest fixtures for the test suite.

Records are built from camelCase documents, the shape the persistence layer
hands over, so every test also goes through the boundary models.
"""
from __future__ import annotations

import pytest

from maintenance_authz.rbac.records import Actor, WorkItem


def _ticket_doc(**overrides) -> dict:
    doc = {
        "id": "ticket-1",
        "organizationId": "org-1",
        "kind": "ticket",
        "status": "new",
        "siteId": "site-legacy",
        "locationId": "loc-1",
        "departmentId": "legacy-dept",
        "originDepartmentId": "dept-1",
        "targetDepartmentId": "dept-1",
        "createdBy": "user-creator",
        "assignedTo": None,
    }
    doc.update(overrides)
    return doc


def _task_doc(**overrides) -> dict:
    doc = {
        "id": "task-1",
        "organizationId": "org-1",
        "kind": "task",
        "status": "open",
        "originDepartmentId": "dept-1",
        "targetDepartmentId": "dept-1",
        "locationId": "loc-1",
        "createdBy": "user-creator",
    }
    doc.update(overrides)
    return doc


def _actor_doc(**overrides) -> dict:
    doc = {
        "id": "user-1",
        "organizationId": "org-1",
        "role": "operario",
        "active": True,
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def make_ticket():
    """Factory: ``make_ticket(status="Cerrada", ...)`` -> WorkItem."""
    return lambda **overrides: WorkItem.model_validate(_ticket_doc(**overrides))


@pytest.fixture
def make_task():
    return lambda **overrides: WorkItem.model_validate(_task_doc(**overrides))


@pytest.fixture
def make_actor():
    return lambda **overrides: Actor.model_validate(_actor_doc(**overrides))


@pytest.fixture
def ticket_doc():
    """Factory for raw ticket documents (for the engine's mapping input)."""
    return _ticket_doc


@pytest.fixture
def actor_doc():
    return _actor_doc
