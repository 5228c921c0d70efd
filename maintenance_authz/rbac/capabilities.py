"""Capability set returned for one (work item, actor) pair."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields

from pydantic.alias_generators import to_camel


@dataclass(frozen=True)
class CapabilitySet:
    """
    Allow/deny decision per action.

    Every field is computed independently; none implies another.
    """

    can_view: bool = False
    can_comment: bool = False
    can_edit_content: bool = False
    can_assign_any_user: bool = False
    can_assign_to_self: bool = False
    can_assign_to_department_bucket: bool = False
    can_change_department: bool = False
    can_change_priority: bool = False
    can_escalate_to_critical: bool = False
    can_change_status: bool = False
    can_mark_complete: bool = False
    """Task "done" / incident "resolved"."""
    can_request_closure: bool = False
    can_close: bool = False
    can_reopen: bool = False
    can_reassign: bool = False
    can_unassign_self: bool = False
    can_view_audit_trail: bool = False

    @classmethod
    def deny_all(cls) -> CapabilitySet:
        return cls()

    def granted(self) -> tuple[str, ...]:
        """Names of the capabilities that are allowed, in field order."""
        return tuple(f.name for f in fields(self) if getattr(self, f.name))

    def to_dict(self) -> dict[str, bool]:
        """Return a JSON-serializable dict with camelCase keys (``canView``, ...)."""
        return {to_camel(name): value for name, value in asdict(self).items()}
