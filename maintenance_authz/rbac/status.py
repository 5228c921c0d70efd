"""
Lifecycle status normalizer for tickets and tasks.

Tickets and tasks keep independent tables. The only facts the permission
matrix needs are "is this item closed?" and "is it still in its initial state?",
both answered on the normalized value.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from .vocabulary import Vocabulary

WorkItemKind = Literal["ticket", "task"]


class TicketStatus(str, Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class TaskStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    DONE = "done"


_TERMINAL: dict[str, Enum] = {"ticket": TicketStatus.RESOLVED, "task": TaskStatus.DONE}
_INITIAL: dict[str, Enum] = {"ticket": TicketStatus.NEW, "task": TaskStatus.OPEN}


def _vocabulary(vocabulary: Vocabulary | None) -> Vocabulary:
    if vocabulary is not None:
        return vocabulary
    # Local import to avoid cycles (vocabulary validates against the enums).
    from .vocabulary import default_vocabulary

    return default_vocabulary()


def _clean(raw: str | None) -> str:
    return str(raw if raw is not None else "").strip()


def normalize_ticket_status(raw: str | None, vocabulary: Vocabulary | None = None) -> TicketStatus | str:
    value = _clean(raw)
    return _vocabulary(vocabulary).ticket_status.get(value.casefold(), value)


def normalize_task_status(raw: str | None, vocabulary: Vocabulary | None = None) -> TaskStatus | str:
    value = _clean(raw)
    return _vocabulary(vocabulary).task_status.get(value.casefold(), value)


def normalize_status(
    kind: WorkItemKind,
    raw: str | None,
    vocabulary: Vocabulary | None = None,
) -> TicketStatus | TaskStatus | str:
    """Dispatch to the ticket or task table based on the item kind."""
    if kind == "task":
        return normalize_task_status(raw, vocabulary)
    return normalize_ticket_status(raw, vocabulary)


def is_closed(kind: WorkItemKind, raw: str | None, vocabulary: Vocabulary | None = None) -> bool:
    """True iff the normalized status is the terminal state for ``kind``."""
    return normalize_status(kind, raw, vocabulary) == _TERMINAL[kind]


def is_initial(kind: WorkItemKind, raw: str | None, vocabulary: Vocabulary | None = None) -> bool:
    """True iff the normalized status is the initial (new/open) state for ``kind``."""
    return normalize_status(kind, raw, vocabulary) == _INITIAL[kind]


def ticket_status_label(raw: str | None, vocabulary: Vocabulary | None = None) -> str:
    vocab = _vocabulary(vocabulary)
    return _label(vocab.ticket_labels, raw, normalize_ticket_status(raw, vocab), vocab.fallback_label)


def task_status_label(raw: str | None, vocabulary: Vocabulary | None = None) -> str:
    vocab = _vocabulary(vocabulary)
    return _label(vocab.task_labels, raw, normalize_task_status(raw, vocab), vocab.fallback_label)


def _label(labels: Mapping[str, str], raw: str | None, status: Enum | str, fallback: str) -> str:
    # Raw codes keep their own label ("closed" -> "Cerrada") even though they
    # collapse into a canonical state for permission purposes.
    code = _clean(raw)
    for key in (code, code.casefold(), status.value if isinstance(status, Enum) else status):
        if key in labels:
            return labels[key]
    return fallback
