"""
Normalization vocabulary and YAML loader.

The role and status tables are data, not code, so the same file can be shipped
to every place that evaluates permissions (UI layer, server-side enforcement).
Key ideas:
- Load YAML once (roles + ticket/task statuses + display labels).
- Validate the shape, reject unknown canonical values and ambiguous synonyms.
- Precompile flat ``synonym -> canonical`` lookup tables.

Canonical names always map to themselves, even when the file omits them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
import logging
from pathlib import Path
from typing import Any, Callable, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
import yaml

from maintenance_authz.settings import get_settings

from .roles import Role
from .status import TaskStatus, TicketStatus

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


# ---- File model ----------------------------------------------------------------------


class LabelsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    fallback: str = "Pendiente"
    ticket: dict[str, str] = Field(default_factory=dict)
    task: dict[str, str] = Field(default_factory=dict)


class VocabularyFileModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    roles: dict[str, list[str]] = Field(default_factory=dict)
    ticket_status: dict[str, list[str]] = Field(default_factory=dict)
    task_status: dict[str, list[str]] = Field(default_factory=dict)
    labels: LabelsModel = Field(default_factory=LabelsModel)


# ---- Compiled vocabulary -------------------------------------------------------------


@dataclass(frozen=True)
class Vocabulary:
    """Compiled lookup tables. Keys are already lower-cased / case-folded."""

    roles: Mapping[str, Role]
    ticket_status: Mapping[str, TicketStatus]
    task_status: Mapping[str, TaskStatus]
    ticket_labels: Mapping[str, str]
    task_labels: Mapping[str, str]
    fallback_label: str


class VocabularyConfigError(ValueError):
    """Raised when the vocabulary YAML is invalid."""


def _compile_table(
    section: str,
    raw: Mapping[str, list[str]],
    enum_cls: type[E],
    fold: Callable[[str], str],
) -> dict[str, E]:
    table: dict[str, E] = {member.value: member for member in enum_cls}

    for canonical_name, synonyms in raw.items():
        try:
            canonical = enum_cls(canonical_name)
        except ValueError:
            raise VocabularyConfigError(
                f"{section}: unknown canonical value {canonical_name!r}; "
                f"expected one of {sorted(m.value for m in enum_cls)}"
            ) from None

        for synonym in synonyms:
            key = fold(str(synonym).strip())
            if not key:
                raise VocabularyConfigError(f"{section}.{canonical_name}: empty synonym")
            existing = table.get(key)
            if existing is not None and existing is not canonical:
                raise VocabularyConfigError(
                    f"{section}: synonym {synonym!r} maps to both {existing.value!r} and {canonical.value!r}"
                )
            table[key] = canonical

    return table


def build_vocabulary(raw: Mapping[str, Any]) -> Vocabulary:
    """Validate an already-parsed mapping and compile it into a ``Vocabulary``."""

    if not isinstance(raw, Mapping):
        raise VocabularyConfigError("vocabulary root must be a mapping")

    try:
        model = VocabularyFileModel.model_validate(dict(raw))
    except PydanticValidationError as exc:
        raise VocabularyConfigError(f"invalid vocabulary: {exc}") from exc

    return Vocabulary(
        roles=_compile_table("roles", model.roles, Role, str.lower),
        ticket_status=_compile_table("ticket_status", model.ticket_status, TicketStatus, str.casefold),
        task_status=_compile_table("task_status", model.task_status, TaskStatus, str.casefold),
        ticket_labels=dict(model.labels.ticket),
        task_labels=dict(model.labels.task),
        fallback_label=model.labels.fallback,
    )


def load_vocabulary(path: Path) -> Vocabulary:
    """
    Load and validate vocabulary YAML from disk.

    Expected shape (simplified):

        roles:
          operator: [operator, operario]
        ticket_status:
          resolved: [resolved, Cerrada]
        task_status:
          done: [done, completada]
        labels:
          fallback: Pendiente
          ticket: {new: Nueva}
          task: {open: Abierta}
    """

    raw_text = path.read_text(encoding="utf-8")
    raw = yaml.safe_load(raw_text) or {}
    vocabulary = build_vocabulary(raw)
    logger.info(
        "Loaded vocabulary %s (roles=%d ticket_status=%d task_status=%d)",
        path,
        len(vocabulary.roles),
        len(vocabulary.ticket_status),
        len(vocabulary.task_status),
    )
    return vocabulary


@lru_cache
def default_vocabulary() -> Vocabulary:
    """Vocabulary from the configured path (packaged file unless overridden)."""
    return load_vocabulary(get_settings().resolved_vocabulary_path())
