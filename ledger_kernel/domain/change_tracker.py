"""
ChangeTracker -- Incremental field-change detection for entity updates.

Responsibility:
    Compares a proposed update (a mapping of API parameter names to raw
    values) against an entity's current state through a descriptor table,
    records the parameters whose value actually changes, and applies them.

Architecture position:
    Kernel > Domain -- pure logic; operates on any object with attributes
    (ORM rows included) but performs no I/O.

Invariants enforced:
    - A parameter absent from the proposal is never changed.
    - An explicit None in the proposal is a value, compared and applied
      like any other.
    - Values equal to the current value are neither recorded nor applied.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from ledger_kernel.domain.validation import parse_bool, parse_int, parse_text


class AccountField(str, Enum):
    """Updatable GL account parameters, valued by their API names."""

    NAME = "name"
    GL_CODE = "glCode"
    CURRENCY_CODE = "currencyCode"
    DESCRIPTION = "description"
    DISABLED = "disabled"
    MANUAL_ENTRIES_ALLOWED = "manualEntriesAllowed"
    PARENT_ID = "parentId"
    TYPE = "type"
    USAGE = "usage"
    TAG_ID = "tagId"
    AFFECTS_LOAN = "affectsLoan"


def _keep(value: Any) -> Any:
    return value


def _currency(value: Any) -> str | None:
    text = parse_text(value)
    return text.upper() if text else None


def _optional(parse: Callable[[Any], Any]) -> Callable[[Any], Any]:
    def coerce(value: Any) -> Any:
        return None if value is None else parse(value)

    return coerce


@dataclass(frozen=True)
class FieldDescriptor:
    """
    One row of a change-tracking table.

    ``field`` names the parameter, ``attribute`` the entity attribute it
    maps to, and ``coerce`` turns a raw proposed value into the attribute's
    type.
    """

    field: Enum
    attribute: str
    coerce: Callable[[Any], Any] = _keep

    @property
    def parameter(self) -> str:
        return self.field.value

    def current(self, entity: Any) -> Any:
        return getattr(entity, self.attribute)

    def apply(self, entity: Any, value: Any) -> None:
        setattr(entity, self.attribute, value)


GL_ACCOUNT_FIELDS: tuple[FieldDescriptor, ...] = (
    FieldDescriptor(AccountField.NAME, "name", parse_text),
    FieldDescriptor(AccountField.GL_CODE, "gl_code", parse_text),
    FieldDescriptor(AccountField.CURRENCY_CODE, "currency_code", _currency),
    FieldDescriptor(AccountField.DESCRIPTION, "description", parse_text),
    FieldDescriptor(AccountField.DISABLED, "disabled", _optional(parse_bool)),
    FieldDescriptor(
        AccountField.MANUAL_ENTRIES_ALLOWED,
        "manual_entries_allowed",
        _optional(parse_bool),
    ),
    FieldDescriptor(AccountField.PARENT_ID, "parent_id", _optional(parse_int)),
    FieldDescriptor(AccountField.TYPE, "classification", _optional(parse_int)),
    FieldDescriptor(AccountField.USAGE, "usage", _optional(parse_int)),
    FieldDescriptor(AccountField.TAG_ID, "tag_id", _optional(parse_int)),
    FieldDescriptor(AccountField.AFFECTS_LOAN, "affects_loan", _optional(parse_bool)),
)


@dataclass(frozen=True)
class ChangeSet:
    """
    Parameters whose values changed, mapped to their new values.

    Guarantees:
        - Read-only; iteration follows descriptor order.
        - bool(change_set) is False when nothing changed.
    """

    changes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "changes", MappingProxyType(dict(self.changes)))

    def __contains__(self, parameter: object) -> bool:
        if isinstance(parameter, Enum):
            parameter = parameter.value
        return parameter in self.changes

    def __iter__(self) -> Iterator[str]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def __bool__(self) -> bool:
        return bool(self.changes)

    def get(self, parameter: str | Enum, default: Any = None) -> Any:
        if isinstance(parameter, Enum):
            parameter = parameter.value
        return self.changes.get(parameter, default)

    def as_dict(self) -> dict[str, Any]:
        return dict(self.changes)


def track_changes(
    entity: Any,
    proposed: Mapping[str, Any],
    descriptors: Iterable[FieldDescriptor] = GL_ACCOUNT_FIELDS,
) -> ChangeSet:
    """Record and apply every proposed value that differs from the current one."""
    changes: dict[str, Any] = {}
    for descriptor in descriptors:
        if descriptor.parameter not in proposed:
            continue
        new_value = descriptor.coerce(proposed[descriptor.parameter])
        if new_value == descriptor.current(entity):
            continue
        changes[descriptor.parameter] = new_value
        descriptor.apply(entity, new_value)
    return ChangeSet(changes)
