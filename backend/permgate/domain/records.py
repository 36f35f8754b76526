"""Typed read models for the access graph.

Repositories return ORM rows; anything that leaves the service layer as a
composite view (a parent with its children, or a permission enriched with its
module name) is one of the frozen records below.
"""
from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, TypeVar


@dataclass(frozen=True)
class ChildRef:
    id: int
    name: str | None


@dataclass(frozen=True)
class EffectivePermission:
    id: int
    name: str | None
    module_id: int
    module_name: str
    action: str
    description: str | None = None


@dataclass(frozen=True)
class PermissionWithModule:
    id: int
    name: str | None
    module_id: int
    module_name: str
    action: str
    description: str | None
    created_at: datetime
    is_deleted: bool


@dataclass(frozen=True)
class GroupWithRoles:
    id: int
    name: str
    description: str | None
    created_at: datetime
    is_deleted: bool
    roles: tuple[ChildRef, ...] = ()


@dataclass(frozen=True)
class RoleWithLinks:
    id: int
    name: str
    description: str | None
    created_at: datetime
    is_deleted: bool
    groups: tuple[ChildRef, ...] = ()
    permissions: tuple[ChildRef, ...] = ()


@dataclass(frozen=True)
class UserWithGroups:
    id: int
    username: str
    email: str
    created_at: datetime
    groups: tuple[str, ...] = ()


P = TypeVar("P")


@dataclass
class _Accumulator:
    parent: Any
    children: dict[str, dict[Hashable, Any]] = field(default_factory=dict)


def fold_children(
    rows: Iterable[Any],
    *,
    parent_key: Callable[[Any], Hashable],
    make_parent: Callable[[Any], P],
    children: dict[str, Callable[[Any], tuple[Hashable, Any] | None]],
) -> list[P]:
    """Fold flat joined rows into parent-with-children records.

    ``rows`` is the output of one LEFT JOIN query, one row per
    (parent, child...) combination. For each row ``parent_key`` identifies the
    parent; the first row seen for a parent builds it with ``make_parent``.
    Every entry of ``children`` maps a field name on the parent record to an
    extractor returning ``(child_id, child_value)`` or ``None`` when the row
    carries no child for that field (the outer join found nothing).

    A child whose id is already in the parent's list is not appended again,
    so the fan-out of multiple joins never produces duplicates. Parent order
    and child order both follow first appearance in ``rows``.
    """
    accumulated: dict[Hashable, _Accumulator] = {}
    for row in rows:
        key = parent_key(row)
        entry = accumulated.get(key)
        if entry is None:
            entry = _Accumulator(parent=make_parent(row))
            entry.children = {name: {} for name in children}
            accumulated[key] = entry
        for name, extract in children.items():
            child = extract(row)
            if child is None:
                continue
            child_id, value = child
            if child_id not in entry.children[name]:
                entry.children[name][child_id] = value

    return [
        replace(
            entry.parent,
            **{name: tuple(values.values()) for name, values in entry.children.items()},
        )
        for entry in accumulated.values()
    ]
