"""Filter predicate builder.

A :class:`Predicate` is the conjunction of the conditions compiled from one
:class:`~chain_events.query.params.EventQuery`. It renders to a SQLAlchemy
clause against the event kind's table so filtering always happens inside the
store, before any distinct/limit step.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Mapping, Tuple, Union

from sqlalchemy import and_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from chain_events.models.kinds import EventKind
from .fields import FilterField, FilterMode, fields_for
from .params import FilterValue


@dataclass(frozen=True)
class Equals:
    column: str
    value: str

    def clause(self, table) -> ColumnElement[bool]:
        return getattr(table, self.column) == self.value

    def describe(self) -> str:
        return f"{self.column}={self.value}"


@dataclass(frozen=True)
class AnyOf:
    """Union over candidate columns: true when any of them is in ``values``."""

    columns: Tuple[str, ...]
    values: FrozenSet[str]

    def clause(self, table) -> ColumnElement[bool]:
        members = sorted(self.values)
        return or_(*(getattr(table, column).in_(members) for column in self.columns))

    def describe(self) -> str:
        return f"({'|'.join(self.columns)}) in {sorted(self.values)}"


@dataclass(frozen=True)
class ContainsAny:
    """True when any element of a set-valued relationship is in ``values``."""

    relationship: str
    column: str
    values: FrozenSet[str]

    def clause(self, table) -> ColumnElement[bool]:
        rel = getattr(table, self.relationship)
        target = rel.property.mapper.class_
        return rel.any(getattr(target, self.column).in_(sorted(self.values)))

    def describe(self) -> str:
        return f"{self.relationship}.{self.column} any in {sorted(self.values)}"


Condition = Union[Equals, AnyOf, ContainsAny]


@dataclass(frozen=True)
class Predicate:
    kind: EventKind
    conditions: Tuple[Condition, ...] = field(default_factory=tuple)

    @property
    def matches_all(self) -> bool:
        return not self.conditions

    def clause(self, table) -> ColumnElement[bool]:
        if not self.conditions:
            return true()
        return and_(*(condition.clause(table) for condition in self.conditions))

    def describe(self) -> str:
        if not self.conditions:
            return f"{self.kind}: *"
        return f"{self.kind}: " + " AND ".join(c.describe() for c in self.conditions)


def _condition(field_def: FilterField, value: FilterValue) -> Condition:
    if field_def.mode is FilterMode.EQUALS:
        return Equals(column=field_def.columns[0], value=value)
    if field_def.mode is FilterMode.ANY_OF:
        return AnyOf(columns=field_def.columns, values=frozenset(value))
    return ContainsAny(
        relationship=field_def.relationship,
        column=field_def.columns[0],
        values=frozenset(value),
    )


def build_predicate(kind: EventKind, filters: Mapping[str, FilterValue]) -> Predicate:
    """Compile normalized filter values into a predicate for ``kind``.

    Parameters not known to ``kind`` are ignored. When a field that supersedes
    others is active (``involved_account_ids`` on transfers), the superseded
    parameters are dropped rather than combined.
    """
    kind = EventKind(kind)
    known = fields_for(kind)
    active: Dict[str, FilterField] = {f.param: f for f in known if filters.get(f.param)}

    disabled = set()
    for f in active.values():
        disabled.update(f.supersedes)

    conditions: List[Condition] = []
    for f in known:
        if f.param in active and f.param not in disabled:
            conditions.append(_condition(f, filters[f.param]))
    return Predicate(kind=kind, conditions=tuple(conditions))


__all__ = ["Equals", "AnyOf", "ContainsAny", "Condition", "Predicate", "build_predicate"]
