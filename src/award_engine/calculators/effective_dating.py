"""Effective-dated table shared by award rules and statutory rates.

Rows are versioned by a half-open ``[effective_from, effective_to)`` window
and grouped by a scope (classification for award rules, rate type for
statutory rates). Within one scope at most one active row may cover any date.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Generic, Protocol, TypeVar

from award_engine.calculators.errors import AmbiguousRuleConfigurationError


class EffectiveDated(Protocol):
    id: str
    effective_from: date
    effective_to: date | None
    is_active: bool

    @property
    def scope(self) -> str: ...

    def validate(self) -> None: ...


RowT = TypeVar("RowT", bound=EffectiveDated)


def covers(row: EffectiveDated, on: date) -> bool:
    """True when ``on`` falls inside the row's window (inclusive from, exclusive to)."""
    if on < row.effective_from:
        return False
    return row.effective_to is None or on < row.effective_to


def windows_overlap(a: EffectiveDated, b: EffectiveDated) -> bool:
    """True when two half-open windows share at least one day."""
    a_before_b_ends = b.effective_to is None or a.effective_from < b.effective_to
    b_before_a_ends = a.effective_to is None or b.effective_from < a.effective_to
    return a_before_b_ends and b_before_a_ends


class EffectiveDatedTable(Generic[RowT]):
    """In-memory snapshot of effective-dated rows.

    Construction takes rows as stored and does not validate them, so a
    snapshot containing overlaps still loads and fails at resolution time.
    ``add`` and ``replace`` are the validated write path.
    """

    def __init__(self, rows: Iterable[RowT] = ()):
        self._rows: dict[str, RowT] = {row.id: row for row in rows}

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self):
        return iter(self._rows.values())

    def get(self, row_id: str) -> RowT | None:
        return self._rows.get(row_id)

    def rows_for(self, scope: str) -> list[RowT]:
        """Active rows in a scope ordered by effective_from."""
        return sorted(
            (r for r in self._rows.values() if r.is_active and r.scope == scope),
            key=lambda r: r.effective_from,
        )

    def find_overlaps(self, candidate: RowT) -> list[RowT]:
        """Active rows in the candidate's scope whose windows overlap it."""
        if not candidate.is_active:
            return []
        return [
            row
            for row in self.rows_for(candidate.scope)
            if row.id != candidate.id and windows_overlap(row, candidate)
        ]

    def check_insert(self, candidate: RowT) -> None:
        """Validate a row against the table without storing it."""
        candidate.validate()
        overlaps = self.find_overlaps(candidate)
        if overlaps:
            raise AmbiguousRuleConfigurationError(
                candidate.scope,
                None,
                [candidate.id] + [r.id for r in overlaps],
            )

    def add(self, candidate: RowT) -> RowT:
        """Insert a new row, rejecting invalid shapes and overlapping windows."""
        if candidate.id in self._rows:
            raise ValueError(f"Row {candidate.id} already exists")
        self.check_insert(candidate)
        self._rows[candidate.id] = candidate
        return candidate

    def replace(self, candidate: RowT) -> RowT:
        """Update an existing row; the row's own previous version is ignored for overlap."""
        if candidate.id not in self._rows:
            raise KeyError(candidate.id)
        self.check_insert(candidate)
        self._rows[candidate.id] = candidate
        return candidate

    def lookup(self, scope: str, on: date) -> RowT | None:
        """Return the single row covering ``on`` or None.

        Raises AmbiguousRuleConfigurationError when more than one row applies.
        """
        matches = [row for row in self.rows_for(scope) if covers(row, on)]
        if len(matches) > 1:
            raise AmbiguousRuleConfigurationError(scope, on, [r.id for r in matches])
        return matches[0] if matches else None
