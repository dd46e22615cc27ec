"""Shared write path for effective-dated configuration tables."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from award_engine.calculators.effective_dating import EffectiveDated, EffectiveDatedTable
from award_engine.calculators.errors import AwardEngineError, NotFoundError
from award_engine.models import new_id

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound=EffectiveDated)
TableT = TypeVar("TableT", bound=EffectiveDatedTable)


class ConfigService(Generic[RowT, TableT]):
    """Loads snapshots and performs validated writes for one config table.

    Writes load the current rows into an in-memory table and go through its
    ``add``/``replace`` so shape and overlap checks run before anything is
    flushed. Reads return a single snapshot so a batch sees consistent rows.
    """

    record_class: ClassVar[Any]
    table_class: ClassVar[Any]
    scope_column: ClassVar[str]
    entity_name: ClassVar[str]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list(self, scope: str | None = None, active_only: bool = False) -> list[RowT]:
        """List rows, optionally restricted to one scope."""
        scope_attr = getattr(self.record_class, self.scope_column)
        query = select(self.record_class)
        if scope is not None:
            query = query.where(scope_attr == scope)
        if active_only:
            query = query.where(self.record_class.is_active.is_(True))
        query = query.order_by(scope_attr, self.record_class.effective_from)

        result = await self.session.execute(query)
        return [record.to_domain() for record in result.scalars().all()]

    async def get(self, row_id: str) -> RowT:
        record = await self.session.get(self.record_class, row_id)
        if record is None:
            raise NotFoundError(f"{self.entity_name} {row_id} not found", id=row_id)
        return record.to_domain()

    async def snapshot(self, scope: str | None = None) -> TableT:
        """Load rows into an in-memory table without validating them."""
        return self.table_class(await self.list(scope))

    async def create(self, row: RowT) -> RowT:
        """Insert a row after shape and overlap validation."""
        if not row.id:
            row = replace(row, id=new_id())
        table = await self.snapshot(row.scope)
        try:
            table.add(row)
        except AwardEngineError as exc:
            logger.info("Rejected new %s %s: %s", self.entity_name, row.id, exc.message)
            raise

        self.session.add(self.record_class.from_domain(row))
        await self.session.flush()
        logger.info("Created %s %s (%s)", self.entity_name, row.id, row.scope)
        return row

    async def update(self, row: RowT) -> RowT:
        """Replace a stored row after shape and overlap validation."""
        record = await self.session.get(self.record_class, row.id)
        if record is None:
            raise NotFoundError(f"{self.entity_name} {row.id} not found", id=row.id)

        # Whole table: the row may be moving to a different scope
        table = await self.snapshot()
        try:
            table.replace(row)
        except AwardEngineError as exc:
            logger.info("Rejected update to %s %s: %s", self.entity_name, row.id, exc.message)
            raise

        for column, value in self.record_class.columns_from_domain(row).items():
            setattr(record, column, value)
        await self.session.flush()
        logger.info("Updated %s %s (%s)", self.entity_name, row.id, row.scope)
        return row

    async def deactivate(self, row_id: str) -> RowT:
        """Retire a row without deleting its history."""
        current = await self.get(row_id)
        return await self.update(replace(current, is_active=False))
