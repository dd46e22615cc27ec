"""Interpretation service - loads a rule snapshot and runs the engine."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from award_engine.calculators.engine import AwardInterpretationEngine, BatchInterpretation
from award_engine.calculators.types import AttendanceRecord
from award_engine.services.rule_service import AwardRuleService


class InterpretationService:
    """Interprets attendance batches against the stored award rules.

    Rules are read once per batch so every record in the batch sees the same
    configuration.
    """

    def __init__(self, session: AsyncSession, engine: AwardInterpretationEngine | None = None):
        self.session = session
        self.rule_service = AwardRuleService(session)
        self.engine = engine or AwardInterpretationEngine()

    async def interpret(
        self,
        records: Sequence[AttendanceRecord],
        hourly_rate: Decimal | None,
        classification: str | None = None,
        public_holidays: Iterable[date] = (),
    ) -> BatchInterpretation:
        rule_table = await self.rule_service.load_rule_table()
        return self.engine.interpret_batch(
            records,
            hourly_rate,
            rule_table,
            classification,
            public_holidays=public_holidays,
        )
