"""Statutory rate configuration service."""

from __future__ import annotations

from datetime import date

from award_engine.calculators.rate_resolver import StatutoryRateResolver
from award_engine.calculators.types import RateType, StatutoryRate
from award_engine.models import StatutoryRateRecord
from award_engine.services.config_service import ConfigService


class StatutoryRateService(ConfigService[StatutoryRate, StatutoryRateResolver]):
    """Reads and validated writes for statutory rates, scoped by rate type."""

    record_class = StatutoryRateRecord
    table_class = StatutoryRateResolver
    scope_column = "rate_type"
    entity_name = "Statutory rate"

    async def load_resolver(self) -> StatutoryRateResolver:
        """Snapshot of every rate for one calculation."""
        return await self.snapshot()

    async def resolve(self, rate_type: RateType | str, on: date) -> StatutoryRate:
        """Resolve a single rate against the stored rows."""
        rate_type = RateType(rate_type)
        resolver = await self.snapshot(rate_type.value)
        return resolver.resolve(rate_type, on)
