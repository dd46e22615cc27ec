"""Seed script for reference award rules and statutory rates.

Run with:
    python scripts/seed_reference_data.py

Creates a standard award rule and the Australian statutory rates needed for
interpretation and bonus withholding. Rows that already exist are skipped.
"""

from __future__ import annotations

import asyncio
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from award_engine.calculators.errors import AmbiguousRuleConfigurationError
from award_engine.calculators.types import (
    AwardRule,
    OvertimeBasis,
    RateType,
    StatutoryRate,
    TaxBracket,
)
from award_engine.database import create_tables, dispose_db, get_session
from award_engine.services import AwardRuleService, StatutoryRateService

FY2024 = date(2024, 7, 1)
FY2025 = date(2025, 7, 1)

# Resident individual rates from 1 July 2024 (Stage 3)
PAYG_BRACKETS = (
    TaxBracket(Decimal("0"), Decimal("0")),
    TaxBracket(Decimal("18200"), Decimal("0.16")),
    TaxBracket(Decimal("45000"), Decimal("0.30")),
    TaxBracket(Decimal("135000"), Decimal("0.37")),
    TaxBracket(Decimal("190000"), Decimal("0.45")),
)


async def seed_award_rules(session: AsyncSession) -> None:
    """Create the default award rule."""
    service = AwardRuleService(session)
    rule = AwardRule(
        id="",
        award_name="General Retail Industry Award",
        classification="standard",
        penalty_rate_pct=Decimal("25"),
        overtime_threshold_hours=Decimal("7.6"),
        overtime_basis=OvertimeBasis.DAILY,
        effective_from=FY2024,
    )
    try:
        await service.create(rule)
        print("Created standard award rule")
    except AmbiguousRuleConfigurationError:
        print("Standard award rule already exists, skipping...")


async def seed_statutory_rates(session: AsyncSession) -> None:
    """Create PAYG, superannuation guarantee and Medicare levy rates."""
    service = StatutoryRateService(session)
    rates = [
        StatutoryRate(
            id="",
            rate_type=RateType.PAYG_WITHHOLDING,
            name="PAYG withholding 2024-25",
            rate=Decimal("0.45"),
            brackets=PAYG_BRACKETS,
            effective_from=FY2024,
        ),
        StatutoryRate(
            id="",
            rate_type=RateType.SUPERANNUATION_GUARANTEE,
            name="Superannuation guarantee 2024-25",
            rate=Decimal("0.115"),
            effective_from=FY2024,
            effective_to=FY2025,
        ),
        StatutoryRate(
            id="",
            rate_type=RateType.SUPERANNUATION_GUARANTEE,
            name="Superannuation guarantee 2025-26",
            rate=Decimal("0.12"),
            effective_from=FY2025,
        ),
        StatutoryRate(
            id="",
            rate_type=RateType.MEDICARE_LEVY,
            name="Medicare levy",
            rate=Decimal("0.02"),
            threshold=Decimal("26000"),
            effective_from=FY2024,
        ),
    ]
    for rate in rates:
        try:
            await service.create(rate)
            print(f"Created {rate.name}")
        except AmbiguousRuleConfigurationError:
            print(f"{rate.name} already exists, skipping...")


async def main() -> None:
    """Run all seed functions."""
    print("Seeding reference data...")
    await create_tables()
    async with get_session() as session:
        await seed_award_rules(session)
        await seed_statutory_rates(session)
    await dispose_db()
    print("Done!")


if __name__ == "__main__":
    asyncio.run(main())
