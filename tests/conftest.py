"""Pytest fixtures for award engine tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from award_engine.calculators.engine import AwardInterpretationEngine
from award_engine.calculators.rate_resolver import StatutoryRateResolver
from award_engine.calculators.rule_table import RuleTable
from award_engine.calculators.types import AwardRule, RateType
from tests.factories import PAYG_BRACKETS, make_rate, make_rule


@pytest.fixture
def engine() -> AwardInterpretationEngine:
    """Engine with the default four-decimal hours precision."""
    return AwardInterpretationEngine(hours_precision=Decimal("0.0001"))


@pytest.fixture
def standard_rule() -> AwardRule:
    return make_rule(id="rule-standard")


@pytest.fixture
def rule_table(standard_rule: AwardRule) -> RuleTable:
    table = RuleTable()
    table.add(standard_rule)
    return table


@pytest.fixture
def statutory_rates() -> StatutoryRateResolver:
    """PAYG 2024-25, SG stepping from 11.5% to 12% and the Medicare levy."""
    resolver = StatutoryRateResolver()
    resolver.add(
        make_rate(
            RateType.PAYG_WITHHOLDING,
            id="payg-2024",
            rate=Decimal("0.45"),
            brackets=PAYG_BRACKETS,
        )
    )
    resolver.add(
        make_rate(
            RateType.SUPERANNUATION_GUARANTEE,
            id="sg-2024",
            rate=Decimal("0.115"),
            effective_to=date(2025, 7, 1),
        )
    )
    resolver.add(
        make_rate(
            RateType.SUPERANNUATION_GUARANTEE,
            id="sg-2025",
            rate=Decimal("0.12"),
            effective_from=date(2025, 7, 1),
        )
    )
    resolver.add(
        make_rate(
            RateType.MEDICARE_LEVY,
            id="medicare",
            rate=Decimal("0.02"),
            threshold=Decimal("26000"),
        )
    )
    return resolver
