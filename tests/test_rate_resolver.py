"""Tests for statutory rate resolution."""

from datetime import date
from decimal import Decimal

import pytest

from award_engine.calculators.errors import (
    AmbiguousRuleConfigurationError,
    InvalidRateConfigurationError,
    RateNotFoundError,
)
from award_engine.calculators.rate_resolver import StatutoryRateResolver
from award_engine.calculators.types import RateType, TaxBracket
from tests.factories import PAYG_BRACKETS, make_rate


class TestResolve:
    """Effective-dated resolution per rate type."""

    def test_effective_from_is_inclusive(self, statutory_rates):
        rate = statutory_rates.resolve(RateType.SUPERANNUATION_GUARANTEE, date(2025, 7, 1))
        assert rate.rate == Decimal("0.12")

    def test_effective_to_is_exclusive(self, statutory_rates):
        rate = statutory_rates.resolve(RateType.SUPERANNUATION_GUARANTEE, date(2025, 6, 30))
        assert rate.rate == Decimal("0.115")

    def test_accepts_rate_type_string(self, statutory_rates):
        rate = statutory_rates.resolve("medicare-levy", date(2024, 12, 1))
        assert rate.id == "medicare"

    def test_not_found_before_first_row(self, statutory_rates):
        with pytest.raises(RateNotFoundError) as exc_info:
            statutory_rates.resolve(RateType.SUPERANNUATION_GUARANTEE, date(2024, 6, 30))

        assert exc_info.value.code == "NotFound"
        assert exc_info.value.rate_type == "superannuation-guarantee"

    def test_not_found_for_unconfigured_type(self, statutory_rates):
        with pytest.raises(RateNotFoundError):
            statutory_rates.resolve(RateType.PAYROLL_TAX, date(2024, 12, 1))

    def test_unknown_rate_type(self, statutory_rates):
        with pytest.raises(ValueError):
            statutory_rates.resolve("land-tax", date(2024, 12, 1))

    def test_inactive_rows_ignored(self):
        resolver = StatutoryRateResolver(
            [make_rate(RateType.PAYROLL_TAX, rate=Decimal("0.0485"), is_active=False)]
        )

        with pytest.raises(RateNotFoundError):
            resolver.resolve(RateType.PAYROLL_TAX, date(2024, 12, 1))

    def test_overlap_in_snapshot_is_ambiguous(self):
        resolver = StatutoryRateResolver(
            [
                make_rate(RateType.PAYROLL_TAX, id="a", rate=Decimal("0.0485")),
                make_rate(RateType.PAYROLL_TAX, id="b", rate=Decimal("0.05")),
            ]
        )

        with pytest.raises(AmbiguousRuleConfigurationError) as exc_info:
            resolver.resolve(RateType.PAYROLL_TAX, date(2024, 12, 1))

        assert exc_info.value.on == date(2024, 12, 1)


class TestAdd:
    """Write-time validation of statutory rows."""

    def test_rejects_overlap(self, statutory_rates):
        with pytest.raises(AmbiguousRuleConfigurationError):
            statutory_rates.add(
                make_rate(RateType.SUPERANNUATION_GUARANTEE, effective_from=date(2025, 1, 1))
            )

    def test_rate_must_be_a_fraction(self):
        with pytest.raises(InvalidRateConfigurationError):
            StatutoryRateResolver().add(make_rate(RateType.PAYROLL_TAX, rate=Decimal("4.85")))

    def test_payg_requires_brackets(self):
        with pytest.raises(InvalidRateConfigurationError):
            StatutoryRateResolver().add(make_rate(RateType.PAYG_WITHHOLDING))

    def test_payg_brackets_must_start_at_zero(self):
        brackets = (TaxBracket(Decimal("18200"), Decimal("0.16")),)

        with pytest.raises(InvalidRateConfigurationError):
            StatutoryRateResolver().add(
                make_rate(RateType.PAYG_WITHHOLDING, brackets=brackets)
            )

    def test_payg_brackets_must_ascend(self):
        brackets = (PAYG_BRACKETS[0], PAYG_BRACKETS[2], PAYG_BRACKETS[1])

        with pytest.raises(InvalidRateConfigurationError):
            StatutoryRateResolver().add(
                make_rate(RateType.PAYG_WITHHOLDING, brackets=brackets)
            )

    def test_flat_rate_rejects_brackets(self):
        with pytest.raises(InvalidRateConfigurationError):
            StatutoryRateResolver().add(
                make_rate(RateType.SUPERANNUATION_GUARANTEE, brackets=PAYG_BRACKETS)
            )
