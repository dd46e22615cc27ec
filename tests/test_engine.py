"""Unit tests for AwardInterpretationEngine.

Covers daily pricing (ordinary, overtime, loadings, allowances) and batch
interpretation across records.
"""

from datetime import date, time, timedelta, timezone
from decimal import Decimal

import pytest

from award_engine.calculators.engine import (
    AwardInterpretationEngine,
    split_at_threshold,
    week_start,
)
from award_engine.calculators.errors import (
    IncompleteShiftError,
    InvalidRateConfigurationError,
)
from award_engine.calculators.normalizer import TimeSegmentNormalizer
from award_engine.calculators.rule_table import RuleTable
from award_engine.calculators.types import (
    AllowanceType,
    ComponentKind,
    LoadingConvention,
    OvertimeBasis,
)
from tests.factories import at, make_record, make_rule

RATE = Decimal("40")
SATURDAY = date(2024, 7, 6)


def segments_for(record):
    return TimeSegmentNormalizer().normalize(record)


def by_code(day):
    return {c.code: c for c in day.components}


class TestOrdinaryAndOvertime:
    """Threshold split and overtime pricing."""

    def test_eight_hour_day(self, engine, standard_rule):
        """7.6h at $40 plus 0.4h at $50 comes to $324.00."""
        day = engine.interpret_day(segments_for(make_record(at(9), at(17))), standard_rule, RATE)

        ordinary, overtime = day.components
        assert ordinary.code == "ORD"
        assert ordinary.units == Decimal("7.6000")
        assert ordinary.rate == Decimal("40.0000")
        assert ordinary.amount == Decimal("304.00")
        assert overtime.code == "OT"
        assert overtime.description == "Overtime (+25%)"
        assert overtime.units == Decimal("0.4000")
        assert overtime.rate == Decimal("50.0000")
        assert overtime.amount == Decimal("20.00")
        assert day.total == Decimal("324.00")

    def test_exactly_at_threshold_is_all_ordinary(self, engine, standard_rule):
        day = engine.interpret_day(
            segments_for(make_record(at(9), at(16, 36))), standard_rule, RATE
        )

        assert [c.code for c in day.components] == ["ORD"]
        assert day.components[0].units == Decimal("7.6000")
        assert day.overtime_seconds == 0

    def test_one_minute_past_threshold_is_overtime(self, engine, standard_rule):
        day = engine.interpret_day(
            segments_for(make_record(at(9), at(16, 37))), standard_rule, RATE
        )

        overtime = by_code(day)["OT"]
        assert overtime.units == Decimal("0.0167")
        assert overtime.amount == Decimal("0.84")
        assert day.overtime_seconds == 60

    def test_zero_threshold_makes_every_hour_overtime(self, engine):
        rule = make_rule(overtime_threshold_hours=Decimal("0"))

        day = engine.interpret_day(segments_for(make_record(at(9), at(17))), rule, RATE)

        assert [c.code for c in day.components] == ["OT"]
        assert day.total == Decimal("400.00")

    def test_breaks_are_unpaid(self, engine, standard_rule):
        record = make_record(at(9), at(17, 30), breaks=((at(12), at(12, 30)),))

        day = engine.interpret_day(segments_for(record), standard_rule, RATE)

        assert day.total == Decimal("324.00")

    def test_overtime_is_chronological_across_a_break(self, engine, standard_rule):
        """Overtime is the time after the threshold, not the longest segment."""
        record = make_record(at(8), at(17), breaks=((at(15, 36), at(16, 36)),))

        day = engine.interpret_day(segments_for(record), standard_rule, RATE)

        assert by_code(day)["ORD"].units == Decimal("7.6000")
        assert by_code(day)["OT"].units == Decimal("0.4000")

    def test_ordinary_already_worked_today_reduces_available(self, engine, standard_rule):
        day = engine.interpret_day(
            segments_for(make_record(at(14), at(18))),
            standard_rule,
            RATE,
            ordinary_seconds_today=Decimal(4 * 3600),
        )

        assert by_code(day)["ORD"].units == Decimal("3.6000")
        assert by_code(day)["OT"].units == Decimal("0.4000")

    def test_zero_rate_prices_at_zero(self, engine, standard_rule):
        day = engine.interpret_day(
            segments_for(make_record(at(9), at(17))), standard_rule, Decimal("0")
        )

        assert day.total == Decimal("0.00")
        assert len(day.components) == 2


class TestEdgeCases:
    """Empty days, invalid rates and open shifts."""

    def test_no_segments_yields_no_components(self, engine, standard_rule):
        day = engine.interpret_day([], standard_rule, RATE)

        assert day.components == ()
        assert day.total == 0

    def test_shift_entirely_on_break(self, engine, standard_rule):
        record = make_record(at(9), at(10), breaks=((at(9), at(10)),))

        day = engine.interpret_day(segments_for(record), standard_rule, RATE)

        assert day.components == ()

    def test_missing_hourly_rate(self, engine, standard_rule):
        with pytest.raises(InvalidRateConfigurationError):
            engine.interpret_day(segments_for(make_record(at(9), at(17))), standard_rule, None)

    def test_negative_hourly_rate(self, engine, standard_rule):
        with pytest.raises(InvalidRateConfigurationError) as exc_info:
            engine.interpret_day(
                segments_for(make_record(at(9), at(17))), standard_rule, Decimal("-1")
            )

        assert exc_info.value.code == "InvalidRateConfiguration"

    def test_incomplete_shift_is_not_priced(self, engine, standard_rule):
        with pytest.raises(IncompleteShiftError) as exc_info:
            engine.interpret_day(segments_for(make_record(at(9), None)), standard_rule, RATE)

        assert exc_info.value.code == "IncompleteShift"
        assert exc_info.value.employee_id == "emp-1"

    def test_invalid_rule_rejected(self, engine):
        rule = make_rule(shift_loading_pct=Decimal("10"), shift_days=frozenset({5}))

        with pytest.raises(InvalidRateConfigurationError):
            engine.interpret_day(segments_for(make_record(at(9), at(17))), rule, RATE)


class TestShiftLoading:
    """Loading conventions and shift windows."""

    def saturday_rule(self, convention):
        return make_rule(
            shift_loading_pct=Decimal("50"),
            loading_convention=convention,
            shift_days=frozenset({SATURDAY.weekday()}),
        )

    def test_additive_loading_on_base_rate(self, engine):
        rule = self.saturday_rule(LoadingConvention.ADDITIVE)
        record = make_record(at(9, day=SATURDAY), at(17, day=SATURDAY))

        day = engine.interpret_day(segments_for(record), rule, RATE)

        assert [c.code for c in day.components] == ["ORD", "OT", "LOADING"]
        loading = by_code(day)["LOADING"]
        assert loading.kind == ComponentKind.LOADING
        assert loading.units == Decimal("8.0000")
        assert loading.rate == Decimal("20.0000")
        assert loading.amount == Decimal("160.00")
        assert day.total == Decimal("484.00")

    def test_multiplicative_loading_compounds_on_overtime(self, engine):
        rule = self.saturday_rule(LoadingConvention.MULTIPLICATIVE)
        record = make_record(at(9, day=SATURDAY), at(17, day=SATURDAY))

        day = engine.interpret_day(segments_for(record), rule, RATE)

        assert [c.code for c in day.components] == ["ORD", "OT", "LOADING", "LOADING-OT"]
        components = by_code(day)
        assert components["LOADING"].units == Decimal("7.6000")
        assert components["LOADING"].amount == Decimal("152.00")
        assert components["LOADING-OT"].units == Decimal("0.4000")
        assert components["LOADING-OT"].rate == Decimal("25.0000")
        assert components["LOADING-OT"].amount == Decimal("10.00")
        assert day.total == Decimal("486.00")

    def test_no_loading_outside_shift_days(self, engine):
        rule = self.saturday_rule(LoadingConvention.ADDITIVE)

        day = engine.interpret_day(segments_for(make_record(at(9), at(17))), rule, RATE)

        assert "LOADING" not in by_code(day)

    def test_night_window_crossing_midnight(self, engine):
        rule = make_rule(
            shift_loading_pct=Decimal("15"),
            loading_convention=LoadingConvention.ADDITIVE,
            shift_start=time(22, 0),
            shift_end=time(6, 0),
            overtime_threshold_hours=Decimal("10"),
        )
        record = make_record(at(20), at(4, day=date(2024, 7, 2)))

        day = engine.interpret_day(segments_for(record), rule, RATE)

        loading = by_code(day)["LOADING"]
        assert loading.units == Decimal("6.0000")
        assert loading.rate == Decimal("6.0000")
        assert loading.amount == Decimal("36.00")

    def test_early_start_inside_previous_nights_window(self, engine):
        rule = make_rule(
            shift_loading_pct=Decimal("15"),
            loading_convention=LoadingConvention.ADDITIVE,
            shift_start=time(22, 0),
            shift_end=time(6, 0),
        )

        day = engine.interpret_day(segments_for(make_record(at(4), at(8))), rule, RATE)

        assert by_code(day)["LOADING"].units == Decimal("2.0000")

    def test_zero_loading_emits_nothing(self, engine, standard_rule):
        day = engine.interpret_day(segments_for(make_record(at(9), at(17))), standard_rule, RATE)

        assert all(c.kind != ComponentKind.LOADING for c in day.components)


class TestAllowances:
    """Flat allowances are per worked day."""

    def test_allowance_is_flat_and_last(self, engine):
        rule = make_rule(allowance_type=AllowanceType.MEAL, allowance_amount=Decimal("15.50"))

        day = engine.interpret_day(segments_for(make_record(at(9), at(17))), rule, RATE)

        allowance = day.components[-1]
        assert allowance.code == "ALLOW-MEAL"
        assert allowance.kind == ComponentKind.ALLOWANCE
        assert allowance.units == Decimal("1")
        assert allowance.amount == Decimal("15.50")
        assert day.total == Decimal("339.50")

    def test_allowance_not_scaled_by_hours(self, engine):
        rule = make_rule(allowance_type=AllowanceType.TOOL, allowance_amount=Decimal("20"))

        short = engine.interpret_day(segments_for(make_record(at(9), at(10))), rule, RATE)
        long = engine.interpret_day(segments_for(make_record(at(9), at(19))), rule, RATE)

        assert by_code(short)["ALLOW-TOOL"].amount == by_code(long)["ALLOW-TOOL"].amount

    def test_no_allowance_without_work(self, engine):
        rule = make_rule(allowance_type=AllowanceType.MEAL, allowance_amount=Decimal("15.50"))

        assert engine.interpret_day([], rule, RATE).components == ()


class TestBatchInterpretation:
    """Batch grouping, ordering and error isolation."""

    def test_failing_record_does_not_abort_batch(self, engine, rule_table):
        records = [
            make_record(at(9), at(17), record_id="good-1"),
            make_record(at(17, day=date(2024, 7, 2)), at(9, day=date(2024, 7, 2)), record_id="bad"),
            make_record(at(9, day=date(2024, 7, 3)), at(17, day=date(2024, 7, 3)), record_id="good-2"),
        ]

        batch = engine.interpret_batch(records, RATE, rule_table)

        assert [r.record_id for r in batch.results] == ["good-1", "bad", "good-2"]
        assert batch.results[0].total == Decimal("324.00")
        assert batch.results[1].success is False
        assert batch.results[1].components == ()
        assert batch.results[1].error.code == "InvalidTimeRange"
        assert batch.results[2].total == Decimal("324.00")
        assert batch.error_count == 1
        assert batch.total == Decimal("648.00")

    def test_mixed_timezone_record_fails_alone(self, engine, rule_table):
        tuesday = date(2024, 7, 2)
        records = [
            make_record(at(9), at(17), record_id="good"),
            make_record(
                at(9, day=tuesday).replace(tzinfo=timezone(timedelta(hours=10))),
                at(17, day=tuesday),
                record_id="mixed",
            ),
        ]

        batch = engine.interpret_batch(records, RATE, rule_table)

        assert batch.results[0].total == Decimal("324.00")
        assert batch.results[1].error.code == "InvalidTimeRange"
        assert batch.error_count == 1

    def test_split_shift_shares_daily_threshold(self, engine, rule_table):
        records = [
            make_record(at(6), at(10), record_id="morning"),
            make_record(at(14), at(18), record_id="afternoon"),
        ]

        batch = engine.interpret_batch(records, RATE, rule_table)

        morning, afternoon = batch.results
        assert [c.code for c in morning.components] == ["ORD"]
        assert {c.code: c.units for c in afternoon.components} == {
            "ORD": Decimal("3.6000"),
            "OT": Decimal("0.4000"),
        }

    def test_records_processed_chronologically(self, engine, rule_table):
        """Input order does not decide which shift reaches overtime."""
        records = [
            make_record(at(14), at(18), record_id="afternoon"),
            make_record(at(6), at(10), record_id="morning"),
        ]

        batch = engine.interpret_batch(records, RATE, rule_table)

        afternoon, morning = batch.results
        assert afternoon.record_id == "afternoon"
        assert any(c.code == "OT" for c in afternoon.components)
        assert all(c.code == "ORD" for c in morning.components)

    def test_employees_do_not_share_thresholds(self, engine, rule_table):
        records = [
            make_record(at(6), at(10), employee_id="alice"),
            make_record(at(14), at(18), employee_id="bob"),
        ]

        batch = engine.interpret_batch(records, RATE, rule_table)

        assert all(c.code == "ORD" for r in batch.results for c in r.components)

    def test_failed_record_contributes_no_hours(self, engine, rule_table):
        records = [
            make_record(at(6), at(10), record_id="morning"),
            make_record(at(11), None, record_id="open"),
            make_record(at(14), at(17), record_id="afternoon"),
        ]

        batch = engine.interpret_batch(records, RATE, rule_table)

        assert batch.results[1].error.code == "IncompleteShift"
        assert all(c.code == "ORD" for c in batch.results[2].components)

    def test_missing_rule_fails_only_that_record(self, engine, rule_table):
        records = [
            make_record(at(9), at(17), classification="casual"),
            make_record(at(9, day=date(2024, 7, 2)), at(17, day=date(2024, 7, 2))),
        ]

        batch = engine.interpret_batch(records, RATE, rule_table)

        assert batch.results[0].error.code == "NotFound"
        assert batch.results[1].success

    def test_default_classification(self, engine):
        table = RuleTable()
        table.add(make_rule(classification="casual", penalty_rate_pct=Decimal("50")))

        batch = engine.interpret_batch(
            [make_record(at(9), at(17))], RATE, table, default_classification="casual"
        )

        assert {c.code: c.rate for c in batch.results[0].components}["OT"] == Decimal("60.0000")

    def test_missing_rate_fails_every_record(self, engine, rule_table):
        records = [make_record(at(9), at(17)), make_record(at(9, day=date(2024, 7, 2)), at(17, day=date(2024, 7, 2)))]

        batch = engine.interpret_batch(records, None, rule_table)

        assert batch.error_count == 2
        assert {r.error.code for r in batch.errors} == {"InvalidRateConfiguration"}

    def test_weekly_threshold_spans_the_week(self, engine):
        table = RuleTable()
        table.add(
            make_rule(
                overtime_basis=OvertimeBasis.WEEKLY,
                overtime_threshold_hours=Decimal("38"),
            )
        )
        monday = date(2024, 7, 1)
        records = [
            make_record(at(9, day=monday + timedelta(days=n)), at(17, day=monday + timedelta(days=n)))
            for n in range(5)
        ]

        batch = engine.interpret_batch(records, RATE, table)

        for result in batch.results[:4]:
            assert [c.code for c in result.components] == ["ORD"]
        friday = {c.code: c.units for c in batch.results[4].components}
        assert friday == {"ORD": Decimal("6.0000"), "OT": Decimal("2.0000")}

    def test_weekly_threshold_resets_on_monday(self, engine):
        table = RuleTable()
        table.add(
            make_rule(
                overtime_basis=OvertimeBasis.WEEKLY,
                overtime_threshold_hours=Decimal("8"),
            )
        )
        sunday = date(2024, 7, 7)
        monday = date(2024, 7, 8)
        records = [
            make_record(at(9, day=sunday), at(17, day=sunday)),
            make_record(at(9, day=monday), at(17, day=monday)),
        ]

        batch = engine.interpret_batch(records, RATE, table)

        assert [c.code for c in batch.results[1].components] == ["ORD"]


class TestHelpers:
    """Module-level helpers."""

    def test_week_start_is_monday(self):
        assert week_start(date(2024, 7, 7)) == date(2024, 7, 1)
        assert week_start(date(2024, 7, 1)) == date(2024, 7, 1)

    def test_split_at_threshold_mid_segment(self):
        work = segments_for(make_record(at(9), at(17)))

        ordinary, overtime = split_at_threshold(work, Decimal(3600))

        assert ordinary == [(at(9), at(10))]
        assert overtime == [(at(10), at(17))]

    def test_split_at_threshold_rejects_open_segment(self):
        work = segments_for(make_record(at(9), None))

        with pytest.raises(IncompleteShiftError):
            split_at_threshold(work, Decimal(3600))

    def test_hours_precision_is_configurable(self, standard_rule):
        coarse = AwardInterpretationEngine(hours_precision=Decimal("0.01"))

        day = coarse.interpret_day(
            segments_for(make_record(at(9), at(16, 37))), standard_rule, RATE
        )

        assert {c.code: c.units for c in day.components}["OT"] == Decimal("0.02")

    def test_rounded_units_add_up_to_worked_hours(self):
        """Overtime takes the remainder so the day's units match the shift."""
        coarse = AwardInterpretationEngine(hours_precision=Decimal("0.01"))
        rule = make_rule(overtime_threshold_hours=Decimal("7.605"))

        day = coarse.interpret_day(segments_for(make_record(at(9), at(17))), rule, RATE)

        units = {c.code: c.units for c in day.components}
        assert units["ORD"] == Decimal("7.61")
        assert units["OT"] == Decimal("0.39")
        assert units["ORD"] + units["OT"] == Decimal("8.00")

    def test_rounded_loading_units_follow_the_same_split(self):
        coarse = AwardInterpretationEngine(hours_precision=Decimal("0.01"))
        rule = make_rule(
            overtime_threshold_hours=Decimal("7.605"),
            shift_loading_pct=Decimal("50"),
            loading_convention=LoadingConvention.MULTIPLICATIVE,
            shift_days=frozenset(range(7)),
        )

        day = coarse.interpret_day(segments_for(make_record(at(9), at(17))), rule, RATE)

        units = {c.code: c.units for c in day.components}
        assert units["LOADING"] == units["ORD"]
        assert units["LOADING-OT"] == units["OT"]


class TestPublicHolidays:
    """Holiday-only rules load time worked on caller-supplied holidays."""

    # Tuesday
    HOLIDAY = date(2024, 7, 2)

    def holiday_rule(self, **overrides):
        fields = {
            "shift_loading_pct": Decimal("150"),
            "loading_convention": LoadingConvention.ADDITIVE,
            "public_holiday_only": True,
        }
        fields.update(overrides)
        return make_rule(**fields)

    def test_loading_applies_on_public_holiday(self, engine):
        record = make_record(at(9, day=self.HOLIDAY), at(17, day=self.HOLIDAY))

        day = engine.interpret_day(
            segments_for(record),
            self.holiday_rule(),
            RATE,
            public_holidays=frozenset({self.HOLIDAY}),
        )

        loading = by_code(day)["LOADING"]
        assert loading.description == "Public holiday loading (150% of base)"
        assert loading.units == Decimal("8.0000")
        assert loading.rate == Decimal("60.0000")
        assert loading.amount == Decimal("480.00")
        assert day.total == Decimal("804.00")

    def test_no_loading_on_other_days(self, engine):
        record = make_record(at(9, day=self.HOLIDAY), at(17, day=self.HOLIDAY))

        day = engine.interpret_day(segments_for(record), self.holiday_rule(), RATE)

        assert "LOADING" not in by_code(day)

    def test_overnight_shift_loads_only_holiday_hours(self, engine):
        rule = self.holiday_rule(overtime_threshold_hours=Decimal("10"))
        record = make_record(at(20), at(4, day=self.HOLIDAY))

        day = engine.interpret_day(
            segments_for(record), rule, RATE, public_holidays=frozenset({self.HOLIDAY})
        )

        assert by_code(day)["LOADING"].units == Decimal("4.0000")

    def test_shift_days_still_restrict_holiday_rule(self, engine):
        rule = self.holiday_rule(shift_days=frozenset({SATURDAY.weekday()}))
        record = make_record(at(9, day=self.HOLIDAY), at(17, day=self.HOLIDAY))

        day = engine.interpret_day(
            segments_for(record), rule, RATE, public_holidays=frozenset({self.HOLIDAY})
        )

        assert "LOADING" not in by_code(day)

    def test_batch_applies_holidays_per_record(self, engine):
        table = RuleTable([self.holiday_rule(id="holiday")])
        records = [
            make_record(at(9), at(17), record_id="monday"),
            make_record(at(9, day=self.HOLIDAY), at(17, day=self.HOLIDAY), record_id="holiday"),
        ]

        batch = engine.interpret_batch(records, RATE, table, public_holidays=[self.HOLIDAY])

        monday, holiday = batch.results
        assert [c.code for c in monday.components] == ["ORD", "OT"]
        assert [c.code for c in holiday.components] == ["ORD", "OT", "LOADING"]
        assert holiday.total == Decimal("804.00")
