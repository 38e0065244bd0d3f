"""Tests for policy schedule lookup and premium rules."""

import pytest
from careplan_sim.params import PolicyYearRecord
from careplan_sim.policy import EMPTY_RECORD, find_policy_record, has_premium_data, premium_due, sort_schedule

SCHEDULE = [
    PolicyYearRecord(year=1, premium=5_000, cash_value=1_000, death_benefit=100_000,
                     total_ltc_benefit=300_000, aob_monthly=3_000, cob_monthly=6_000),
    PolicyYearRecord(year=2, premium=5_000, cash_value=4_000, death_benefit=100_000,
                     total_ltc_benefit=300_000, aob_monthly=3_000, cob_monthly=6_000),
    PolicyYearRecord(year=5, premium=4_000, cash_value=16_000, death_benefit=130_000,
                     total_ltc_benefit=390_000, aob_monthly=3_900, cob_monthly=7_800),
]


class TestSortSchedule:
    def test_orders_by_year(self):
        rows = sort_schedule((SCHEDULE[2], SCHEDULE[0], SCHEDULE[1]))
        assert [r.year for r in rows] == [1, 2, 5]

    def test_last_duplicate_wins(self):
        replacement = PolicyYearRecord(year=2, premium=9_999)
        rows = sort_schedule((SCHEDULE[0], SCHEDULE[1], replacement))
        assert rows[1].premium == 9_999
        assert len(rows) == 2


class TestFindPolicyRecord:
    def test_exact_year(self):
        assert find_policy_record(SCHEDULE, 2) is SCHEDULE[1]

    def test_first_year(self):
        assert find_policy_record(SCHEDULE, 1) is SCHEDULE[0]

    def test_interpolated_year(self):
        """Year 3 is one third of the way from year 2 to year 5."""
        rec = find_policy_record(SCHEDULE, 3)
        assert rec.year == 3
        assert rec.cash_value == pytest.approx(8_000)
        assert rec.death_benefit == pytest.approx(110_000)
        assert rec.total_ltc_benefit == pytest.approx(330_000)
        assert rec.cob_monthly == pytest.approx(6_600)

    def test_interpolation_keeps_lower_premium(self):
        assert find_policy_record(SCHEDULE, 4).premium == 5_000

    def test_beyond_schedule_is_zero(self):
        assert find_policy_record(SCHEDULE, 6) is EMPTY_RECORD

    def test_beyond_schedule_extrapolated(self):
        rec = find_policy_record(SCHEDULE, 20, extrapolate=True)
        assert rec.year == 20
        assert rec.premium == 0.0
        assert rec.cash_value == 16_000
        assert rec.death_benefit == 130_000
        assert rec.cob_monthly == 7_800

    def test_empty_schedule(self):
        assert find_policy_record([], 1) is EMPTY_RECORD

    def test_gap_before_first_row(self):
        schedule = [PolicyYearRecord(year=3, cash_value=500)]
        assert find_policy_record(schedule, 1).cash_value == 500


class TestPremiumDue:
    def setup_method(self):
        self.record = PolicyYearRecord(year=1, premium=5_000)

    def test_within_premium_years(self):
        assert premium_due(self.record, 10, False, 10, 3_000) == 5_000

    def test_after_premium_years(self):
        assert premium_due(self.record, 11, False, 10, 3_000) == 0.0

    def test_single_premium_first_year_only(self):
        assert premium_due(self.record, 1, True, 10, 3_000) == 5_000
        assert premium_due(self.record, 2, True, 10, 3_000) == 0.0

    def test_fallback_amount(self):
        record = PolicyYearRecord(year=3)
        assert premium_due(record, 3, False, 10, 3_000, use_schedule_premium=False) == 3_000

    def test_zero_row_premium_is_zero(self):
        assert premium_due(PolicyYearRecord(year=3), 3, False, 10, 3_000) == 0.0

    def test_beyond_schedule(self):
        assert premium_due(EMPTY_RECORD, 12, False, 20, 3_000, beyond_schedule=True) == 0.0


class TestHasPremiumData:
    def test_schedule_with_premiums(self):
        assert has_premium_data(SCHEDULE)

    def test_all_zero_premiums(self):
        assert not has_premium_data([PolicyYearRecord(year=1), PolicyYearRecord(year=2)])

    def test_empty(self):
        assert not has_premium_data([])
