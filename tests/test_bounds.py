"""Tests for chart bound calculation."""

import dataclasses
import math

import pytest
from careplan_sim import Person, ProjectionOptions, project_household, project_person
from careplan_sim.bounds import (
    ASSET_GRANULARITY,
    MIN_WITHDRAWAL_BOUND,
    NO_AGE_RANGE,
    get_age_range,
    get_asset_max_value,
    get_asset_min_value,
    get_income_max_value,
    get_income_min_value,
    get_ltc_max_value,
    round_up,
)

OPTIONS = ProjectionOptions(base_year=2030)


def _with_peak_assets(value: float):
    """A projection whose largest asset figure is exactly value."""
    person = Person(current_age=60, retirement_age=60, death_age=61, initial_assets=0,
                    annual_income=0, social_security=0)
    projection = project_person(person, OPTIONS)
    outcomes = [dataclasses.replace(o, assets=0.0, net_worth=0.0) for o in projection.outcomes]
    outcomes[0] = dataclasses.replace(outcomes[0], assets=value)
    return dataclasses.replace(projection, outcomes=outcomes)


class TestRoundUp:
    def test_rounds_to_next_multiple(self):
        assert round_up(1_230_000, 500_000) == 1_500_000

    def test_exact_multiple_unchanged(self):
        assert round_up(1_000_000, 500_000) == 1_000_000

    def test_zero(self):
        assert round_up(0, 50_000) == 0


class TestAssetMaxValue:
    def test_1_23m_rounds_to_1_5m(self):
        assert get_asset_max_value(_with_peak_assets(1_230_000), None) == 1_500_000

    def test_granularity(self):
        household = project_household(Person(), Person(current_age=58), OPTIONS)
        bound = get_asset_max_value(household.person1, household.person2, household.matrix)
        assert bound % ASSET_GRANULARITY == 0
        assert bound >= max(household.matrix.series("combined", "net_worth"))

    def test_nan_and_none_are_zero(self):
        p = _with_peak_assets(1_230_000)
        outcomes = list(p.outcomes)
        outcomes[1] = dataclasses.replace(outcomes[1], assets=math.nan, net_worth=None)
        p = dataclasses.replace(p, outcomes=outcomes)
        assert get_asset_max_value(p, None) == 1_500_000

    def test_no_projection(self):
        assert get_asset_max_value(None, None) == 0


class TestAssetMinValue:
    def test_floor_magnitude(self):
        """No income gap: bound is still -MIN_WITHDRAWAL_BOUND."""
        p = project_person(
            Person(current_age=60, retirement_age=65, death_age=70, social_security=1_000_000),
            OPTIONS,
        )
        assert get_asset_min_value(p, None) == -MIN_WITHDRAWAL_BOUND

    def test_largest_retired_withdrawal(self):
        p = project_person(
            Person(current_age=60, retirement_age=60, death_age=62, annual_income=200_000, pay_raise=0.0,
                   social_security=0, general_inflation_rate=0.0),
            OPTIONS,
        )
        # Gap 140,000 rounds to 150,000
        assert get_asset_min_value(p, None) == -150_000


class TestIncomeBounds:
    def setup_method(self):
        self.household = project_household(
            Person(current_age=60, annual_income=120_000), Person(current_age=62, annual_income=80_000), OPTIONS,
        )

    def test_max_covers_stacked_combined(self):
        h = self.household
        bound = get_income_max_value(h.person1, h.person2, h.matrix)
        assert bound % 50_000 == 0
        work = h.matrix.series("combined", "work_income")
        assert bound >= max(work)

    def test_combined_sources_not_stacked(self):
        """Worker 120k + retiree SS 40k: fields peak at 120k, so 150k not 200k."""
        worker = Person(current_age=60, annual_income=120_000, pay_raise=0.0, general_inflation_rate=0.0)
        retiree = Person(current_age=70, retirement_age=70, annual_income=0, social_security=40_000,
                         general_inflation_rate=0.0)
        h = project_household(worker, retiree, OPTIONS)
        assert get_income_max_value(h.person1, h.person2, h.matrix) == 150_000

    def test_min_is_negated_gap(self):
        h = self.household
        bound = get_income_min_value(h.person1, h.person2, h.matrix)
        assert bound <= 0
        assert -bound >= max(h.matrix.series("combined", "income_gap"))


class TestLtcMaxValue:
    def test_no_ltc(self):
        p = project_person(Person(), OPTIONS)
        assert get_ltc_max_value(p, None) == 0

    def test_ltc_cost(self):
        p = project_person(
            Person(current_age=60, ltc_event_enabled=True, ltc_event_age=60, ltc_duration=1,
                   ltc_monthly_need=7_000),
            OPTIONS,
        )
        assert get_ltc_max_value(p, None) == 100_000  # 84,000 rounds up


class TestAgeRange:
    def test_single_person(self):
        assert get_age_range(Person(current_age=60), None) == (60, 95)

    def test_earliest_start(self):
        assert get_age_range(Person(current_age=65), Person(current_age=58)) == (58, 95)

    def test_disabled_ignored(self):
        assert get_age_range(Person(current_age=50, enabled=False), Person(current_age=62)) == (62, 95)

    def test_no_enabled_person(self):
        assert get_age_range(None, Person(enabled=False)) == NO_AGE_RANGE == (100, 0)
