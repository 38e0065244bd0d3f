"""Tests for Person, PolicyYearRecord and ProjectionOptions."""

import dataclasses
from datetime import date

import pytest
from careplan_sim import Person, PolicyYearRecord, ProjectionOptions, HORIZON_AGE


class TestPersonLastAge:
    def test_death_before_horizon(self):
        p = Person(current_age=60, death_age=85)
        assert p.last_age == 85
        assert p.projection_years == 26

    def test_death_after_horizon_clipped(self):
        p = Person(current_age=60, death_age=100)
        assert p.last_age == HORIZON_AGE
        assert p.projection_years == 36

    def test_death_at_horizon(self):
        p = Person(current_age=95, retirement_age=95, death_age=95)
        assert p.projection_years == 1


class TestPersonImmutable:
    def test_frozen(self):
        p = Person()
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.current_age = 50

    def test_replace_copies(self):
        p = Person(current_age=60)
        q = dataclasses.replace(p, current_age=55)
        assert p.current_age == 60
        assert q.current_age == 55


class TestMonthlyPayout:
    def setup_method(self):
        self.record = PolicyYearRecord(year=1, aob_monthly=4_000, cob_monthly=6_000)

    def test_cob(self):
        assert self.record.monthly_payout("cob") == 6_000

    def test_aob(self):
        assert self.record.monthly_payout("aob") == 4_000


class TestProjectionOptions:
    def test_defaults(self):
        options = ProjectionOptions()
        assert options.extrapolate is False
        assert options.benefit_variant == "cob"
        assert options.base_year == date.today().year

    def test_explicit_base_year(self):
        assert ProjectionOptions(base_year=2030).base_year == 2030
