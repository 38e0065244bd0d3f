"""Tests for scenarios.py."""

from careplan_sim import Person, PolicyYearRecord, ProjectionOptions
from careplan_sim.matrix import COMBINED
from careplan_sim.scenarios import SCENARIOS, apply_scenario, run_scenarios

OPTIONS = ProjectionOptions(base_year=2030)


class TestRunScenarios:
    def setup_method(self):
        self.person1 = Person(current_age=60)
        self.person2 = Person(name="Person 2", person_id="2", current_age=58)
        self.results = run_scenarios(self.person1, self.person2, OPTIONS)

    def test_returns_4_scenarios(self):
        assert set(self.results) == {"low growth", "standard", "high growth", "high LTC inflation"}

    def test_each_scenario_has_both_persons(self):
        for name, household in self.results.items():
            assert len(household.projections()) == 2, name
            assert len(household.matrix) == 38

    def test_inputs_unchanged(self):
        assert self.person1.asset_return_rate == Person().asset_return_rate


class TestScenarioOrdering:
    """High growth > Standard > Low growth in pre-retirement assets."""

    def test_ordering(self):
        results = run_scenarios(Person(current_age=50), Person(enabled=False), OPTIONS)
        # Index 10: age 60, still working
        low = results["low growth"].matrix.series(COMBINED, "assets")[10]
        mid = results["standard"].matrix.series(COMBINED, "assets")[10]
        high = results["high growth"].matrix.series(COMBINED, "assets")[10]
        assert high > mid > low


class TestHighLtcInflation:
    def test_larger_ltc_costs(self):
        person = Person(
            current_age=60, ltc_event_enabled=True, ltc_event_age=80, ltc_duration=3,
            policy_enabled=True,
            policy_schedule=tuple(PolicyYearRecord(year=y, total_ltc_benefit=200_000, cob_monthly=5_000)
                                  for y in range(1, 31)),
        )
        results = run_scenarios(person, Person(enabled=False), OPTIONS)
        standard = sum(results["standard"].matrix.series(COMBINED, "ltc_costs"))
        stressed = sum(results["high LTC inflation"].matrix.series(COMBINED, "ltc_costs"))
        assert stressed > standard


class TestApplyScenario:
    def test_overrides_rates(self):
        p = apply_scenario(Person(), SCENARIOS["high LTC inflation"])
        assert p.ltc_inflation_rate == 0.08

    def test_custom_scenarios(self):
        results = run_scenarios(
            Person(), Person(enabled=False), OPTIONS, scenarios={"flat": {"asset_return_rate": 0.0}},
        )
        assert list(results) == ["flat"]
