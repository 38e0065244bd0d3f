"""Economic assumption scenarios and multi-scenario execution."""

import dataclasses

from careplan_sim.matrix import HouseholdProjection, project_household
from careplan_sim.params import Person, ProjectionOptions

SCENARIOS = {
    "low growth": {
        "asset_return_rate": 0.05,
        "retirement_return_rate": 0.035,
        "general_inflation_rate": 0.02,
        "ltc_inflation_rate": 0.04,
    },
    "standard": {
        "asset_return_rate": 0.07,
        "retirement_return_rate": 0.05,
        "general_inflation_rate": 0.03,
        "ltc_inflation_rate": 0.05,
    },
    "high growth": {
        "asset_return_rate": 0.09,
        "retirement_return_rate": 0.06,
        "general_inflation_rate": 0.03,
        "ltc_inflation_rate": 0.05,
    },
    # Care costs outpacing general inflation (facility cost surveys run 5-8%)
    "high LTC inflation": {
        "asset_return_rate": 0.07,
        "retirement_return_rate": 0.05,
        "general_inflation_rate": 0.03,
        "ltc_inflation_rate": 0.08,
    },
}


def apply_scenario(person: Person, overrides: dict) -> Person:
    """Return a copy of person with the scenario's rate assumptions."""
    return dataclasses.replace(person, **overrides)


def run_scenarios(
    person1: Person,
    person2: Person,
    options: ProjectionOptions | None = None,
    scenarios: dict[str, dict] | None = None,
) -> dict[str, HouseholdProjection]:
    """Project the household under every scenario.

    scenarios: name -> Person field overrides. None = SCENARIOS.
    """
    if scenarios is None:
        scenarios = SCENARIOS
    results = {}
    for name, overrides in scenarios.items():
        results[name] = project_household(
            apply_scenario(person1, overrides),
            apply_scenario(person2, overrides),
            options,
        )
    return results
