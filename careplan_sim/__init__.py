"""Retirement and Long-Term Care Projection Package."""

from careplan_sim.params import (
    Person,
    PolicyYearRecord,
    ProjectionOptions,
    HORIZON_AGE,
    BENEFIT_VARIANTS,
)
from careplan_sim.errors import ConfigurationError, DataAlignmentError
from careplan_sim.policy import find_policy_record, premium_due
from careplan_sim.simulation import (
    YearlyOutcome,
    ProjectionSummary,
    PersonProjection,
    project,
    project_person,
    summarize,
    validate_person,
)
from careplan_sim.matrix import (
    DataMatrix,
    HouseholdProjection,
    combine,
    project_household,
)
from careplan_sim.bounds import (
    get_income_max_value,
    get_income_min_value,
    get_asset_max_value,
    get_asset_min_value,
    get_ltc_max_value,
    get_age_range,
)
from careplan_sim.scenarios import SCENARIOS, run_scenarios
from careplan_sim.tax import gross_up_withdrawal, tax_on_withdrawal

__all__ = [
    "Person",
    "PolicyYearRecord",
    "ProjectionOptions",
    "HORIZON_AGE",
    "BENEFIT_VARIANTS",
    "ConfigurationError",
    "DataAlignmentError",
    "find_policy_record",
    "premium_due",
    "YearlyOutcome",
    "ProjectionSummary",
    "PersonProjection",
    "project",
    "project_person",
    "summarize",
    "validate_person",
    "DataMatrix",
    "HouseholdProjection",
    "combine",
    "project_household",
    "get_income_max_value",
    "get_income_min_value",
    "get_asset_max_value",
    "get_asset_min_value",
    "get_ltc_max_value",
    "get_age_range",
    "SCENARIOS",
    "run_scenarios",
    "gross_up_withdrawal",
    "tax_on_withdrawal",
]
