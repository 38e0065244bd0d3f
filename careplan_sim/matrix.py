"""Dual-person combination onto a shared years-from-now index."""

from dataclasses import dataclass
from datetime import date

from careplan_sim.errors import DataAlignmentError
from careplan_sim.params import HORIZON_AGE, Person, ProjectionOptions
from careplan_sim.simulation import PersonProjection, YearlyOutcome, project_person

PERSON_KEYS = ("person1", "person2")
COMBINED = "combined"
ROW_PREFIXES = {"person1": "p1_", "person2": "p2_", COMBINED: "combined_"}

# Metrics copied straight from each YearlyOutcome
BASE_METRICS = (
    "work_income",
    "social_security",
    "pension",
    "policy_income",
    "income_needed",
    "assets",
    "assets_no_policy",
    "policy_premium",
    "policy_cash_value",
    "policy_death_benefit",
    "ltc_costs",
    "ltc_benefits",
    "policy_loan_balance",
)
# Metrics derived from other figures inside the projector
DERIVED_METRICS = (
    "income_gap",
    "ltc_out_of_pocket",
    "net_worth",
    "net_worth_no_policy",
)
ALL_METRICS = BASE_METRICS + DERIVED_METRICS

# Chart groupings shared with careplan_sim.bounds
INCOME_SOURCE_METRICS = ("work_income", "social_security", "pension", "policy_income")
INCOME_METRICS = INCOME_SOURCE_METRICS + ("income_needed",)
ASSET_METRICS = ("assets", "assets_no_policy", "policy_cash_value", "net_worth", "net_worth_no_policy")
LTC_METRICS = ("ltc_costs", "ltc_benefits", "ltc_out_of_pocket")


@dataclass
class DataMatrix:
    """Index-parallel arrays for two persons and their sum.

    Index i means i years from now for both persons and age start_age + i on
    the shared axis. Each person's own age at index i is their start age + i,
    or 0 where the person is disabled or past the horizon.
    """

    years_from_now: list[int]
    ages: dict[str, list[int]]
    base_data: dict[str, dict[str, list[float]]]     # person1, person2
    derived_data: dict[str, dict[str, list[float]]]  # person1, person2, combined (all metrics)
    bankrupt: dict[str, list[bool]]                  # person1, person2, combined
    base_year: int
    start_age: int  # earliest enabled start age, the age at index 0

    def __len__(self) -> int:
        return len(self.years_from_now)

    def series(self, key: str, metric: str) -> list[float]:
        """Return one metric array for person1, person2 or combined."""
        if key != COMBINED and metric in BASE_METRICS:
            return self.base_data[key][metric]
        return self.derived_data[key][metric]

    def to_rows(self) -> list[dict]:
        """Flatten into one dict per index with p1_/p2_/combined_ prefixed keys."""
        rows = []
        for i, offset in enumerate(self.years_from_now):
            row = {
                "years_from_now": offset,
                "year": self.base_year + offset,
                "age": self.start_age + offset,
                "p1_age": self.ages["person1"][i],
                "p2_age": self.ages["person2"][i],
            }
            for key in PERSON_KEYS + (COMBINED,):
                prefix = ROW_PREFIXES[key]
                for metric in ALL_METRICS:
                    row[prefix + metric] = self.series(key, metric)[i]
                row[prefix + "bankrupt"] = self.bankrupt[key][i]
            rows.append(row)
        return rows


@dataclass(frozen=True)
class HouseholdProjection:
    person1: PersonProjection | None
    person2: PersonProjection | None
    matrix: DataMatrix

    def projections(self) -> list[PersonProjection]:
        return [p for p in (self.person1, self.person2) if p is not None]


def _place_series(
    outcomes: list[YearlyOutcome], start_age: int, length: int, label: str,
) -> tuple[dict[str, list[float]], list[bool]]:
    """Place outcomes at index age - start_age; unfilled indices stay zero."""
    values = {metric: [0.0] * length for metric in ALL_METRICS}
    bankrupt = [False] * length
    for outcome in outcomes:
        index = outcome.age - start_age
        if index < 0 or index >= length:
            raise DataAlignmentError(
                f"{label}: age {outcome.age} cannot be placed on a timeline starting at "
                f"age {start_age} with {length} years"
            )
        for metric in ALL_METRICS:
            values[metric][index] = getattr(outcome, metric)
        bankrupt[index] = outcome.bankrupt
    return values, bankrupt


def _infer_base_year(
    series_list: list[list[YearlyOutcome] | None], start_ages: list[int | None],
) -> int:
    for outcomes, start_age in zip(series_list, start_ages):
        if outcomes:
            first = outcomes[0]
            return first.year - (first.age - start_age)
    return date.today().year


def combine(
    series_a: list[YearlyOutcome] | None,
    series_b: list[YearlyOutcome] | None,
    start_age_a: int | None,
    start_age_b: int | None,
    base_year: int | None = None,
) -> DataMatrix:
    """Align two per-person series on one years-from-now index and sum them.

    A disabled person is passed as series None / start age None and
    contributes zeros at every index. The index runs from the earliest
    enabled start age to HORIZON_AGE. Series may differ in length; missing
    years are zero-padded at the front and back.
    Raises DataAlignmentError when nothing can be aligned.
    """
    series_list = [series_a, series_b]
    start_ages = [start_age_a, start_age_b]
    for key, outcomes, start_age in zip(PERSON_KEYS, series_list, start_ages):
        if outcomes is not None and start_age is None:
            raise DataAlignmentError(f"{key}: series given without a start age")
    enabled_starts = [s for s in start_ages if s is not None]
    if not enabled_starts:
        raise DataAlignmentError("Both persons are disabled: nothing to combine")
    earliest = min(enabled_starts)
    if earliest > HORIZON_AGE:
        raise DataAlignmentError(f"Start age {earliest} is beyond the horizon age {HORIZON_AGE}")
    length = HORIZON_AGE - earliest + 1

    ages: dict[str, list[int]] = {}
    base_data: dict[str, dict[str, list[float]]] = {}
    derived_data: dict[str, dict[str, list[float]]] = {}
    bankrupt: dict[str, list[bool]] = {}
    placed: dict[str, dict[str, list[float]]] = {}
    for key, outcomes, start_age in zip(PERSON_KEYS, series_list, start_ages):
        if start_age is None:
            ages[key] = [0] * length
            values = {metric: [0.0] * length for metric in ALL_METRICS}
            flags = [False] * length
        else:
            ages[key] = [
                start_age + i if start_age + i <= HORIZON_AGE else 0 for i in range(length)
            ]
            values, flags = _place_series(outcomes or [], start_age, length, key)
        placed[key] = values
        base_data[key] = {m: values[m] for m in BASE_METRICS}
        derived_data[key] = {m: values[m] for m in DERIVED_METRICS}
        bankrupt[key] = flags

    derived_data[COMBINED] = {
        metric: [a + b for a, b in zip(placed["person1"][metric], placed["person2"][metric])]
        for metric in ALL_METRICS
    }

    # Household bankruptcy is sticky from the first year either person fails
    combined_flags = []
    failed = False
    for p1_flag, p2_flag in zip(bankrupt["person1"], bankrupt["person2"]):
        failed = failed or p1_flag or p2_flag
        combined_flags.append(failed)
    bankrupt[COMBINED] = combined_flags

    if base_year is None:
        base_year = _infer_base_year(series_list, start_ages)

    return DataMatrix(
        years_from_now=list(range(length)),
        ages=ages,
        base_data=base_data,
        derived_data=derived_data,
        bankrupt=bankrupt,
        base_year=base_year,
        start_age=earliest,
    )


def project_household(
    person1: Person, person2: Person, options: ProjectionOptions | None = None,
) -> HouseholdProjection:
    """Project each enabled person and combine them into a DataMatrix.

    Raises ConfigurationError for invalid parameters and DataAlignmentError
    when both persons are disabled.
    """
    if options is None:
        options = ProjectionOptions()
    if not person1.enabled and not person2.enabled:
        raise DataAlignmentError("Both persons are disabled: nothing to project")
    p1 = project_person(person1, options) if person1.enabled else None
    p2 = project_person(person2, options) if person2.enabled else None
    matrix = combine(
        p1.outcomes if p1 else None,
        p2.outcomes if p2 else None,
        person1.current_age if p1 else None,
        person2.current_age if p2 else None,
        base_year=options.base_year,
    )
    return HouseholdProjection(person1=p1, person2=p2, matrix=matrix)
