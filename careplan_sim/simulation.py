"""Core single-person projection engine."""

from dataclasses import dataclass

from careplan_sim.errors import ConfigurationError
from careplan_sim.params import (
    BENEFIT_VARIANTS,
    HORIZON_AGE,
    Person,
    ProjectionOptions,
)
from careplan_sim.policy import (
    EMPTY_RECORD,
    find_policy_record,
    has_premium_data,
    premium_due,
    sort_schedule,
)
from careplan_sim.tax import gross_up_withdrawal


@dataclass(frozen=True)
class YearlyOutcome:
    """Projected figures for one age of one person."""

    age: int
    year: int
    work_income: float = 0.0
    social_security: float = 0.0
    pension: float = 0.0
    policy_income: float = 0.0
    income_needed: float = 0.0
    income_gap: float = 0.0
    assets: float = 0.0             # policy scenario
    assets_no_policy: float = 0.0
    policy_premium: float = 0.0
    policy_cash_value: float = 0.0
    policy_death_benefit: float = 0.0
    ltc_costs: float = 0.0
    ltc_benefits: float = 0.0
    ltc_out_of_pocket: float = 0.0  # policy scenario
    ltc_out_of_pocket_no_policy: float = 0.0
    net_worth: float = 0.0
    net_worth_no_policy: float = 0.0
    policy_loan_taken: float = 0.0
    policy_loan_interest: float = 0.0
    policy_loan_balance: float = 0.0
    bankrupt: bool = False
    bankrupt_age: int | None = None
    bankrupt_no_policy: bool = False
    bankrupt_age_no_policy: int | None = None
    is_death_year: bool = False
    legacy_amount: float = 0.0


@dataclass(frozen=True)
class ProjectionSummary:
    final_net_worth: float
    final_net_worth_no_policy: float
    total_ltc_needed: float
    total_ltc_covered: float
    ltc_gap: float
    average_income_gap: float
    total_premiums: float
    bankrupt: bool
    bankrupt_age: int | None
    bankrupt_no_policy: bool
    bankrupt_age_no_policy: int | None
    legacy_amount: float
    death_benefit_at_death: float


@dataclass(frozen=True)
class PersonProjection:
    person: Person
    outcomes: list[YearlyOutcome]
    summary: ProjectionSummary


@dataclass(frozen=True)
class _ScenarioState:
    """Asset state of one scenario carried from year to year."""

    balance: float
    bankrupt: bool = False
    bankrupt_age: int | None = None
    loan_balance: float = 0.0
    loan_taken: float = 0.0
    loan_interest: float = 0.0


def validate_person(person: Person, options: ProjectionOptions | None = None) -> list[str]:
    """Validate person parameters. Returns list of error messages."""
    errors = []

    if person.current_age < 0 or person.current_age > HORIZON_AGE:
        errors.append(f"Current age {person.current_age} is outside 0-{HORIZON_AGE}")
    if person.death_age < person.current_age:
        errors.append(
            f"Death age {person.death_age} is before current age {person.current_age}"
        )
    if person.retirement_age < person.current_age:
        errors.append(
            f"Retirement age {person.retirement_age} is before current age {person.current_age}"
        )
    elif person.retirement_age > person.death_age:
        errors.append(
            f"Retirement age {person.retirement_age} is after death age {person.death_age}"
        )

    if person.ltc_event_enabled:
        if not person.current_age <= person.ltc_event_age <= person.death_age:
            errors.append(
                f"LTC event age {person.ltc_event_age} is outside the lifespan "
                f"{person.current_age}-{person.death_age}"
            )
        if person.ltc_duration < 0:
            errors.append(f"LTC duration {person.ltc_duration} is negative")

    if person.policy_enabled:
        if not person.policy_schedule:
            errors.append("Policy is enabled but the policy schedule is empty")
        elif any(rec.year < 1 for rec in person.policy_schedule):
            errors.append("Policy schedule years must start at 1")
        if person.premium_years < 0:
            errors.append(f"Premium years {person.premium_years} is negative")

    for label, value in [
        ("Annual income", person.annual_income),
        ("Initial assets", person.initial_assets),
        ("Annual contribution", person.annual_contribution),
        ("Social Security", person.social_security),
        ("Pension", person.pension),
        ("LTC monthly need", person.ltc_monthly_need),
        ("Annual premium", person.annual_premium_amount),
    ]:
        if value < 0:
            errors.append(f"{label} {value:,.0f} is negative")

    for label, rate in [
        ("Pay raise", person.pay_raise),
        ("Asset return rate", person.asset_return_rate),
        ("Retirement return rate", person.retirement_return_rate),
        ("General inflation rate", person.general_inflation_rate),
        ("LTC inflation rate", person.ltc_inflation_rate),
        ("Policy loan rate", person.policy_loan_rate),
    ]:
        if rate <= -1:
            errors.append(f"{label} {rate:.2%} must be above -100%")

    if not 0 <= person.withdrawal_tax_rate < 1:
        errors.append(f"Withdrawal tax rate {person.withdrawal_tax_rate:.2%} must be in [0%, 100%)")
    if not 0 <= person.max_loan_to_value <= 1:
        errors.append(f"Maximum loan-to-value {person.max_loan_to_value:.2%} must be in [0%, 100%]")

    if options is not None and options.benefit_variant not in BENEFIT_VARIANTS:
        errors.append(
            f"Unknown LTC benefit variant {options.benefit_variant!r} "
            f"(expected one of {', '.join(BENEFIT_VARIANTS)})"
        )

    return errors


def _calc_income(person: Person, age: int) -> tuple[float, float, float, float]:
    """Calculate yearly income. Returns (work_income, social_security, pension, income_needed)."""
    if age < person.retirement_age:
        years_elapsed = age - person.current_age
        work_income = person.annual_income * (1 + person.pay_raise) ** years_elapsed
        return work_income, 0.0, 0.0, 0.0

    final_income = person.annual_income * (
        (1 + person.pay_raise) ** (person.retirement_age - person.current_age)
    )
    inflation = (1 + person.general_inflation_rate) ** (age - person.retirement_age)
    social_security = person.social_security * inflation
    pension = person.pension * inflation
    income_needed = final_income * person.income_replacement * inflation
    return 0.0, social_security, pension, income_needed


def _calc_ltc_cost(person: Person, age: int) -> float:
    """Annual LTC cost, inflated from today's dollars. Zero outside the event window."""
    if not person.ltc_event_enabled:
        return 0.0
    if not person.ltc_event_age <= age < person.ltc_event_age + person.ltc_duration:
        return 0.0
    inflation = (1 + person.ltc_inflation_rate) ** (age - person.current_age)
    return person.ltc_monthly_need * 12 * inflation


def _advance_scenario(
    state: _ScenarioState,
    age: int,
    is_retired: bool,
    growth_rate: float,
    contribution: float,
    premium: float,
    ltc_outflow: float,
    income_gap: float,
    tax_rate: float,
    loan_capacity: float = 0.0,
    loan_rate: float = 0.0,
) -> _ScenarioState:
    """Advance one scenario's assets by one year.

    Working years: growth + contribution - premium. LTC costs are drawn from
    assets only once retired, together with the income gap.
    ltc_outflow: LTC out-of-pocket (policy) or full LTC cost (no policy).
    loan_capacity: maximum total policy loan (cash value x LTV), 0 disables loans.
    Loans and the bankruptcy floor apply to retired years only.
    """
    loan_interest = state.loan_balance * loan_rate
    loan_balance = state.loan_balance + loan_interest

    available = state.balance * (1 + growth_rate)
    if not is_retired:
        return _ScenarioState(
            balance=available + contribution - premium,
            bankrupt=state.bankrupt,
            bankrupt_age=state.bankrupt_age,
            loan_balance=loan_balance,
            loan_interest=loan_interest,
        )

    need = income_gap + premium + ltc_outflow
    gross = gross_up_withdrawal(need, tax_rate)
    if available >= gross:
        balance = available - gross
    else:
        # Net amount still uncovered once assets are exhausted
        balance = -(need - max(available, 0.0) * (1 - tax_rate))

    loan_taken = 0.0
    if balance < 0 and loan_capacity > 0:
        loan_taken = min(-balance, max(0.0, loan_capacity - loan_balance))
        loan_balance += loan_taken
        balance += loan_taken

    bankrupt = state.bankrupt
    bankrupt_age = state.bankrupt_age
    if balance < 0:
        balance = 0.0
        if not bankrupt:
            bankrupt = True
            bankrupt_age = age

    return _ScenarioState(
        balance=balance,
        bankrupt=bankrupt,
        bankrupt_age=bankrupt_age,
        loan_balance=loan_balance,
        loan_taken=loan_taken,
        loan_interest=loan_interest,
    )


def project(person: Person, options: ProjectionOptions | None = None) -> list[YearlyOutcome]:
    """Project one person from current_age to min(death_age, 95).

    Both scenarios (with and without the policy) are reduced separately over
    the same yearly income, policy and LTC inputs.
    Raises ConfigurationError for a disabled person or invalid parameters.
    """
    if options is None:
        options = ProjectionOptions()
    if not person.enabled:
        raise ConfigurationError(f"{person.name}: person is disabled and cannot be projected")
    errors = validate_person(person, options)
    if errors:
        raise ConfigurationError(
            f"{person.name}: invalid parameters:\n" + "\n".join(f"  - {e}" for e in errors)
        )

    schedule = sort_schedule(person.policy_schedule) if person.policy_enabled else []
    last_policy_year = schedule[-1].year if schedule else 0
    use_schedule_premium = has_premium_data(schedule)
    loans_enabled = person.policy_enabled and person.policy_loan_enabled

    with_policy = _ScenarioState(balance=person.initial_assets)
    no_policy = _ScenarioState(balance=person.initial_assets)
    ltc_benefits_paid = 0.0
    outcomes: list[YearlyOutcome] = []

    for age in range(person.current_age, person.last_age + 1):
        years_elapsed = age - person.current_age
        is_retired = age >= person.retirement_age
        growth_rate = person.retirement_return_rate if is_retired else person.asset_return_rate

        work_income, social_security, pension, income_needed = _calc_income(person, age)
        income_gap = max(0.0, income_needed - social_security - pension)

        # Policy metrics
        policy_year = years_elapsed + 1
        record = EMPTY_RECORD
        premium = 0.0
        if person.policy_enabled:
            record = find_policy_record(schedule, policy_year, options.extrapolate)
            premium = premium_due(
                record, policy_year,
                person.is_premium_single, person.premium_years, person.annual_premium_amount,
                beyond_schedule=policy_year > last_policy_year,
                use_schedule_premium=use_schedule_premium,
            )
        cash_value = record.cash_value
        death_benefit = record.death_benefit

        # LTC event: benefit capped by cost and by the remaining benefit pool
        ltc_cost = _calc_ltc_cost(person, age)
        ltc_benefit = 0.0
        if ltc_cost > 0 and person.policy_enabled:
            remaining_pool = max(0.0, record.total_ltc_benefit - ltc_benefits_paid)
            payout = record.monthly_payout(options.benefit_variant) * 12
            ltc_benefit = min(payout, ltc_cost, remaining_pool)
            ltc_benefits_paid += ltc_benefit
        ltc_out_of_pocket = max(0.0, ltc_cost - ltc_benefit)

        loan_capacity = cash_value * person.max_loan_to_value if loans_enabled and is_retired else 0.0
        with_policy = _advance_scenario(
            with_policy, age, is_retired, growth_rate,
            person.annual_contribution, premium, ltc_out_of_pocket, income_gap,
            person.withdrawal_tax_rate,
            loan_capacity=loan_capacity,
            loan_rate=person.policy_loan_rate if loans_enabled else 0.0,
        )
        no_policy = _advance_scenario(
            no_policy, age, is_retired, growth_rate,
            person.annual_contribution, 0.0, ltc_cost, income_gap,
            person.withdrawal_tax_rate,
        )

        net_worth = with_policy.balance + max(0.0, cash_value - with_policy.loan_balance)
        is_death_year = age == person.last_age

        outcomes.append(YearlyOutcome(
            age=age,
            year=options.base_year + years_elapsed,
            work_income=work_income,
            social_security=social_security,
            pension=pension,
            policy_income=ltc_benefit,
            income_needed=income_needed,
            income_gap=income_gap,
            assets=with_policy.balance,
            assets_no_policy=no_policy.balance,
            policy_premium=premium,
            policy_cash_value=cash_value,
            policy_death_benefit=death_benefit,
            ltc_costs=ltc_cost,
            ltc_benefits=ltc_benefit,
            ltc_out_of_pocket=ltc_out_of_pocket,
            ltc_out_of_pocket_no_policy=ltc_cost,
            net_worth=net_worth,
            net_worth_no_policy=no_policy.balance,
            policy_loan_taken=with_policy.loan_taken,
            policy_loan_interest=with_policy.loan_interest,
            policy_loan_balance=with_policy.loan_balance,
            bankrupt=with_policy.bankrupt,
            bankrupt_age=with_policy.bankrupt_age,
            bankrupt_no_policy=no_policy.bankrupt,
            bankrupt_age_no_policy=no_policy.bankrupt_age,
            is_death_year=is_death_year,
            legacy_amount=net_worth if is_death_year else 0.0,
        ))

    return outcomes


def summarize(person: Person, outcomes: list[YearlyOutcome]) -> ProjectionSummary:
    """Aggregate a projection into headline figures."""
    if not outcomes:
        raise ConfigurationError(f"{person.name}: no projected years to summarize")
    last = outcomes[-1]
    total_ltc_needed = sum(o.ltc_costs for o in outcomes)
    total_ltc_covered = sum(o.ltc_benefits for o in outcomes)
    retired = [o for o in outcomes if o.age >= person.retirement_age]
    average_income_gap = (
        sum(o.income_gap for o in retired) / len(retired) if retired else 0.0
    )
    death_year = next((o for o in outcomes if o.is_death_year), None)
    return ProjectionSummary(
        final_net_worth=last.net_worth,
        final_net_worth_no_policy=last.net_worth_no_policy,
        total_ltc_needed=total_ltc_needed,
        total_ltc_covered=total_ltc_covered,
        ltc_gap=total_ltc_needed - total_ltc_covered,
        average_income_gap=average_income_gap,
        total_premiums=sum(o.policy_premium for o in outcomes),
        bankrupt=last.bankrupt,
        bankrupt_age=last.bankrupt_age,
        bankrupt_no_policy=last.bankrupt_no_policy,
        bankrupt_age_no_policy=last.bankrupt_age_no_policy,
        legacy_amount=death_year.legacy_amount if death_year else 0.0,
        death_benefit_at_death=death_year.policy_death_benefit if death_year else 0.0,
    )


def project_person(person: Person, options: ProjectionOptions | None = None) -> PersonProjection:
    """Project one person and attach the summary."""
    outcomes = project(person, options)
    return PersonProjection(person=person, outcomes=outcomes, summary=summarize(person, outcomes))
