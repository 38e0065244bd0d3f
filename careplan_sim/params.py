"""Person parameters, policy schedule rows and projection options."""

from dataclasses import dataclass, field
from datetime import date

HORIZON_AGE = 95  # last projected age

BENEFIT_VARIANTS = ("cob", "aob")


@dataclass(frozen=True)
class PolicyYearRecord:
    """One row of an externally supplied policy illustration."""

    year: int  # policy year, 1 = first year in force
    premium: float = 0.0
    cash_value: float = 0.0
    death_benefit: float = 0.0
    total_ltc_benefit: float = 0.0
    aob_monthly: float = 0.0  # acceleration of benefits payout
    cob_monthly: float = 0.0  # continuation of benefits payout

    def monthly_payout(self, variant: str) -> float:
        return self.aob_monthly if variant == "aob" else self.cob_monthly


@dataclass(frozen=True)
class Person:

    # Identity
    name: str = "Person 1"
    person_id: str = "1"
    enabled: bool = True
    current_age: int = 60

    # Income parameters
    annual_income: float = 150_000
    pay_raise: float = 0.02
    retirement_age: int = 67
    income_replacement: float = 0.70
    social_security: float = 36_000  # annual, in retirement-start dollars
    pension: float = 0.0

    # Asset parameters
    initial_assets: float = 500_000  # 401k-style balance
    annual_contribution: float = 19_500
    asset_return_rate: float = 0.07       # pre-retirement
    retirement_return_rate: float = 0.05  # post-retirement
    general_inflation_rate: float = 0.03
    withdrawal_tax_rate: float = 0.0  # tax on retirement-asset withdrawals

    # LTC event parameters
    ltc_event_enabled: bool = False
    ltc_event_age: int = 75
    ltc_monthly_need: float = 7_000  # today's dollars
    ltc_duration: int = 4
    ltc_inflation_rate: float = 0.05

    death_age: int = 85

    # Policy parameters
    policy_enabled: bool = False
    policy_schedule: tuple[PolicyYearRecord, ...] = ()
    is_premium_single: bool = False
    annual_premium_amount: float = 3_000
    premium_years: int = 15

    # Policy loans against cash value (policy scenario only)
    policy_loan_enabled: bool = False
    policy_loan_rate: float = 0.05
    max_loan_to_value: float = 0.95

    @property
    def last_age(self) -> int:
        """Last projected age: death age clipped to the horizon."""
        return min(self.death_age, HORIZON_AGE)

    @property
    def projection_years(self) -> int:
        return self.last_age - self.current_age + 1


@dataclass(frozen=True)
class ProjectionOptions:
    """Per-run settings passed explicitly to the projector."""

    # Hold the last schedule row (cash value, death benefit, LTC pool and
    # payouts) beyond the end of the schedule instead of dropping to zero.
    extrapolate: bool = False
    benefit_variant: str = "cob"
    base_year: int = field(default_factory=lambda: date.today().year)
