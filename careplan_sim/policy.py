"""Policy schedule lookup by policy year."""

from careplan_sim.params import PolicyYearRecord

EMPTY_RECORD = PolicyYearRecord(year=0)


def _interpolate(a: float, b: float, ratio: float) -> float:
    return a + (b - a) * ratio


def sort_schedule(schedule: tuple[PolicyYearRecord, ...]) -> list[PolicyYearRecord]:
    """Return schedule rows ordered by policy year (last duplicate wins)."""
    by_year = {rec.year: rec for rec in schedule}
    return [by_year[y] for y in sorted(by_year)]


def find_policy_record(
    schedule: list[PolicyYearRecord], policy_year: int, extrapolate: bool = False,
) -> PolicyYearRecord:
    """Look up the schedule row for a policy year.

    schedule must be sorted by year (see sort_schedule).
    Exact rows are returned as-is. Years between two rows are linearly
    interpolated, except the premium which is taken from the preceding row.
    Years before the first row use the first row. Years after the last row
    return an all-zero record, or the last row with zero premium when
    extrapolate is set.
    """
    if not schedule or policy_year < 1:
        return EMPTY_RECORD
    first, last = schedule[0], schedule[-1]
    if policy_year <= first.year:
        return first
    if policy_year > last.year:
        if not extrapolate:
            return EMPTY_RECORD
        return PolicyYearRecord(
            year=policy_year,
            premium=0.0,
            cash_value=last.cash_value,
            death_benefit=last.death_benefit,
            total_ltc_benefit=last.total_ltc_benefit,
            aob_monthly=last.aob_monthly,
            cob_monthly=last.cob_monthly,
        )

    lower = first
    for rec in schedule:
        if rec.year == policy_year:
            return rec
        if rec.year > policy_year:
            upper = rec
            break
        lower = rec
    else:  # pragma: no cover
        return last

    ratio = (policy_year - lower.year) / (upper.year - lower.year)
    return PolicyYearRecord(
        year=policy_year,
        premium=lower.premium,
        cash_value=_interpolate(lower.cash_value, upper.cash_value, ratio),
        death_benefit=_interpolate(lower.death_benefit, upper.death_benefit, ratio),
        total_ltc_benefit=_interpolate(lower.total_ltc_benefit, upper.total_ltc_benefit, ratio),
        aob_monthly=_interpolate(lower.aob_monthly, upper.aob_monthly, ratio),
        cob_monthly=_interpolate(lower.cob_monthly, upper.cob_monthly, ratio),
    )


def has_premium_data(schedule: list[PolicyYearRecord]) -> bool:
    """True when any schedule row carries a premium."""
    return any(rec.premium > 0 for rec in schedule)


def premium_due(
    record: PolicyYearRecord, policy_year: int,
    is_premium_single: bool, premium_years: int, fallback_amount: float,
    beyond_schedule: bool = False, use_schedule_premium: bool = True,
) -> float:
    """Premium charged in a policy year.

    Single-premium policies pay only in policy year 1; otherwise premiums are
    due while policy_year <= premium_years. Nothing is due past the end of
    the schedule. The row premium is charged as-is, zero included; only a
    schedule without any premium data (use_schedule_premium=False) charges
    fallback_amount instead.
    """
    if is_premium_single:
        if policy_year != 1:
            return 0.0
    elif policy_year > premium_years:
        return 0.0
    if beyond_schedule:
        return 0.0
    return record.premium if use_schedule_premium else fallback_amount
