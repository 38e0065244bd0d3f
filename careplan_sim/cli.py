"""CLI entry point for a household projection (with vs. without the LTC policy)."""

import argparse
import sys

from careplan_sim.config import parse_args
from careplan_sim.matrix import COMBINED, DataMatrix, HouseholdProjection, project_household
from careplan_sim.params import Person, ProjectionOptions
from careplan_sim.scenarios import SCENARIOS, run_scenarios
from careplan_sim.simulation import PersonProjection


def _print_header(people: list[Person], options: ProjectionOptions):
    print("=" * 100)
    print(f"Retirement & long-term care projection (base year {options.base_year})")
    for p in people:
        print(
            f"  {p.name}: age {p.current_age}, retires at {p.retirement_age}, "
            f"death age {p.death_age} / income ${p.annual_income:,.0f} "
            f"(+{p.pay_raise:.1%}/yr) / assets ${p.initial_assets:,.0f}"
        )
        print(
            f"    returns {p.asset_return_rate:.1%} pre / {p.retirement_return_rate:.1%} post, "
            f"inflation {p.general_inflation_rate:.1%}, replacement {p.income_replacement:.0%}, "
            f"SS ${p.social_security:,.0f} + pension ${p.pension:,.0f}"
        )
        if p.ltc_event_enabled:
            print(
                f"    LTC event: age {p.ltc_event_age} for {p.ltc_duration} years, "
                f"${p.ltc_monthly_need:,.0f}/month today (+{p.ltc_inflation_rate:.1%}/yr)"
            )
        else:
            print("    LTC event: none")
        if p.policy_enabled:
            premium = "single premium" if p.is_premium_single else f"{p.premium_years} years of premiums"
            loans = f", loans up to {p.max_loan_to_value:.0%} of cash value" if p.policy_loan_enabled else ""
            print(f"    Policy: {len(p.policy_schedule)}-year schedule, {premium}{loans}")
        else:
            print("    Policy: none")
    extrapolate = "held at last row" if options.extrapolate else "zero"
    print(f"  Beyond the policy schedule: {extrapolate} / benefit variant: {options.benefit_variant.upper()}")
    print("=" * 100)
    print()


def _print_yearly_log(projection: PersonProjection, step: int = 5):
    person = projection.person
    print(f"\n[Yearly log - {person.name}]")
    print("-" * 100)
    print(
        f"{'Age':<5} {'Year':<6} {'Income':>10} {'Needed':>10} {'Gap':>10} {'LTC cost':>10} "
        f"{'Benefit':>10} {'Assets':>12} {'No policy':>12}"
    )
    print("-" * 100)
    outcomes = projection.outcomes
    for i, o in enumerate(outcomes):
        show = i % step == 0 or i == len(outcomes) - 1 or o.ltc_costs > 0 or o.age == person.retirement_age
        if not show:
            continue
        income = o.work_income + o.social_security + o.pension + o.policy_income
        flag = " !" if o.bankrupt or o.bankrupt_no_policy else ""
        print(
            f"{o.age:<5} {o.year:<6} {income:>10,.0f} {o.income_needed:>10,.0f} {o.income_gap:>10,.0f} "
            f"{o.ltc_costs:>10,.0f} {o.ltc_benefits:>10,.0f} {o.assets:>12,.0f} {o.assets_no_policy:>12,.0f}{flag}"
        )
    print("-" * 100)


def _print_summary(projection: PersonProjection):
    s = projection.summary
    print(f"\n[{projection.person.name}]")
    print(f"  Final net worth:     ${s.final_net_worth:>14,.0f} (policy) / ${s.final_net_worth_no_policy:>14,.0f} (no policy)")
    print(f"  LTC needed/covered:  ${s.total_ltc_needed:>14,.0f} / ${s.total_ltc_covered:>14,.0f} (gap ${s.ltc_gap:,.0f})")
    print(f"  Premiums paid:       ${s.total_premiums:>14,.0f}")
    print(f"  Avg retirement gap:  ${s.average_income_gap:>14,.0f}/yr")
    print(f"  Legacy:              ${s.legacy_amount:>14,.0f} (death benefit ${s.death_benefit_at_death:,.0f})")
    if s.bankrupt_age is not None:
        print(f"  ! Assets depleted at age {s.bankrupt_age} with the policy")
    if s.bankrupt_age_no_policy is not None:
        print(f"  ! Assets depleted at age {s.bankrupt_age_no_policy} without the policy")


def _print_household(matrix: DataMatrix):
    print("\n[Household]")
    net_worth = matrix.series(COMBINED, "net_worth")
    net_worth_no_policy = matrix.series(COMBINED, "net_worth_no_policy")
    print(f"  Years projected:     {len(matrix)} ({matrix.base_year}-{matrix.base_year + len(matrix) - 1})")
    print(f"  Peak net worth:      ${max(net_worth):>14,.0f} (policy) / ${max(net_worth_no_policy):>14,.0f} (no policy)")
    print(f"  LTC out-of-pocket:   ${sum(matrix.series(COMBINED, 'ltc_out_of_pocket')):>14,.0f}")
    failed = [i for i, flag in enumerate(matrix.bankrupt[COMBINED]) if flag]
    if failed:
        print(f"  ! Household assets depleted {failed[0]} years from now ({matrix.base_year + failed[0]})")


def _print_scenarios(results: dict[str, HouseholdProjection]):
    print("\n" + "=" * 100)
    print("[Scenario comparison - household net worth at the horizon]")
    print("=" * 100)
    print(f"{'Scenario':<20} {'Return':>8} {'Infl.':>7} {'LTC infl.':>10} {'Policy':>14} {'No policy':>14}")
    print("-" * 100)
    for name, household in results.items():
        scenario = SCENARIOS.get(name, {})
        matrix = household.matrix
        # Last index where anyone is still alive carries the household figures
        alive = [i for i in range(len(matrix)) if matrix.ages["person1"][i] or matrix.ages["person2"][i]]
        last = alive[-1] if alive else 0
        suffix = " !" if matrix.bankrupt[COMBINED][last] else ""
        print(
            f"{name:<20} {scenario.get('asset_return_rate', 0):>8.1%} "
            f"{scenario.get('general_inflation_rate', 0):>7.1%} {scenario.get('ltc_inflation_rate', 0):>10.1%} "
            f"{matrix.series(COMBINED, 'net_worth')[last]:>14,.0f} "
            f"{matrix.series(COMBINED, 'net_worth_no_policy')[last]:>14,.0f}{suffix}"
        )
    print("-" * 100)


def _add_args(parser: argparse.ArgumentParser):
    parser.add_argument("--scenarios", action="store_true", help="also compare the assumption scenarios")
    parser.add_argument("--step", type=int, default=5, help="yearly log interval in years (default: 5)")


def main():
    """Execute a household projection and print the report."""
    try:
        person1, person2, options, args = parse_args("Retirement & LTC projection", _add_args)
        household = project_household(person1, person2, options)
    except ValueError as e:
        print(f"\n{e}\n", file=sys.stderr)
        raise SystemExit(1)

    _print_header([p.person for p in household.projections()], options)
    for projection in household.projections():
        _print_yearly_log(projection, args.step)
    print("\n" + "=" * 100)
    print("[Summary]")
    print("=" * 100)
    for projection in household.projections():
        _print_summary(projection)
    _print_household(household.matrix)

    if args.scenarios:
        print("Running assumption scenarios...", file=sys.stderr)
        _print_scenarios(run_scenarios(person1, person2, options))


if __name__ == "__main__":
    main()
