"""Chart generation for household projection results."""

from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as ticker

from careplan_sim.bounds import (
    NO_AGE_RANGE,
    get_age_range,
    get_asset_max_value,
    get_asset_min_value,
    get_income_max_value,
    get_income_min_value,
    get_ltc_max_value,
)
from careplan_sim.matrix import COMBINED, HouseholdProjection

INCOME_COLORS = {
    "work_income": "#1f77b4",      # blue
    "social_security": "#2ca02c",  # green
    "pension": "#9467bd",          # purple
    "policy_income": "#ff7f0e",    # orange
}
INCOME_LABELS = {
    "work_income": "Work income",
    "social_security": "Social Security",
    "pension": "Pension",
    "policy_income": "Policy LTC benefit",
}

COLOR_POLICY = "#1f77b4"
COLOR_NO_POLICY = "#d62728"
COLOR_GAP = "#c0392b"
COLOR_BANKRUPT = "#888888"

SCENARIO_COLORS = ["#2ca02c", "#1f77b4", "#ff7f0e", "#d62728", "#9467bd", "#8c564b"]


def _format_dollar_axis(ax: plt.Axes):
    """Dollar tick labels, abbreviated to k / M."""
    def fmt(x, _):
        if abs(x) >= 1_000_000:
            return f"${x / 1_000_000:.1f}M"
        if abs(x) >= 1_000:
            return f"${x / 1_000:.0f}k"
        return f"${x:,.0f}"
    ax.yaxis.set_major_formatter(ticker.FuncFormatter(fmt))


def _x_ages(household: HouseholdProjection) -> list[int]:
    """X positions: age of the earliest-starting person at each index."""
    age_range = get_age_range(
        household.person1.person if household.person1 else None,
        household.person2.person if household.person2 else None,
    )
    if age_range == NO_AGE_RANGE:
        raise ValueError("No enabled person to chart")
    min_age = age_range[0]
    return [min_age + i for i in household.matrix.years_from_now]


def _mark_bankruptcy(ax: plt.Axes, ages: list[int], flags: list[bool]):
    for age, failed in zip(ages, flags):
        if failed:
            ax.axvline(age, color=COLOR_BANKRUPT, linewidth=1, linestyle="--", alpha=0.7)
            ax.annotate(
                "assets depleted", xy=(age, ax.get_ylim()[1]), fontsize=9,
                color=COLOR_BANKRUPT, ha="left", va="top",
            )
            return


def _save(fig: plt.Figure, output_path: Path, stem: str, name: str) -> Path:
    output_path.mkdir(parents=True, exist_ok=True)
    suffix = f"-{name}" if name else ""
    filepath = output_path / f"{stem}{suffix}.png"
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath


def plot_income(
    household: HouseholdProjection, output_path: Path, name: str = "", key: str = COMBINED,
) -> Path:
    """Stacked income sources against income needed; the gap drawn below zero.

    Args:
        household: project_household() result.
        output_path: directory to save the PNG.
        name: optional suffix for the output filename (e.g. "base" -> "income-base.png").
        key: "person1", "person2" or "combined".

    Returns:
        Path to the generated PNG file.
    """
    matrix = household.matrix
    ages = _x_ages(household)

    fig, ax = plt.subplots(figsize=(14, 8))
    bottom = [0.0] * len(ages)
    for metric, color in INCOME_COLORS.items():
        values = matrix.series(key, metric)
        ax.bar(ages, values, bottom=bottom, color=color, label=INCOME_LABELS[metric], width=0.8)
        bottom = [b + v for b, v in zip(bottom, values)]
    ax.bar(
        ages, [-g for g in matrix.series(key, "income_gap")],
        color=COLOR_GAP, alpha=0.6, label="Income gap", width=0.8,
    )
    ax.plot(ages, matrix.series(key, "income_needed"), color="black", linewidth=2, label="Income needed")

    ax.set_ylim(
        get_income_min_value(household.person1, household.person2, matrix),
        get_income_max_value(household.person1, household.person2, matrix),
    )
    ax.axhline(0, color="black", linewidth=0.8)
    ax.set_xlabel("Age")
    ax.set_ylabel("Annual income")
    ax.set_title("Income sources vs. income needed")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_dollar_axis(ax)
    return _save(fig, output_path, "income", name)


def plot_assets(
    household: HouseholdProjection, output_path: Path, name: str = "", key: str = COMBINED,
) -> Path:
    """Assets and net worth with and without the policy; withdrawals below zero."""
    matrix = household.matrix
    ages = _x_ages(household)

    fig, ax = plt.subplots(figsize=(14, 8))
    withdrawals = [
        -(gap + oop)
        for gap, oop in zip(matrix.series(key, "income_gap"), matrix.series(key, "ltc_out_of_pocket"))
    ]
    ax.bar(ages, withdrawals, color=COLOR_GAP, alpha=0.5, label="Withdrawals (gap + LTC)", width=0.8)
    ax.plot(ages, matrix.series(key, "assets"), color=COLOR_POLICY, linewidth=2, label="Assets (policy)")
    ax.plot(ages, matrix.series(key, "net_worth"), color=COLOR_POLICY, linewidth=1.5, linestyle=":",
            label="Net worth (policy)")
    ax.plot(ages, matrix.series(key, "assets_no_policy"), color=COLOR_NO_POLICY, linewidth=2,
            label="Assets (no policy)")
    ax.plot(ages, matrix.series(key, "policy_cash_value"), color="#7f7f7f", linewidth=1,
            label="Policy cash value")

    ax.set_ylim(
        get_asset_min_value(household.person1, household.person2, matrix),
        get_asset_max_value(household.person1, household.person2, matrix),
    )
    ax.axhline(0, color="black", linewidth=0.8)
    ax.set_xlabel("Age")
    ax.set_ylabel("Balance")
    ax.set_title("Retirement assets with and without the LTC policy")
    ax.legend(loc="upper right")
    ax.grid(True, alpha=0.3)
    _format_dollar_axis(ax)
    _mark_bankruptcy(ax, ages, matrix.bankrupt[key])
    return _save(fig, output_path, "assets", name)


def plot_ltc(
    household: HouseholdProjection, output_path: Path, name: str = "", key: str = COMBINED,
) -> Path:
    """LTC costs, policy benefits and out-of-pocket per year."""
    matrix = household.matrix
    ages = _x_ages(household)

    fig, ax = plt.subplots(figsize=(14, 8))
    ax.bar(ages, matrix.series(key, "ltc_costs"), color=COLOR_NO_POLICY, alpha=0.4, label="LTC cost", width=0.8)
    ax.bar(ages, matrix.series(key, "ltc_benefits"), color=COLOR_POLICY, alpha=0.8, label="Policy benefit",
           width=0.5)
    ax.plot(ages, matrix.series(key, "ltc_out_of_pocket"), color="black", linewidth=2, marker="o",
            markersize=3, label="Out-of-pocket")

    ax.set_ylim(0, max(1, get_ltc_max_value(household.person1, household.person2, matrix)))
    ax.set_xlabel("Age")
    ax.set_ylabel("Annual cost")
    ax.set_title("Long-term care costs and coverage")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_dollar_axis(ax)
    return _save(fig, output_path, "ltc", name)


def plot_scenarios(
    results: dict[str, HouseholdProjection], output_path: Path, name: str = "",
) -> Path:
    """Combined net worth (policy solid, no policy dashed) per assumption scenario."""
    if not results:
        raise ValueError("No scenario results to chart")

    fig, ax = plt.subplots(figsize=(14, 8))
    asset_max = 0
    for i, (scenario, household) in enumerate(results.items()):
        ages = _x_ages(household)
        color = SCENARIO_COLORS[i % len(SCENARIO_COLORS)]
        matrix = household.matrix
        ax.plot(ages, matrix.series(COMBINED, "net_worth"), color=color, linewidth=2, label=scenario)
        ax.plot(ages, matrix.series(COMBINED, "net_worth_no_policy"), color=color, linewidth=1,
                linestyle="--")
        asset_max = max(asset_max, get_asset_max_value(household.person1, household.person2, matrix))

    ax.set_ylim(0, max(1, asset_max))
    ax.set_xlabel("Age")
    ax.set_ylabel("Household net worth")
    ax.set_title("Net worth by scenario (solid: with policy, dashed: without)")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_dollar_axis(ax)
    return _save(fig, output_path, "scenarios", name)
