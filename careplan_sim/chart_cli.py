"""CLI entry point for chart generation."""

import argparse
import sys
from pathlib import Path

from careplan_sim.charts import plot_assets, plot_income, plot_ltc, plot_scenarios
from careplan_sim.config import parse_args
from careplan_sim.matrix import COMBINED, project_household
from careplan_sim.scenarios import run_scenarios


def _add_args(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--output", type=Path, default=Path("reports/charts"),
        help="output directory (default: reports/charts)",
    )
    parser.add_argument(
        "--name", type=str, default="",
        help="output filename suffix (e.g. smith -> income-smith.png)",
    )
    parser.add_argument(
        "--view", choices=("person1", "person2", COMBINED), default=COMBINED,
        help="which series to chart (default: combined)",
    )
    parser.add_argument(
        "--no-scenarios", action="store_true",
        help="skip the scenario comparison chart",
    )


def main():
    try:
        person1, person2, options, args = parse_args("Retirement & LTC projection charts", _add_args)
        print("Projecting household...", file=sys.stderr)
        household = project_household(person1, person2, options)
    except ValueError as e:
        print(f"\n{e}\n", file=sys.stderr)
        raise SystemExit(1)

    output_dir = args.output
    chart_name = args.name
    paths = [
        plot_income(household, output_dir, chart_name, key=args.view),
        plot_assets(household, output_dir, chart_name, key=args.view),
        plot_ltc(household, output_dir, chart_name, key=args.view),
    ]
    if not args.no_scenarios:
        print("Running assumption scenarios...", file=sys.stderr)
        paths.append(plot_scenarios(run_scenarios(person1, person2, options), output_dir, chart_name))

    for path in paths:
        print(f"  wrote {path}", file=sys.stderr)


if __name__ == "__main__":
    main()
