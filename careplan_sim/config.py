"""TOML config loader with CLI > config > default resolution."""

import argparse
import csv
import dataclasses
import sys
import tomllib
from collections.abc import Callable
from pathlib import Path

from careplan_sim.errors import ConfigurationError
from careplan_sim.params import Person, PolicyYearRecord, ProjectionOptions

DEFAULT_CONFIG_PATH = Path("config.toml")

PERSON_SECTIONS = ("person1", "person2")

# Person defaults beyond the Person dataclass defaults
DEFAULTS = {
    "person1": {"name": "Person 1", "person_id": "1", "enabled": True},
    "person2": {"name": "Person 2", "person_id": "2", "enabled": False, "current_age": 58},
    "options": {"extrapolate": False, "benefit_variant": "cob", "base_year": None},
}

PERSON_FIELDS = {f.name for f in dataclasses.fields(Person)}
OPTION_FIELDS = {f.name for f in dataclasses.fields(ProjectionOptions)}
POLICY_COLUMNS = [f.name for f in dataclasses.fields(PolicyYearRecord)]

# (flag suffix, Person field, type, help) exposed per person on the command line
PERSON_FLAGS = [
    ("age", "current_age", int, "current age"),
    ("income", "annual_income", float, "annual work income"),
    ("assets", "initial_assets", float, "initial retirement assets"),
    ("contribution", "annual_contribution", float, "annual contribution until retirement"),
    ("retirement-age", "retirement_age", int, "retirement age"),
    ("death-age", "death_age", int, "assumed age at death (clipped to 95)"),
    ("ltc-age", "ltc_event_age", int, "age the LTC event starts"),
    ("ltc-duration", "ltc_duration", int, "years of care"),
    ("ltc-monthly", "ltc_monthly_need", float, "monthly care cost in today's dollars"),
]


def _parse_amount(value) -> float:
    """Parse a schedule cell: blanks are 0, "$1,200" is 1200."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace("$", "").replace(",", "")
    return float(text) if text else 0.0


def _policy_record(row: dict, source: str) -> PolicyYearRecord:
    unknown = set(row) - set(POLICY_COLUMNS)
    if unknown:
        raise ConfigurationError(f"{source}: unknown policy columns {sorted(unknown)}")
    if row.get("year") in (None, ""):
        raise ConfigurationError(f"{source}: policy row without a year: {row}")
    try:
        values = {col: _parse_amount(row.get(col)) for col in POLICY_COLUMNS if col != "year"}
        return PolicyYearRecord(year=int(_parse_amount(row["year"])), **values)
    except ValueError as e:
        raise ConfigurationError(f"{source}: bad policy row {row}: {e}") from e


def load_policy_csv(path: Path) -> tuple[PolicyYearRecord, ...]:
    """Read a policy illustration CSV with PolicyYearRecord column names."""
    if not path.exists():
        raise ConfigurationError(f"Policy CSV not found: {path}")
    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        rows = [
            {k.strip(): v for k, v in row.items() if k is not None and k.strip()}
            for row in reader
        ]
    return tuple(_policy_record(row, str(path)) for row in rows)


def _normalize_person(section: dict, name: str, base_dir: Path) -> dict:
    """Turn a TOML person table into Person keyword arguments."""
    section = dict(section)
    policy_rows = section.pop("policy", None)
    policy_csv = section.pop("policy_csv", None)
    if policy_rows is not None and policy_csv is not None:
        raise ConfigurationError(f"[{name}]: give either policy rows or policy_csv, not both")
    if policy_rows is not None:
        section["policy_schedule"] = tuple(
            _policy_record(row, f"[{name}.policy]") for row in policy_rows
        )
    elif policy_csv is not None:
        csv_path = Path(policy_csv)
        if not csv_path.is_absolute():
            csv_path = base_dir / csv_path
        section["policy_schedule"] = load_policy_csv(csv_path)
    if "policy_schedule" in section:
        section.setdefault("policy_enabled", True)
    unknown = set(section) - PERSON_FIELDS
    if unknown:
        raise ConfigurationError(f"[{name}]: unknown keys {sorted(unknown)}")
    return section


def load_config(path: Path | None = None) -> dict:
    """Load TOML config file. Returns empty dict if file doesn't exist.

    Person tables are normalized to Person field names; policy rows from
    [[personN.policy]] or personN.policy_csv become policy_schedule.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"Failed to read config file: {path}: {e}", file=sys.stderr)
        raise SystemExit(1)
    unknown = set(raw) - set(PERSON_SECTIONS) - {"options"}
    if unknown:
        raise ConfigurationError(f"{path}: unknown sections {sorted(unknown)}")
    for name in PERSON_SECTIONS:
        if name in raw:
            raw[name] = _normalize_person(raw[name], name, path.parent)
    if "options" in raw:
        unknown = set(raw["options"]) - OPTION_FIELDS
        if unknown:
            raise ConfigurationError(f"[options]: unknown keys {sorted(unknown)}")
    return raw


def create_parser(description: str) -> argparse.ArgumentParser:
    """Create argparse parser with shared projection flags."""
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--config", type=Path, default=None, help="config file path (default: config.toml)")
    for n, section in enumerate(PERSON_SECTIONS, start=1):
        for suffix, field_name, kind, text in PERSON_FLAGS:
            parser.add_argument(
                f"--p{n}-{suffix}", dest=f"{section}_{field_name}", type=kind, default=None,
                help=f"person {n}: {text}",
            )
        parser.add_argument(
            f"--p{n}-ltc", dest=f"{section}_ltc_event_enabled", action="store_true", default=None,
            help=f"person {n}: model an LTC event",
        )
        parser.add_argument(
            f"--p{n}-policy-csv", dest=f"{section}_policy_csv", type=Path, default=None,
            help=f"person {n}: policy illustration CSV (enables the policy)",
        )
    parser.add_argument("--p2", dest="person2_enabled", action="store_true", default=None, help="include person 2")
    parser.add_argument("--no-p1", dest="person1_enabled", action="store_false", default=None, help="exclude person 1")
    parser.add_argument("--extrapolate", action="store_true", default=None, help="hold the last policy row beyond the schedule")
    parser.add_argument("--benefit-variant", choices=("cob", "aob"), default=None, help="monthly LTC payout variant (default: cob)")
    parser.add_argument("--base-year", type=int, default=None, help="calendar year of projection year 0 (default: this year)")
    return parser


def resolve(args: argparse.Namespace, config: dict) -> dict:
    """Resolve values with priority: CLI flag > config.toml > hardcoded default.

    Returns {"person1": {...}, "person2": {...}, "options": {...}}.
    """
    resolved = {}
    for section, defaults in DEFAULTS.items():
        values = {**defaults, **config.get(section, {})}
        for key, cli_val in vars(args).items():
            prefix = f"{section}_"
            if cli_val is None or not key.startswith(prefix):
                continue
            values[key[len(prefix):]] = cli_val
        resolved[section] = values
    for key in OPTION_FIELDS:
        cli_val = getattr(args, key, None)
        if cli_val is not None:
            resolved["options"][key] = cli_val
    return resolved


def build_person(values: dict) -> Person:
    """Build a Person from a resolved person section."""
    values = dict(values)
    policy_csv = values.pop("policy_csv", None)
    if policy_csv is not None:
        values["policy_schedule"] = load_policy_csv(Path(policy_csv))
        values["policy_enabled"] = True
    unknown = set(values) - PERSON_FIELDS
    if unknown:
        raise ConfigurationError(f"Unknown person parameters {sorted(unknown)}")
    return Person(**values)


def build_options(values: dict) -> ProjectionOptions:
    """Build ProjectionOptions; a missing base_year means this year."""
    values = {k: v for k, v in values.items() if v is not None}
    return ProjectionOptions(**values)


def parse_args(
    description: str,
    add_args_fn: Callable[[argparse.ArgumentParser], None] | None = None,
) -> tuple[Person, Person, ProjectionOptions, argparse.Namespace]:
    """Parse CLI args, load config, resolve values.

    Returns (person1, person2, options, namespace).
    namespace: raw argparse.Namespace (for extra CLI args added via add_args_fn).
    """
    parser = create_parser(description)
    if add_args_fn:
        add_args_fn(parser)
    args = parser.parse_args()
    config = load_config(args.config)
    r = resolve(args, config)
    return build_person(r["person1"]), build_person(r["person2"]), build_options(r["options"]), args
