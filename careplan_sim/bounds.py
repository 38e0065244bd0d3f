"""Axis bounds shared by the income, asset and LTC charts.

Bounds are rounded up to a coarse granularity so that small changes in the
projection do not rescale the charts.
"""

import math
from collections.abc import Iterable, Iterator

from careplan_sim.matrix import (
    ASSET_METRICS,
    COMBINED,
    INCOME_METRICS,
    INCOME_SOURCE_METRICS,
    LTC_METRICS,
    PERSON_KEYS,
    DataMatrix,
)
from careplan_sim.params import HORIZON_AGE, Person
from careplan_sim.simulation import PersonProjection

INCOME_GRANULARITY = 50_000
ASSET_GRANULARITY = 500_000
LTC_GRANULARITY = 50_000
MIN_WITHDRAWAL_BOUND = 50_000

NO_AGE_RANGE = (100, 0)  # sentinel: no enabled person


def _value(v) -> float:
    """Missing, None or NaN values count as zero."""
    if v is None:
        return 0.0
    v = float(v)
    return 0.0 if math.isnan(v) else v


def round_up(value: float, granularity: int) -> int:
    """Round value up to the next multiple of granularity (0 stays 0)."""
    return math.ceil(value / granularity) * granularity


def _projections(*projections: PersonProjection | None) -> list[PersonProjection]:
    return [p for p in projections if p is not None and p.person.enabled]


def _outcome_values(projections: list[PersonProjection], metrics: Iterable[str]) -> Iterator[float]:
    for p in projections:
        for outcome in p.outcomes:
            for metric in metrics:
                yield _value(getattr(outcome, metric, None))


def _matrix_values(matrix: DataMatrix | None, metrics: Iterable[str]) -> Iterator[float]:
    if matrix is None:
        return
    for key in PERSON_KEYS + (COMBINED,):
        for metric in metrics:
            for v in matrix.series(key, metric):
                yield _value(v)


def _stacked_income(projections: list[PersonProjection]) -> Iterator[float]:
    """Per-person yearly totals of the stacked income sources."""
    for p in projections:
        for outcome in p.outcomes:
            yield sum(_value(getattr(outcome, m, None)) for m in INCOME_SOURCE_METRICS)


def _peak(*sources: Iterable[float]) -> float:
    return max((max(source, default=0.0) for source in sources), default=0.0)


def get_income_max_value(
    person1: PersonProjection | None, person2: PersonProjection | None,
    matrix: DataMatrix | None = None,
) -> int:
    """Upper bound of the income chart.

    Scans every income field (person and combined), each person's stacked
    source total and income needed. Combined sources are not stacked.
    """
    projections = _projections(person1, person2)
    max_value = _peak(
        [0.0],
        _outcome_values(projections, INCOME_METRICS),
        _matrix_values(matrix, INCOME_METRICS),
        _stacked_income(projections),
    )
    return round_up(max_value, INCOME_GRANULARITY)


def get_income_min_value(
    person1: PersonProjection | None, person2: PersonProjection | None,
    matrix: DataMatrix | None = None,
) -> int:
    """Lower bound of the income chart: the largest income gap, negated."""
    projections = _projections(person1, person2)
    max_gap = _peak(
        [0.0],
        _outcome_values(projections, ("income_gap",)),
        _matrix_values(matrix, ("income_gap",)),
    )
    return -round_up(max_gap, INCOME_GRANULARITY)


def get_asset_max_value(
    person1: PersonProjection | None, person2: PersonProjection | None,
    matrix: DataMatrix | None = None,
) -> int:
    """Upper bound of the asset chart (balances, cash value, net worth)."""
    projections = _projections(person1, person2)
    max_value = _peak(
        [0.0],
        _outcome_values(projections, ASSET_METRICS),
        _matrix_values(matrix, ASSET_METRICS),
    )
    return round_up(max_value, ASSET_GRANULARITY)


def _retired_withdrawals(
    person1: PersonProjection | None, person2: PersonProjection | None,
    matrix: DataMatrix | None,
) -> Iterator[float]:
    """Income gap + LTC out-of-pocket for each retired year."""
    slots = [
        p if p is not None and p.person.enabled else None for p in (person1, person2)
    ]
    for p in slots:
        if p is None:
            continue
        for outcome in p.outcomes:
            if outcome.age >= p.person.retirement_age:
                yield _value(outcome.income_gap) + _value(outcome.ltc_out_of_pocket)
    if matrix is None:
        return
    for key, p in zip(PERSON_KEYS, slots):
        if p is None:
            continue
        gaps = matrix.series(key, "income_gap")
        out_of_pocket = matrix.series(key, "ltc_out_of_pocket")
        for age, gap, oop in zip(matrix.ages[key], gaps, out_of_pocket):
            if age and age >= p.person.retirement_age:
                yield _value(gap) + _value(oop)


def get_asset_min_value(
    person1: PersonProjection | None, person2: PersonProjection | None,
    matrix: DataMatrix | None = None,
) -> int:
    """Lower bound of the asset chart: the largest retirement withdrawal, negated.

    Never smaller in magnitude than MIN_WITHDRAWAL_BOUND.
    """
    max_withdrawal = _peak([0.0], _retired_withdrawals(person1, person2, matrix))
    return -max(MIN_WITHDRAWAL_BOUND, round_up(max_withdrawal, INCOME_GRANULARITY))


def get_ltc_max_value(
    person1: PersonProjection | None, person2: PersonProjection | None,
    matrix: DataMatrix | None = None,
) -> int:
    """Upper bound of the LTC chart (costs, benefits, out-of-pocket)."""
    projections = _projections(person1, person2)
    max_value = _peak(
        [0.0],
        _outcome_values(projections, LTC_METRICS),
        _matrix_values(matrix, LTC_METRICS),
    )
    return round_up(max_value, LTC_GRANULARITY)


def get_age_range(person1: Person | None, person2: Person | None) -> tuple[int, int]:
    """X-axis age range: (earliest enabled current age, HORIZON_AGE).

    Returns NO_AGE_RANGE (100, 0) when no person is enabled; callers treat it
    as "no data".
    """
    min_age, max_age = NO_AGE_RANGE
    for person in (person1, person2):
        if person is not None and person.enabled:
            min_age = min(min_age, person.current_age)
            max_age = max(max_age, HORIZON_AGE)
    return min_age, max_age
