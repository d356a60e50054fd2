from __future__ import annotations
import re
from typing import Dict, Mapping, Optional, Sequence, Tuple

from .dates import DateRange, EmploymentType, MonthYear
from .models import ScoreComponent

OVERLAP_SUM = "sum"
OVERLAP_MERGE = "merge"
OVERLAP_STRATEGIES = (OVERLAP_SUM, OVERLAP_MERGE)


def months_between(a: MonthYear, b: MonthYear) -> int:
    """Inclusive month count: a range inside one month is 1. Negative spans floor at 0."""
    return max(0, (b.year - a.year) * 12 + (b.month - a.month) + 1)


def _month_index(my: MonthYear) -> int:
    return my.year * 12 + my.month


def assign_months(
    ranges: Sequence[DateRange],
    weights_by_type: Mapping[str, float],
) -> Dict[int, Tuple[float, EmploymentType]]:
    """
    Give every calendar month covered by any range to exactly one employment type.
    A contested month goes to the highest-weighted type; on equal weight the
    range listed first keeps it. Malformed (end < start) ranges cover nothing.
    """
    owner: Dict[int, Tuple[float, EmploymentType]] = {}
    for r in ranges:
        weight = weights_by_type.get(r.employment_type.value, 1.0)
        for idx in range(_month_index(r.start), _month_index(r.end) + 1):
            if idx not in owner or weight > owner[idx][0]:
                owner[idx] = (weight, r.employment_type)
    return owner


def sum_experience_months(
    ranges: Sequence[DateRange],
    weights_by_type: Mapping[str, float],
    strategy: str = OVERLAP_SUM,
) -> Dict[str, object]:
    """
    Weighted and per-type month totals.
    With the default "sum" strategy concurrent roles are double counted;
    "merge" counts each calendar month once, across all employment types.
    """
    by_type: Dict[str, int] = {t.value: 0 for t in EmploymentType}
    total_weighted = 0.0
    if strategy == OVERLAP_MERGE:
        for weight, etype in assign_months(ranges, weights_by_type).values():
            by_type[etype.value] += 1
            total_weighted += weight
        return {"total_weighted_months": total_weighted, "by_type_months": by_type}
    for r in ranges:
        months = months_between(r.start, r.end)
        by_type[r.employment_type.value] += months
        total_weighted += months * weights_by_type.get(r.employment_type.value, 1.0)
    return {"total_weighted_months": total_weighted, "by_type_months": by_type}


def credit_fraction(years: float, min_years: float) -> float:
    if min_years <= 0:
        return 1.0
    return max(0.0, min(1.0, years / min_years))


def score_experience(ranges: Sequence[DateRange], cfg) -> ScoreComponent:
    summed = sum_experience_months(ranges, cfg.weights_by_type, cfg.overlap_strategy)
    years = summed["total_weighted_months"] / 12.0
    frac = credit_fraction(years, cfg.min_years)
    return ScoreComponent(
        points=frac * cfg.weight,
        weight=cfg.weight,
        detail={
            "years": round(years, 2),
            "total_weighted_months": round(summed["total_weighted_months"], 2),
            "by_type_months": summed["by_type_months"],
            "min_years": cfg.min_years,
            "overlap_strategy": cfg.overlap_strategy,
            "ranges": [r.to_dict() for r in ranges],
        },
    )


def _required_location_re(required_any: Sequence[str]) -> Optional[re.Pattern]:
    terms = [re.escape(t.strip()).replace(r"\ ", r"\s+") for t in required_any if t and t.strip()]
    if not terms:
        return None
    return re.compile("|".join(terms), re.I)


def months_in_required_location(ranges: Sequence[DateRange], required_any: Sequence[str]) -> int:
    wanted = _required_location_re(required_any)
    if wanted is None:
        return 0
    return sum(months_between(r.start, r.end) for r in ranges if r.location and wanted.search(r.location))
