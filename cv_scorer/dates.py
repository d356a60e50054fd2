from __future__ import annotations
import re
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, List, Optional, Pattern, Sequence, Tuple

logger = logging.getLogger(__name__)

MIN_YEAR = 1900
MAX_YEAR = 2200

MONTHS = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)
MONTH_ABBR = tuple(m[:3] for m in MONTHS)

DEFAULT_PRESENT_WORDS = ("present", "current", "now")

DEFAULT_GAZETTEER = (
    "saudi arabia", "ksa", "riyadh", "jeddah", "dammam", "khobar",
    "amman", "jordan", "uae", "dubai", "turkey", "pakistan", "egypt",
)


@dataclass(frozen=True, order=True)
class MonthYear:
    year: int
    month: int = 0  # 0..11

    def __post_init__(self):
        object.__setattr__(self, "year", max(MIN_YEAR, min(MAX_YEAR, int(self.year))))
        object.__setattr__(self, "month", max(0, min(11, int(self.month))))

    @classmethod
    def from_date(cls, d: date) -> "MonthYear":
        return cls(d.year, d.month - 1)

    def to_dict(self) -> Dict[str, int]:
        return {"year": self.year, "month": self.month}

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month + 1:02d}"


class EmploymentType(str, Enum):
    FULLTIME = "fulltime"
    PARTTIME = "parttime"
    FREELANCE = "freelance"
    CONTRACT = "contract"
    INTERNSHIP = "internship"
    UNSPECIFIED = "unspecified"


# Evaluated top to bottom, first hit wins. "contractor" is freelance, not contract.
CLASSIFICATION_RULES: Tuple[Tuple[Pattern[str], EmploymentType], ...] = (
    (re.compile(r"\b(?:intern|internship)\b", re.I), EmploymentType.INTERNSHIP),
    (re.compile(r"\bpart[- ]?time\b", re.I), EmploymentType.PARTTIME),
    (re.compile(r"\b(?:freelance|self[- ]?employed|consultant|contractor)\b", re.I), EmploymentType.FREELANCE),
    (re.compile(r"\b(?:contract|contractor|outsourced)\b", re.I), EmploymentType.CONTRACT),
    (re.compile(r"\b(?:full[- ]?time|permanent)\b", re.I), EmploymentType.FULLTIME),
)


@dataclass(frozen=True)
class DateRange:
    start: MonthYear
    end: MonthYear
    employment_type: EmploymentType
    location: Optional[str]
    source_line: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.start.to_dict(),
            "to": self.end.to_dict(),
            "type": self.employment_type.value,
            "location": self.location,
            "line": self.source_line.strip(),
        }


_MONTH_ALT = "|".join(MONTHS + MONTH_ABBR)
_NUM_TOKEN = r"20\d{2}|19\d{2}|\d{1,2}[/-]\d{2,4}"
_MM_YY = re.compile(r"(\d{1,2})[/-](\d{2,4})")


@lru_cache(maxsize=32)
def range_pattern(present_words: Tuple[str, ...] = DEFAULT_PRESENT_WORDS) -> Pattern[str]:
    """
    Jan 2023 - present | 2021 - 2024 | march 2020 to jun 2022 | 05/2022 - 10/2023
    """
    present = "|".join(
        re.escape(" ".join(w.split()).lower()).replace(r"\ ", r"\s+") for w in present_words if w and w.strip()
    )
    end_alt = f"{present}|{_NUM_TOKEN}" if present else _NUM_TOKEN
    return re.compile(
        rf"\b(?:(?P<mon_a>{_MONTH_ALT})\s+)?(?P<a>{_NUM_TOKEN})\s*(?:to|-|–|—)\s*"
        rf"(?:(?P<mon_b>{_MONTH_ALT})\s+)?(?P<b>{end_alt})\b",
        re.I,
    )


@lru_cache(maxsize=32)
def location_pattern(gazetteer: Tuple[str, ...] = DEFAULT_GAZETTEER) -> Optional[Pattern[str]]:
    names = [re.escape(g.strip().lower()).replace(r"\ ", r"\s+") for g in gazetteer if g and g.strip()]
    if not names:
        return None
    return re.compile(rf"\b(?:{'|'.join(names)})\b", re.I)


def parse_month_token(tok: Optional[str]) -> Optional[int]:
    if not tok:
        return None
    s = tok.lower()
    if s in MONTHS:
        return MONTHS.index(s)
    if s[:3] in MONTH_ABBR:
        return MONTH_ABBR.index(s[:3])
    return None


def parse_year_token(raw: Optional[str]) -> Optional[Tuple[int, int]]:
    """'2023' -> (2023, 0); '05/2023' -> (2023, 4); '5-23' -> (2023, 4)."""
    s = (raw or "").strip()
    m = _MM_YY.search(s)
    if m:
        mm = max(1, min(12, int(m.group(1)))) - 1
        yy = m.group(2)
        return int("20" + yy if len(yy) == 2 else yy), mm
    if s.isdigit():
        return int(s), 0
    return None


def classify_line(line: str, rules: Sequence[Tuple[Pattern[str], EmploymentType]] = CLASSIFICATION_RULES) -> EmploymentType:
    for pattern, label in rules:
        if pattern.search(line):
            return label
    return EmploymentType.UNSPECIFIED


def detect_location(line: str, gazetteer: Sequence[str] = DEFAULT_GAZETTEER) -> Optional[str]:
    pat = location_pattern(tuple(gazetteer))
    if pat is None:
        return None
    m = pat.search(line)
    return m.group(0) if m else None


def _resolve(mon: Optional[str], tok: str, now: MonthYear, present: set) -> Optional[MonthYear]:
    if " ".join(tok.split()).lower() in present:
        return now
    parsed = parse_year_token(tok)
    if parsed is None:
        return None
    year, month = parsed
    mon_idx = parse_month_token(mon)
    return MonthYear(year, mon_idx if mon_idx is not None else month)


def extract_ranges(
    text: str,
    now: MonthYear,
    present_words: Sequence[str] = DEFAULT_PRESENT_WORDS,
    gazetteer: Sequence[str] = DEFAULT_GAZETTEER,
    rules: Sequence[Tuple[Pattern[str], EmploymentType]] = CLASSIFICATION_RULES,
) -> List[DateRange]:
    """
    Scan normalized text line by line; the first date range on a line becomes a
    DateRange tagged with that line's employment type and location.
    Present-class end tokens resolve to `now`. Ranges are not merged or
    deduplicated, so one role listed twice is counted twice downstream.
    """
    words = tuple(" ".join(w.split()).lower() for w in present_words if w and w.strip())
    pat = range_pattern(words)
    present = set(words)
    out: List[DateRange] = []
    for line in (text or "").splitlines():
        m = pat.search(line)
        if not m:
            continue
        start = _resolve(m.group("mon_a"), m.group("a"), now, present)
        end = _resolve(m.group("mon_b"), m.group("b"), now, present)
        if start is None or end is None:
            logger.debug(f"Dropping unresolved range: {m.group(0)!r}")
            continue
        out.append(DateRange(
            start=start,
            end=end,
            employment_type=classify_line(line, rules),
            location=detect_location(line, gazetteer),
            source_line=line,
        ))
    return out
