"""
CV Scorer: rubric-weighted ranking of résumé documents.

Usage:
    from cv_scorer import load_rubric, score_candidate, MonthYear

    rubric = load_rubric(Path("scoring.config.json"))
    result = score_candidate("alice.pdf", text, rubric, now=MonthYear(2024, 5))
    print(result.total)
"""

__version__ = "1.0.0"

from .config import ConfigError, Rubric, load_rubric
from .dates import DateRange, EmploymentType, MonthYear, extract_ranges
from .models import CandidateResult, ScoreComponent
from .scoring import rank, score_candidate

__all__ = [
    "ConfigError", "Rubric", "load_rubric",
    "DateRange", "EmploymentType", "MonthYear", "extract_ranges",
    "CandidateResult", "ScoreComponent",
    "rank", "score_candidate",
]
