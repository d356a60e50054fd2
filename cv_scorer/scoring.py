from __future__ import annotations
import re
import logging
from typing import Dict, List, Optional, Sequence

from .config import Rubric
from .dates import DateRange, MonthYear, extract_ranges
from .experience import months_in_required_location, score_experience
from .fit import FitScorer, score_semantic_fit
from .links import find_links
from .models import CandidateResult, ScoreComponent
from .normalize import has_any, normalize_text
from .skills import missing_must_skills, score_languages, score_skills

logger = logging.getLogger(__name__)

PRESENCE_SHARE = 0.4
MONTHS_SHARE = 0.6

GITHUB_PROFILE_RE = re.compile(r"github\.com/[A-Za-z0-9._-]+", re.I)
YEAR_MENTION_RE = re.compile(r"\b(20\d{2})\b")


def score_location(text: str, ranges: Sequence[DateRange], cfg) -> ScoreComponent:
    """
    40% of the weight for any required-location term in the text, plus up to
    60% ramped linearly on months spent in ranges tagged with a required
    location (full at cfg.months_cap).
    """
    pts = 0.0
    mentioned = has_any(text, cfg.required_any)
    if mentioned:
        pts += cfg.weight * PRESENCE_SHARE
    months = 0
    if cfg.count_months_in_required and ranges:
        months = months_in_required_location(ranges, cfg.required_any)
        frac = min(1.0, months / cfg.months_cap)
        pts += cfg.weight * MONTHS_SHARE * frac
    return ScoreComponent(
        points=pts,
        weight=cfg.weight,
        detail={"mentioned": mentioned, "monthsInRequired": months, "monthsCap": cfg.months_cap},
    )


def score_education(text: str, cfg) -> ScoreComponent:
    hit = next((p for p in cfg.preferred if p.lower() in text), None)
    return ScoreComponent(
        points=cfg.weight if hit else 0.0,
        weight=cfg.weight,
        detail={"matched": hit is not None, "hit": hit},
    )


def score_github(text: str, cfg) -> ScoreComponent:
    m = GITHUB_PROFILE_RE.search(text)
    return ScoreComponent(
        points=cfg.weight if m else 0.0,
        weight=cfg.weight,
        detail={"matched": m is not None},
    )


def score_recency(text: str, now: MonthYear, cfg) -> ScoreComponent:
    """Share of the required number of recent year mentions (>= now.year - cfg.years)."""
    cutoff = now.year - cfg.years
    recent = sum(1 for m in YEAR_MENTION_RE.finditer(text) if int(m.group(1)) >= cutoff)
    frac = min(1.0, recent / cfg.projects_in_last_years)
    return ScoreComponent(
        points=frac * cfg.weight,
        weight=cfg.weight,
        detail={"recentMentions": recent, "sinceYear": cutoff},
    )


def total_points(components: Dict[str, ScoreComponent]) -> float:
    return round(sum(c.points for c in components.values()), 2)


def score_candidate(
    candidate: str,
    raw_text: str,
    rubric: Rubric,
    now: MonthYear,
    job_text: str = "",
    fit_scorer: Optional[FitScorer] = None,
) -> CandidateResult:
    """
    Score one document. Every component failure stays local to its own
    function; nothing here raises for bad document content.
    """
    text = normalize_text(raw_text)
    if not text.strip():
        logger.warning(f"{candidate}: no extractable text; scoring as empty")

    ranges = extract_ranges(
        text, now,
        present_words=rubric.experience.present_words,
        gazetteer=rubric.location.gazetteer,
    )
    logger.debug(f"{candidate}: {len(ranges)} date range(s)")

    must = score_skills(text, rubric.must_skills)
    components: Dict[str, ScoreComponent] = {
        "mustSkills": must,
        "niceSkills": score_skills(text, rubric.nice_skills),
        "experience": score_experience(ranges, rubric.experience),
        "location": score_location(text, ranges, rubric.location),
        "languages": score_languages(text, rubric.languages),
    }
    if rubric.education is not None:
        components["education"] = score_education(text, rubric.education)
    if rubric.github is not None:
        components["githubPresence"] = score_github(text, rubric.github)
    if rubric.recency is not None:
        components["recency"] = score_recency(text, now, rubric.recency)
    if rubric.llm_boost is not None:
        components["llmBoost"] = score_semantic_fit(text, job_text, rubric.llm_boost, fit_scorer)

    return CandidateResult(
        candidate=candidate,
        total=total_points(components),
        components=components,
        links=find_links(raw_text),
        missing_must=missing_must_skills(must, rubric.must_skills),
    )


def rank(results: Sequence[CandidateResult]) -> List[CandidateResult]:
    """Descending total; the stable sort keeps ties in encounter order."""
    return sorted(results, key=lambda r: -r.total)
