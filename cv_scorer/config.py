"""
Rubric loading.

The rubric is a JSON document, loaded once per run and read-only afterwards:

{
  "mustSkills": [{"name": "python", "alternatives": ["django"], "weight": 10}],
  "niceSkills": [...],
  "experience": {"minYears": 3, "weight": 20, "weightsByType": {"internship": 0.5},
                 "presentWords": ["present", "current", "now"], "overlapStrategy": "sum"},
  "location":   {"requiredAny": ["riyadh", "ksa"], "weight": 10, "countMonthsInRequired": true,
                 "monthsCap": 24, "gazetteer": [...]},
  "languages":  {"mustAny": [["english"], ["arabic", "french"]], "weight": 5},
  "education":  {"preferred": ["bachelor", "computer science"], "weight": 5},
  "githubPresence": {"weight": 3},
  "recency":    {"years": 2, "projectsInLastYears": 1, "weight": 5},
  "llmBoost":   {"enabledEnvVar": "OPENAI_API_KEY", "weight": 10, "model": "gpt-4o-mini", "timeout": 30}
}

The last four blocks are optional; a component is only scored when its block is present.
"""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .dates import DEFAULT_GAZETTEER, DEFAULT_PRESENT_WORDS, EmploymentType
from .experience import OVERLAP_STRATEGIES, OVERLAP_SUM
from .utils import load_json

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "scoring.config.json"
DEFAULT_MONTHS_CAP = 24.0
DEFAULT_FIT_MODEL = "gpt-4o-mini"
DEFAULT_FIT_TIMEOUT_S = 30.0


class ConfigError(Exception):
    """Missing, unreadable or invalid rubric. Fatal at startup."""


@dataclass(frozen=True)
class SkillItem:
    name: str
    alternatives: Tuple[str, ...] = ()
    weight: float = 0.0


@dataclass(frozen=True)
class ExperienceConfig:
    min_years: float = 0.0
    weight: float = 0.0
    weights_by_type: Dict[str, float] = field(default_factory=dict)
    present_words: Tuple[str, ...] = DEFAULT_PRESENT_WORDS
    overlap_strategy: str = OVERLAP_SUM


@dataclass(frozen=True)
class LocationConfig:
    required_any: Tuple[str, ...] = ()
    weight: float = 0.0
    count_months_in_required: bool = False
    months_cap: float = DEFAULT_MONTHS_CAP
    gazetteer: Tuple[str, ...] = DEFAULT_GAZETTEER


@dataclass(frozen=True)
class LanguagesConfig:
    must_any: Tuple[Tuple[str, ...], ...] = ()
    weight: float = 0.0


@dataclass(frozen=True)
class EducationConfig:
    preferred: Tuple[str, ...] = ()
    weight: float = 0.0


@dataclass(frozen=True)
class GithubConfig:
    weight: float = 0.0


@dataclass(frozen=True)
class RecencyConfig:
    years: int = 2
    projects_in_last_years: int = 1
    weight: float = 0.0


@dataclass(frozen=True)
class FitConfig:
    enabled_env_var: str = ""
    weight: float = 0.0
    model: str = DEFAULT_FIT_MODEL
    timeout: float = DEFAULT_FIT_TIMEOUT_S


@dataclass(frozen=True)
class Rubric:
    must_skills: Tuple[SkillItem, ...] = ()
    nice_skills: Tuple[SkillItem, ...] = ()
    experience: ExperienceConfig = field(default_factory=ExperienceConfig)
    location: LocationConfig = field(default_factory=LocationConfig)
    languages: LanguagesConfig = field(default_factory=LanguagesConfig)
    education: Optional[EducationConfig] = None
    github: Optional[GithubConfig] = None
    recency: Optional[RecencyConfig] = None
    llm_boost: Optional[FitConfig] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rubric":
        if not isinstance(data, dict):
            raise ConfigError("Rubric root must be a JSON object.")
        return cls(
            must_skills=_skills(data.get("mustSkills"), "mustSkills"),
            nice_skills=_skills(data.get("niceSkills"), "niceSkills"),
            experience=_experience(_block(data, "experience") or {}),
            location=_location(_block(data, "location") or {}),
            languages=_languages(_block(data, "languages") or {}),
            education=_optional(data, "education", _education),
            github=_optional(data, "githubPresence", lambda b: GithubConfig(weight=_weight(b, "githubPresence"))),
            recency=_optional(data, "recency", _recency),
            llm_boost=_optional(data, "llmBoost", _fit),
        )


# ---------- field helpers ----------
def _block(data: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    v = data.get(key)
    if v is None:
        return None
    if not isinstance(v, dict):
        raise ConfigError(f"'{key}' must be an object.")
    return v

def _optional(data: Dict[str, Any], key: str, build):
    b = _block(data, key)
    return build(b) if b is not None else None

def _number(block: Dict[str, Any], key: str, where: str, default: float = 0.0) -> float:
    raw = block.get(key)
    if raw is None:
        return default
    if isinstance(raw, bool):
        raise ConfigError(f"{where}.{key} must be a number, got {raw!r}.")
    try:
        val = float(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{where}.{key} must be a number, got {raw!r}.")
    if val < 0:
        raise ConfigError(f"{where}.{key} must be >= 0, got {val}.")
    return val

def _weight(block: Dict[str, Any], where: str) -> float:
    return _number(block, "weight", where)

def _flag(block: Dict[str, Any], key: str, where: str, default: bool = False) -> bool:
    raw = block.get(key)
    if raw is None:
        return default
    if not isinstance(raw, bool):
        raise ConfigError(f"{where}.{key} must be true or false, got {raw!r}.")
    return raw

def _str_list(raw, where: str) -> Tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str) or not isinstance(raw, (list, tuple)):
        raise ConfigError(f"{where} must be a list of strings.")
    return tuple(str(x).strip() for x in raw if str(x).strip())

def _skills(raw, where: str) -> Tuple[SkillItem, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ConfigError(f"{where} must be a list.")
    items: List[SkillItem] = []
    for i, it in enumerate(raw):
        if not isinstance(it, dict) or not str(it.get("name") or "").strip():
            raise ConfigError(f"{where}[{i}] needs a non-empty 'name'.")
        items.append(SkillItem(
            name=str(it["name"]).strip(),
            alternatives=_str_list(it.get("alternatives"), f"{where}[{i}].alternatives"),
            weight=_weight(it, f"{where}[{i}]"),
        ))
    return tuple(items)

def _experience(b: Dict[str, Any]) -> ExperienceConfig:
    raw_weights = b.get("weightsByType") or {}
    if not isinstance(raw_weights, dict):
        raise ConfigError("experience.weightsByType must be an object.")
    known = {t.value for t in EmploymentType}
    weights: Dict[str, float] = {}
    for k in raw_weights:
        key = str(k).lower()
        if key not in known:
            logger.warning(f"Ignoring unknown employment type in weightsByType: {k}")
            continue
        weights[key] = _number(raw_weights, k, "experience.weightsByType")
    strategy = str(b.get("overlapStrategy") or OVERLAP_SUM).lower()
    if strategy not in OVERLAP_STRATEGIES:
        raise ConfigError(f"experience.overlapStrategy must be one of {OVERLAP_STRATEGIES}, got {strategy!r}.")
    present = _str_list(b.get("presentWords"), "experience.presentWords") or DEFAULT_PRESENT_WORDS
    return ExperienceConfig(
        min_years=_number(b, "minYears", "experience"),
        weight=_weight(b, "experience"),
        weights_by_type=weights,
        present_words=tuple(w.lower() for w in present),
        overlap_strategy=strategy,
    )

def _location(b: Dict[str, Any]) -> LocationConfig:
    gaz = _str_list(b.get("gazetteer"), "location.gazetteer") or DEFAULT_GAZETTEER
    cap = _number(b, "monthsCap", "location", DEFAULT_MONTHS_CAP)
    return LocationConfig(
        required_any=tuple(t.lower() for t in _str_list(b.get("requiredAny"), "location.requiredAny")),
        weight=_weight(b, "location"),
        count_months_in_required=_flag(b, "countMonthsInRequired", "location"),
        months_cap=cap if cap > 0 else DEFAULT_MONTHS_CAP,
        gazetteer=tuple(g.lower() for g in gaz),
    )

def _languages(b: Dict[str, Any]) -> LanguagesConfig:
    raw = b.get("mustAny") or []
    if not isinstance(raw, list):
        raise ConfigError("languages.mustAny must be a list of lists.")
    groups = tuple(
        _str_list(g, f"languages.mustAny[{i}]") for i, g in enumerate(raw)
    )
    return LanguagesConfig(must_any=groups, weight=_weight(b, "languages"))

def _education(b: Dict[str, Any]) -> EducationConfig:
    return EducationConfig(preferred=_str_list(b.get("preferred"), "education.preferred"), weight=_weight(b, "education"))

def _recency(b: Dict[str, Any]) -> RecencyConfig:
    return RecencyConfig(
        years=int(_number(b, "years", "recency", 2)),
        projects_in_last_years=max(1, int(_number(b, "projectsInLastYears", "recency", 1))),
        weight=_weight(b, "recency"),
    )

def _fit(b: Dict[str, Any]) -> FitConfig:
    return FitConfig(
        enabled_env_var=str(b.get("enabledEnvVar") or "").strip(),
        weight=_weight(b, "llmBoost"),
        model=str(b.get("model") or DEFAULT_FIT_MODEL),
        timeout=_number(b, "timeout", "llmBoost", DEFAULT_FIT_TIMEOUT_S) or DEFAULT_FIT_TIMEOUT_S,
    )


def load_rubric(path: Path) -> Rubric:
    if not path.exists():
        raise ConfigError(f"Missing scoring config: {path}")
    try:
        data = load_json(path)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to parse scoring config {path}: {e}")
    rubric = Rubric.from_dict(data)
    logger.debug(
        f"Loaded rubric: {len(rubric.must_skills)} must, {len(rubric.nice_skills)} nice skills"
    )
    return rubric
