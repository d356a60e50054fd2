from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence

from .models import MissingSkill, ScoreComponent
from .normalize import has_term

MAIN_CREDIT = 1.0
ALTERNATIVE_CREDIT = 0.6

MATCH_MAIN = "main"
MATCH_ALTERNATIVE = "alternative"
MATCH_NONE = "none"


def first_alternative_hit(text: str, alternatives: Sequence[str]) -> Optional[str]:
    for alt in alternatives or ():
        if has_term(text, alt):
            return alt
    return None


def score_skills(text: str, items: Sequence) -> ScoreComponent:
    """
    Full credit for the skill name itself, partial credit for a listed
    alternative, nothing otherwise. Per-item details keep which alternative
    matched so reports can surface it.
    """
    total = 0.0
    details: List[Dict[str, Any]] = []
    weight_sum = 0.0
    for item in items:
        found_main = has_term(text, item.name)
        alt_hit = first_alternative_hit(text, item.alternatives)
        if found_main:
            matched, credit = MATCH_MAIN, MAIN_CREDIT
        elif alt_hit is not None:
            matched, credit = MATCH_ALTERNATIVE, ALTERNATIVE_CREDIT
        else:
            matched, credit = MATCH_NONE, 0.0
        pts = item.weight * credit
        total += pts
        weight_sum += item.weight
        details.append({
            "name": item.name,
            "matched": matched,
            "weight": item.weight,
            "pts": round(pts, 2),
            "altHit": alt_hit,
        })
    return ScoreComponent(points=total, weight=weight_sum, detail={"items": details})


def missing_must_skills(component: ScoreComponent, items: Sequence) -> List[MissingSkill]:
    """Unmatched must-skills with their configured alternatives, matched or not."""
    alts = {it.name: list(it.alternatives) for it in items}
    return [
        MissingSkill(skill=d["name"], alternatives=alts.get(d["name"], []))
        for d in component.detail.get("items", [])
        if d["matched"] == MATCH_NONE
    ]


def score_languages(text: str, cfg) -> ScoreComponent:
    """AND across groups, OR within a group. Binary: full weight or nothing."""
    groups = [list(g) for g in cfg.must_any]
    hits = [[lang for lang in g if has_term(text, lang)] for g in groups]
    ok = all(bool(h) for h in hits)
    return ScoreComponent(
        points=cfg.weight if ok else 0.0,
        weight=cfg.weight,
        detail={"ok": ok, "groups": groups, "hits": hits},
    )
