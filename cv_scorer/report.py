from __future__ import annotations
import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .dates import EmploymentType
from .models import CandidateResult

logger = logging.getLogger(__name__)

CSV_NAME = "results.csv"
JSON_NAME = "results.json"

CSV_FIELDS = (
    ["candidate", "total", "mustSkillsPts", "niceSkillsPts", "expYearsWeighted"]
    + [f"exp_{t.value}_m" for t in EmploymentType]
    + ["locationMonthsInRequired", "languagesOk",
       "educationPts", "githubPts", "recencyPts", "llmBoostPts",
       "linkedin", "github", "website", "missingMust"]
)


def flatten_row(r: CandidateResult) -> Dict[str, Any]:
    exp = r.components["experience"].detail
    by_type = exp.get("by_type_months", {})
    row: Dict[str, Any] = {
        "candidate": r.candidate,
        "total": r.total,
        "mustSkillsPts": round(r.points("mustSkills"), 2),
        "niceSkillsPts": round(r.points("niceSkills"), 2),
        "expYearsWeighted": exp.get("years", 0.0),
    }
    for t in EmploymentType:
        row[f"exp_{t.value}_m"] = by_type.get(t.value, 0)
    row.update({
        "locationMonthsInRequired": r.components["location"].detail.get("monthsInRequired", 0),
        "languagesOk": "yes" if r.components["languages"].detail.get("ok") else "no",
        "educationPts": round(r.points("education"), 2),
        "githubPts": round(r.points("githubPresence"), 2),
        "recencyPts": round(r.points("recency"), 2),
        "llmBoostPts": round(r.points("llmBoost"), 2),
        "linkedin": r.links.linkedin or "",
        "github": r.links.github or "",
        "website": r.links.website or "",
        "missingMust": "; ".join(f"{m.skill}{{alt:{'|'.join(m.alternatives)}}}" for m in r.missing_must),
    })
    return row


def write_csv(results: Sequence[CandidateResult], path: Path) -> None:
    with open(path, "w", newline="", encoding="utf-8") as fh:
        w = csv.DictWriter(fh, fieldnames=CSV_FIELDS)
        w.writeheader()
        for r in results:
            w.writerow(flatten_row(r))
    logger.info(f"Wrote CSV: {path}")


def write_json(results: Sequence[CandidateResult], path: Path) -> None:
    path.write_text(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info(f"Wrote JSON: {path}")


def _fmt(v: float) -> str:
    return f"{v:.2f}"


def render_candidate_md(r: CandidateResult) -> str:
    c: List[str] = []
    c.append(f"# {r.candidate}")
    c.append(f"**Total Score:** {_fmt(r.total)}\n")

    must = r.components["mustSkills"]
    nice = r.components["niceSkills"]
    c.append("## Skills")
    c.append(f"- MUST total: {_fmt(must.points)} / {_fmt(must.weight)}")
    for d in must.detail.get("items", []):
        alt = f" (alt: {d['altHit']})" if d.get("altHit") else ""
        c.append(f"  - {d['name']}: {d['matched']}{alt} (+{_fmt(d['pts'])})")
    c.append(f"- NICE total: {_fmt(nice.points)} / {_fmt(nice.weight)}")
    for d in nice.detail.get("items", []):
        alt = f" (alt: {d['altHit']})" if d.get("altHit") else ""
        c.append(f"  - {d['name']}: {d['matched']}{alt} (+{_fmt(d['pts'])})")

    exp = r.components["experience"]
    c.append("\n## Experience")
    c.append(f"- Weighted years: {exp.detail.get('years', 0.0)} (min {exp.detail.get('min_years', 0)}) "
             f"-> {_fmt(exp.points)} / {_fmt(exp.weight)}")
    by_type = exp.detail.get("by_type_months", {})
    c.append("- By type (months): " + ", ".join(f"{k}:{v}" for k, v in by_type.items()))
    for rng in exp.detail.get("ranges", []):
        loc = f" @ {rng['location']}" if rng.get("location") else ""
        c.append(f"  - {rng['from']['year']}-{rng['from']['month'] + 1:02d} .. "
                 f"{rng['to']['year']}-{rng['to']['month'] + 1:02d} [{rng['type']}]{loc}")

    loc = r.components["location"]
    c.append("\n## Location")
    c.append(f"- Months in required: {loc.detail.get('monthsInRequired', 0)}")
    c.append(f"- Presence credit: {'yes' if loc.detail.get('mentioned') else 'no'} (points: {_fmt(loc.points)})")

    lang = r.components["languages"]
    c.append("\n## Languages")
    c.append(f"- Requirement satisfied: {'yes' if lang.detail.get('ok') else 'no'} (points: {_fmt(lang.points)})")

    if "education" in r.components:
        e = r.components["education"]
        c.append("\n## Education")
        c.append(f"- Preferred match: {e.detail.get('hit') or 'none'} ({_fmt(e.points)} / {_fmt(e.weight)})")
    if "githubPresence" in r.components:
        g = r.components["githubPresence"]
        c.append("\n## GitHub presence")
        c.append(f"- {_fmt(g.points)} / {_fmt(g.weight)}")
    if "recency" in r.components:
        rec = r.components["recency"]
        c.append("\n## Recency")
        c.append(f"- Mentions since {rec.detail.get('sinceYear')}: {rec.detail.get('recentMentions', 0)} "
                 f"({_fmt(rec.points)} / {_fmt(rec.weight)})")
    if "llmBoost" in r.components:
        b = r.components["llmBoost"]
        c.append("\n## Semantic fit")
        c.append(f"- {_fmt(b.points)} / {_fmt(b.weight)} ({b.detail.get('reason', '')})")

    c.append("\n## Missing MUST Skills")
    if r.missing_must:
        for m in r.missing_must:
            c.append(f"- {m.skill} (alternatives: {', '.join(m.alternatives) or 'none'})")
    else:
        c.append("- None")

    c.append("\n## Links")
    c.append(f"- LinkedIn: {r.links.linkedin or '-'}")
    c.append(f"- GitHub: {r.links.github or '-'}")
    c.append(f"- Website/Portfolio: {r.links.website or '-'}")
    return "\n".join(c) + "\n"


def write_md(r: CandidateResult, out_dir: Path) -> Path:
    path = out_dir / f"{r.candidate}.md"
    path.write_text(render_candidate_md(r), encoding="utf-8")
    return path
