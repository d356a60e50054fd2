from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ScoreComponent:
    """Uniform shape returned by every scoring function."""
    points: float
    weight: float
    detail: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"pts": round(self.points, 2), "weight": self.weight, **self.detail}


@dataclass(frozen=True)
class Links:
    linkedin: Optional[str] = None
    github: Optional[str] = None
    website: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"linkedin": self.linkedin, "github": self.github, "website": self.website}


@dataclass(frozen=True)
class MissingSkill:
    skill: str
    alternatives: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"skill": self.skill, "alternativesAvailable": list(self.alternatives)}


@dataclass(frozen=True)
class CandidateResult:
    candidate: str
    total: float
    components: Dict[str, ScoreComponent]
    links: Links
    missing_must: List[MissingSkill]

    def points(self, name: str) -> float:
        comp = self.components.get(name)
        return comp.points if comp else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate": self.candidate,
            "total": self.total,
            "components": {k: v.to_dict() for k, v in self.components.items()},
            "links": self.links.to_dict(),
            "missingMust": [m.to_dict() for m in self.missing_must],
        }
