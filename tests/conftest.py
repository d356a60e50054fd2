"""
Pytest configuration and shared fixtures.
"""

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from cv_scorer.config import Rubric
from cv_scorer.dates import MonthYear


@pytest.fixture
def fixed_now() -> MonthYear:
    """June 2024 (month index 5)."""
    return MonthYear(2024, 5)


@pytest.fixture
def sample_rubric_dict() -> Dict[str, Any]:
    """Rubric exercising every core component."""
    return {
        "mustSkills": [
            {"name": "python", "alternatives": ["django", "flask"], "weight": 10},
            {"name": "java", "alternatives": ["kotlin"], "weight": 10},
            {"name": "rust", "alternatives": ["go"], "weight": 5},
        ],
        "niceSkills": [
            {"name": "docker", "alternatives": ["podman"], "weight": 3},
        ],
        "experience": {
            "minYears": 3,
            "weight": 20,
            "weightsByType": {"fulltime": 1.0, "internship": 0.5, "parttime": 0.5},
        },
        "location": {
            "requiredAny": ["riyadh", "ksa"],
            "weight": 10,
            "countMonthsInRequired": True,
        },
        "languages": {"mustAny": [["english"], ["arabic", "french"]], "weight": 5},
    }


@pytest.fixture
def sample_rubric(sample_rubric_dict) -> Rubric:
    return Rubric.from_dict(sample_rubric_dict)


@pytest.fixture
def rubric_file(tmp_path, sample_rubric_dict) -> Path:
    """Rubric written to disk."""
    path = tmp_path / "scoring.config.json"
    path.write_text(json.dumps(sample_rubric_dict), encoding="utf-8")
    return path


@pytest.fixture
def sample_cv_text() -> str:
    """A CV that matches most of the sample rubric."""
    return (
        "Jane Doe\n"
        "https://www.LinkedIn.com/in/JaneDoe | https://github.com/JaneDoe\n"
        "https://janedoe.dev/Portfolio\n"
        "Languages: English, French\n"
        "Skills: Python, Kotlin, Docker\n"
        "Backend Engineer, Full-time, Riyadh, Jan 2021 – Dec 2022\n"
        "Software Intern, Amman, Jun 2020 – Aug 2020\n"
    )
