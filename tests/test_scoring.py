"""
Tests for the remaining components, aggregation and ranking.
"""

import pytest

from cv_scorer.config import (
    EducationConfig,
    FitConfig,
    GithubConfig,
    LocationConfig,
    RecencyConfig,
    Rubric,
)
from cv_scorer.dates import DateRange, EmploymentType, MonthYear
from cv_scorer.models import CandidateResult, Links
from cv_scorer.scoring import (
    rank,
    score_candidate,
    score_education,
    score_github,
    score_location,
    score_recency,
)


def _riyadh(months: int) -> DateRange:
    end = MonthYear(2020 + (months - 1) // 12, (months - 1) % 12)
    return DateRange(MonthYear(2020, 0), end, EmploymentType.FULLTIME, "riyadh", "")


class TestLocation:
    """Presence and months signals are additive."""

    def test_presence_and_partial_months(self):
        cfg = LocationConfig(required_any=("riyadh",), weight=10, count_months_in_required=True)
        comp = score_location("based in riyadh", [_riyadh(12)], cfg)
        assert comp.points == pytest.approx(4.0 + 3.0)
        assert comp.detail["monthsInRequired"] == 12

    def test_months_part_saturates_at_cap(self):
        cfg = LocationConfig(required_any=("riyadh",), weight=10, count_months_in_required=True)
        comp = score_location("riyadh", [_riyadh(36)], cfg)
        assert comp.points == pytest.approx(10.0)

    def test_custom_cap(self):
        cfg = LocationConfig(required_any=("riyadh",), weight=10, count_months_in_required=True, months_cap=12)
        comp = score_location("", [_riyadh(6)], cfg)
        assert comp.points == pytest.approx(3.0)

    def test_months_ignored_when_disabled(self):
        cfg = LocationConfig(required_any=("riyadh",), weight=10)
        comp = score_location("no mention", [_riyadh(24)], cfg)
        assert comp.points == 0.0


class TestOptionalComponents:
    """Education, GitHub presence and recency."""

    def test_education(self):
        cfg = EducationConfig(preferred=("bachelor", "computer science"), weight=5)
        assert score_education("bachelor of science", cfg).points == 5
        assert score_education("high school", cfg).points == 0.0

    def test_github(self):
        cfg = GithubConfig(weight=3)
        assert score_github("see github.com/janedoe", cfg).points == 3
        assert score_github("no profile", cfg).points == 0.0

    def test_recency_partial(self, fixed_now):
        cfg = RecencyConfig(years=2, projects_in_last_years=3, weight=9)
        comp = score_recency("project 2023, job 2019, work 2024", fixed_now, cfg)
        assert comp.detail["recentMentions"] == 2
        assert comp.points == pytest.approx(6.0)

    def test_recency_saturates(self, fixed_now):
        cfg = RecencyConfig(years=2, projects_in_last_years=1, weight=4)
        assert score_recency("2023 2024", fixed_now, cfg).points == pytest.approx(4.0)


class TestScoreCandidate:
    """Aggregation of all components for one document."""

    def test_experience_end_to_end(self, fixed_now):
        rubric = Rubric.from_dict({
            "experience": {"minYears": 1, "weight": 10, "weightsByType": {"fulltime": 1.0}},
        })
        result = score_candidate("a.txt", "Software Engineer, Full-time, Jan 2021 - Dec 2022", rubric, fixed_now)
        assert result.components["experience"].points == pytest.approx(10.0)
        assert result.total == pytest.approx(10.0)

    def test_total_is_sum_of_components(self, sample_rubric, sample_cv_text, fixed_now):
        result = score_candidate("jane.txt", sample_cv_text, sample_rubric, fixed_now)
        assert result.total == pytest.approx(round(sum(c.points for c in result.components.values()), 2))
        assert set(result.components) == {"mustSkills", "niceSkills", "experience", "location", "languages"}

    def test_sample_cv_breakdown(self, sample_rubric, sample_cv_text, fixed_now):
        result = score_candidate("jane.txt", sample_cv_text, sample_rubric, fixed_now)
        # python main (10) + kotlin alt for java (6) + rust missing
        assert result.points("mustSkills") == pytest.approx(16.0)
        assert result.points("niceSkills") == pytest.approx(3.0)
        exp = result.components["experience"].detail
        assert exp["by_type_months"]["fulltime"] == 24
        assert exp["by_type_months"]["internship"] == 3
        # (24 + 3 * 0.5) / 12 = 2.125 years of 3 required
        assert result.points("experience") == pytest.approx(20 * 2.125 / 3)
        # presence 4 + full months share 6
        assert result.points("location") == pytest.approx(10.0)
        assert result.components["languages"].detail["ok"] is True
        assert [m.skill for m in result.missing_must] == ["rust"]
        assert result.links.linkedin == "https://www.LinkedIn.com/in/JaneDoe"
        assert result.links.website == "https://janedoe.dev/Portfolio"

    def test_empty_document_scores_zero(self, sample_rubric, fixed_now):
        result = score_candidate("empty.pdf", "", sample_rubric, fixed_now)
        assert result.total == 0.0
        assert len(result.missing_must) == 3

    def test_optional_components_when_configured(self, fixed_now):
        rubric = Rubric(
            education=EducationConfig(preferred=("bachelor",), weight=2),
            github=GithubConfig(weight=1),
            recency=RecencyConfig(weight=1),
            llm_boost=FitConfig(enabled_env_var="X", weight=5),
        )
        result = score_candidate("x.md", "Bachelor, github.com/me, 2024", rubric, fixed_now)
        assert result.points("education") == 2
        assert result.points("githubPresence") == 1
        assert result.points("recency") == 1
        assert result.points("llmBoost") == 0.0
        assert "disabled" in result.components["llmBoost"].detail["reason"]
        assert result.total == pytest.approx(4.0)

    def test_fit_scorer_adds_points(self, fixed_now):
        rubric = Rubric(llm_boost=FitConfig(enabled_env_var="X", weight=10))
        result = score_candidate("x.md", "cv", rubric, fixed_now, job_text="jd", fit_scorer=lambda cv, jd: 0.25)
        assert result.points("llmBoost") == pytest.approx(2.5)

    def test_idempotent(self, sample_rubric, sample_cv_text, fixed_now):
        docs = [("a", sample_cv_text), ("b", "python"), ("c", "")]
        first = rank([score_candidate(n, t, sample_rubric, fixed_now) for n, t in docs])
        second = rank([score_candidate(n, t, sample_rubric, fixed_now) for n, t in docs])
        assert [(r.candidate, r.total) for r in first] == [(r.candidate, r.total) for r in second]


class TestRank:
    """Descending totals; ties stay in encounter order."""

    def _result(self, name, total):
        return CandidateResult(candidate=name, total=total, components={}, links=Links(), missing_must=[])

    def test_descending_with_stable_ties(self):
        results = [self._result("a", 5), self._result("b", 10), self._result("c", 5), self._result("d", 10)]
        assert [r.candidate for r in rank(results)] == ["b", "d", "a", "c"]
