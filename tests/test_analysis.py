import random

import pytest

import services.analysis as analysis_module
from nlp.scoring import DEFAULT_RANGES
from services.analysis import (
    FALLBACK_CRITICAL,
    FALLBACK_EXCELLENT,
    FALLBACK_FOUND_KEYWORDS,
    FALLBACK_MISSING_KEYWORDS,
    FALLBACK_RECOMMENDED,
    FALLBACK_SUGGESTED_KEYWORDS,
    analyze_resume,
    assemble_analysis,
    match_job_locally,
)
from services.errors import AnalysisParseError, AnalysisServiceError


RESUME = """Priya Raman
priya.raman@example.com
Summary
Data engineer building Python and SQL pipelines on AWS.

Experience
Data Engineer 2020 - Present
Analyst 2017 - 2020

Skills: python, sql, aws, docker, git, communication
"""

RESPONSE = """Overall Resume Quality Score: 81
ATS Compatibility Score: 77
## Critical Issues
- Add a skills summary near the top
## Recommended Improvements
- Quantify pipeline throughput
## Excellent Aspects
- Concise bullet points
Found Keywords: Python, SQL
Missing Keywords: Airflow
Suggested Keywords: dbt, Spark
"""


def _assert_lists_non_empty(result):
    for values in (
        result.suggestions.critical,
        result.suggestions.recommended,
        result.suggestions.excellent,
        result.keywords.found,
        result.keywords.missing,
        result.keywords.suggested,
    ):
        assert values


def test_assemble_combines_extractor_and_sectionizer():
    result = assemble_analysis(RESUME, RESPONSE, rng=random.Random(3))

    assert result.overall_score == 81
    assert result.ats_score == 77
    assert 70 <= result.readability_score < 90
    low, high = DEFAULT_RANGES["keyword"]
    assert low <= result.keyword_score < high

    info = result.extracted_content.personal_info
    assert info.name == "Priya Raman"
    assert info.email == "priya.raman@example.com"
    assert "Data engineer" in result.extracted_content.summary
    assert len(result.extracted_content.experience) == 2

    assert result.suggestions.critical == ["Add a skills summary near the top"]
    assert result.keywords.found == ["Python", "SQL"]
    assert result.job_match_score is None
    assert result.job_matching is None


def test_scenario_empty_inputs_produce_complete_result():
    result = assemble_analysis("", "")

    assert result.suggestions.critical == [FALLBACK_CRITICAL]
    assert result.suggestions.recommended == [FALLBACK_RECOMMENDED]
    assert result.suggestions.excellent == [FALLBACK_EXCELLENT]
    assert result.keywords.found == FALLBACK_FOUND_KEYWORDS
    assert result.keywords.missing == FALLBACK_MISSING_KEYWORDS
    assert result.keywords.suggested == FALLBACK_SUGGESTED_KEYWORDS
    assert result.extracted_content.personal_info.name == "Name not found"

    for family, attr in (
        ("overall", "overall_score"),
        ("ats", "ats_score"),
        ("readability", "readability_score"),
        ("keyword", "keyword_score"),
    ):
        low, high = DEFAULT_RANGES[family]
        assert low <= getattr(result, attr) < high


def test_found_keywords_fall_back_to_detected_skills():
    result = assemble_analysis(RESUME, "nothing useful here")
    assert result.keywords.found == ["python", "sql", "git", "aws", "docker"]


def test_lists_are_never_empty_for_messy_input():
    for response in ("", "###", "- dangling", "Critical issues\n", "Found Keywords: , ,"):
        _assert_lists_non_empty(assemble_analysis("x", response))


def test_job_targeted_analysis_uses_response_block():
    response = RESPONSE + "Job Match Score: 64\nMatch Percentage: 60%\nMissing Skills: Airflow\n"
    result = assemble_analysis(RESUME, response, job_description="Airflow and Python")

    assert result.job_match_score == 64
    assert result.job_matching.match_percentage == 60
    assert result.job_matching.missing_skills == ["Airflow"]


def test_job_targeted_analysis_without_block_matches_locally():
    job = "We need Python, Kubernetes and SQL experience."
    result = assemble_analysis(RESUME, RESPONSE, job_description=job)

    matching = result.job_matching
    assert matching is not None
    assert matching.aligned_experience == ["python", "sql"]
    assert matching.missing_skills == ["kubernetes"]
    assert matching.match_percentage == 67
    assert result.job_match_score == 67


def test_blank_job_description_is_not_job_targeted():
    result = assemble_analysis(RESUME, RESPONSE + "Job Match Score: 90\n", job_description="   ")
    assert result.job_match_score is None
    assert result.job_matching is None


def test_match_job_locally_without_known_skills():
    matching = match_job_locally(["python"], "Friendly office, free snacks")
    assert matching.match_percentage == 0
    assert matching.missing_skills == []


def test_merge_failure_raises_single_parse_error(monkeypatch):
    def boom(*args, **kwargs):
        raise KeyError("unexpected")

    monkeypatch.setattr(analysis_module, "normalize_scores", boom)
    with pytest.raises(AnalysisParseError) as excinfo:
        assemble_analysis(RESUME, RESPONSE)
    assert str(excinfo.value) == "Failed to parse AI analysis results"
    assert isinstance(excinfo.value.__cause__, KeyError)


def test_to_dict_projects_detailed_analysis():
    data = assemble_analysis(RESUME, RESPONSE, job_description="python").to_dict()

    detailed = data["detailedAnalysis"]
    assert detailed["criticalImprovements"] == data["suggestions"]["critical"]
    assert detailed["recommendedImprovements"] == data["suggestions"]["recommended"]
    assert detailed["excellentAspects"] == data["suggestions"]["excellent"]
    assert detailed["keywordAnalysis"]["foundKeywords"] == data["keywords"]["found"]
    assert detailed["keywordAnalysis"]["missingKeywords"] == data["keywords"]["missing"]
    assert detailed["keywordAnalysis"]["suggestedKeywords"] == data["keywords"]["suggested"]
    assert "jobMatchScore" in data
    assert "jobMatching" in data
    assert data["extractedContent"]["personalInfo"]["name"] == "Priya Raman"


def test_analyze_resume_uses_fetcher():
    calls = []

    def fake_fetch(resume_text, job_description):
        calls.append((resume_text, job_description))
        return RESPONSE

    result = analyze_resume(RESUME, "", fetch=fake_fetch)

    assert calls == [(RESUME, None)]
    assert result.overall_score == 81


def test_analyze_resume_rejects_blank_text():
    with pytest.raises(ValueError):
        analyze_resume("   ", fetch=lambda *_: RESPONSE)


def test_analyze_resume_wraps_unexpected_fetch_errors():
    def broken(*_):
        raise ConnectionError("offline")

    with pytest.raises(AnalysisServiceError):
        analyze_resume(RESUME, fetch=broken)


def test_analyze_resume_propagates_service_errors():
    def refused(*_):
        raise AnalysisServiceError("Gemini API key is required")

    with pytest.raises(AnalysisServiceError, match="API key"):
        analyze_resume(RESUME, fetch=refused)
