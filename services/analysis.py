"""Analysis assembly: resume text + AI response -> ``AnalysisResult``.

The assembler glues together the field extractor, the response sectionizer
and the score normaliser, then backfills every list the UI renders so a
completed analysis never shows an empty panel.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

from rapidfuzz import fuzz

from nlp.extractor import COMMON_SKILLS, ExtractedFields, extract_fields
from nlp.llm import analyze_resume_via_gemini
from nlp.scoring import normalize_scores
from nlp.sectionizer import SectionizedResponse, sectionize
from services.errors import AnalysisParseError, AnalysisServiceError, ResumeAnalysisError
from services.models import (
    AnalysisResult,
    ExtractedContent,
    JobMatching,
    KeywordLists,
    Suggestions,
)

logger = logging.getLogger(__name__)
if not logging.getLogger().handlers:
    logging.basicConfig(level=logging.INFO)


FALLBACK_CRITICAL = "Improve keyword optimization for better ATS compatibility"
FALLBACK_RECOMMENDED = "Add more quantified achievements with specific metrics"
FALLBACK_EXCELLENT = "Good overall structure and formatting"

FALLBACK_FOUND_KEYWORDS = ["communication", "teamwork"]
FALLBACK_MISSING_KEYWORDS = ["leadership", "project management", "data analysis", "problem solving"]
FALLBACK_SUGGESTED_KEYWORDS = [
    "agile methodology",
    "cross-functional collaboration",
    "strategic planning",
    "process improvement",
]

FOUND_FROM_SKILLS_LIMIT = 5
JOB_SKILL_THRESHOLD = 90


def _job_targeted(job_description: Optional[str]) -> bool:
    return bool(job_description and job_description.strip())


def _mentions_skill(skill: str, body: str) -> bool:
    if skill in body:
        return True
    # short tokens produce too many partial hits
    if len(skill) <= 3:
        return False
    return fuzz.partial_ratio(skill, body) >= JOB_SKILL_THRESHOLD


def match_job_locally(detected_skills: List[str], job_description: str) -> JobMatching:
    """Keyword-overlap job match used when the AI response has no matching block."""
    jd_lower = job_description.lower()
    wanted = [skill for skill in COMMON_SKILLS if _mentions_skill(skill, jd_lower)]
    have = set(detected_skills)
    aligned = [skill for skill in wanted if skill in have]
    missing = [skill for skill in wanted if skill not in have]
    percentage = round(len(aligned) / len(wanted) * 100) if wanted else 0
    return JobMatching(
        match_percentage=percentage,
        missing_skills=missing,
        aligned_experience=aligned,
        recommended_keywords=list(missing),
    )


def _backfill_suggestions(suggestions: Suggestions) -> None:
    if not suggestions.critical:
        suggestions.critical.append(FALLBACK_CRITICAL)
    if not suggestions.recommended:
        suggestions.recommended.append(FALLBACK_RECOMMENDED)
    if not suggestions.excellent:
        suggestions.excellent.append(FALLBACK_EXCELLENT)


def _backfill_keywords(keywords: KeywordLists, detected_skills: List[str]) -> None:
    if not keywords.found:
        keywords.found = detected_skills[:FOUND_FROM_SKILLS_LIMIT] or list(FALLBACK_FOUND_KEYWORDS)
    if not keywords.missing:
        keywords.missing = list(FALLBACK_MISSING_KEYWORDS)
    if not keywords.suggested:
        keywords.suggested = list(FALLBACK_SUGGESTED_KEYWORDS)


def _merge(
    fields: ExtractedFields,
    response: SectionizedResponse,
    job_description: Optional[str],
    rng: Optional[random.Random],
) -> AnalysisResult:
    scores = normalize_scores(response.scores, rng)

    _backfill_suggestions(response.suggestions)
    _backfill_keywords(response.keywords, fields.detected_skills)

    job_matching: Optional[JobMatching] = None
    job_match_score: Optional[int] = None
    if _job_targeted(job_description):
        job_matching = response.job_matching or match_job_locally(fields.detected_skills, job_description or "")
        job_match_score = scores.job_match or job_matching.match_percentage

    content = ExtractedContent(
        personal_info=fields.personal_info,
        summary=fields.summary,
        experience=fields.experience,
        skills=fields.skills,
    )

    return AnalysisResult(
        overall_score=scores.overall,
        ats_score=scores.ats,
        readability_score=scores.readability,
        keyword_score=scores.keyword,
        extracted_content=content,
        keywords=response.keywords,
        suggestions=response.suggestions,
        section_analysis=response.section_analysis,
        job_match_score=job_match_score,
        job_matching=job_matching,
    )


def assemble_analysis(
    resume_text: Optional[str],
    ai_response: Optional[str],
    job_description: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> AnalysisResult:
    """Build a complete ``AnalysisResult``.

    Missing fields, unknown headings and absent scores are all absorbed by
    fallbacks. Only an unexpected failure while merging escapes, and it does
    so as a single ``AnalysisParseError`` with no partial result.
    """
    try:
        fields = extract_fields(resume_text)
        response = sectionize(ai_response, job_targeted=_job_targeted(job_description))
        result = _merge(fields, response, job_description, rng)
    except Exception as err:
        logger.exception("[analysis] failed to assemble analysis: %s", err)
        raise AnalysisParseError() from err

    logger.info(
        "[analysis] scores overall=%s ats=%s readability=%s keyword=%s job_match=%s",
        result.overall_score,
        result.ats_score,
        result.readability_score,
        result.keyword_score,
        result.job_match_score,
    )
    return result


def analyze_resume(
    resume_text: str,
    job_description: Optional[str] = None,
    *,
    fetch: Optional[Callable[[str, Optional[str]], str]] = None,
    rng: Optional[random.Random] = None,
) -> AnalysisResult:
    """Run the AI call and assemble its response.

    ``fetch`` defaults to the Gemini client; it must return the raw response
    text or raise ``ResumeAnalysisError``.
    """
    if not resume_text or not resume_text.strip():
        raise ValueError("Please upload a resume or enter resume text")

    if fetch is None:
        fetch = analyze_resume_via_gemini

    job_description = job_description if _job_targeted(job_description) else None
    try:
        ai_response = fetch(resume_text, job_description)
    except ResumeAnalysisError:
        raise
    except Exception as err:
        logger.exception("[analysis] AI service call failed: %s", err)
        raise AnalysisServiceError() from err

    return assemble_analysis(resume_text, ai_response, job_description, rng)


__all__ = [
    "FALLBACK_CRITICAL",
    "FALLBACK_EXCELLENT",
    "FALLBACK_FOUND_KEYWORDS",
    "FALLBACK_MISSING_KEYWORDS",
    "FALLBACK_RECOMMENDED",
    "FALLBACK_SUGGESTED_KEYWORDS",
    "analyze_resume",
    "assemble_analysis",
    "match_job_locally",
]
