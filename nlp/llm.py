"""Gemini client for resume analysis.

Sends the resume (and optional job description) with the fixed analysis
prompt to the Gemini ``generateContent`` endpoint and returns the free-text
answer. Configuration comes from the environment, optionally seeded from a
``.env`` file at the repository root:

  • ``GEMINI_API_KEY`` (required)
  • ``GEMINI_API_ENDPOINT`` (default: gemini-1.5-flash-latest)
  • ``GEMINI_TIMEOUT`` seconds (default: 60)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from services.errors import AnalysisServiceError

logger = logging.getLogger(__name__)
if not logging.getLogger().handlers:
    logging.basicConfig(level=logging.INFO)


DEFAULT_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash-latest:generateContent"
)
DEFAULT_TIMEOUT = 60.0

GENERATION_CONFIG = {
    "temperature": 0.3,
    "topP": 0.95,
    "maxOutputTokens": 4096,
}

_ENV_LOADED = False


def _load_local_env() -> None:
    global _ENV_LOADED
    if _ENV_LOADED:
        return
    env_path = Path(__file__).resolve().parent.parent / ".env"
    if env_path.exists():
        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key.strip(), value.strip())
    _ENV_LOADED = True


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------


_JOB_BLOCK = """
Job Description for Matching Analysis:
{job_description}

Please also analyze how well this resume matches the job description and provide specific recommendations for improvement.
"""

_JOB_MATCHING_SECTION = """
## JOB MATCHING ANALYSIS:
Match Percentage: [0-100]%
Missing Skills: [List skills from job description not found in resume]
Aligned Experience: [List experience that matches job requirements well]
Recommended Keywords: [List job-specific keywords to incorporate]
"""

_PROMPT_TEMPLATE = """You are an expert resume analyzer and career coach with deep knowledge of ATS systems, hiring practices, and industry standards. Analyze this resume comprehensively and provide detailed, actionable feedback in a structured format.

Resume Content:
{resume_text}
{job_block}
Please provide a comprehensive analysis with the following EXACT structure and headings:

## SCORING ANALYSIS
Overall Resume Quality Score: [0-100]
ATS Compatibility Score: [0-100]
Readability Score: [0-100]
Keyword Optimization Score: [0-100]
{job_score_line}
## CRITICAL IMPROVEMENTS NEEDED:
- [List 3-5 critical issues that must be fixed immediately]
- [Focus on ATS compatibility, major formatting issues, missing essential information]
- [Each point should be specific and actionable]

## RECOMMENDED IMPROVEMENTS:
- [List 4-6 recommended enhancements for better impact]
- [Focus on content optimization, keyword enhancement, achievement quantification]
- [Each point should provide clear guidance for improvement]

## EXCELLENT ASPECTS:
- [List 3-5 things the resume does well]
- [Highlight strengths to maintain and build upon]
- [Acknowledge good practices and effective elements]

## KEYWORD ANALYSIS:
Found Keywords: [List 8-12 relevant keywords currently present in the resume]
Missing Keywords: [List 6-10 important industry keywords that are missing]
Suggested Keywords: [List 8-12 specific keywords to add for better ATS performance]
{job_matching_section}
## SECTION-BY-SECTION ANALYSIS:
### Contact Information: [Score: 0-100]
[Specific feedback and suggestions]

### Professional Summary: [Score: 0-100]
[Specific feedback and suggestions]

### Work Experience: [Score: 0-100]
[Specific feedback and suggestions]

### Skills Section: [Score: 0-100]
[Specific feedback and suggestions]

### Education: [Score: 0-100]
[Specific feedback and suggestions]

## ATS OPTIMIZATION RECOMMENDATIONS:
- [Specific formatting improvements for better ATS parsing]
- [Keyword density and placement suggestions]
- [Section organization recommendations]
- [File format and structure advice]

## CONTENT EXTRACTION:
Personal Information:
- Name: [Extract name]
- Email: [Extract email]
- Phone: [Extract phone]
- Location: [Extract location]
- LinkedIn: [Extract if present]
- Website: [Extract if present]

Professional Summary: [Extract or note if missing]

Work Experience: [List companies, positions, and key achievements]

Education: [List degrees and institutions]

Skills: [Categorize technical and soft skills]

Certifications: [List if present]

Projects: [List if present]

Please ensure your response follows this EXACT structure with clear headings and bullet points. Be specific, actionable, and encouraging while being honest about areas needing improvement. Focus on both immediate fixes and long-term enhancements.
"""


def build_analysis_prompt(resume_text: str, job_description: Optional[str] = None) -> str:
    targeted = bool(job_description and job_description.strip())
    return _PROMPT_TEMPLATE.format(
        resume_text=resume_text,
        job_block=_JOB_BLOCK.format(job_description=job_description) if targeted else "",
        job_score_line="Job Match Score: [0-100]\n" if targeted else "",
        job_matching_section=_JOB_MATCHING_SECTION if targeted else "",
    )


# ---------------------------------------------------------------------------
# Gemini call
# ---------------------------------------------------------------------------


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.reason or "Unknown error"
    message = (data.get("error") or {}).get("message") if isinstance(data, dict) else None
    return message or response.reason or "Unknown error"


def _first_candidate_text(data: Dict[str, Any]) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or [{}]
    return parts[0].get("text") or ""


def analyze_resume_via_gemini(resume_text: str, job_description: Optional[str] = None) -> str:
    """Return Gemini's free-text analysis, or raise ``AnalysisServiceError``."""
    _load_local_env()
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        logger.info("[llm] GEMINI_API_KEY not set; cannot run analysis")
        raise AnalysisServiceError("Gemini API key is required")

    endpoint = os.getenv("GEMINI_API_ENDPOINT", DEFAULT_ENDPOINT)
    timeout = float(os.getenv("GEMINI_TIMEOUT", DEFAULT_TIMEOUT))
    payload = {
        "contents": [{"parts": [{"text": build_analysis_prompt(resume_text, job_description)}]}],
        "generationConfig": GENERATION_CONFIG,
    }

    try:
        response = requests.post(
            endpoint,
            headers={"Content-Type": "application/json"},
            json=payload,
            params={"key": api_key},
            timeout=timeout,
        )
        if not response.ok:
            logger.error("[llm] gemini returned %s: %s", response.status_code, _error_message(response))
            raise AnalysisServiceError()
        text = _first_candidate_text(response.json())
    except AnalysisServiceError:
        raise
    except Exception as err:
        logger.exception("[llm] gemini call failed: %s", err)
        raise AnalysisServiceError() from err

    if not text.strip():
        logger.error("[llm] gemini returned no analysis candidates")
        raise AnalysisServiceError()
    logger.info("[llm] gemini analysis received (%d chars)", len(text))
    return text


__all__ = ["analyze_resume_via_gemini", "build_analysis_prompt"]
