"""Plain-text analysis report handed to the document exporter."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from services.models import AnalysisResult

REPORT_TITLE = "AI RESUME ANALYSIS REPORT"


def _bullets(items: Iterable[str]) -> List[str]:
    return [f"• {item}" for item in items]


def render_report(result: AnalysisResult, generated_on: Optional[date] = None) -> str:
    """Flatten ``result`` into the fixed report layout.

    Order: scores, critical, recommended, excellent, keyword lists and, for
    job-targeted analyses, the job-matching block.
    """
    generated_on = generated_on or date.today()
    lines: List[str] = [
        REPORT_TITLE,
        f"Generated on: {generated_on.isoformat()}",
        "",
        "OVERALL SCORES:",
        f"• Overall Quality: {result.overall_score}/100",
        f"• ATS Compatibility: {result.ats_score}/100",
        f"• Readability: {result.readability_score}/100",
        f"• Keyword Optimization: {result.keyword_score}/100",
    ]
    if result.job_match_score is not None:
        lines.append(f"• Job Match: {result.job_match_score}/100")

    lines += ["", "CRITICAL IMPROVEMENTS NEEDED:", *_bullets(result.suggestions.critical)]
    lines += ["", "RECOMMENDED IMPROVEMENTS:", *_bullets(result.suggestions.recommended)]
    lines += ["", "EXCELLENT ASPECTS:", *_bullets(result.suggestions.excellent)]
    lines += [
        "",
        "KEYWORD ANALYSIS:",
        f"Found Keywords: {', '.join(result.keywords.found)}",
        f"Missing Keywords: {', '.join(result.keywords.missing)}",
        f"Suggested Keywords: {', '.join(result.keywords.suggested)}",
    ]

    matching = result.job_matching
    if matching is not None:
        lines += [
            "",
            "JOB MATCHING ANALYSIS:",
            f"Match Percentage: {matching.match_percentage}%",
            f"Missing Skills: {', '.join(matching.missing_skills)}",
            f"Aligned Experience: {', '.join(matching.aligned_experience)}",
            f"Recommended Keywords: {', '.join(matching.recommended_keywords)}",
        ]

    return "\n".join(lines) + "\n"


__all__ = ["REPORT_TITLE", "render_report"]
