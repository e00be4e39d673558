# sectionizer.py
# --- Line classifier for free-text AI analysis responses ---

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from nlp.scoring import JOB_MATCH, clamp_score
from services.models import JobMatching, KeywordLists, SectionFeedback, Suggestions


# ---- Debug utilities ----

_DEBUG = False


def set_debug(enabled: bool) -> None:
    """Toggle step-by-step debug output for this module."""
    global _DEBUG
    _DEBUG = enabled


def _debug(step: str, detail: Optional[str] = None) -> None:
    if not _DEBUG:
        return
    if detail:
        print(f"[sectionizer] {step}: {detail}")
    else:
        print(f"[sectionizer] {step}")


# ---- Vocabulary ----

class Section(Enum):
    NONE = "none"
    CRITICAL = "critical"
    RECOMMENDED = "recommended"
    EXCELLENT = "excellent"
    FOUND_KEYWORDS = "found"
    MISSING_KEYWORDS = "missing"
    SUGGESTED_KEYWORDS = "suggested"


KEYWORD_SECTIONS = {Section.FOUND_KEYWORDS, Section.MISSING_KEYWORDS, Section.SUGGESTED_KEYWORDS}

# (section, topic phrases, qualifier phrases); an empty qualifier tuple means
# the topic phrase alone is enough. Checked in order, first hit wins.
SECTION_RULES: List[Tuple[Section, Tuple[str, ...], Tuple[str, ...]]] = [
    (Section.CRITICAL, ("critical",), ("improvement", "issue")),
    (Section.RECOMMENDED, ("recommended",), ("improvement",)),
    (Section.EXCELLENT, ("excellent",), ("aspect", "keep")),
    (Section.FOUND_KEYWORDS, ("found keywords", "keywords present"), ()),
    (Section.MISSING_KEYWORDS, ("missing keywords", "keywords missing"), ()),
    (Section.SUGGESTED_KEYWORDS, ("suggested keywords", "recommended keywords"), ()),
]

INLINE_KEYWORD_LABELS: List[Tuple[Section, Tuple[str, ...]]] = [
    (Section.FOUND_KEYWORDS, ("found keywords:", "keywords present:")),
    (Section.MISSING_KEYWORDS, ("missing keywords:",)),
    (Section.SUGGESTED_KEYWORDS, ("suggested keywords:", "recommended keywords:")),
]

SCORE_LABELS: Dict[str, Tuple[str, ...]] = {
    "overall": ("overall resume quality score", "overall score", "overall quality"),
    "ats": ("ats compatibility score", "ats score", "ats optimization"),
    "readability": ("readability score", "clarity score"),
    "keyword": ("keyword optimization score", "keyword score", "keywords"),
    JOB_MATCH: ("job match score", "job matching", "match score"),
}

JOB_MATCH_LABELS: Dict[str, str] = {
    "match percentage:": "match_percentage",
    "missing skills:": "missing_skills",
    "aligned experience:": "aligned_experience",
    "recommended keywords:": "recommended_keywords",
}

BULLETS = ("-", "•", "*")
MIN_CONTENT_CHARS = 4

_DIGITS_RE = re.compile(r"\d+")
_BULLET_RE = re.compile(r"^[-•*]\s*")
_SECTION_SCORE_RE = re.compile(
    r"^#{1,6}\s*(?P<name>[^:\[\]#]+?)\s*:?\s*\[?\s*score\s*:\s*(?P<score>\d+)",
    re.IGNORECASE,
)


# ---- Result containers ----

@dataclass(frozen=True)
class ScanState:
    """Active section plus the markdown depths the fold needs.

    ``depth`` is the depth the active section lives at: that of its own ``#``
    heading, or of the enclosing one when a plain line opened it (0 outside
    any markdown heading). ``outer`` is the depth of the last ``#`` heading.
    """

    section: Section = Section.NONE
    depth: int = 0
    outer: int = 0


@dataclass
class LineEvents:
    """What one line contributed: bucketed items plus any scores it carried."""

    items: List[Tuple[Section, str]] = field(default_factory=list)
    scores: Dict[str, int] = field(default_factory=dict)
    switched: bool = False


@dataclass
class SectionizedResponse:
    suggestions: Suggestions = field(default_factory=Suggestions)
    keywords: KeywordLists = field(default_factory=KeywordLists)
    scores: Dict[str, int] = field(default_factory=dict)
    job_matching: Optional[JobMatching] = None
    section_analysis: Dict[str, SectionFeedback] = field(default_factory=dict)


# ---- Line helpers ----

def _is_bullet(line: str) -> bool:
    return line.startswith(BULLETS)


def _strip_bullet(line: str) -> str:
    return _BULLET_RE.sub("", line, count=1).strip()


def _split_keywords(text: str) -> List[str]:
    tokens = (token.strip().strip("*").strip() for token in text.split(","))
    return [token for token in tokens if token]


def _after_colon(line: str) -> str:
    return line.split(":", 1)[1] if ":" in line else ""


def detect_section(line: str) -> Optional[Section]:
    """Return the section a heading line opens, or ``None`` for non-headings."""
    lowered = line.strip().lower()
    for section, topics, qualifiers in SECTION_RULES:
        if not any(topic in lowered for topic in topics):
            continue
        if qualifiers and not any(q in lowered for q in qualifiers):
            continue
        return section
    return None


def parse_score_line(line: str, job_targeted: bool = False) -> Dict[str, int]:
    lowered = line.lower()
    digits = _DIGITS_RE.search(line)
    if not digits:
        return {}
    found: Dict[str, int] = {}
    for family, labels in SCORE_LABELS.items():
        if family == JOB_MATCH and not job_targeted:
            continue
        if any(label in lowered for label in labels):
            found[family] = int(digits.group(0))
    return found


def _bullet_items(section: Section, line: str) -> List[Tuple[Section, str]]:
    if section is Section.NONE or not _is_bullet(line):
        return []
    content = _strip_bullet(line)
    if len(content) < MIN_CONTENT_CHARS:
        return []
    if section in KEYWORD_SECTIONS:
        return [(section, token) for token in _split_keywords(content)]
    return [(section, content)]


def _inline_keyword_items(line: str) -> List[Tuple[Section, str]]:
    lowered = line.lower()
    items: List[Tuple[Section, str]] = []
    for section, labels in INLINE_KEYWORD_LABELS:
        if any(label in lowered for label in labels):
            items.extend((section, token) for token in _split_keywords(_after_colon(line)))
    return items


def _heading_depth(line: str) -> int:
    return len(line) - len(line.lstrip("#"))


def scan_line(state: ScanState, line: str, job_targeted: bool = False) -> Tuple[ScanState, LineEvents]:
    """Fold step: classify ``line`` given the active ``state``.

    Returns the next state and the events the line produced. Lines that open
    a section are never content. An unrecognised markdown heading closes the
    active section only when it sits at the same or a shallower depth than the
    heading that opened it; deeper sub-headings stay inside. A bullet that
    merely repeats the active section's heading words stays content.
    """
    trimmed = line.strip()
    events = LineEvents(scores=parse_score_line(trimmed, job_targeted))
    active = state.section
    depth = _heading_depth(trimmed)
    outer = depth or state.outer

    opened = detect_section(trimmed)
    if opened is active and active not in KEYWORD_SECTIONS and _is_bullet(trimmed):
        opened = None
    if opened is not None:
        events.switched = opened is not active
        state = ScanState(opened, depth or state.outer, outer)
    elif depth and active is not Section.NONE and state.depth and depth <= state.depth:
        events.switched = True
        state = ScanState(outer=outer)
    else:
        events.items.extend(_bullet_items(active, trimmed))
        state = replace(state, outer=outer)

    events.items.extend(_inline_keyword_items(trimmed))
    return state, events


# ---- Secondary passes ----

def extract_job_matching(lines: Sequence[str]) -> Optional[JobMatching]:
    """Collect the job-matching block, if the response carries one.

    Labels may carry a comma list after the colon or introduce bullets on the
    following lines.
    """
    matching = JobMatching()
    seen = False
    open_list: Optional[str] = None

    for raw in lines:
        trimmed = raw.strip()
        lowered = trimmed.lower()
        label = next((key for key in JOB_MATCH_LABELS if key in lowered), None)
        if label:
            seen = True
            attr = JOB_MATCH_LABELS[label]
            remainder = trimmed[lowered.index(label) + len(label):]
            open_list = None
            if attr == "match_percentage":
                digits = _DIGITS_RE.search(remainder)
                if digits:
                    matching.match_percentage = clamp_score(int(digits.group(0)))
                continue
            values = _split_keywords(remainder)
            if values:
                getattr(matching, attr).extend(values)
            else:
                open_list = attr
            continue
        if open_list and _is_bullet(trimmed):
            content = _strip_bullet(trimmed)
            if len(content) >= MIN_CONTENT_CHARS:
                getattr(matching, open_list).append(content)
            continue
        if trimmed:
            open_list = None

    return matching if seen else None


def extract_section_analysis(lines: Sequence[str]) -> Dict[str, SectionFeedback]:
    """Read ``### Section: [Score: N]`` blocks into per-section feedback."""
    sections: Dict[str, SectionFeedback] = {}
    current: Optional[SectionFeedback] = None
    feedback: List[str] = []

    def close() -> None:
        if current is not None:
            current.feedback = " ".join(feedback)

    for raw in lines:
        trimmed = raw.strip()
        if not trimmed:
            continue
        match = _SECTION_SCORE_RE.match(trimmed)
        if match:
            close()
            feedback = []
            current = SectionFeedback(score=clamp_score(int(match.group("score"))))
            sections[match.group("name").strip()] = current
            continue
        if trimmed.startswith("#"):
            close()
            feedback = []
            current = None
            continue
        if current is None:
            continue
        if _is_bullet(trimmed):
            content = _strip_bullet(trimmed)
            if len(content) >= MIN_CONTENT_CHARS:
                current.suggestions.append(content)
        else:
            feedback.append(trimmed)
    close()
    return sections


# ---- Entry point ----

_SUGGESTION_TARGETS = {
    Section.CRITICAL: "critical",
    Section.RECOMMENDED: "recommended",
    Section.EXCELLENT: "excellent",
}

_KEYWORD_TARGETS = {
    Section.FOUND_KEYWORDS: "found",
    Section.MISSING_KEYWORDS: "missing",
    Section.SUGGESTED_KEYWORDS: "suggested",
}


def sectionize(text: Optional[str], job_targeted: bool = False) -> SectionizedResponse:
    """Classify every line of an AI analysis response.

    Single pass, order-sensitive, no backtracking. Running it twice on the same
    text yields identical output.
    """
    lines = (text or "").split("\n")
    result = SectionizedResponse()
    state = ScanState()

    for line in lines:
        state, events = scan_line(state, line, job_targeted)
        if events.switched:
            _debug("section", state.section.value)
        result.scores.update(events.scores)
        for section, value in events.items:
            if section in _SUGGESTION_TARGETS:
                getattr(result.suggestions, _SUGGESTION_TARGETS[section]).append(value)
            else:
                getattr(result.keywords, _KEYWORD_TARGETS[section]).append(value)

    if job_targeted:
        result.job_matching = extract_job_matching(lines)
    result.section_analysis = extract_section_analysis(lines)

    _debug(
        "sectionize",
        f"critical={len(result.suggestions.critical)}, recommended={len(result.suggestions.recommended)}, "
        f"excellent={len(result.suggestions.excellent)}, scores={sorted(result.scores)}",
    )
    return result


__all__ = [
    "LineEvents",
    "ScanState",
    "Section",
    "SectionizedResponse",
    "detect_section",
    "extract_job_matching",
    "extract_section_analysis",
    "parse_score_line",
    "scan_line",
    "sectionize",
    "set_debug",
]
