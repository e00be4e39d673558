# extractor.py
# --- Best-effort field extraction from raw resume text ---

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from services.models import ExperienceEntry, PersonalInfo, SkillGroup


# ---- Debug utilities ----

_DEBUG = False


def set_debug(enabled: bool) -> None:
    """Toggle step-by-step debug output for this module."""
    global _DEBUG
    _DEBUG = enabled


def _debug(step: str, detail: Optional[str] = None) -> None:
    """Emit a debug line when debugging is enabled."""
    if not _DEBUG:
        return
    if detail:
        print(f"[extractor] {step}: {detail}")
    else:
        print(f"[extractor] {step}")


# ---- Patterns ----

NAME_PLACEHOLDER = "Name not found"

_EMAIL_RE = re.compile(r"[\w.-]+@[\w.-]+\.\w+")
_PHONE_RE = re.compile(r"\+?(?:[\d\-()]|[^\S\n]){10,}")
_PHONE_MIN_DIGITS = 7
_URL_RE = re.compile(r"\bhttps?://[^\s)]+", re.IGNORECASE)
_LINKEDIN_RE = re.compile(r"((?:https?://)?(?:www\.)?linkedin\.com/in/[A-Za-z0-9\-_/]+)", re.IGNORECASE)
_DATE_RANGE_RE = re.compile(r"\d{4}\s*[-–—]\s*(?:\d{4}|present|current)", re.IGNORECASE)

SUMMARY_HEADINGS = ("summary", "objective", "profile")
SUMMARY_WINDOW = 500
SUMMARY_MAX_LINES = 3

EXPERIENCE_PLACEHOLDER_DESCRIPTION = "Experience description extracted from resume"

SKILL_CATEGORY = "Technical Skills"
MAX_SKILLS = 10

# Order matters: matches are reported in vocabulary order.
COMMON_SKILLS = [
    "javascript", "python", "java", "react", "node.js", "sql", "html", "css", "git", "aws",
    "docker", "kubernetes", "typescript", "angular", "vue", "mongodb", "postgresql", "redis",
    "machine learning", "data analysis", "project management", "agile", "scrum", "leadership",
    "communication", "problem solving", "teamwork", "analytical thinking",
]


@dataclass
class ExtractedFields:
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    summary: str = ""
    experience: List[ExperienceEntry] = field(default_factory=list)
    skills: List[SkillGroup] = field(default_factory=list)
    detected_skills: List[str] = field(default_factory=list)


# ---- Primitive extractors ----

def extract_name(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            _debug("extract_name", line)
            return line
    _debug("extract_name", "no match")
    return NAME_PLACEHOLDER


def extract_email(text: str) -> str:
    match = _EMAIL_RE.search(text)
    _debug("extract_email", match.group(0) if match else "no match")
    return match.group(0) if match else ""


def extract_phone(text: str) -> str:
    # The pattern alone also accepts blank runs and year ranges.
    for match in _PHONE_RE.finditer(text):
        candidate = match.group(0).strip()
        if _DATE_RANGE_RE.search(candidate):
            continue
        if sum(ch.isdigit() for ch in candidate) >= _PHONE_MIN_DIGITS:
            _debug("extract_phone", candidate)
            return candidate
    _debug("extract_phone", "no match")
    return ""


def extract_links(text: str) -> Tuple[str, str]:
    """Return ``(linkedin, website)``; either may be empty."""
    linkedin_match = _LINKEDIN_RE.search(text)
    linkedin = linkedin_match.group(1) if linkedin_match else ""
    website = ""
    for url in _URL_RE.findall(text):
        if "linkedin.com" in url.lower():
            continue
        website = url.rstrip(".,;")
        break
    _debug("extract_links", f"linkedin={bool(linkedin)}, website={bool(website)}")
    return linkedin, website


def extract_summary(text: str) -> str:
    lowered = text.lower()
    index = -1
    for heading in SUMMARY_HEADINGS:
        index = lowered.find(heading)
        if index != -1:
            _debug("extract_summary", f"heading '{heading}' at {index}")
            break
    if index == -1:
        _debug("extract_summary", "no heading")
        return ""

    window = text[index:index + SUMMARY_WINDOW].splitlines()[1:]
    picked = [ln.strip() for ln in window if ln.strip()][:SUMMARY_MAX_LINES]
    return " ".join(picked)


def extract_experience(text: str) -> List[ExperienceEntry]:
    entries: List[ExperienceEntry] = []
    for idx, match in enumerate(_DATE_RANGE_RE.finditer(text)):
        entries.append(
            ExperienceEntry(
                id=f"exp-{idx}",
                company=f"Company {idx + 1}",
                position=f"Position {idx + 1}",
                duration=match.group(0),
                description=EXPERIENCE_PLACEHOLDER_DESCRIPTION,
            )
        )
    _debug("extract_experience", f"found {len(entries)} date ranges")
    return entries


def extract_skills(text: str, vocabulary: Optional[List[str]] = None) -> List[str]:
    lowered = text.lower()
    found = [skill for skill in (vocabulary or COMMON_SKILLS) if skill.lower() in lowered]
    _debug("extract_skills", f"found {len(found)}")
    return found


# ---- Entry point ----

def extract_fields(text: Optional[str]) -> ExtractedFields:
    """Pull contact details, summary, date ranges and skills out of ``text``.

    Never raises on odd input: anything that does not match degrades to an
    empty string or an empty list so the caller always has something to render.
    """
    text = text or ""
    _debug("extract", f"start chars={len(text)}")

    linkedin, website = extract_links(text)
    personal = PersonalInfo(
        name=extract_name(text),
        email=extract_email(text),
        phone=extract_phone(text),
        linkedin=linkedin,
        website=website,
    )

    detected = extract_skills(text)
    groups: List[SkillGroup] = []
    if detected:
        groups.append(SkillGroup(id="skills-1", category=SKILL_CATEGORY, items=detected[:MAX_SKILLS]))

    fields = ExtractedFields(
        personal_info=personal,
        summary=extract_summary(text),
        experience=extract_experience(text),
        skills=groups,
        detected_skills=detected,
    )
    _debug("extract", "complete")
    return fields


__all__ = [
    "COMMON_SKILLS",
    "ExtractedFields",
    "NAME_PLACEHOLDER",
    "extract_email",
    "extract_experience",
    "extract_fields",
    "extract_links",
    "extract_name",
    "extract_phone",
    "extract_skills",
    "extract_summary",
    "set_debug",
]
