"""Data model shared by the extractor, sectionizer and assembler.

Every record exposes ``to_dict`` returning the camelCase shape the editor UI
and the persistence layer bind to. ``AnalysisResult.to_dict`` also projects the
``detailedAnalysis`` view from the canonical ``suggestions``/``keywords`` pair,
so the two never drift apart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PersonalInfo:
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    website: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "location": self.location,
            "linkedin": self.linkedin,
            "website": self.website,
        }


@dataclass
class ExperienceEntry:
    id: str
    company: str = ""
    position: str = ""
    duration: str = ""
    description: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "company": self.company,
            "position": self.position,
            "duration": self.duration,
            "description": self.description,
        }


@dataclass
class EducationEntry:
    id: str
    institution: str = ""
    degree: str = ""
    year: str = ""
    gpa: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "institution": self.institution,
            "degree": self.degree,
            "year": self.year,
        }
        if self.gpa is not None:
            data["gpa"] = self.gpa
        return data


@dataclass
class SkillGroup:
    id: str
    category: str = ""
    items: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "category": self.category, "items": list(self.items)}


@dataclass
class ProjectEntry:
    id: str
    name: str = ""
    description: str = ""
    technologies: str = ""
    link: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "technologies": self.technologies,
        }
        if self.link is not None:
            data["link"] = self.link
        return data


@dataclass
class CertificationEntry:
    id: str
    name: str = ""
    issuer: str = ""
    date: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "issuer": self.issuer, "date": self.date}


@dataclass
class ExtractedContent:
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    summary: str = ""
    experience: List[ExperienceEntry] = field(default_factory=list)
    education: List[EducationEntry] = field(default_factory=list)
    skills: List[SkillGroup] = field(default_factory=list)
    projects: List[ProjectEntry] = field(default_factory=list)
    certifications: List[CertificationEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "personalInfo": self.personal_info.to_dict(),
            "summary": self.summary,
            "experience": [entry.to_dict() for entry in self.experience],
            "education": [entry.to_dict() for entry in self.education],
            "skills": [group.to_dict() for group in self.skills],
            "projects": [entry.to_dict() for entry in self.projects],
            "certifications": [entry.to_dict() for entry in self.certifications],
        }


@dataclass
class KeywordLists:
    found: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    suggested: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return {"found": list(self.found), "missing": list(self.missing), "suggested": list(self.suggested)}


@dataclass
class Suggestions:
    critical: List[str] = field(default_factory=list)
    recommended: List[str] = field(default_factory=list)
    excellent: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "critical": list(self.critical),
            "recommended": list(self.recommended),
            "excellent": list(self.excellent),
        }


@dataclass
class SectionFeedback:
    score: int = 0
    feedback: str = ""
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "feedback": self.feedback, "suggestions": list(self.suggestions)}


@dataclass
class JobMatching:
    match_percentage: int = 0
    missing_skills: List[str] = field(default_factory=list)
    aligned_experience: List[str] = field(default_factory=list)
    recommended_keywords: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matchPercentage": self.match_percentage,
            "missingSkills": list(self.missing_skills),
            "alignedExperience": list(self.aligned_experience),
            "recommendedKeywords": list(self.recommended_keywords),
        }


@dataclass
class AnalysisResult:
    overall_score: int
    ats_score: int
    readability_score: int
    keyword_score: int
    extracted_content: ExtractedContent = field(default_factory=ExtractedContent)
    keywords: KeywordLists = field(default_factory=KeywordLists)
    suggestions: Suggestions = field(default_factory=Suggestions)
    section_analysis: Dict[str, SectionFeedback] = field(default_factory=dict)
    job_match_score: Optional[int] = None
    job_matching: Optional[JobMatching] = None

    def detailed_analysis(self) -> Dict[str, Any]:
        return {
            "criticalImprovements": list(self.suggestions.critical),
            "recommendedImprovements": list(self.suggestions.recommended),
            "excellentAspects": list(self.suggestions.excellent),
            "keywordAnalysis": {
                "foundKeywords": list(self.keywords.found),
                "missingKeywords": list(self.keywords.missing),
                "suggestedKeywords": list(self.keywords.suggested),
            },
        }

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "overallScore": self.overall_score,
            "atsScore": self.ats_score,
            "readabilityScore": self.readability_score,
            "keywordScore": self.keyword_score,
            "extractedContent": self.extracted_content.to_dict(),
            "keywords": self.keywords.to_dict(),
            "suggestions": self.suggestions.to_dict(),
            "sectionAnalysis": {name: fb.to_dict() for name, fb in self.section_analysis.items()},
            "detailedAnalysis": self.detailed_analysis(),
        }
        if self.job_match_score is not None:
            data["jobMatchScore"] = self.job_match_score
        if self.job_matching is not None:
            data["jobMatching"] = self.job_matching.to_dict()
        return data


__all__ = [
    "AnalysisResult",
    "CertificationEntry",
    "EducationEntry",
    "ExperienceEntry",
    "ExtractedContent",
    "JobMatching",
    "KeywordLists",
    "PersonalInfo",
    "ProjectEntry",
    "SectionFeedback",
    "SkillGroup",
    "Suggestions",
]
