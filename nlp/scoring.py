"""Score normalisation for analysis results.

Scores read out of the AI response are integers; a missing score shows up as
``0``. Rather than display a bare zero, each mandatory family is replaced by a
random value drawn from its default range.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

SCORE_FAMILIES = ("overall", "ats", "readability", "keyword")
JOB_MATCH = "job_match"

# (low, high) with ``high`` exclusive, matching ``floor(random * span) + low``.
DEFAULT_RANGES: Dict[str, Tuple[int, int]] = {
    "overall": (60, 90),
    "ats": (65, 90),
    "readability": (70, 90),
    "keyword": (55, 90),
}

MAX_SCORE = 100


@dataclass(frozen=True)
class NormalizedScores:
    overall: int
    ats: int
    readability: int
    keyword: int
    job_match: Optional[int] = None


def clamp_score(value: int) -> int:
    return max(0, min(MAX_SCORE, int(value)))


def default_score(family: str, rng: Optional[random.Random] = None) -> int:
    low, high = DEFAULT_RANGES[family]
    return (rng or random).randrange(low, high)


def normalize_scores(
    raw: Mapping[str, int],
    rng: Optional[random.Random] = None,
) -> NormalizedScores:
    """Clamp parsed scores and substitute defaults for the ones not found.

    ``raw`` maps family name to the parsed value; absent families count as 0.
    ``job_match`` is passed through clamped and never defaulted.
    """
    # TODO: replace the random fallback with a fixed per-family default once
    # the UI can show "not scored" instead of a number.
    values: Dict[str, int] = {}
    for family in SCORE_FAMILIES:
        value = clamp_score(raw.get(family, 0) or 0)
        values[family] = value if value else default_score(family, rng)

    job_match = raw.get(JOB_MATCH)
    return NormalizedScores(
        overall=values["overall"],
        ats=values["ats"],
        readability=values["readability"],
        keyword=values["keyword"],
        job_match=clamp_score(job_match) if job_match is not None else None,
    )


__all__ = [
    "DEFAULT_RANGES",
    "JOB_MATCH",
    "NormalizedScores",
    "SCORE_FAMILIES",
    "clamp_score",
    "default_score",
    "normalize_scores",
]
