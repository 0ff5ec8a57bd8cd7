import math
from typing import Iterable, Optional

from jobmatch.models.matcher_settings import DEFAULT_SETTINGS, MatcherSettings
from jobmatch.models.response import MatchResult
from jobmatch.models.schemas import JobPosting


def skill_match(job_skills: Iterable[str], candidate_skills: Iterable[str]) -> float:
    """Share of the job's required skills the candidate lists, case-insensitive.

    Requirements are counted as listed, so a repeated requirement weighs twice.
    """
    jd_lower = [s.lower() for s in job_skills]
    cv_set = set([s.lower() for s in candidate_skills])
    if not jd_lower or not cv_set:
        return 0.0
    return sum(s in cv_set for s in jd_lower) / len(jd_lower)


def text_similarity(a: str, b: str) -> float:
    """Jaccard similarity of the lowercased whitespace-separated word sets."""
    sa, sb = set(a.lower().split()), set(b.lower().split())
    if not sa and not sb:
        return 0.0
    return len(sa & sb) / len(sa | sb)


def to_percent(ratio: float) -> int:
    # half-up rounding, so 0.5% -> 1
    return int(math.floor(ratio * 100 + 0.5))


def blend(skill_ratio: float, text_ratio: float, settings: Optional[MatcherSettings] = None) -> int:
    settings = settings or DEFAULT_SETTINGS
    total = (skill_ratio * settings.skill_weight) + (text_ratio * settings.text_weight)
    return to_percent(total)


def build_job_text(job: JobPosting) -> str:
    return f"{job.title} {job.description} {job.company}"


def score(
    job_requirements: Iterable[str],
    job_text: str,
    candidate_skills: Iterable[str],
    candidate_text: str,
    subject_id: str = "",
    counterpart_id: str = "",
    settings: Optional[MatcherSettings] = None,
) -> MatchResult:
    skill = skill_match(job_requirements, candidate_skills)
    text = text_similarity(job_text, candidate_text)
    return MatchResult(
        subject_id=subject_id,
        counterpart_id=counterpart_id,
        skill_match_ratio=skill,
        text_similarity_ratio=text,
        blended_score=blend(skill, text, settings),
    )
