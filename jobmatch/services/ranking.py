"""
Ranking and pagination of match results

Every call rescores the whole corpus; nothing is cached between requests.
"""
import math
from typing import List, Optional, Sequence, Tuple, TypeVar

from jobmatch.models.matcher_settings import MatcherSettings
from jobmatch.models.response import (
    CandidateRecommendationPage,
    JobRecommendationPage,
    RecommendedCandidate,
    RecommendedJob,
)
from jobmatch.models.schemas import CandidateRef, Caller, JobPosting, ParsedResume, Role
from jobmatch.services.job_source import JobCorpus, job_corpus
from jobmatch.services.matching import build_job_text, score, to_percent
from jobmatch.services.resume_store import ResumeStore, resume_store
from jobmatch.utils.config import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT
from jobmatch.utils.exceptions import NotAuthorized, ResumeNotFound, ValidationError
from jobmatch.utils.logging_config import get_logger, PerformanceMonitor

logger = get_logger(__name__)

T = TypeVar("T")


def paginate(items: Sequence[T], page: int = DEFAULT_PAGE, limit: int = DEFAULT_PAGE_LIMIT) -> Tuple[List[T], int]:
    """Return the one-indexed page of items and the total page count."""
    if page < 1:
        raise ValidationError("page must be at least 1", field="page", value=page)
    if limit < 1:
        raise ValidationError("limit must be at least 1", field="limit", value=limit)
    start = (page - 1) * limit
    return list(items[start:start + limit]), math.ceil(len(items) / limit)


def rank_jobs_for_candidate(
    resume: ParsedResume,
    jobs: Sequence[JobPosting],
    settings: Optional[MatcherSettings] = None,
) -> List[RecommendedJob]:
    candidate_skills = resume.extracted_fields.skills
    candidate_text = resume.extracted_fields.summary

    ranked = []
    for job in jobs:
        result = score(
            job.requirements, build_job_text(job), candidate_skills, candidate_text,
            subject_id=resume.owner_id, counterpart_id=job.job_id, settings=settings,
        )
        ranked.append(RecommendedJob(
            **job.model_dump(),
            matchScore=result.blended_score,
            skillMatch=to_percent(result.skill_match_ratio),
            textSimilarity=to_percent(result.text_similarity_ratio),
        ))

    # stable: equal scores keep corpus order
    ranked.sort(key=lambda j: j.matchScore, reverse=True)
    return ranked


def rank_candidates_for_job(
    job: JobPosting,
    resumes: Sequence[Tuple[str, ParsedResume]],
    settings: Optional[MatcherSettings] = None,
) -> List[Tuple[str, ParsedResume, int, int, int]]:
    """Score every (owner_id, resume) against the job, best first.

    Returns tuples of (owner_id, resume, matchScore, skillMatch, textSimilarity).
    """
    text = build_job_text(job)
    ranked = []
    for owner_id, resume in resumes:
        result = score(
            job.requirements, text,
            resume.extracted_fields.skills, resume.extracted_fields.summary,
            subject_id=job.job_id, counterpart_id=owner_id, settings=settings,
        )
        ranked.append((
            owner_id,
            resume,
            result.blended_score,
            to_percent(result.skill_match_ratio),
            to_percent(result.text_similarity_ratio),
        ))

    ranked.sort(key=lambda row: row[2], reverse=True)
    return ranked


def can_view_candidates(caller: Caller, job: JobPosting) -> bool:
    if caller.role == Role.ADMIN:
        return True
    return caller.role == Role.EMPLOYER and job.created_by == caller.user_id


class RecommendationService:
    """Runs the scorer across the job corpus or the stored resumes."""

    def __init__(
        self,
        resumes: Optional[ResumeStore] = None,
        jobs: Optional[JobCorpus] = None,
        settings: Optional[MatcherSettings] = None,
    ):
        self.resumes = resumes or resume_store
        self.jobs = jobs or job_corpus
        self.settings = settings

    async def jobs_for_candidate(
        self, owner_id: str, page: int = DEFAULT_PAGE, limit: int = DEFAULT_PAGE_LIMIT
    ) -> JobRecommendationPage:
        resume = await self.resumes.most_recent_for(owner_id)
        if resume is None:
            raise ResumeNotFound(owner_id=owner_id)

        jobs = await self.jobs.list_active_jobs()
        with PerformanceMonitor("rank_jobs_for_candidate", logger):
            ranked = rank_jobs_for_candidate(resume, jobs, self.settings)
        items, total_pages = paginate(ranked, page, limit)

        logger.info(f"Ranked {len(ranked)} jobs for candidate {owner_id}, returning page {page}")
        return JobRecommendationPage(
            jobs=items,
            totalPages=total_pages,
            currentPage=page,
            total=len(ranked),
        )

    async def candidates_for_job(
        self, caller: Caller, job_id: str, page: int = DEFAULT_PAGE, limit: int = DEFAULT_PAGE_LIMIT
    ) -> CandidateRecommendationPage:
        job = await self.jobs.get_job(job_id)
        if not can_view_candidates(caller, job):
            logger.warning(f"User {caller.user_id} ({caller.role.value}) denied candidate ranking for job {job_id}")
            raise NotAuthorized(resource=f"job:{job_id}")

        resumes = await self.resumes.all_most_recent()
        with PerformanceMonitor("rank_candidates_for_job", logger):
            ranked = rank_candidates_for_job(job, resumes, self.settings)
        rows, total_pages = paginate(ranked, page, limit)

        candidates = await self.resumes.resolve_candidates(owner_id for owner_id, *_ in rows)
        items = [
            RecommendedCandidate(
                candidate=candidates.get(owner_id) or CandidateRef(user_id=owner_id),
                resume=resume,
                matchScore=match_score,
                skillMatch=skill,
                textSimilarity=text,
            )
            for owner_id, resume, match_score, skill, text in rows
        ]

        logger.info(f"Ranked {len(ranked)} candidates for job {job_id}, returning page {page}")
        return CandidateRecommendationPage(
            candidates=items,
            totalPages=total_pages,
            currentPage=page,
            total=len(ranked),
        )
