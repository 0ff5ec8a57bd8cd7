from fastapi import APIRouter, Depends, Query, Request

from jobmatch.dependencies import get_caller, require_employer
from jobmatch.models.response import CandidateRecommendationPage, JobRecommendationPage
from jobmatch.models.schemas import Caller
from jobmatch.services.ranking import RecommendationService
from jobmatch.utils.config import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT
from jobmatch.utils.logging_config import get_logger, log_api_call

router = APIRouter(prefix="/matching", tags=["matching"])
logger = get_logger(__name__)

recommendation_service = RecommendationService()


@router.get("/recommend", response_model=JobRecommendationPage)
@log_api_call("recommend_jobs")
async def recommend_jobs(
    request: Request,
    page: int = Query(DEFAULT_PAGE),
    limit: int = Query(DEFAULT_PAGE_LIMIT),
    caller: Caller = Depends(get_caller),
):
    """Active jobs ranked against the caller's most recent resume"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.info(
        f"Job recommendations requested by {caller.user_id}",
        extra={"request_id": request_id, "owner_id": caller.user_id, "page": page, "limit": limit}
    )
    return await recommendation_service.jobs_for_candidate(caller.user_id, page, limit)


@router.get("/match/{job_id}", response_model=CandidateRecommendationPage)
@log_api_call("match_candidates")
async def match_candidates(
    job_id: str,
    request: Request,
    page: int = Query(DEFAULT_PAGE),
    limit: int = Query(DEFAULT_PAGE_LIMIT),
    caller: Caller = Depends(require_employer),
):
    """Candidates ranked against one job; job owner or admin only"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.info(
        f"Candidate ranking for job {job_id} requested by {caller.user_id}",
        extra={"request_id": request_id, "job_id": job_id, "page": page, "limit": limit}
    )
    return await recommendation_service.candidates_for_job(caller, job_id, page, limit)
