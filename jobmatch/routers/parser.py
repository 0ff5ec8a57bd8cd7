from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile

from jobmatch.dependencies import get_caller
from jobmatch.models.response import ParseResponse
from jobmatch.models.schemas import Caller, ParsedResume
from jobmatch.services.resume_parser import resume_parser, store_upload
from jobmatch.services.resume_store import resume_store
from jobmatch.utils.exceptions import ResumeNotFound
from jobmatch.utils.logging_config import get_logger, log_api_call

router = APIRouter(prefix="/parser", tags=["parser"])
logger = get_logger(__name__)


@router.post("/parse-resume", response_model=ParseResponse)
@log_api_call("parse_resume")
async def parse_resume(
    request: Request,
    resume: Optional[UploadFile] = File(default=None),
    caller: Caller = Depends(get_caller),
):
    """Upload a resume (pdf, doc, docx) and extract structured fields from it"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.info(
        f"Parsing resume upload for user {caller.user_id}",
        extra={"request_id": request_id, "owner_id": caller.user_id}
    )

    upload = await store_upload(resume)
    return await resume_parser.parse_upload(caller.user_id, upload)


@router.get("/parsed-resume", response_model=ParsedResume)
async def get_parsed_resume(caller: Caller = Depends(get_caller)):
    """Get the caller's most recent parsed resume"""
    parsed = await resume_store.most_recent_for(caller.user_id)
    if not parsed:
        raise ResumeNotFound("No parsed resume found", owner_id=caller.user_id)
    return parsed
