from typing import List

from pymongo import DESCENDING

from jobmatch.models.schemas import JobPosting
from jobmatch.services.db import jobs_coll, to_dict
from jobmatch.utils.exceptions import ExceptionContext, JobNotFound
from jobmatch.utils.logging_config import get_logger

logger = get_logger(__name__)


class JobCorpus:
    """Read-only view of the job listings collection."""

    def __init__(self, collection=None):
        self.collection = collection if collection is not None else jobs_coll

    async def list_active_jobs(self) -> List[JobPosting]:
        with ExceptionContext("list_active_jobs", logger, collection="jobs"):
            cursor = self.collection.find({"is_active": True}).sort("created_at", DESCENDING)
            docs = await cursor.to_list(length=None)
        return [JobPosting(**to_dict(doc)) for doc in docs]

    async def get_job(self, job_id: str) -> JobPosting:
        with ExceptionContext("get_job", logger, collection="jobs", job_id=job_id):
            doc = await self.collection.find_one({"job_id": job_id})
        if not doc:
            raise JobNotFound(job_id=job_id)
        return JobPosting(**to_dict(doc))


job_corpus = JobCorpus()
