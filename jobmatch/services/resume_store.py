"""
Append-only store of parsed resumes, one record per parse event
"""
from typing import Dict, Iterable, List, Optional, Tuple

from pymongo import DESCENDING

from jobmatch.models.schemas import CandidateRef, ParsedResume
from jobmatch.services.db import parsed_resumes_coll, users_coll, to_dict
from jobmatch.utils.exceptions import ExceptionContext
from jobmatch.utils.logging_config import get_logger

logger = get_logger(__name__)


class ResumeStore:
    """Resume persistence over a motor collection.

    Records are never updated; a later parse supersedes an earlier one and
    the newest record per owner is the active profile.
    """

    def __init__(self, collection=None, users_collection=None):
        self.collection = collection if collection is not None else parsed_resumes_coll
        self.users_collection = users_collection if users_collection is not None else users_coll

    async def save(self, resume: ParsedResume) -> str:
        doc = resume.model_dump()
        doc["source_file_type"] = resume.source_file_type.value
        with ExceptionContext("save_parsed_resume", logger, collection="parsed_resumes", owner_id=resume.owner_id):
            await self.collection.insert_one(doc)
        logger.info(f"Stored parsed resume {resume.resume_id} for owner {resume.owner_id}")
        return resume.resume_id

    async def most_recent_for(self, owner_id: str) -> Optional[ParsedResume]:
        with ExceptionContext("find_most_recent_resume", logger, collection="parsed_resumes", owner_id=owner_id):
            doc = await self.collection.find_one(
                {"owner_id": owner_id},
                sort=[("created_at", DESCENDING)],
            )
        if not doc:
            return None
        return ParsedResume(**to_dict(doc))

    async def all_most_recent(self) -> List[Tuple[str, ParsedResume]]:
        """Newest parse of every candidate, newest candidates first."""
        pipeline = [
            {"$sort": {"created_at": DESCENDING}},
            {"$group": {"_id": "$owner_id", "latest": {"$first": "$$ROOT"}}},
            {"$replaceRoot": {"newRoot": "$latest"}},
            {"$sort": {"created_at": DESCENDING}},
        ]
        with ExceptionContext("list_most_recent_resumes", logger, collection="parsed_resumes"):
            docs = await self.collection.aggregate(pipeline).to_list(length=None)

        resumes = [ParsedResume(**to_dict(doc)) for doc in docs]
        return [(resume.owner_id, resume) for resume in resumes]

    async def resolve_candidates(self, owner_ids: Iterable[str]) -> Dict[str, CandidateRef]:
        """Look up display names for candidates; unknown ids get a bare reference."""
        ids = list(dict.fromkeys(owner_ids))
        if not ids:
            return {}
        with ExceptionContext("resolve_candidates", logger, collection="users"):
            docs = await self.users_collection.find(
                {"user_id": {"$in": ids}},
                {"user_id": 1, "name": 1, "email": 1},
            ).to_list(length=None)

        found = {doc["user_id"]: doc for doc in docs}
        return {
            owner_id: CandidateRef(
                user_id=owner_id,
                name=found.get(owner_id, {}).get("name"),
                email=found.get(owner_id, {}).get("email"),
            )
            for owner_id in ids
        }


resume_store = ResumeStore()
