from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from jobmatch.models.schemas import FileType
from jobmatch.services.job_source import JobCorpus
from jobmatch.services.resume_store import ResumeStore
from jobmatch.utils.exceptions import JobNotFound, PersistenceFailure


def resume_doc(owner_id="user-1", resume_id="r-1", skills=None, created_at=None):
    return {
        "_id": "mongo-object-id",
        "resume_id": resume_id,
        "owner_id": owner_id,
        "original_file_name": "cv.pdf",
        "file_size": 42,
        "extracted_fields": {
            "skills": skills or ["Python"],
            "education": [{"degree": "BSc", "institution": "MIT", "year": "2020"}],
            "experience": [],
            "contact": {"phone": "", "address": "", "linkedin": ""},
            "summary": "Python developer",
        },
        "confidence": 0.8,
        "source_file_type": "pdf",
        "created_at": created_at or datetime(2024, 1, 1),
    }


def cursor_returning(docs):
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=docs)
    cursor.sort.return_value = cursor
    return cursor


class TestResumeStore:
    """Test cases for the parsed resume store"""

    @pytest.mark.asyncio
    async def test_save_inserts_document(self, make_resume):
        coll = MagicMock()
        coll.insert_one = AsyncMock()
        resume = make_resume(skills=["Python"])

        resume_id = await ResumeStore(collection=coll).save(resume)

        assert resume_id == resume.resume_id
        doc = coll.insert_one.call_args.args[0]
        assert doc["owner_id"] == "user-1"
        assert doc["source_file_type"] == "pdf"
        assert doc["extracted_fields"]["skills"] == ["Python"]

    @pytest.mark.asyncio
    async def test_save_wraps_store_errors(self, make_resume):
        coll = MagicMock()
        coll.insert_one = AsyncMock(side_effect=ConnectionError("connection refused"))

        with pytest.raises(PersistenceFailure) as exc_info:
            await ResumeStore(collection=coll).save(make_resume())

        assert exc_info.value.details["operation"] == "save_parsed_resume"
        assert isinstance(exc_info.value.cause, ConnectionError)

    @pytest.mark.asyncio
    async def test_most_recent_for(self):
        coll = MagicMock()
        coll.find_one = AsyncMock(return_value=resume_doc())

        resume = await ResumeStore(collection=coll).most_recent_for("user-1")

        assert resume.resume_id == "r-1"
        assert resume.source_file_type == FileType.PDF
        assert resume.extracted_fields.education[0].institution == "MIT"
        query = coll.find_one.call_args.args[0]
        assert query == {"owner_id": "user-1"}
        assert coll.find_one.call_args.kwargs["sort"] == [("created_at", -1)]

    @pytest.mark.asyncio
    async def test_most_recent_for_missing(self):
        coll = MagicMock()
        coll.find_one = AsyncMock(return_value=None)

        assert await ResumeStore(collection=coll).most_recent_for("nobody") is None

    @pytest.mark.asyncio
    async def test_all_most_recent(self):
        coll = MagicMock()
        coll.aggregate.return_value = cursor_returning([
            resume_doc("user-2", "r-3"),
            resume_doc("user-1", "r-2"),
        ])

        pairs = await ResumeStore(collection=coll).all_most_recent()

        assert [(owner, r.resume_id) for owner, r in pairs] == [("user-2", "r-3"), ("user-1", "r-2")]
        pipeline = coll.aggregate.call_args.args[0]
        assert pipeline[1]["$group"]["_id"] == "$owner_id"

    @pytest.mark.asyncio
    async def test_resolve_candidates(self):
        users = MagicMock()
        users.find.return_value = cursor_returning([
            {"user_id": "user-1", "name": "Jane", "email": "jane@example.com"},
        ])

        refs = await ResumeStore(collection=MagicMock(), users_collection=users).resolve_candidates(
            ["user-1", "user-2", "user-1"]
        )

        assert refs["user-1"].name == "Jane"
        assert refs["user-2"].name is None
        assert users.find.call_args.args[0] == {"user_id": {"$in": ["user-1", "user-2"]}}

    @pytest.mark.asyncio
    async def test_resolve_no_candidates(self):
        users = MagicMock()
        assert await ResumeStore(collection=MagicMock(), users_collection=users).resolve_candidates([]) == {}
        users.find.assert_not_called()


class TestJobCorpus:
    """Test cases for the job corpus source"""

    @pytest.mark.asyncio
    async def test_list_active_jobs(self):
        coll = MagicMock()
        coll.find.return_value = cursor_returning([
            {"_id": "x", "job_id": "job-1", "title": "Dev", "requirements": ["Python"], "salary": "100k"},
        ])

        jobs = await JobCorpus(collection=coll).list_active_jobs()

        assert jobs[0].job_id == "job-1"
        assert jobs[0].model_dump()["salary"] == "100k"
        assert coll.find.call_args.args[0] == {"is_active": True}

    @pytest.mark.asyncio
    async def test_get_job(self):
        coll = MagicMock()
        coll.find_one = AsyncMock(return_value={"job_id": "job-1", "title": "Dev", "created_by": "emp-1"})

        job = await JobCorpus(collection=coll).get_job("job-1")

        assert job.created_by == "emp-1"

    @pytest.mark.asyncio
    async def test_get_job_missing(self):
        coll = MagicMock()
        coll.find_one = AsyncMock(return_value=None)

        with pytest.raises(JobNotFound):
            await JobCorpus(collection=coll).get_job("missing")


class TestIndexes:
    """Test cases for startup index creation"""

    @pytest.mark.asyncio
    async def test_init_indexes(self):
        from jobmatch.services import db

        resumes, jobs = MagicMock(), MagicMock()
        resumes.name, jobs.name = "parsed_resumes", "jobs"
        resumes.create_index = AsyncMock()
        jobs.create_index = AsyncMock(side_effect=[Exception("Index already exists with a different name"), None])

        with patch.object(db, "parsed_resumes_coll", resumes), patch.object(db, "jobs_coll", jobs):
            await db.init_indexes()

        assert resumes.create_index.await_count == 3
        assert jobs.create_index.await_count == 2
        assert resumes.create_index.await_args_list[0].kwargs == {"unique": True}

    def test_to_dict_strips_mongo_id(self):
        from jobmatch.services.db import to_dict

        assert to_dict({"_id": "x", "job_id": "job-1"}) == {"job_id": "job-1"}
        assert to_dict(None) is None
