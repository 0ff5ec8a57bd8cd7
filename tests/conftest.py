import os
from datetime import datetime, timedelta

import pytest

os.environ.setdefault("ENVIRONMENT", "testing")

from jobmatch.models.schemas import ExtractedFields, FileType, JobPosting, ParsedResume  # noqa: E402

SAMPLE_RESUME = """Jane Doe
Senior Software Engineer

Skills: Python, Django, PostgreSQL, Docker, AWS

Experience
Backend Engineer at Acme Corp
Acme Corporation
2019 - 2023
Built REST API services in Python.
Owned the Docker build pipeline.
Data Engineer @ Globex
Globex Inc
2016 - 2019

Education
Bachelor of Science in Computer Science
State University
2016
"""


@pytest.fixture
def sample_resume_text():
    return SAMPLE_RESUME


@pytest.fixture
def make_resume():
    base = datetime(2024, 1, 1)

    def _make(owner_id="user-1", skills=None, summary="", minutes=0):
        return ParsedResume(
            owner_id=owner_id,
            original_file_name=f"{owner_id}.pdf",
            file_size=100,
            extracted_fields=ExtractedFields(skills=skills or [], summary=summary),
            source_file_type=FileType.PDF,
            created_at=base + timedelta(minutes=minutes),
        )

    return _make


@pytest.fixture
def make_job():
    def _make(job_id="job-1", title="", description="", company="", requirements=None, created_by="employer-1"):
        return JobPosting(
            job_id=job_id,
            title=title,
            description=description,
            company=company,
            requirements=requirements or [],
            created_by=created_by,
        )

    return _make
