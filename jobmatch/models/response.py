# Response shapes use the camelCase field names the job-board client expects.
from pydantic import BaseModel
from typing import List

from jobmatch.models.schemas import CandidateRef, ExtractedFields, JobPosting, ParsedResume


class MatchResult(BaseModel):
    subject_id: str
    counterpart_id: str
    skill_match_ratio: float
    text_similarity_ratio: float
    blended_score: int


class ParseResponse(BaseModel):
    message: str = "Resume parsed successfully"
    parsedData: ExtractedFields
    resumeId: str


class RecommendedJob(JobPosting):
    matchScore: int
    skillMatch: int
    textSimilarity: int


class RecommendedCandidate(BaseModel):
    candidate: CandidateRef
    resume: ParsedResume
    matchScore: int
    skillMatch: int
    textSimilarity: int


class JobRecommendationPage(BaseModel):
    jobs: List[RecommendedJob]
    totalPages: int
    currentPage: int
    total: int


class CandidateRecommendationPage(BaseModel):
    candidates: List[RecommendedCandidate]
    totalPages: int
    currentPage: int
    total: int
