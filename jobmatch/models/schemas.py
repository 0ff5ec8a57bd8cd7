from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum
import uuid


class FileType(str, Enum):
    """Resume file types accepted for upload"""
    PDF = "pdf"
    DOC = "doc"
    DOCX = "docx"


class Role(str, Enum):
    CANDIDATE = "candidate"
    EMPLOYER = "employer"
    ADMIN = "admin"


# -------- Parsed resumes --------
class EducationEntry(BaseModel):
    degree: str = ""
    institution: str = ""
    year: str = ""


class ExperienceEntry(BaseModel):
    title: str = ""
    company: str = ""
    duration: str = ""
    description: str = ""


class ContactInfo(BaseModel):
    phone: str = ""
    address: str = ""
    linkedin: str = ""


class ExtractedFields(BaseModel):
    skills: List[str] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    contact: ContactInfo = Field(default_factory=ContactInfo)
    summary: str = ""


class ParsedResume(BaseModel):
    model_config = ConfigDict(frozen=True)

    resume_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    owner_id: str
    original_file_name: str
    file_size: Optional[int] = None
    extracted_fields: ExtractedFields
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    source_file_type: FileType
    created_at: datetime = Field(default_factory=datetime.utcnow)


# -------- Jobs (read-only) --------
class JobPosting(BaseModel):
    model_config = ConfigDict(extra="allow")

    job_id: str
    title: str = ""
    company: str = ""
    description: str = ""
    requirements: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    created_by: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


# -------- Candidates (read-only) --------
class CandidateRef(BaseModel):
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None


# -------- Request context --------
class UploadedFile(BaseModel):
    """Temporary stored upload handed to the resume parser"""
    original_name: str
    stored_path: str
    size_bytes: int
    declared_extension: str


class Caller(BaseModel):
    user_id: str
    role: Role = Role.CANDIDATE
