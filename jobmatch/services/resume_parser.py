"""
Resume parsing pipeline: stored upload -> normalized text -> fields -> store
"""
import os
import tempfile
from typing import Optional

from fastapi import UploadFile

from jobmatch.helpers.parsing import cleanup_file, read_and_normalize, resolve_file_type
from jobmatch.models.response import ParseResponse
from jobmatch.models.schemas import ParsedResume, UploadedFile
from jobmatch.services.extraction import FieldExtractor
from jobmatch.services.resume_store import ResumeStore, resume_store
from jobmatch.utils.config import MAX_UPLOAD_BYTES, UPLOAD_DIR
from jobmatch.utils.exceptions import ValidationError
from jobmatch.utils.logging_config import get_logger, PerformanceMonitor

logger = get_logger(__name__)


async def store_upload(file: UploadFile, upload_dir: str = UPLOAD_DIR, max_bytes: int = MAX_UPLOAD_BYTES) -> UploadedFile:
    """Write an incoming upload to a temporary file the parser will consume."""
    if file is None or not file.filename:
        raise ValidationError("No file uploaded", field="resume")

    data = await file.read()
    if len(data) > max_bytes:
        raise ValidationError(
            f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.",
            field="resume",
            value=len(data),
        )

    os.makedirs(upload_dir, exist_ok=True)
    ext = os.path.splitext(file.filename)[1]
    tf = tempfile.NamedTemporaryFile(delete=False, suffix=ext, dir=upload_dir)
    try:
        tf.write(data)
        tf.flush()
    except Exception:
        tf.close()
        cleanup_file(tf.name)
        raise
    tf.close()

    return UploadedFile(
        original_name=file.filename,
        stored_path=tf.name,
        size_bytes=len(data),
        declared_extension=ext.lstrip(".").lower(),
    )


class ResumeParser:
    """Parses one stored upload into a ParsedResume and persists it."""

    def __init__(self, store: Optional[ResumeStore] = None, extractor: Optional[FieldExtractor] = None):
        self.store = store or resume_store
        self.extractor = extractor or FieldExtractor()

    async def parse_upload(self, owner_id: str, upload: UploadedFile) -> ParseResponse:
        # The stored file is removed on every exit path, exactly once.
        try:
            with PerformanceMonitor(f"parse_resume:{upload.original_name}", logger):
                file_type = resolve_file_type(upload.declared_extension)
                text = read_and_normalize(upload.stored_path, file_type)
                fields = self.extractor.extract(text)

            resume = ParsedResume(
                owner_id=owner_id,
                original_file_name=upload.original_name,
                file_size=upload.size_bytes,
                extracted_fields=fields,
                confidence=self.extractor.confidence,
                source_file_type=file_type,
            )
            resume_id = await self.store.save(resume)
        finally:
            cleanup_file(upload.stored_path)

        logger.info(f"Parsed resume {resume_id} for owner {owner_id} ({len(fields.skills)} skills)")
        return ParseResponse(parsedData=fields, resumeId=resume_id)


resume_parser = ResumeParser()
