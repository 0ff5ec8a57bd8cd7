import io
import tempfile
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import UploadFile

from jobmatch.models.schemas import FileType, UploadedFile
from jobmatch.services.resume_parser import ResumeParser, store_upload
from jobmatch.utils.exceptions import (
    ExtractionFailure,
    PersistenceFailure,
    UnsupportedFileType,
    ValidationError,
)


def make_upload(tmp_path, name="cv.pdf", content=b"Python developer\nSQL"):
    path = tmp_path / f"stored-{name}"
    path.write_bytes(content)
    return UploadedFile(
        original_name=name,
        stored_path=str(path),
        size_bytes=len(content),
        declared_extension=name.rsplit(".", 1)[-1],
    )


@pytest.fixture
def store():
    store = MagicMock()
    store.save = AsyncMock(side_effect=lambda resume: resume.resume_id)
    return store


class TestStoreUpload:
    """Test cases for writing uploads to temporary files"""

    @pytest.mark.asyncio
    async def test_writes_temp_file(self, tmp_path):
        file = UploadFile(file=io.BytesIO(b"resume body"), filename="Jane.DOCX")

        upload = await store_upload(file, upload_dir=str(tmp_path))

        assert upload.original_name == "Jane.DOCX"
        assert upload.declared_extension == "docx"
        assert upload.size_bytes == 11
        with open(upload.stored_path, "rb") as fh:
            assert fh.read() == b"resume body"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError) as exc_info:
            await store_upload(None, upload_dir=str(tmp_path))
        assert exc_info.value.message == "No file uploaded"

    @pytest.mark.asyncio
    async def test_file_too_large(self, tmp_path):
        file = UploadFile(file=io.BytesIO(b"x" * 2048), filename="cv.pdf")

        with pytest.raises(ValidationError):
            await store_upload(file, upload_dir=str(tmp_path), max_bytes=1024)

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_failed_write_removes_temp_file(self, tmp_path):
        real_temp_file = tempfile.NamedTemporaryFile

        def disk_full_temp_file(**kwargs):
            real = real_temp_file(**kwargs)
            handle = MagicMock()
            handle.name = real.name
            handle.write.side_effect = OSError("No space left on device")
            handle.close.side_effect = real.close
            return handle

        file = UploadFile(file=io.BytesIO(b"resume body"), filename="cv.pdf")

        with patch("jobmatch.services.resume_parser.tempfile.NamedTemporaryFile", disk_full_temp_file):
            with pytest.raises(OSError):
                await store_upload(file, upload_dir=str(tmp_path))

        assert list(tmp_path.iterdir()) == []


class TestResumeParser:
    """Test cases for the parse pipeline and temp file cleanup"""

    @pytest.mark.asyncio
    async def test_parse_success(self, tmp_path, store):
        upload = make_upload(tmp_path)
        parser = ResumeParser(store=store)

        result = await parser.parse_upload("user-1", upload)

        assert result.parsedData.skills == ["Python", "SQL"]
        assert result.parsedData.summary == "Python developer\nSQL"
        saved = store.save.call_args.args[0]
        assert saved.owner_id == "user-1"
        assert saved.source_file_type == FileType.PDF
        assert saved.confidence == 0.8
        assert saved.file_size == upload.size_bytes
        assert result.resumeId == saved.resume_id
        assert not (tmp_path / "stored-cv.pdf").exists()

    @pytest.mark.asyncio
    async def test_unsupported_type_cleans_up(self, tmp_path, store):
        upload = make_upload(tmp_path, name="cv.txt")

        with pytest.raises(UnsupportedFileType):
            await ResumeParser(store=store).parse_upload("user-1", upload)

        assert not (tmp_path / "stored-cv.txt").exists()
        store.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_extraction_failure_cleans_up(self, tmp_path, store):
        upload = make_upload(tmp_path)
        extractor = MagicMock()
        extractor.extract.side_effect = ExtractionFailure(file_type="pdf")

        with pytest.raises(ExtractionFailure):
            await ResumeParser(store=store, extractor=extractor).parse_upload("user-1", upload)

        assert not (tmp_path / "stored-cv.pdf").exists()
        store.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_persistence_failure_cleans_up(self, tmp_path):
        upload = make_upload(tmp_path, name="cv.doc")
        store = MagicMock()
        store.save = AsyncMock(side_effect=PersistenceFailure("store unreachable"))

        with pytest.raises(PersistenceFailure):
            await ResumeParser(store=store).parse_upload("user-1", upload)

        assert not (tmp_path / "stored-cv.doc").exists()
